"""
Theme Service.

Reads and changes the persisted light/dark/system theme choice.
"""

from noteapp.backend.events.live_query import LiveQuery
from noteapp.backend.repositories.preferences import ThemePreferenceRepository
from noteapp.backend.schemas.theme import ThemePreference
from noteapp.backend.services.base import BaseService


class ThemeService(BaseService):
    """
    Service for the theme preference.

    Choosing light or dark always stops following the system theme.
    Going back to the system theme keeps the stored dark flag, so the
    last explicit choice returns if the user picks it again.
    """

    def __init__(self, repo: ThemePreferenceRepository) -> None:
        super().__init__()
        self.repo = repo

    def observe_preference(self) -> LiveQuery[ThemePreference]:
        return self.repo.observe()

    def observe_dark_mode(self) -> LiveQuery[bool]:
        return self.repo.observe().map(
            lambda preference: preference.is_dark_mode, name="preferences:dark_mode",
        )

    def observe_use_system_theme(self) -> LiveQuery[bool]:
        return self.repo.observe().map(
            lambda preference: preference.use_system_theme,
            name="preferences:use_system_theme",
        )

    async def get_preference(self) -> ThemePreference:
        return await self.repo.read()

    async def set_dark_mode(self, is_dark: bool) -> ThemePreference:
        """Persist an explicit light or dark choice."""
        self._log_operation("Setting theme", dark_mode=is_dark)
        return await self.repo.edit(is_dark_mode=is_dark, use_system_theme=False)

    async def reset_to_system_theme(self) -> ThemePreference:
        """Follow the system theme again."""
        self._log_operation("Following system theme")
        return await self.repo.edit(use_system_theme=True)

    @staticmethod
    def resolve_dark(preference: ThemePreference, system_dark: bool) -> bool:
        """Effective dark flag for a preference and the system's own setting."""
        if preference.use_system_theme:
            return system_dark
        return preference.is_dark_mode
