"""
Theme Schemas.

The theme preference record, stored as a small JSON key-value file with
the keys dark_mode and use_system_theme.
"""

from pydantic import BaseModel, ConfigDict, Field


class ThemePreference(BaseModel):
    """
    Persisted theme choice.

    is_dark_mode only takes effect while use_system_theme is false; it is
    kept when switching back to the system theme so the last explicit
    choice is remembered.
    """

    is_dark_mode: bool = Field(default=False, alias="dark_mode")
    use_system_theme: bool = Field(default=True, alias="use_system_theme")

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)
