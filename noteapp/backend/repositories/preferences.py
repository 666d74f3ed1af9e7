"""
Theme Preference Repository.

Persists the theme preference as a small JSON key-value file:

    {"dark_mode": false, "use_system_theme": true}

A missing file means every key takes its default. File I/O runs on the
shared I/O thread pool; edits are read-modify-write under a lock and are
written atomically (temporary file, then rename).
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from noteapp.backend.core.concurrency import run_blocking
from noteapp.backend.core.exceptions import StorageError
from noteapp.backend.core.logging import get_logger
from noteapp.backend.events.live_query import LiveQuery
from noteapp.backend.events.publishers import PreferenceEventPublisher
from noteapp.backend.schemas.theme import ThemePreference

logger = get_logger(__name__)


def _read_file(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def _write_file_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class ThemePreferenceRepository:
    """Durable single-record store for the theme preference."""

    def __init__(self, path: Path, publisher: PreferenceEventPublisher) -> None:
        self.path = path
        self.publisher = publisher
        self._lock = asyncio.Lock()

    async def read(self) -> ThemePreference:
        """
        Load the stored preference, applying defaults for missing keys.

        Raises:
            StorageError: If the file cannot be read or is not valid JSON
        """
        try:
            raw = await run_blocking(_read_file, self.path)
        except OSError as e:
            logger.error(
                "Preference file unreadable",
                extra={"path": str(self.path), "error": str(e)},
            )
            raise StorageError(f"Cannot read preferences: {self.path}") from e

        if raw is None or not raw.strip():
            return ThemePreference()

        try:
            return ThemePreference.model_validate_json(raw)
        except ValidationError as e:
            logger.error(
                "Preference file corrupt",
                extra={"path": str(self.path), "error": str(e)},
            )
            raise StorageError(f"Corrupt preference file: {self.path}") from e

    async def edit(self, **changes: Any) -> ThemePreference:
        """
        Apply changes to the stored preference and persist the result.

        Args:
            **changes: Field values by attribute name (is_dark_mode,
                use_system_theme)

        Returns:
            The preference as written

        Raises:
            StorageError: If the file cannot be read or written
        """
        async with self._lock:
            current = await self.read()
            updated = current.model_copy(update=changes)
            payload = updated.model_dump(by_alias=True)
            try:
                await run_blocking(
                    _write_file_atomic, self.path, json.dumps(payload, indent=2),
                )
            except OSError as e:
                logger.error(
                    "Preference file unwritable",
                    extra={"path": str(self.path), "error": str(e)},
                )
                raise StorageError(f"Cannot write preferences: {self.path}") from e

        self.publisher.theme_changed(payload)
        return updated

    def observe(self) -> LiveQuery[ThemePreference]:
        """Live view of the stored preference."""
        return LiveQuery(
            self.read,
            self.publisher.broker,
            self.publisher.CHANNEL,
            name="preferences:theme",
        )
