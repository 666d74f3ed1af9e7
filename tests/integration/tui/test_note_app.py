"""
Integration Tests for the Textual App.

Drives NoteApp headlessly with Textual's pilot over a container built on
temporary files.
"""

import pytest
from textual.widgets import Input

from noteapp.backend.core.dependencies import create_container
from noteapp.backend.schemas.note import NoteCreate
from noteapp.tui.app import NoteApp
from noteapp.tui.screens import ConfirmDeleteScreen, HomeScreen, NoteEditorScreen, NoteItem
from noteapp.tui.theme import DARK_THEME_NAME, LIGHT_THEME_NAME


@pytest.fixture
async def container(tmp_path):
    container = await create_container(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}",
        preferences_path=tmp_path / "theme_prefs.json",
    )
    yield container
    await container.aclose()


@pytest.fixture
async def app(container):
    app = NoteApp(container)
    yield app
    await app.view_model.aclose()


async def _titles(container) -> list[str]:
    return [note.title for note in await container.note_service.all_notes().fetch()]


class TestHomeScreen:
    @pytest.mark.asyncio
    async def test_lists_stored_notes(self, app, container, wait_until):
        await container.note_service.insert_note(NoteCreate(title="Groceries"))

        async with app.run_test():
            await wait_until(lambda: isinstance(app.screen, HomeScreen))
            await wait_until(lambda: len(app.screen.query(NoteItem)) == 1)

    @pytest.mark.asyncio
    async def test_delete_asks_for_confirmation(self, app, container, wait_until):
        await container.note_service.insert_note(NoteCreate(title="Groceries"))

        async with app.run_test() as pilot:
            await wait_until(lambda: len(app.screen.query(NoteItem)) == 1)

            await pilot.press("x")
            await wait_until(lambda: isinstance(app.screen, ConfirmDeleteScreen))
            await pilot.press("y")

            await wait_until(
                lambda: isinstance(app.screen, HomeScreen) and len(app.screen.query(NoteItem)) == 0
            )

        assert await _titles(container) == []

    @pytest.mark.asyncio
    async def test_theme_menu_switches_theme(self, app, wait_until):
        async with app.run_test() as pilot:
            await wait_until(lambda: isinstance(app.screen, HomeScreen))

            await pilot.press("d")
            await wait_until(lambda: app.theme == DARK_THEME_NAME)

            await pilot.press("l")
            await wait_until(lambda: app.theme == LIGHT_THEME_NAME)


class TestEditorScreen:
    @pytest.mark.asyncio
    async def test_add_note(self, app, container, wait_until):
        async with app.run_test() as pilot:
            await wait_until(lambda: isinstance(app.screen, HomeScreen))

            await pilot.press("a")
            await wait_until(lambda: isinstance(app.screen, NoteEditorScreen))
            await wait_until(lambda: not app.screen.query_one("#title", Input).disabled)

            await pilot.press(*"Trip", "space", *"plan")
            await pilot.press("ctrl+s")

            await wait_until(lambda: isinstance(app.screen, HomeScreen))

        assert await _titles(container) == ["Trip plan"]

    @pytest.mark.asyncio
    async def test_blank_title_stays_on_editor(self, app, container, wait_until):
        async with app.run_test() as pilot:
            await wait_until(lambda: isinstance(app.screen, HomeScreen))
            app.navigate("add_note")
            await pilot.pause()
            await wait_until(lambda: isinstance(app.screen, NoteEditorScreen))
            editor_screen = app.screen
            await wait_until(lambda: not editor_screen.query_one("#title", Input).disabled)

            await pilot.press("ctrl+s")
            await wait_until(lambda: editor_screen.editor.state.error is not None)

            assert app.screen is editor_screen

        assert await _titles(container) == []
