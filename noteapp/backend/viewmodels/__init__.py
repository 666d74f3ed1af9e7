"""
View-Models.

UI-framework-free state controllers. The TUI screens render their state
and forward user input to them.
"""

from noteapp.backend.viewmodels.editor import EditorState, EditorStatus, NoteEditor
from noteapp.backend.viewmodels.notes import NoteViewModel

__all__ = [
    "EditorState",
    "EditorStatus",
    "NoteEditor",
    "NoteViewModel",
]
