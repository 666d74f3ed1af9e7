# Pydantic schemas package
from noteapp.backend.schemas.note import NoteCreate, NoteRead
from noteapp.backend.schemas.theme import ThemePreference

__all__ = [
    "NoteCreate",
    "NoteRead",
    "ThemePreference",
]
