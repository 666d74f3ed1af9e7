# SQLAlchemy models package
from noteapp.backend.models.base import Base
from noteapp.backend.models.note import Note

__all__ = [
    "Base",
    "Note",
]
