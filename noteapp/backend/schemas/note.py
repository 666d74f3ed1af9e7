"""
Note Schemas.

Pydantic schemas for note values passed between the store, the services
and the presentation layer. NoteRead is an immutable snapshot; edits are
expressed as a full replacement built with model_copy(update=...).
"""

from pydantic import BaseModel, ConfigDict, Field

from noteapp.backend.core.utils import now_millis


class NoteCreate(BaseModel):
    """Schema for a note that has not been stored yet."""

    id: int | None = Field(
        default=None,
        description="Explicit id; an existing row with this id is replaced",
    )
    title: str = Field(description="Note title", examples=["Groceries"])
    description: str = Field(
        default="",
        description="Note body",
        examples=["Milk, eggs, bread"],
    )
    is_favorite: bool = Field(default=False, description="Favorite flag")
    timestamp: int = Field(
        default_factory=now_millis,
        description="Milliseconds since the epoch",
    )


class NoteRead(BaseModel):
    """Stored note snapshot."""

    id: int = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    description: str = Field(description="Note body")
    is_favorite: bool = Field(description="Whether the note is a favorite")
    timestamp: int = Field(description="Creation or last edit, epoch millis")

    model_config = ConfigDict(from_attributes=True, frozen=True)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on title or description."""
        needle = query.lower()
        return needle in self.title.lower() or needle in self.description.lower()
