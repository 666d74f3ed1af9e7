"""
Note Model.

Database model for notes. Column names match the on-disk table:

    notes(id INTEGER PRIMARY KEY AUTOINCREMENT, title TEXT, description TEXT,
          isFavorite BOOLEAN DEFAULT 0, timestamp INTEGER)
"""

from sqlalchemy import BigInteger, Boolean, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from noteapp.backend.core.utils import now_millis
from noteapp.backend.models.base import Base


class Note(Base):
    """
    Note database model.

    A user-authored title/description pair with a favorite flag and a
    millisecond timestamp used for newest-first ordering.
    """

    __tablename__ = "notes"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_favorite: Mapped[bool] = mapped_column(
        "isFavorite",
        Boolean,
        nullable=False,
        default=False,
        server_default=text("0"),
    )
    timestamp: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        nullable=False,
        default=now_millis,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
