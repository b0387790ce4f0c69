"""
Bookmark Model

Existence of a row is the bookmark. At most one per (book, user).
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base
from bookshelf.utils.identifiers import ID_LENGTH, new_id


class Bookmark(Base):
    """Bookmark model. Table: bookmarks"""

    __tablename__ = "bookmarks"

    id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        primary_key=True,
        default=new_id,
    )
    book_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_uid: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    book = relationship("Book", back_populates="bookmarks")

    __table_args__ = (
        UniqueConstraint("book_id", "user_uid", name="uq_bookmark_book_user"),
    )

    def __repr__(self) -> str:
        return f"<Bookmark(book_id='{self.book_id}', user_uid='{self.user_uid}')>"
