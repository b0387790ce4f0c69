"""
Book Model

The central model of the Bookshelf API.

This file also contains BookUpvote, the set of users who upvoted a book.

Denormalized aggregates:
- rating / total_reviews: recomputed from the reviews table after every
  review mutation (see services/ratings.py)
- upvotes: incremented after an upvote record is stored

Owner identity is a back-reference (uid/email/name copied from the token
at creation), not a foreign key: a book can be created before the owner's
profile row exists.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base
from bookshelf.utils.identifiers import ID_LENGTH, new_id

if TYPE_CHECKING:
    from bookshelf.models.bookmark import Bookmark
    from bookshelf.models.review import Review


class ReadingStatus(str, Enum):
    """Lifecycle status of a book on its owner's shelf."""
    WANT_TO_READ = "Want-to-Read"
    READING = "Reading"
    READ = "Read"


class Book(Base):
    """
    Book model representing books on users' shelves.

    Table: books

    Relationships:
    - reviews: One-to-Many, deleted with the book (and their votes)
    - bookmarks: One-to-Many, deleted with the book
    - upvoters: One-to-Many, deleted with the book
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        primary_key=True,
        default=new_id,
    )

    # -------------------------------------------------------------------------
    # Owner
    # -------------------------------------------------------------------------
    owner_uid: Mapped[str] = mapped_column(
        String(128),
        index=True,
        nullable=False,
        comment="Identity provider uid of the owner"
    )
    owner_email: Mapped[str | None] = mapped_column(
        String(255),
        index=True,
        nullable=True,
    )
    owner_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="Anonymous",
    )

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
    )
    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
    )
    category: Mapped[str | None] = mapped_column(
        String(100),
        index=True,
        nullable=True,
    )
    overview: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    cover_photo: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    total_pages: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    reading_status: Mapped[str] = mapped_column(
        String(20),
        index=True,
        nullable=False,
        default=ReadingStatus.WANT_TO_READ.value,
    )

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------
    upvotes: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        index=True,
    )
    # Mean of review ratings, 0.0 when there are no reviews
    rating: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        nullable=False,
    )
    total_reviews: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )
    bookmarks: Mapped[list["Bookmark"]] = relationship(
        "Bookmark",
        back_populates="book",
        cascade="all, delete-orphan",
    )
    upvoters: Mapped[list["BookUpvote"]] = relationship(
        "BookUpvote",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Book(id='{self.id}', title='{self.title}', owner_uid='{self.owner_uid}')"


class BookUpvote(Base):
    """
    One row per user who upvoted a book.

    Table: book_upvotes
    """

    __tablename__ = "book_upvotes"

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

    book: Mapped["Book"] = relationship("Book", back_populates="upvoters")

    __table_args__ = (
        UniqueConstraint("book_id", "user_uid", name="uq_book_upvote_book_user"),
    )

    def __repr__(self) -> str:
        return f"<BookUpvote(book_id='{self.book_id}', user_uid='{self.user_uid}')>"
