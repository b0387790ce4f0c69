"""
Review Model

Represents a user's review of a book, including rating and text content.

Business Rules:
- One review per user per book (unique constraint)
- Rating must be 1-5
- Users can only edit/delete their own reviews
- likes/dislikes are counters kept in step with ReviewVote rows
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
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
    from bookshelf.models.vote import ReviewVote


class Review(Base):
    """
    Review model for book reviews.

    Attributes:
        id: Opaque identifier
        book_id: Foreign key to books table
        user_uid: Identity provider uid of the author
        user_name: Author display name at the time of writing
        user_photo: Author photo URL at the time of writing
        rating: 1-5 star rating
        review_text: Review body
        likes: Number of like votes
        dislikes: Number of dislike votes
        created_at: When the review was created
        updated_at: When the review was last updated
    """

    __tablename__ = "reviews"

    id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        primary_key=True,
        default=new_id,
    )

    # Foreign keys
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

    # Author snapshot
    user_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="Anonymous",
    )
    user_photo: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    # Review content
    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rating from 1-5 stars",
    )
    review_text: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    # Vote counters
    likes: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    dislikes: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    # Timestamps
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

    # Relationships
    book = relationship("Book", back_populates="reviews")
    votes: Mapped[list["ReviewVote"]] = relationship(
        "ReviewVote",
        back_populates="review",
        cascade="all, delete-orphan",
    )

    # Constraints
    __table_args__ = (
        # One review per user per book
        UniqueConstraint("book_id", "user_uid", name="uq_review_book_user"),
        # Rating must be 1-5
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<Review(id='{self.id}', book_id='{self.book_id}', user_uid='{self.user_uid}', rating={self.rating})>"
