"""
Review Vote Model

A single tagged relation for both vote kinds. The unique constraint on
(review_id, user_uid) means a user holds at most one vote per review, so
liking and disliking the same review at once cannot be stored.
"""

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base
from bookshelf.utils.identifiers import ID_LENGTH, new_id


class VoteKind(str, Enum):
    """Kind of vote a user can cast on a review."""
    LIKE = "like"
    DISLIKE = "dislike"

    @property
    def opposite(self) -> "VoteKind":
        return VoteKind.DISLIKE if self is VoteKind.LIKE else VoteKind.LIKE

    @property
    def counter(self) -> str:
        """Name of the Review counter column for this kind."""
        return "likes" if self is VoteKind.LIKE else "dislikes"


class ReviewVote(Base):
    """Review vote model. Table: review_votes"""

    __tablename__ = "review_votes"

    id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        primary_key=True,
        default=new_id,
    )
    review_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_uid: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        index=True,
    )
    kind: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    review = relationship("Review", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("review_id", "user_uid", name="uq_review_vote_review_user"),
    )

    def __repr__(self) -> str:
        return f"<ReviewVote(review_id='{self.review_id}', user_uid='{self.user_uid}', kind='{self.kind}')>"
