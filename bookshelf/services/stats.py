"""
User Statistics Service

Profile statistics computed from the detail tables on every read. Nothing
here is cached or stored.

A review always carries a rating, so "ratings given" counts the reviews
the user authored with a rating set.
"""

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookshelf.models import Book, Bookmark, ReadingStatus, Review


@dataclass(frozen=True)
class BookStats:
    total: int
    read: int
    reading: int
    want_to_read: int


@dataclass(frozen=True)
class EngagementStats:
    bookmarks: int
    reviews: int
    ratings: int


@dataclass(frozen=True)
class UserStats:
    books: BookStats
    engagement: EngagementStats
    upvotes_received: int


def _count(db: Session, stmt) -> int:
    return db.execute(stmt).scalar() or 0


def get_book_stats(db: Session, user_uid: str) -> tuple[BookStats, int]:
    """
    Count owned books by reading status and sum their upvotes.

    Returns:
        (BookStats, total upvotes received across owned books)
    """
    stmt = (
        select(
            Book.reading_status,
            func.count(Book.id),
            func.coalesce(func.sum(Book.upvotes), 0),
        )
        .where(Book.owner_uid == user_uid)
        .group_by(Book.reading_status)
    )

    by_status: dict[str, int] = {}
    total = 0
    upvotes = 0
    for status, count, status_upvotes in db.execute(stmt).all():
        by_status[status] = count
        total += count
        upvotes += int(status_upvotes)

    stats = BookStats(
        total=total,
        read=by_status.get(ReadingStatus.READ.value, 0),
        reading=by_status.get(ReadingStatus.READING.value, 0),
        want_to_read=by_status.get(ReadingStatus.WANT_TO_READ.value, 0),
    )
    return stats, upvotes


def get_engagement_stats(db: Session, user_uid: str) -> EngagementStats:
    """Count the user's bookmarks, reviews and ratings."""
    return EngagementStats(
        bookmarks=_count(
            db, select(func.count(Bookmark.id)).where(Bookmark.user_uid == user_uid)
        ),
        reviews=_count(
            db, select(func.count(Review.id)).where(Review.user_uid == user_uid)
        ),
        ratings=_count(
            db,
            select(func.count(Review.id)).where(
                Review.user_uid == user_uid,
                Review.rating.is_not(None),
            ),
        ),
    )


def get_user_stats(db: Session, user_uid: str) -> UserStats:
    """
    Compute the full statistics block for a user.

    Args:
        db: Database session
        user_uid: Identity provider uid

    Returns:
        UserStats recomputed from current table state
    """
    books, upvotes = get_book_stats(db, user_uid)
    return UserStats(
        books=books,
        engagement=get_engagement_stats(db, user_uid),
        upvotes_received=upvotes,
    )
