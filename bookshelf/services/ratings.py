"""
Ratings Service

Service for managing book rating aggregations.

This service maintains denormalized rating fields on the Book model:
- rating: The mean of all review ratings (0.0 when there are none)
- total_reviews: Total number of reviews

Every recomputation re-reads the full review set for the book instead of
adjusting the mean incrementally, so a failed earlier write cannot leave a
permanent drift. Two concurrent recomputations for the same book race and
the last write wins.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookshelf.models import Book, Review

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingSummary:
    """Mean rating and review count for one book."""
    rating: float
    total_reviews: int


def compute_book_rating(db: Session, book_id: str) -> RatingSummary:
    """
    Compute a book's rating aggregate from its reviews without storing it.

    Args:
        db: Database session
        book_id: ID of the book

    Returns:
        RatingSummary with the arithmetic mean (no rounding) and count
    """
    stmt = select(
        func.sum(Review.rating),
        func.count(Review.id),
    ).where(Review.book_id == book_id)

    rating_sum, total_reviews = db.execute(stmt).one()

    if not total_reviews:
        return RatingSummary(rating=0.0, total_reviews=0)

    return RatingSummary(
        rating=float(rating_sum) / total_reviews,
        total_reviews=total_reviews,
    )


def recalculate_book_rating(db: Session, book_id: str) -> RatingSummary:
    """
    Recalculate and persist a book's rating aggregate.

    Called after any review create/update/delete operation to keep
    the denormalized fields in sync.

    Args:
        db: Database session
        book_id: ID of the book to update

    Returns:
        The summary that was written

    Note:
        This function commits the changes to the database.
    """
    summary = compute_book_rating(db, book_id)

    db.execute(
        update(Book)
        .where(Book.id == book_id)
        .values(rating=summary.rating, total_reviews=summary.total_reviews)
    )
    db.commit()

    return summary


def refresh_book_rating(db: Session, book_id: str) -> RatingSummary | None:
    """
    Best-effort recalculation after a committed review mutation.

    The review write is already committed; if the aggregate write fails it
    is logged and rolled back, and the review stays. The live read path and
    the reconciliation sweep repair the stored aggregate later.

    Returns:
        The written summary, or None if the recalculation failed
    """
    try:
        return recalculate_book_rating(db, book_id)
    except SQLAlchemyError:
        logger.exception(f"Rating recalculation failed for book {book_id}")
        db.rollback()
        return None


def recalculate_all_book_ratings(db: Session) -> int:
    """
    Recalculate rating aggregations for all books.

    Useful for data migrations or fixing inconsistencies.

    Args:
        db: Database session

    Returns:
        Number of books updated
    """
    book_ids = db.execute(select(Book.id)).scalars().all()

    for book_id in book_ids:
        recalculate_book_rating(db, book_id)

    return len(book_ids)
