"""
Reviews Router

CRUD endpoints for book reviews and review votes.

Endpoints:
- GET /books/{book_id}/reviews - List reviews for a book
- POST /books/{book_id}/reviews - Create a review (authenticated)
- PATCH /reviews/{review_id} - Update a review (author only)
- DELETE /reviews/{review_id} - Delete a review (author only)
- POST /reviews/{review_id}/like - Toggle a like
- POST /reviews/{review_id}/dislike - Toggle a dislike
- GET /reviews/{review_id}/status - Caller's vote on a review

Business Rules:
- One review per user per book
- Only the review author can update or delete their review
- The book's rating aggregate is recomputed after create, after delete,
  and after an update that changed the rating
- A failed recomputation never undoes the committed review change
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from bookshelf.config import get_settings
from bookshelf.dependencies import (
    CurrentIdentity,
    DbSession,
    ensure_valid_id,
    get_book_or_404,
    get_review_or_404,
)
from bookshelf.models import Review, VoteKind
from bookshelf.schemas import (
    DislikeResponse,
    LikeResponse,
    ReviewCreate,
    ReviewMutationResponse,
    ReviewResponse,
    ReviewUpdate,
    VoteStatusResponse,
)
from bookshelf.services.rate_limiter import limiter
from bookshelf.services.ratings import RatingSummary, refresh_book_rating
from bookshelf.services.votes import get_vote_status, toggle_vote

logger = logging.getLogger(__name__)

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)


def _mutation_response(
    message: str,
    summary: RatingSummary | None,
    review: Review | None = None,
) -> ReviewMutationResponse:
    return ReviewMutationResponse(
        message=message,
        review=ReviewResponse.model_validate(review) if review is not None else None,
        average_rating=summary.rating if summary else None,
        total_reviews=summary.total_reviews if summary else None,
    )


# =============================================================================
# Book Review Endpoints
# =============================================================================


@router.get(
    "/books/{book_id}/reviews",
    response_model=list[ReviewResponse],
    summary="List reviews for a book",
    description="All reviews for a book, newest first.",
)
@limiter.limit(settings.rate_limit_default)
def list_book_reviews(
    request: Request,
    book_id: str,
    db: DbSession,
) -> list[ReviewResponse]:
    ensure_valid_id(book_id, "Book")

    stmt = (
        select(Review)
        .where(Review.book_id == book_id)
        .order_by(Review.created_at.desc())
    )
    return [ReviewResponse.model_validate(r) for r in db.execute(stmt).scalars().all()]


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Review a book. Requires authentication. One review per book per user.",
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    book_id: str,
    review_data: ReviewCreate,
    db: DbSession,
    identity: CurrentIdentity,
) -> ReviewMutationResponse:
    """
    Create a new review for a book.

    Raises:
        HTTPException: 404 if book not found
        HTTPException: 400 if user already reviewed this book
    """
    book = get_book_or_404(db, book_id)

    existing = db.execute(
        select(Review).where(
            Review.book_id == book.id,
            Review.user_uid == identity.uid,
        )
    ).scalar_one_or_none()
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You have already reviewed this book. Please update your existing review.",
        )

    review = Review(
        book_id=book.id,
        user_uid=identity.uid,
        user_name=identity.display_name,
        user_photo=identity.photo_url or "",
        rating=review_data.rating,
        review_text=review_data.review_text,
        likes=0,
        dislikes=0,
    )
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You have already reviewed this book. Please update your existing review.",
        )
    db.refresh(review)

    summary = refresh_book_rating(db, book_id)

    return _mutation_response("Review added successfully", summary, review)


# =============================================================================
# Individual Review Endpoints
# =============================================================================


@router.patch(
    "/reviews/{review_id}",
    response_model=ReviewMutationResponse,
    summary="Update a review",
    description="Update your own review. Only the review author can update.",
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: str,
    review_data: ReviewUpdate,
    db: DbSession,
    identity: CurrentIdentity,
) -> ReviewMutationResponse:
    """
    Update an existing review.

    The book aggregate is only recomputed when the rating changed.

    Raises:
        HTTPException: 404 if review not found
        HTTPException: 403 if user is not the review author
    """
    review = get_review_or_404(db, review_id)

    if review.user_uid != identity.uid:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to update this review",
        )

    update_data = review_data.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        return ReviewMutationResponse(message="No changes detected for review update")

    rating_changed = "rating" in update_data and update_data["rating"] != review.rating
    for field, value in update_data.items():
        setattr(review, field, value)

    db.commit()
    db.refresh(review)

    summary = None
    if rating_changed:
        summary = refresh_book_rating(db, review.book_id)

    return _mutation_response("Review updated successfully", summary, review)


@router.delete(
    "/reviews/{review_id}",
    response_model=ReviewMutationResponse,
    summary="Delete a review",
    description="Delete your own review. Only the review author can delete.",
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: str,
    db: DbSession,
    identity: CurrentIdentity,
) -> ReviewMutationResponse:
    """
    Delete a review and its votes, then recompute the book aggregate.

    Raises:
        HTTPException: 404 if review not found
        HTTPException: 403 if user is not the review author
    """
    review = get_review_or_404(db, review_id)

    if review.user_uid != identity.uid:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to delete this review",
        )

    book_id = review.book_id
    db.delete(review)
    db.commit()

    summary = refresh_book_rating(db, book_id)

    return _mutation_response("Review deleted successfully", summary)


# =============================================================================
# Vote Endpoints
# =============================================================================


@router.post(
    "/reviews/{review_id}/like",
    response_model=LikeResponse,
    summary="Toggle a like",
    description="Like a review, or withdraw an existing like. Replaces a dislike.",
)
@limiter.limit(settings.rate_limit_write)
def like_review(
    request: Request,
    review_id: str,
    db: DbSession,
    identity: CurrentIdentity,
) -> LikeResponse:
    review = get_review_or_404(db, review_id)
    outcome = toggle_vote(db, review.id, identity.uid, VoteKind.LIKE)

    return LikeResponse(
        message="Review liked" if outcome.active else "Review unliked",
        likes=outcome.count,
        user_liked=outcome.active,
    )


@router.post(
    "/reviews/{review_id}/dislike",
    response_model=DislikeResponse,
    summary="Toggle a dislike",
    description="Dislike a review, or withdraw an existing dislike. Replaces a like.",
)
@limiter.limit(settings.rate_limit_write)
def dislike_review(
    request: Request,
    review_id: str,
    db: DbSession,
    identity: CurrentIdentity,
) -> DislikeResponse:
    review = get_review_or_404(db, review_id)
    outcome = toggle_vote(db, review.id, identity.uid, VoteKind.DISLIKE)

    return DislikeResponse(
        message="Review disliked" if outcome.active else "Review undisliked",
        dislikes=outcome.count,
        user_disliked=outcome.active,
    )


@router.get(
    "/reviews/{review_id}/status",
    response_model=VoteStatusResponse,
    summary="Get vote status",
    description="Whether the caller currently likes or dislikes a review.",
)
@limiter.limit(settings.rate_limit_default)
def review_vote_status(
    request: Request,
    review_id: str,
    db: DbSession,
    identity: CurrentIdentity,
) -> VoteStatusResponse:
    ensure_valid_id(review_id, "Review")
    vote = get_vote_status(db, review_id, identity.uid)
    return VoteStatusResponse(user_liked=vote.liked, user_disliked=vote.disliked)
