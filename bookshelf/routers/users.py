"""
Users Router

User profile and statistics endpoints.

Endpoints:
- GET /users/me - Current user's profile with statistics
- PATCH /users/me - Update current user's profile
- GET /users/me/stats - Flat dashboard statistics
- GET /users/me/reading-list - Owned books, most recently updated first
- GET /users/me/activity - Recent reviews and added books
- GET /users/me/bookmarks - Bookmarked books
- GET /users/{uid} - Public profile with statistics

Statistics are recomputed from the books, bookmarks and reviews tables on
every request.
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from firebase_admin.exceptions import FirebaseError
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.config import get_settings
from bookshelf.dependencies import (
    CurrentIdentity,
    DbSession,
    IdentityProvider,
    get_user_or_404,
)
from bookshelf.models import Book, Bookmark, ReadingStatus, Review, User
from bookshelf.schemas import (
    ActivityItem,
    BookResponse,
    BookStatsResponse,
    EngagementStatsResponse,
    ProfileResponse,
    ProfileUpdate,
    ReviewResponse,
    UserResponse,
    UserStatsResponse,
)
from bookshelf.services.rate_limiter import limiter
from bookshelf.services.stats import get_user_stats
from bookshelf.services.users import sync_user

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "User not found"},
    },
)

ACTIVITY_PER_KIND = 5
ACTIVITY_LIMIT = 10


def build_profile(db: Session, user: User) -> ProfileResponse:
    """Combine a stored profile with freshly computed statistics."""
    stats = get_user_stats(db, user.uid)
    return ProfileResponse(
        user=UserResponse.model_validate(user),
        book_stats=BookStatsResponse.model_validate(stats.books),
        engagement_stats=EngagementStatsResponse.model_validate(stats.engagement),
        upvotes_received=stats.upvotes_received,
    )


# =============================================================================
# Current User Endpoints (/users/me/...)
# =============================================================================


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current user profile",
    description="Profile of the authenticated user with book and engagement statistics.",
)
@limiter.limit(settings.rate_limit_default)
def get_my_profile(
    request: Request,
    db: DbSession,
    identity: CurrentIdentity,
) -> ProfileResponse:
    """The profile row is created or refreshed from the token first."""
    user = sync_user(db, identity)
    return build_profile(db, user)


@router.patch(
    "/me",
    response_model=UserResponse,
    summary="Update current user profile",
    description="Update display name, photo and bio. Name and photo are also updated in Firebase.",
)
@limiter.limit(settings.rate_limit_write)
def update_my_profile(
    request: Request,
    profile: ProfileUpdate,
    db: DbSession,
    identity: CurrentIdentity,
    provider: IdentityProvider,
) -> UserResponse:
    """
    Update the current user's profile.

    The identity provider is updated first; if it fails nothing is
    written locally.

    Raises:
        HTTPException: 500 if the identity provider rejects the update
    """
    try:
        provider.update_user(
            identity.uid,
            display_name=profile.display_name,
            photo_url=profile.photo_url,
        )
    except FirebaseError as exc:
        logger.error(f"Identity provider profile update failed for {identity.uid}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error updating profile",
        )

    user = db.get(User, identity.uid)
    if user is None:
        user = sync_user(db, identity)

    if profile.display_name is not None:
        user.name = profile.display_name
    if profile.photo_url is not None:
        user.profile_photo = profile.photo_url
    if profile.bio is not None:
        user.bio = profile.bio

    db.commit()
    db.refresh(user)

    return UserResponse.model_validate(user)


@router.get(
    "/me/stats",
    response_model=UserStatsResponse,
    summary="Get current user statistics",
)
@limiter.limit(settings.rate_limit_default)
def get_my_stats(
    request: Request,
    db: DbSession,
    identity: CurrentIdentity,
) -> UserStatsResponse:
    stats = get_user_stats(db, identity.uid)
    return UserStatsResponse(
        total_books=stats.books.total,
        books_read=stats.books.read,
        currently_reading=stats.books.reading,
        want_to_read=stats.books.want_to_read,
        total_reviews=stats.engagement.reviews,
        total_upvotes=stats.upvotes_received,
    )


@router.get(
    "/me/reading-list",
    response_model=list[BookResponse],
    summary="Get reading list",
    description="Books on the caller's shelf, most recently updated first.",
)
@limiter.limit(settings.rate_limit_default)
def get_reading_list(
    request: Request,
    db: DbSession,
    identity: CurrentIdentity,
) -> list[BookResponse]:
    stmt = (
        select(Book)
        .where(
            Book.owner_uid == identity.uid,
            Book.reading_status.in_([s.value for s in ReadingStatus]),
        )
        .order_by(Book.updated_at.desc())
    )
    return [BookResponse.model_validate(b) for b in db.execute(stmt).scalars().all()]


@router.get(
    "/me/activity",
    response_model=list[ActivityItem],
    summary="Get recent activity",
    description="The caller's latest reviews and added books, newest first.",
)
@limiter.limit(settings.rate_limit_default)
def get_activity(
    request: Request,
    db: DbSession,
    identity: CurrentIdentity,
) -> list[ActivityItem]:
    reviews = db.execute(
        select(Review)
        .where(Review.user_uid == identity.uid)
        .order_by(Review.created_at.desc())
        .limit(ACTIVITY_PER_KIND)
    ).scalars().all()
    books = db.execute(
        select(Book)
        .where(Book.owner_uid == identity.uid)
        .order_by(Book.created_at.desc())
        .limit(ACTIVITY_PER_KIND)
    ).scalars().all()

    activity = [
        ActivityItem(type="review", date=r.created_at, review=ReviewResponse.model_validate(r))
        for r in reviews
    ] + [
        ActivityItem(type="book_added", date=b.created_at, book=BookResponse.model_validate(b))
        for b in books
    ]
    activity.sort(key=lambda item: item.date, reverse=True)

    return activity[:ACTIVITY_LIMIT]


@router.get(
    "/me/bookmarks",
    response_model=list[BookResponse],
    summary="Get bookmarked books",
)
@limiter.limit(settings.rate_limit_default)
def get_bookmarked_books(
    request: Request,
    db: DbSession,
    identity: CurrentIdentity,
) -> list[BookResponse]:
    stmt = (
        select(Book)
        .join(Bookmark, Bookmark.book_id == Book.id)
        .where(Bookmark.user_uid == identity.uid)
        .order_by(Bookmark.created_at.desc())
    )
    return [BookResponse.model_validate(b) for b in db.execute(stmt).scalars().all()]


# =============================================================================
# Public Profile
# =============================================================================


@router.get(
    "/{uid}",
    response_model=ProfileResponse,
    summary="Get a user's public profile",
    description="Profile and statistics of any registered user.",
)
@limiter.limit(settings.rate_limit_default)
def get_user_profile(
    request: Request,
    uid: str,
    db: DbSession,
) -> ProfileResponse:
    user = get_user_or_404(db, uid)
    return build_profile(db, user)
