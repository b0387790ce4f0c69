"""
FastAPI Dependencies Module

Reusable components injected into route handlers with Depends().

Common Dependency Patterns:
- Database sessions (per-request)
- Authentication (verify the bearer token with the identity provider)
- Pagination parameters
- Resource lookup with ID validation and 404s
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.database import get_db
from bookshelf.models import Book, Review, User
from bookshelf.services.identity import (
    FirebaseIdentityProvider,
    IdentityClaims,
    InvalidCredentialsError,
    get_identity_provider,
)
from bookshelf.utils.identifiers import is_valid_id

logger = logging.getLogger(__name__)

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
DbSession = Annotated[Session, Depends(get_db)]
IdentityProvider = Annotated[FirebaseIdentityProvider, Depends(get_identity_provider)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed for user-friendliness)
    - per_page: How many items per page
    - skip: Calculated offset for database query
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        per_page: int = Query(
            default=12,
            ge=1,
            le=100,
            description="Number of items per page (max 100)",
            examples=[12, 24, 48],
        ),
    ) -> None:
        self.page = page
        self.per_page = per_page

    @property
    def skip(self) -> int:
        """
        Number of records to skip.

        Page 1 → skip 0 items, page 2 → skip per_page items.
        """
        return (self.page - 1) * self.per_page


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Bearer Token Authentication
# =============================================================================
# auto_error=False so a missing header is reported with our own 401 and
# message instead of FastAPI's default.
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    provider: IdentityProvider,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> IdentityClaims:
    """
    Verify the Authorization: Bearer <token> header.

    Raises:
        HTTPException: 401 if the header is absent or malformed
        HTTPException: 401 if the identity provider rejects the token
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access: No token provided or invalid format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return provider.verify_token(credentials.credentials)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access: Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )


CurrentIdentity = Annotated[IdentityClaims, Depends(get_current_identity)]


# =============================================================================
# Resource Lookup Helpers
# =============================================================================
def ensure_valid_id(value: str, entity: str) -> str:
    """
    Reject malformed identifiers before touching the database.

    Raises:
        HTTPException: 400 if the identifier is not well formed
    """
    if not is_valid_id(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {entity} ID format",
        )
    return value


def get_book_or_404(db: Session, book_id: str) -> Book:
    """
    Get a book by ID or raise.

    Raises:
        HTTPException: 400 if the ID is malformed
        HTTPException: 404 if the book does not exist
    """
    ensure_valid_id(book_id, "Book")
    book = db.get(Book, book_id)

    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found",
        )
    return book


def get_review_or_404(db: Session, review_id: str) -> Review:
    """
    Get a review by ID or raise.

    Raises:
        HTTPException: 400 if the ID is malformed
        HTTPException: 404 if the review does not exist
    """
    ensure_valid_id(review_id, "Review")
    review = db.get(Review, review_id)

    if review is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found",
        )
    return review


def get_user_or_404(db: Session, uid: str) -> User:
    """Get a user profile by uid or raise 404."""
    user = db.execute(select(User).where(User.uid == uid)).scalar_one_or_none()

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user
