"""
Pydantic Schemas Package

Request/response validation models, kept separate from the SQLAlchemy
models so the API shape can evolve independently of the tables.

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
"""

from pydantic import BaseModel

from bookshelf.schemas.book import (
    BookBase,
    BookCreate,
    BookListResponse,
    BookMutationResponse,
    BookResponse,
    BookUpdate,
)
from bookshelf.schemas.review import (
    DislikeResponse,
    LikeResponse,
    ReviewCreate,
    ReviewMutationResponse,
    ReviewResponse,
    ReviewUpdate,
    VoteStatusResponse,
)
from bookshelf.schemas.user import (
    ActivityItem,
    BookStatsResponse,
    EngagementStatsResponse,
    ProfileResponse,
    ProfileUpdate,
    RegisterRequest,
    UserResponse,
    UserStatsResponse,
    UserSyncResponse,
)


class MessageResponse(BaseModel):
    """Plain acknowledgement or error body."""

    message: str


__all__ = [
    "MessageResponse",
    # Book schemas
    "BookBase",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "BookListResponse",
    "BookMutationResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewMutationResponse",
    "LikeResponse",
    "DislikeResponse",
    "VoteStatusResponse",
    # User schemas
    "RegisterRequest",
    "UserResponse",
    "UserSyncResponse",
    "ProfileUpdate",
    "ProfileResponse",
    "BookStatsResponse",
    "EngagementStatsResponse",
    "UserStatsResponse",
    "ActivityItem",
]
