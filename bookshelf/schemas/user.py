"""
User Pydantic Schemas

Schemas:
- RegisterRequest: Optional profile overrides sent at registration
- UserResponse: Stored profile
- ProfileUpdate: Editable profile fields
- ProfileResponse: Profile with book and engagement statistics
- UserStatsResponse: Flat statistics for the dashboard
- ActivityItem: One entry in the recent activity feed
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from bookshelf.schemas.book import BookResponse
from bookshelf.schemas.review import ReviewResponse


class RegisterRequest(BaseModel):
    """Registration body. Values default to the identity token claims."""

    name: str | None = Field(default=None, max_length=255)
    profile_photo: str | None = Field(default=None)


class UserResponse(BaseModel):
    """Stored user profile."""

    uid: str = Field(..., description="Identity provider uid")
    name: str = Field(..., description="Display name")
    email: str | None = Field(default=None, description="Email address")
    profile_photo: str = Field(default="", description="Photo URL")
    bio: str | None = Field(default=None, description="Biography")

    model_config = ConfigDict(from_attributes=True)


class UserSyncResponse(BaseModel):
    message: str
    user: UserResponse


class ProfileUpdate(BaseModel):
    """
    Profile update body.

    display_name and photo_url are also pushed to the identity provider.
    """

    display_name: str | None = Field(default=None, min_length=1, max_length=255)
    photo_url: str | None = Field(default=None)
    bio: str | None = Field(default=None, max_length=2000)


# =============================================================================
# Statistics Schemas
# =============================================================================


class BookStatsResponse(BaseModel):
    total: int
    read: int
    reading: int
    want_to_read: int

    model_config = ConfigDict(from_attributes=True)


class EngagementStatsResponse(BaseModel):
    bookmarks: int
    reviews: int
    ratings: int

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(BaseModel):
    """Profile with statistics recomputed on every request."""

    user: UserResponse
    book_stats: BookStatsResponse
    engagement_stats: EngagementStatsResponse
    upvotes_received: int


class UserStatsResponse(BaseModel):
    total_books: int
    books_read: int
    currently_reading: int
    want_to_read: int
    total_reviews: int
    total_upvotes: int


class ActivityItem(BaseModel):
    type: Literal["review", "book_added"]
    date: datetime
    review: ReviewResponse | None = None
    book: BookResponse | None = None
