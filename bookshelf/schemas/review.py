"""
Review Pydantic Schemas

Schemas for book reviews and review votes.

Business Rules:
- Rating must be 1-5 (validated at schema level)
- One review per user per book (checked before insert, backed by a
  unique constraint)
- Users can only edit/delete their own reviews
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Review Schemas
# =============================================================================


def _blank_to_none(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


class ReviewCreate(BaseModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "rating": 5,
        "review_text": "One of the best books I've ever read..."
    }
    """

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    review_text: str | None = Field(
        default=None,
        max_length=5000,
        description="Review text content",
    )

    @field_validator("review_text")
    @classmethod
    def blank_text_is_none(cls, v: str | None) -> str | None:
        """Store whitespace-only text as no text."""
        return _blank_to_none(v)


class ReviewUpdate(BaseModel):
    """Schema for updating a review. Omitted fields are left unchanged."""

    rating: int | None = Field(
        default=None,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
    )

    review_text: str | None = Field(
        default=None,
        max_length=5000,
        description="Review text content",
    )

    @field_validator("review_text")
    @classmethod
    def blank_text_is_none(cls, v: str | None) -> str | None:
        return _blank_to_none(v)


class ReviewResponse(BaseModel):
    """Schema for review responses."""

    id: str = Field(..., description="Unique review identifier")
    book_id: str = Field(..., description="ID of the reviewed book")
    user_uid: str = Field(..., description="Author's identity uid")
    user_name: str = Field(..., description="Author's display name")
    user_photo: str = Field(default="", description="Author's photo URL")
    rating: int = Field(..., description="Rating from 1 to 5 stars")
    review_text: str | None = Field(default=None, description="Review text")
    likes: int = Field(default=0, description="Number of likes")
    dislikes: int = Field(default=0, description="Number of dislikes")
    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime = Field(..., description="When the review was last updated")

    model_config = ConfigDict(from_attributes=True)


class ReviewMutationResponse(BaseModel):
    """
    Result of creating, updating or deleting a review.

    average_rating/total_reviews are the book aggregate after the change,
    or null if recomputing it failed.
    """

    message: str
    review: ReviewResponse | None = None
    average_rating: float | None = None
    total_reviews: int | None = None


# =============================================================================
# Vote Schemas
# =============================================================================


class LikeResponse(BaseModel):
    message: str
    likes: int
    user_liked: bool


class DislikeResponse(BaseModel):
    message: str
    dislikes: int
    user_disliked: bool


class VoteStatusResponse(BaseModel):
    user_liked: bool
    user_disliked: bool
