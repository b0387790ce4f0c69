"""
Book Pydantic Schemas

Schemas:
- BookBase: Shared fields between create/update
- BookCreate: Fields accepted when adding a book
- BookUpdate: Partial update (all optional)
- BookResponse: Book data including owner and aggregates
- BookListResponse: Paginated list of books
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookshelf.models.book import ReadingStatus


class BookBase(BaseModel):
    """Base schema with shared book fields."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["The Hobbit"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Book author",
        examples=["J.R.R. Tolkien"],
    )

    category: str | None = Field(
        default=None,
        max_length=100,
        description="Category or genre",
        examples=["Fantasy"],
    )

    overview: str | None = Field(
        default=None,
        max_length=5000,
        description="Short overview of the book",
    )

    cover_photo: str | None = Field(
        default=None,
        description="URL of the cover image",
    )

    total_pages: int | None = Field(
        default=None,
        ge=1,
        description="Number of pages",
    )

    reading_status: ReadingStatus = Field(
        default=ReadingStatus.WANT_TO_READ,
        description="Want-to-Read, Reading or Read",
    )

    @field_validator("title", "author")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        """Reject whitespace-only values."""
        if not v.strip():
            raise ValueError("must not be empty or whitespace")
        return v.strip()


class BookCreate(BookBase):
    """
    Schema for adding a book.

    Example request body:
    {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "category": "Fantasy",
        "reading_status": "Reading"
    }
    """

    pass


class BookUpdate(BaseModel):
    """Schema for updating a book. All fields are optional."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    author: str | None = Field(default=None, min_length=1, max_length=255)
    category: str | None = Field(default=None, max_length=100)
    overview: str | None = Field(default=None, max_length=5000)
    cover_photo: str | None = Field(default=None)
    total_pages: int | None = Field(default=None, ge=1)
    reading_status: ReadingStatus | None = Field(default=None)

    @field_validator("title", "author", "reading_status")
    @classmethod
    def required_fields_not_null(cls, v):
        """Omitting a field keeps it, but a required one cannot be set to null."""
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("title", "author")
    @classmethod
    def must_not_be_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("must not be empty or whitespace")
        return v.strip() if v else v


class BookResponse(BookBase):
    """
    Schema for book responses.

    rating/total_reviews are the stored aggregates on list endpoints and
    the live values on GET /books/{id}.
    """

    id: str = Field(..., description="Unique identifier")
    owner_uid: str = Field(..., description="Owner's identity uid")
    owner_email: str | None = Field(default=None, description="Owner's email")
    owner_name: str = Field(..., description="Owner's display name")

    upvotes: int = Field(default=0, description="Number of upvotes")
    rating: float = Field(default=0.0, description="Mean review rating, 0 if no reviews")
    total_reviews: int = Field(default=0, description="Number of reviews")

    created_at: datetime = Field(..., description="When the book was added")
    updated_at: datetime = Field(..., description="When the book was last updated")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "9f1c2e7a4b8d4e0f8a6b3c2d1e0f9a8b",
                "title": "The Hobbit",
                "author": "J.R.R. Tolkien",
                "category": "Fantasy",
                "overview": None,
                "cover_photo": None,
                "total_pages": 310,
                "reading_status": "Reading",
                "owner_uid": "firebase-uid-123",
                "owner_email": "reader@example.com",
                "owner_name": "Reader",
                "upvotes": 3,
                "rating": 4.5,
                "total_reviews": 2,
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class BookListResponse(BaseModel):
    """Schema for paginated book list responses."""

    items: list[BookResponse] = Field(..., description="Books on this page")
    total: int = Field(..., ge=0, description="Total number of matching books")
    page: int = Field(..., ge=1, description="Current page number")
    per_page: int = Field(..., ge=1, le=100, description="Number of items per page")
    pages: int = Field(..., ge=0, description="Total number of pages")


class BookMutationResponse(BaseModel):
    """Message plus the affected book."""

    message: str
    book: BookResponse
