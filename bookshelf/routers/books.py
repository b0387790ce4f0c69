"""
Books Router

CRUD endpoints for books plus upvotes and bookmarks.

Endpoints:
- POST /books/ - Add a book (authenticated)
- GET /books/ - List books with filters, sorting and pagination
- GET /books/trending - Top 10 books by upvotes
- GET /books/search - Free-text search
- GET /books/{book_id} - Get a book with its live rating
- PATCH /books/{book_id} - Update a book (owner only)
- DELETE /books/{book_id} - Delete a book and everything attached (owner only)
- POST /books/{book_id}/upvote - Upvote someone else's book
- POST /books/{book_id}/bookmark - Bookmark a book
- DELETE /books/{book_id}/bookmark - Remove a bookmark
"""

import logging
import math

from fastapi import APIRouter, HTTPException, Query, Request, status
from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError

from bookshelf.config import get_settings
from bookshelf.dependencies import (
    CurrentIdentity,
    DbSession,
    Pagination,
    ensure_valid_id,
    get_book_or_404,
)
from bookshelf.models import Book, Bookmark, BookUpvote, ReadingStatus
from bookshelf.schemas import (
    BookCreate,
    BookListResponse,
    BookMutationResponse,
    BookResponse,
    BookUpdate,
    MessageResponse,
)
from bookshelf.services.rate_limiter import limiter
from bookshelf.services.ratings import compute_book_rating

logger = logging.getLogger(__name__)

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================
router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)

SORT_ORDERS = {
    "newest": Book.created_at.desc(),
    "oldest": Book.created_at.asc(),
    "popular": Book.upvotes.desc(),
    "title_asc": Book.title.asc(),
    "title_desc": Book.title.desc(),
}

TRENDING_LIMIT = 10
SEARCH_LIMIT = 20


# =============================================================================
# CRUD Endpoints
# =============================================================================


@router.post(
    "/",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a book",
    description="Add a book to the authenticated user's shelf.",
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
    identity: CurrentIdentity,
) -> BookResponse:
    """
    Create a book owned by the caller.

    Upvotes and rating aggregates start at zero.
    """
    data = book_data.model_dump()
    data["reading_status"] = book_data.reading_status.value

    book = Book(
        **data,
        owner_uid=identity.uid,
        owner_email=identity.email,
        owner_name=identity.display_name,
        upvotes=0,
        rating=0.0,
        total_reviews=0,
    )
    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Book {book.id} created by {identity.uid}")
    return BookResponse.model_validate(book)


@router.get(
    "/",
    response_model=BookListResponse,
    summary="List books",
    description="Paginated list of books with optional filters and sort order.",
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    category: str | None = Query(default=None, description="Exact category"),
    reading_status: ReadingStatus | None = Query(default=None, description="Reading status"),
    owner_email: str | None = Query(default=None, description="Owner's email"),
    sort: str = Query(
        default="newest",
        description="newest, oldest, popular, title_asc or title_desc",
    ),
) -> BookListResponse:
    """
    List books.

    Unknown sort values fall back to newest first.
    """
    stmt = select(Book)
    if owner_email:
        stmt = stmt.where(Book.owner_email == owner_email)
    if category:
        stmt = stmt.where(Book.category == category)
    if reading_status:
        stmt = stmt.where(Book.reading_status == reading_status.value)

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = db.execute(count_stmt).scalar() or 0
    pages = math.ceil(total / pagination.per_page) if total > 0 else 0

    order = SORT_ORDERS.get(sort, SORT_ORDERS["newest"])
    books = db.execute(
        stmt.order_by(order, Book.id)
        .offset(pagination.skip)
        .limit(pagination.per_page)
    ).scalars().all()

    return BookListResponse(
        items=[BookResponse.model_validate(book) for book in books],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pages,
    )


@router.get(
    "/trending",
    response_model=list[BookResponse],
    summary="Trending books",
    description="The ten most upvoted books.",
)
@limiter.limit(settings.rate_limit_default)
def trending_books(request: Request, db: DbSession) -> list[BookResponse]:
    stmt = select(Book).order_by(Book.upvotes.desc(), Book.created_at.desc()).limit(TRENDING_LIMIT)
    return [BookResponse.model_validate(book) for book in db.execute(stmt).scalars().all()]


@router.get(
    "/search",
    response_model=list[BookResponse],
    summary="Search books",
    description="Case-insensitive match on title, author, overview and category.",
)
@limiter.limit(settings.rate_limit_default)
def search_books(
    request: Request,
    db: DbSession,
    q: str | None = Query(default=None, max_length=100, description="Search text"),
) -> list[BookResponse]:
    """
    Search books.

    Raises:
        HTTPException: 400 if q is missing or empty
    """
    if not q or not q.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Search query parameter "q" is required',
        )

    pattern = f"%{q.strip().lower()}%"
    stmt = (
        select(Book)
        .where(
            or_(
                func.lower(Book.title).like(pattern),
                func.lower(Book.author).like(pattern),
                func.lower(Book.overview).like(pattern),
                func.lower(Book.category).like(pattern),
            )
        )
        .order_by(Book.created_at.desc())
        .limit(SEARCH_LIMIT)
    )
    return [BookResponse.model_validate(book) for book in db.execute(stmt).scalars().all()]


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book",
    description="Get a book with rating and review count computed from its reviews.",
)
@limiter.limit(settings.rate_limit_default)
def get_book(request: Request, book_id: str, db: DbSession) -> BookResponse:
    """
    Get a single book.

    rating/total_reviews are recomputed from the reviews table on every
    read, so the response is correct even if a stored recomputation was
    missed.
    """
    book = get_book_or_404(db, book_id)
    summary = compute_book_rating(db, book.id)

    return BookResponse.model_validate(book).model_copy(
        update={"rating": summary.rating, "total_reviews": summary.total_reviews}
    )


@router.patch(
    "/{book_id}",
    response_model=BookMutationResponse,
    summary="Update a book",
    description="Update your own book. Only the owner can update.",
)
@limiter.limit(settings.rate_limit_write)
def update_book(
    request: Request,
    book_id: str,
    book_data: BookUpdate,
    db: DbSession,
    identity: CurrentIdentity,
) -> BookMutationResponse:
    """
    Partially update a book.

    Raises:
        HTTPException: 403 if the caller does not own the book
    """
    book = get_book_or_404(db, book_id)

    if book.owner_uid != identity.uid:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to update this book",
        )

    update_data = book_data.model_dump(exclude_unset=True)
    if not update_data:
        return BookMutationResponse(
            message="Book data is the same, no update needed",
            book=BookResponse.model_validate(book),
        )

    if update_data.get("reading_status") is not None:
        update_data["reading_status"] = update_data["reading_status"].value

    for field, value in update_data.items():
        setattr(book, field, value)

    db.commit()
    db.refresh(book)

    return BookMutationResponse(
        message="Book updated successfully",
        book=BookResponse.model_validate(book),
    )


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    summary="Delete a book",
    description="Delete your own book with its reviews, review votes, bookmarks and upvotes.",
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: str,
    db: DbSession,
    identity: CurrentIdentity,
) -> MessageResponse:
    """
    Delete a book.

    The ORM cascades remove reviews (and their votes), bookmarks and
    upvote records together with the book.

    Raises:
        HTTPException: 403 if the caller does not own the book
    """
    book = get_book_or_404(db, book_id)

    if book.owner_uid != identity.uid:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to delete this book",
        )

    db.delete(book)
    db.commit()

    logger.info(f"Book {book_id} deleted by {identity.uid}")
    return MessageResponse(message="Book deleted successfully")


# =============================================================================
# Upvotes
# =============================================================================


@router.post(
    "/{book_id}/upvote",
    response_model=BookMutationResponse,
    summary="Upvote a book",
    description="Upvote a book you do not own. Each user can upvote a book once.",
)
@limiter.limit(settings.rate_limit_write)
def upvote_book(
    request: Request,
    book_id: str,
    db: DbSession,
    identity: CurrentIdentity,
) -> BookMutationResponse:
    """
    Upvote a book.

    The upvote record is stored first, then the counter is incremented in
    place.

    Raises:
        HTTPException: 400 if the caller owns the book or already upvoted it
    """
    book = get_book_or_404(db, book_id)

    if book.owner_uid == identity.uid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You can't upvote your own book",
        )

    existing = db.execute(
        select(BookUpvote).where(
            BookUpvote.book_id == book.id,
            BookUpvote.user_uid == identity.uid,
        )
    ).scalar_one_or_none()
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You have already upvoted this book",
        )

    db.add(BookUpvote(book_id=book.id, user_uid=identity.uid))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You have already upvoted this book",
        )

    db.execute(
        update(Book)
        .where(Book.id == book.id)
        .values(upvotes=Book.upvotes + 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(book)

    return BookMutationResponse(
        message="Book upvoted successfully",
        book=BookResponse.model_validate(book),
    )


# =============================================================================
# Bookmarks
# =============================================================================


@router.post(
    "/{book_id}/bookmark",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Bookmark a book",
)
@limiter.limit(settings.rate_limit_write)
def create_bookmark(
    request: Request,
    book_id: str,
    db: DbSession,
    identity: CurrentIdentity,
) -> MessageResponse:
    """
    Bookmark a book.

    Raises:
        HTTPException: 400 if the book is already bookmarked by the caller
    """
    book = get_book_or_404(db, book_id)

    existing = db.execute(
        select(Bookmark).where(
            Bookmark.book_id == book.id,
            Bookmark.user_uid == identity.uid,
        )
    ).scalar_one_or_none()
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Book already bookmarked",
        )

    db.add(Bookmark(book_id=book.id, user_uid=identity.uid))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Book already bookmarked",
        )

    return MessageResponse(message="Book bookmarked successfully")


@router.delete(
    "/{book_id}/bookmark",
    response_model=MessageResponse,
    summary="Remove a bookmark",
)
@limiter.limit(settings.rate_limit_write)
def delete_bookmark(
    request: Request,
    book_id: str,
    db: DbSession,
    identity: CurrentIdentity,
) -> MessageResponse:
    """
    Remove the caller's bookmark on a book.

    Raises:
        HTTPException: 404 if there is no such bookmark
    """
    ensure_valid_id(book_id, "Book")

    bookmark = db.execute(
        select(Bookmark).where(
            Bookmark.book_id == book_id,
            Bookmark.user_uid == identity.uid,
        )
    ).scalar_one_or_none()
    if bookmark is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bookmark not found",
        )

    db.delete(bookmark)
    db.commit()

    return MessageResponse(message="Bookmark removed successfully")
