"""
SQLAlchemy Models Package

Model Relationships:
- Book -> Review: One-to-Many (deleted with the book)
- Review -> ReviewVote: One-to-Many (deleted with the review)
- Book -> Bookmark: One-to-Many (deleted with the book)
- Book -> BookUpvote: One-to-Many (deleted with the book)
- User: keyed by identity provider uid, referenced by uid columns

Import all models here so Alembic discovers them for migrations.
"""

from bookshelf.models.user import User
from bookshelf.models.book import Book, BookUpvote, ReadingStatus
from bookshelf.models.bookmark import Bookmark
from bookshelf.models.review import Review
from bookshelf.models.vote import ReviewVote, VoteKind

__all__ = [
    "User",
    "Book",
    "BookUpvote",
    "ReadingStatus",
    "Bookmark",
    "Review",
    "ReviewVote",
    "VoteKind",
]
