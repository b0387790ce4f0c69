"""
API Routers Package

Router Structure:
- auth.py: /api/v1/auth/* endpoints (register, login)
- books.py: /api/v1/books/* endpoints (CRUD, upvotes, bookmarks)
- reviews.py: review CRUD and like/dislike toggles
- users.py: /api/v1/users/* endpoints (profile, statistics)

Each router is imported and registered in main.py.
"""

from bookshelf.routers.auth import router as auth_router
from bookshelf.routers.books import router as books_router
from bookshelf.routers.reviews import router as reviews_router
from bookshelf.routers.users import router as users_router

__all__ = [
    "auth_router",
    "books_router",
    "reviews_router",
    "users_router",
]
