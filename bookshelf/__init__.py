"""
Bookshelf API Application Package

REST backend for a book-tracking application: users add books, review and
rate them, bookmark and upvote, and view profile statistics.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine and session management
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Aggregate recomputation, statistics and identity provider
- utils/: Helper functions
"""

__version__ = "0.1.0"
