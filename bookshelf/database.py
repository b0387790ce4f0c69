"""
Database Configuration Module

SQLAlchemy 2.0 setup for the Bookshelf API.

The engine and its connection pool are created once per process and shared
by every request. There are no cross-row transactions in the aggregate
logic: each step of a multi-step update commits on its own.

Session Management Pattern
==========================
"Session per request":
1. Request arrives → create a new session
2. Use session for all database operations in that request
3. Commit explicitly after each step
4. Close session when request ends
"""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookshelf.config import Settings, get_settings

# Get settings instance
settings = get_settings()


def engine_options(config: Settings) -> dict[str, Any]:
    """
    Build create_engine() keyword arguments for the configured backend.

    SQLite uses a single-connection pool that rejects the sizing options,
    and its drivers name the connect timeout differently.

    Args:
        config: Application settings

    Returns:
        Keyword arguments for create_engine()
    """
    url = make_url(config.database_url)
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": config.debug,
    }

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": config.db_connect_timeout,
        }
    else:
        options["pool_size"] = config.db_pool_size
        options["max_overflow"] = config.db_max_overflow
        options["connect_args"] = {"connect_timeout": config.db_connect_timeout}

    return options


# =============================================================================
# Database Engine
# =============================================================================
engine = create_engine(settings.database_url, **engine_options(settings))


# =============================================================================
# Session Factory
# =============================================================================
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Creates a session, yields it to the route handler and closes it
    when the request ends, even if the handler raised.

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    WARNING: In production, use Alembic migrations instead!
    """
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Only use in development and tests.
    """
    Base.metadata.drop_all(bind=engine)
