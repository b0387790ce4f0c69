"""
Alembic environment for the Bookshelf schema.

The database URL comes from DATABASE_URL via bookshelf settings, never from
alembic.ini. Importing bookshelf.models registers the six tables (users,
books, book_upvotes, bookmarks, reviews, review_votes) on Base.metadata so
autogenerate can diff them.

    alembic upgrade head
    alembic revision --autogenerate -m "describe the change"
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

import bookshelf.models  # noqa: F401
from bookshelf.config import get_settings
from bookshelf.database import Base

config = context.config
config.set_main_option("sqlalchemy.url", get_settings().database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of executing it (alembic upgrade head --sql)."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a short-lived, unpooled connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite cannot ALTER constraints in place
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
