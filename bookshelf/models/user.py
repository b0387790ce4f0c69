"""
User Model

Profile of a user known to the identity provider.

The primary key is the provider's uid, not a generated identifier. The
profile stores no aggregate fields: statistics are computed on read.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.database import Base


class User(Base):
    """
    User model representing registered users.

    Table: users

    Rows are created on first register/login/profile access and refreshed
    from the identity token claims on later logins.
    """

    __tablename__ = "users"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    uid: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
        comment="Identity provider uid"
    )

    # -------------------------------------------------------------------------
    # Profile Fields
    # -------------------------------------------------------------------------
    email: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=True,
        comment="Email address from the identity provider"
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="Anonymous",
        comment="Display name"
    )

    profile_photo: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="URL to the user's photo"
    )

    bio: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="User biography"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"User(uid='{self.uid}', email='{self.email}')"
