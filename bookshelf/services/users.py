"""
User Profile Service

Keeps the users table in step with the identity provider's claims.
"""

import logging

from sqlalchemy.orm import Session

from bookshelf.models import User
from bookshelf.services.identity import IdentityClaims

logger = logging.getLogger(__name__)


def sync_user(db: Session, identity: IdentityClaims) -> User:
    """
    Create or refresh a user's profile from token claims.

    A missing row is created. An existing row is updated when the name,
    email or photo in the token differ from what is stored, or when the
    stored name/photo is empty.

    Args:
        db: Database session
        identity: Verified caller identity

    Returns:
        The stored User
    """
    name = identity.display_name
    photo = identity.photo_url or ""

    user = db.get(User, identity.uid)

    if user is None:
        logger.info(f"Creating profile for {identity.uid} from identity token")
        user = User(
            uid=identity.uid,
            email=identity.email,
            name=name,
            profile_photo=photo,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    if (
        user.name != name
        or user.email != identity.email
        or user.profile_photo != photo
        or not user.name
        or not user.profile_photo
    ):
        logger.info(f"Refreshing profile for {identity.uid} from identity token")
        user.name = name
        user.email = identity.email
        user.profile_photo = photo
        db.commit()
        db.refresh(user)

    return user
