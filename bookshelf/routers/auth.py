"""
Authentication Router

Identity is owned by Firebase; these endpoints copy the verified token
claims into the users table.

Endpoints:
- POST /auth/register - Create the profile row for the caller
- POST /auth/login - Create or refresh the profile row from the token
"""

import logging

from fastapi import APIRouter, Request, Response, status
from sqlalchemy import select

from bookshelf.config import get_settings
from bookshelf.dependencies import CurrentIdentity, DbSession
from bookshelf.models import User
from bookshelf.schemas import RegisterRequest, UserResponse, UserSyncResponse
from bookshelf.services.rate_limiter import limiter
from bookshelf.services.users import sync_user

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Missing or invalid bearer token"},
    },
)


@router.post(
    "/register",
    response_model=UserSyncResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register the caller",
    description="Store the caller's profile. Returns 200 if it already exists.",
)
@limiter.limit(settings.rate_limit_write)
def register(
    request: Request,
    response: Response,
    db: DbSession,
    identity: CurrentIdentity,
    payload: RegisterRequest | None = None,
) -> UserSyncResponse:
    """
    Register a user.

    An existing profile with the same uid or email is returned unchanged
    with status 200.
    """
    existing = db.get(User, identity.uid)
    if existing is None and identity.email:
        existing = db.execute(
            select(User).where(User.email == identity.email)
        ).scalar_one_or_none()

    if existing is not None:
        response.status_code = status.HTTP_200_OK
        return UserSyncResponse(
            message="User already exists in DB",
            user=UserResponse.model_validate(existing),
        )

    payload = payload or RegisterRequest()
    user = User(
        uid=identity.uid,
        email=identity.email,
        name=payload.name or identity.display_name,
        profile_photo=payload.profile_photo or identity.photo_url or "",
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Registered user {user.uid}")
    return UserSyncResponse(
        message="User synced to DB successfully",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_model=UserSyncResponse,
    summary="Log in",
    description="Create or refresh the caller's profile from the identity token.",
)
@limiter.limit(settings.rate_limit_write)
def login(
    request: Request,
    db: DbSession,
    identity: CurrentIdentity,
) -> UserSyncResponse:
    user = sync_user(db, identity)
    return UserSyncResponse(
        message="User synced and logged in successfully",
        user=UserResponse.model_validate(user),
    )
