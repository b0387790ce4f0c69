"""
Identity Provider Service

Firebase Admin SDK wrapper used to verify bearer ID tokens and to push
profile changes back to Firebase Authentication.

The Firebase app is initialized lazily from the base64 service account in
settings (FIREBASE_SERVICE_KEY) the first time it is needed, then reused
for the life of the process.

Routers receive the provider through the get_identity_provider dependency,
so tests can swap in a fake without touching Firebase.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from bookshelf.config import get_settings

logger = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    """The bearer token was rejected by the identity provider."""


@dataclass(frozen=True)
class IdentityClaims:
    """Identity of the caller as asserted by a verified token."""
    uid: str
    email: str | None
    name: str | None
    photo_url: str | None

    @property
    def display_name(self) -> str:
        return self.name or "Anonymous"


class FirebaseIdentityProvider:
    """Verifies Firebase ID tokens and updates Firebase user records."""

    def __init__(self, service_account: dict[str, Any]) -> None:
        self._service_account = service_account
        self._app: firebase_admin.App | None = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is None:
            try:
                self._app = firebase_admin.get_app()
            except ValueError:
                cred = credentials.Certificate(self._service_account)
                self._app = firebase_admin.initialize_app(cred)
                logger.info("Firebase Admin SDK initialized")
        return self._app

    def verify_token(self, token: str) -> IdentityClaims:
        """
        Verify a Firebase ID token.

        Args:
            token: Raw bearer token

        Returns:
            IdentityClaims extracted from the decoded token

        Raises:
            InvalidCredentialsError: If Firebase rejects the token
        """
        try:
            decoded = auth.verify_id_token(token, app=self._get_app())
        except (ValueError, FirebaseError) as exc:
            logger.warning(f"Firebase ID token verification failed: {exc}")
            raise InvalidCredentialsError(str(exc)) from exc

        return IdentityClaims(
            uid=decoded["uid"],
            email=decoded.get("email"),
            name=decoded.get("name"),
            photo_url=decoded.get("picture"),
        )

    def update_user(
        self,
        uid: str,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> None:
        """
        Push display name and/or photo changes to Firebase Authentication.

        Only the arguments that are not None are sent. FirebaseError
        propagates to the caller.
        """
        changes: dict[str, Any] = {}
        if display_name is not None:
            changes["display_name"] = display_name
        if photo_url is not None:
            changes["photo_url"] = photo_url

        if not changes:
            return

        auth.update_user(uid, app=self._get_app(), **changes)


@lru_cache
def get_identity_provider() -> FirebaseIdentityProvider:
    """
    Process-wide identity provider dependency.

    Usage in Routes:
        def endpoint(provider: FirebaseIdentityProvider = Depends(get_identity_provider)):
            ...
    """
    return FirebaseIdentityProvider(get_settings().firebase_credentials)
