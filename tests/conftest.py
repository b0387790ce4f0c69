"""
pytest Fixtures for Bookshelf API Tests

Shared fixtures used across all test files.

For database tests, we use:
- session scope for the engine (expensive to create)
- function scope for sessions (isolation between tests)

Firebase is never contacted: the identity provider dependency is replaced
by FakeIdentityProvider, which accepts a fixed set of bearer tokens.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# Settings are validated at import time and FIREBASE_SERVICE_KEY is required
import base64
import json
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["FIREBASE_SERVICE_KEY"] = base64.b64encode(
    json.dumps({"type": "service_account", "project_id": "bookshelf-test"}).encode()
).decode()

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from firebase_admin.exceptions import UnavailableError
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookshelf.database import Base, get_db
from bookshelf.main import app
from bookshelf.models import Book, ReadingStatus, Review, User
from bookshelf.services.identity import (
    IdentityClaims,
    InvalidCredentialsError,
    get_identity_provider,
)

# =============================================================================
# IDENTITIES
# =============================================================================
ALICE = IdentityClaims(
    uid="uid-alice",
    email="alice@example.com",
    name="Alice Reader",
    photo_url="https://example.com/alice.png",
)
BOB = IdentityClaims(
    uid="uid-bob",
    email="bob@example.com",
    name="Bob Pages",
    photo_url="https://example.com/bob.png",
)
CAROL = IdentityClaims(
    uid="uid-carol",
    email="carol@example.com",
    name=None,
    photo_url=None,
)

TOKENS = {
    "token-alice": ALICE,
    "token-bob": BOB,
    "token-carol": CAROL,
}


def auth_header(identity: IdentityClaims) -> dict:
    """Authorization header accepted by FakeIdentityProvider for identity."""
    token = next(t for t, claims in TOKENS.items() if claims == identity)
    return {"Authorization": f"Bearer {token}"}


class FakeIdentityProvider:
    """In-memory stand-in for FirebaseIdentityProvider."""

    def __init__(self) -> None:
        self.updates: list[dict] = []
        self.fail_updates = False

    def verify_token(self, token: str) -> IdentityClaims:
        try:
            return TOKENS[token]
        except KeyError:
            raise InvalidCredentialsError("unknown token")

    def update_user(
        self,
        uid: str,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> None:
        if self.fail_updates:
            raise UnavailableError("identity provider unavailable")
        self.updates.append(
            {"uid": uid, "display_name": display_name, "photo_url": photo_url}
        )


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the connection alive for the entire session.
    Without it, SQLite in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session is joined to an outer transaction that's rolled back,
    so commits inside the app never reach the shared database.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture(scope="function")
def client(
    db_session: Session,
    identity_provider: FakeIdentityProvider,
) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database and fake identity provider.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
def make_book(
    db_session: Session,
    owner: IdentityClaims,
    title: str = "The Hobbit",
    status: ReadingStatus = ReadingStatus.WANT_TO_READ,
    **fields,
) -> Book:
    """Insert a book owned by owner."""
    book = Book(
        owner_uid=owner.uid,
        owner_email=owner.email,
        owner_name=owner.display_name,
        title=title,
        author=fields.pop("author", "J.R.R. Tolkien"),
        reading_status=status.value,
        **fields,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


def make_review(
    db_session: Session,
    book: Book,
    author: IdentityClaims,
    rating: int,
    text: str | None = None,
) -> Review:
    """Insert a review without touching the book aggregate."""
    review = Review(
        book_id=book.id,
        user_uid=author.uid,
        user_name=author.display_name,
        rating=rating,
        review_text=text,
    )
    db_session.add(review)
    db_session.commit()
    db_session.refresh(review)
    return review


@pytest.fixture
def alice_user(db_session: Session) -> User:
    """Stored profile for Alice."""
    user = User(
        uid=ALICE.uid,
        email=ALICE.email,
        name=ALICE.display_name,
        profile_photo=ALICE.photo_url,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_book(db_session: Session) -> Book:
    """A book on Alice's shelf."""
    return make_book(
        db_session,
        ALICE,
        category="Fantasy",
        overview="Bilbo Baggins embarks on a quest to reclaim the Lonely Mountain.",
        total_pages=310,
    )


@pytest.fixture
def sample_review(db_session: Session, sample_book: Book) -> Review:
    """Bob's review of Alice's book."""
    return make_review(db_session, sample_book, BOB, rating=4, text="Great adventure.")
