"""
Tests for User Profile Endpoints

Tests:
- Profile with book and engagement statistics
- Profile update (pushed to the identity provider)
- Flat statistics
- Reading list, activity feed and bookmarks
- Public profiles
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookshelf.models import Book, Bookmark, ReadingStatus, User
from tests.conftest import ALICE, BOB, CAROL, FakeIdentityProvider, auth_header, make_book, make_review


class TestProfile:
    """Tests for GET /api/v1/users/me"""

    def test_profile_creates_user_row(self, client: TestClient, db_session: Session):
        response = client.get("/api/v1/users/me", headers=auth_header(BOB))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["user"]["uid"] == BOB.uid
        assert data["user"]["name"] == BOB.name
        assert data["book_stats"] == {"total": 0, "read": 0, "reading": 0, "want_to_read": 0}
        assert data["engagement_stats"] == {"bookmarks": 0, "reviews": 0, "ratings": 0}
        assert data["upvotes_received"] == 0
        assert db_session.get(User, BOB.uid) is not None

    def test_profile_statistics(self, client: TestClient, db_session: Session):
        make_book(db_session, ALICE, title="Read", status=ReadingStatus.READ)
        make_book(db_session, ALICE, title="Reading 1", status=ReadingStatus.READING)
        make_book(db_session, ALICE, title="Reading 2", status=ReadingStatus.READING)

        data = client.get("/api/v1/users/me", headers=auth_header(ALICE)).json()

        assert data["book_stats"] == {"total": 3, "read": 1, "reading": 2, "want_to_read": 0}
        assert data["engagement_stats"] == {"bookmarks": 0, "reviews": 0, "ratings": 0}

    def test_profile_engagement(self, client: TestClient, db_session: Session, sample_book: Book):
        make_review(db_session, sample_book, BOB, rating=4)
        db_session.add(Bookmark(book_id=sample_book.id, user_uid=BOB.uid))
        db_session.commit()

        data = client.get("/api/v1/users/me", headers=auth_header(BOB)).json()

        assert data["engagement_stats"] == {"bookmarks": 1, "reviews": 1, "ratings": 1}

    def test_profile_requires_auth(self, client: TestClient):
        response = client.get("/api/v1/users/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestUpdateProfile:
    """Tests for PATCH /api/v1/users/me"""

    def test_update_profile(
        self,
        client: TestClient,
        identity_provider: FakeIdentityProvider,
        alice_user: User,
    ):
        response = client.patch(
            "/api/v1/users/me",
            json={"display_name": "Alice R.", "bio": "Mostly fantasy."},
            headers=auth_header(ALICE),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Alice R."
        assert response.json()["bio"] == "Mostly fantasy."
        assert response.json()["profile_photo"] == ALICE.photo_url
        assert identity_provider.updates == [
            {"uid": ALICE.uid, "display_name": "Alice R.", "photo_url": None}
        ]

    def test_update_profile_without_row(self, client: TestClient, db_session: Session):
        response = client.patch(
            "/api/v1/users/me",
            json={"photo_url": "https://example.com/new.png"},
            headers=auth_header(CAROL),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["profile_photo"] == "https://example.com/new.png"
        assert db_session.get(User, CAROL.uid) is not None

    def test_update_profile_provider_failure(
        self,
        client: TestClient,
        db_session: Session,
        identity_provider: FakeIdentityProvider,
        alice_user: User,
    ):
        identity_provider.fail_updates = True

        response = client.patch(
            "/api/v1/users/me",
            json={"display_name": "Nope"},
            headers=auth_header(ALICE),
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"message": "Server error updating profile"}
        db_session.refresh(alice_user)
        assert alice_user.name == ALICE.name


class TestStats:
    """Tests for GET /api/v1/users/me/stats"""

    def test_stats(self, client: TestClient, db_session: Session):
        make_book(db_session, ALICE, title="One", status=ReadingStatus.READ, upvotes=2)
        make_book(db_session, ALICE, title="Two", upvotes=3)
        make_book(db_session, BOB, title="Other", upvotes=10)

        data = client.get("/api/v1/users/me/stats", headers=auth_header(ALICE)).json()

        assert data == {
            "total_books": 2,
            "books_read": 1,
            "currently_reading": 0,
            "want_to_read": 1,
            "total_reviews": 0,
            "total_upvotes": 5,
        }


class TestLists:
    """Tests for the reading list, activity feed and bookmarks"""

    def test_reading_list_only_own_books(self, client: TestClient, db_session: Session):
        make_book(db_session, ALICE, title="Mine")
        make_book(db_session, BOB, title="Not mine")

        data = client.get("/api/v1/users/me/reading-list", headers=auth_header(ALICE)).json()

        assert [b["title"] for b in data] == ["Mine"]

    def test_activity_feed(self, client: TestClient, db_session: Session, sample_book: Book):
        make_review(db_session, sample_book, ALICE, rating=5)
        for i in range(7):
            make_book(db_session, ALICE, title=f"Extra {i}")

        data = client.get("/api/v1/users/me/activity", headers=auth_header(ALICE)).json()

        types = [item["type"] for item in data]
        assert len(data) == 6
        assert types.count("review") == 1
        assert types.count("book_added") == 5
        dates = [item["date"] for item in data]
        assert dates == sorted(dates, reverse=True)

    def test_bookmarks(self, client: TestClient, sample_book: Book):
        client.post(f"/api/v1/books/{sample_book.id}/bookmark", headers=auth_header(BOB))

        data = client.get("/api/v1/users/me/bookmarks", headers=auth_header(BOB)).json()

        assert [b["id"] for b in data] == [sample_book.id]


class TestPublicProfile:
    """Tests for GET /api/v1/users/{uid}"""

    def test_public_profile(self, client: TestClient, db_session: Session, alice_user: User):
        make_book(db_session, ALICE, title="Shared", status=ReadingStatus.READING)

        response = client.get(f"/api/v1/users/{ALICE.uid}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["email"] == ALICE.email
        assert response.json()["book_stats"]["reading"] == 1

    def test_public_profile_not_found(self, client: TestClient):
        response = client.get("/api/v1/users/nobody")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "User not found"}
