"""
Tests for Books Endpoints

Tests the shelf:
- Create, read, update, delete (owner only for writes)
- Filters, sorting and pagination
- Trending and search
- Upvotes (never on your own book, once per user)
- Bookmarks
- Cascading delete of everything attached to a book
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.models import Book, Bookmark, BookUpvote, ReadingStatus, Review, ReviewVote
from tests.conftest import ALICE, BOB, CAROL, auth_header, make_book, make_review

MISSING_ID = "0" * 32


# =============================================================================
# Create Book
# =============================================================================


class TestCreateBook:
    """Tests for POST /api/v1/books/"""

    def test_create_book_defaults(self, client: TestClient):
        response = client.post(
            "/api/v1/books/",
            json={"title": "Dune", "author": "Frank Herbert"},
            headers=auth_header(ALICE),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert len(data["id"]) == 32
        assert data["reading_status"] == "Want-to-Read"
        assert data["owner_uid"] == ALICE.uid
        assert data["owner_email"] == ALICE.email
        assert data["owner_name"] == ALICE.name
        assert data["upvotes"] == 0
        assert data["rating"] == 0.0
        assert data["total_reviews"] == 0

    def test_create_book_with_status(self, client: TestClient):
        response = client.post(
            "/api/v1/books/",
            json={"title": "Dune", "author": "Frank Herbert", "reading_status": "Reading"},
            headers=auth_header(ALICE),
        )

        assert response.json()["reading_status"] == "Reading"

    def test_create_book_requires_auth(self, client: TestClient):
        response = client.post("/api/v1/books/", json={"title": "Dune", "author": "Frank Herbert"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_book_blank_title(self, client: TestClient):
        response = client.post(
            "/api/v1/books/",
            json={"title": "   ", "author": "Frank Herbert"},
            headers=auth_header(ALICE),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "title" in response.json()["message"]

    def test_create_book_unknown_status(self, client: TestClient):
        response = client.post(
            "/api/v1/books/",
            json={"title": "Dune", "author": "Frank Herbert", "reading_status": "Abandoned"},
            headers=auth_header(ALICE),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Read Books
# =============================================================================


class TestGetBook:
    """Tests for GET /api/v1/books/{book_id}"""

    def test_get_book(self, client: TestClient, sample_book: Book):
        response = client.get(f"/api/v1/books/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["title"] == "The Hobbit"

    def test_get_book_not_found(self, client: TestClient):
        response = client.get(f"/api/v1/books/{MISSING_ID}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Book not found"}

    def test_get_book_invalid_id(self, client: TestClient):
        response = client.get("/api/v1/books/abc")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"message": "Invalid Book ID format"}

    def test_live_rating_ignores_stale_aggregate(
        self, client: TestClient, db_session: Session, sample_book: Book
    ):
        make_review(db_session, sample_book, BOB, rating=5)
        sample_book.rating = 1.0
        sample_book.total_reviews = 7
        db_session.commit()

        data = client.get(f"/api/v1/books/{sample_book.id}").json()

        assert data["rating"] == 5.0
        assert data["total_reviews"] == 1


class TestListBooks:
    """Tests for GET /api/v1/books/"""

    def test_list_filters(self, client: TestClient, db_session: Session):
        make_book(db_session, ALICE, title="A", category="Fantasy", status=ReadingStatus.READ)
        make_book(db_session, ALICE, title="B", category="Mystery")
        make_book(db_session, BOB, title="C", category="Fantasy")

        by_category = client.get("/api/v1/books/", params={"category": "Fantasy"}).json()
        by_status = client.get("/api/v1/books/", params={"reading_status": "Read"}).json()
        by_owner = client.get("/api/v1/books/", params={"owner_email": BOB.email}).json()

        assert {b["title"] for b in by_category["items"]} == {"A", "C"}
        assert [b["title"] for b in by_status["items"]] == ["A"]
        assert [b["title"] for b in by_owner["items"]] == ["C"]

    def test_list_sort_by_title(self, client: TestClient, db_session: Session):
        for title in ("Beta", "Alpha", "Gamma"):
            make_book(db_session, ALICE, title=title)

        asc = client.get("/api/v1/books/", params={"sort": "title_asc"}).json()
        desc = client.get("/api/v1/books/", params={"sort": "title_desc"}).json()

        assert [b["title"] for b in asc["items"]] == ["Alpha", "Beta", "Gamma"]
        assert [b["title"] for b in desc["items"]] == ["Gamma", "Beta", "Alpha"]

    def test_list_sort_popular(self, client: TestClient, db_session: Session):
        make_book(db_session, ALICE, title="Quiet", upvotes=1)
        make_book(db_session, ALICE, title="Loud", upvotes=9)

        data = client.get("/api/v1/books/", params={"sort": "popular"}).json()

        assert [b["title"] for b in data["items"]] == ["Loud", "Quiet"]

    def test_list_pagination(self, client: TestClient, db_session: Session):
        for i in range(15):
            make_book(db_session, ALICE, title=f"Book {i:02d}")

        first = client.get("/api/v1/books/", params={"sort": "title_asc"}).json()
        second = client.get("/api/v1/books/", params={"sort": "title_asc", "page": 2}).json()

        assert first["total"] == 15
        assert first["pages"] == 2
        assert first["per_page"] == 12
        assert len(first["items"]) == 12
        assert [b["title"] for b in second["items"]] == ["Book 12", "Book 13", "Book 14"]


class TestTrendingAndSearch:
    """Tests for GET /api/v1/books/trending and /api/v1/books/search"""

    def test_trending_top_ten(self, client: TestClient, db_session: Session):
        for i in range(12):
            make_book(db_session, ALICE, title=f"Book {i}", upvotes=i)

        data = client.get("/api/v1/books/trending").json()

        assert len(data) == 10
        assert data[0]["upvotes"] == 11
        assert data[-1]["upvotes"] == 2

    def test_search_case_insensitive(self, client: TestClient, db_session: Session):
        make_book(db_session, ALICE, title="The Hobbit", author="J.R.R. Tolkien")
        make_book(db_session, ALICE, title="Emma", author="Jane Austen", overview="A hobbit-free novel")
        make_book(db_session, ALICE, title="Dune", author="Frank Herbert", category="Science Fiction")

        titles = {b["title"] for b in client.get("/api/v1/books/search", params={"q": "HOBBIT"}).json()}
        by_category = client.get("/api/v1/books/search", params={"q": "science"}).json()

        assert titles == {"The Hobbit", "Emma"}
        assert [b["title"] for b in by_category] == ["Dune"]

    def test_search_requires_query(self, client: TestClient):
        response = client.get("/api/v1/books/search")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"message": 'Search query parameter "q" is required'}


# =============================================================================
# Update / Delete
# =============================================================================


class TestUpdateBook:
    """Tests for PATCH /api/v1/books/{book_id}"""

    def test_update_status(self, client: TestClient, sample_book: Book):
        response = client.patch(
            f"/api/v1/books/{sample_book.id}",
            json={"reading_status": "Read"},
            headers=auth_header(ALICE),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Book updated successfully"
        assert response.json()["book"]["reading_status"] == "Read"

    def test_update_empty_body(self, client: TestClient, sample_book: Book):
        response = client.patch(
            f"/api/v1/books/{sample_book.id}",
            json={},
            headers=auth_header(ALICE),
        )

        assert response.json()["message"] == "Book data is the same, no update needed"

    def test_update_not_owner(self, client: TestClient, sample_book: Book):
        response = client.patch(
            f"/api/v1/books/{sample_book.id}",
            json={"reading_status": "Read"},
            headers=auth_header(BOB),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"message": "Not authorized to update this book"}

    def test_update_null_required_field(self, client: TestClient, sample_book: Book):
        for body in ({"title": None}, {"author": None}, {"reading_status": None}):
            response = client.patch(
                f"/api/v1/books/{sample_book.id}",
                json=body,
                headers=auth_header(ALICE),
            )

            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert "must not be null" in response.json()["message"]

        book = client.get(f"/api/v1/books/{sample_book.id}").json()
        assert book["title"] == "The Hobbit"
        assert book["reading_status"] == "Want-to-Read"

    def test_update_null_optional_field_clears_it(self, client: TestClient, sample_book: Book):
        response = client.patch(
            f"/api/v1/books/{sample_book.id}",
            json={"category": None},
            headers=auth_header(ALICE),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["book"]["category"] is None


class TestDeleteBook:
    """Tests for DELETE /api/v1/books/{book_id}"""

    def test_delete_not_owner(self, client: TestClient, sample_book: Book):
        response = client.delete(f"/api/v1/books/{sample_book.id}", headers=auth_header(BOB))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_cascades(
        self, client: TestClient, db_session: Session, sample_book: Book, sample_review: Review
    ):
        book_url = f"/api/v1/books/{sample_book.id}"
        client.post(f"{book_url}/bookmark", headers=auth_header(BOB))
        client.post(f"{book_url}/upvote", headers=auth_header(CAROL))
        client.post(f"/api/v1/reviews/{sample_review.id}/like", headers=auth_header(CAROL))

        response = client.delete(book_url, headers=auth_header(ALICE))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Book deleted successfully"}
        assert client.get(book_url).status_code == status.HTTP_404_NOT_FOUND
        assert client.get(f"{book_url}/reviews").json() == []

        for model in (Review, ReviewVote, Bookmark, BookUpvote):
            assert db_session.execute(select(model)).scalars().all() == []


# =============================================================================
# Upvotes
# =============================================================================


class TestUpvote:
    """Tests for POST /api/v1/books/{book_id}/upvote"""

    def test_upvote(self, client: TestClient, sample_book: Book):
        response = client.post(f"/api/v1/books/{sample_book.id}/upvote", headers=auth_header(BOB))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Book upvoted successfully"
        assert response.json()["book"]["upvotes"] == 1

    def test_cannot_upvote_own_book(self, client: TestClient, sample_book: Book):
        for _ in range(3):
            response = client.post(
                f"/api/v1/books/{sample_book.id}/upvote", headers=auth_header(ALICE)
            )

            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert response.json() == {"message": "You can't upvote your own book"}

        assert client.get(f"/api/v1/books/{sample_book.id}").json()["upvotes"] == 0

    def test_cannot_upvote_twice(self, client: TestClient, sample_book: Book):
        client.post(f"/api/v1/books/{sample_book.id}/upvote", headers=auth_header(BOB))
        response = client.post(f"/api/v1/books/{sample_book.id}/upvote", headers=auth_header(BOB))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert client.get(f"/api/v1/books/{sample_book.id}").json()["upvotes"] == 1

    def test_upvotes_from_several_users(self, client: TestClient, sample_book: Book):
        client.post(f"/api/v1/books/{sample_book.id}/upvote", headers=auth_header(BOB))
        response = client.post(f"/api/v1/books/{sample_book.id}/upvote", headers=auth_header(CAROL))

        assert response.json()["book"]["upvotes"] == 2


# =============================================================================
# Bookmarks
# =============================================================================


class TestBookmarks:
    """Tests for POST/DELETE /api/v1/books/{book_id}/bookmark"""

    def test_bookmark_and_remove(self, client: TestClient, sample_book: Book):
        url = f"/api/v1/books/{sample_book.id}/bookmark"

        created = client.post(url, headers=auth_header(BOB))
        duplicate = client.post(url, headers=auth_header(BOB))
        removed = client.delete(url, headers=auth_header(BOB))
        missing = client.delete(url, headers=auth_header(BOB))

        assert created.status_code == status.HTTP_201_CREATED
        assert created.json() == {"message": "Book bookmarked successfully"}
        assert duplicate.status_code == status.HTTP_400_BAD_REQUEST
        assert duplicate.json() == {"message": "Book already bookmarked"}
        assert removed.json() == {"message": "Bookmark removed successfully"}
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    def test_bookmark_missing_book(self, client: TestClient):
        response = client.post(f"/api/v1/books/{MISSING_ID}/bookmark", headers=auth_header(BOB))

        assert response.status_code == status.HTTP_404_NOT_FOUND
