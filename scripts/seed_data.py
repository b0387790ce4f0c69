#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (optional)
3. Creates sample users, books, reviews and votes
4. Recomputes the rating aggregates through the same services the API uses
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bookshelf.database import SessionLocal, create_tables
from bookshelf.models import Book, Bookmark, BookUpvote, ReadingStatus, Review, ReviewVote, User, VoteKind
from bookshelf.services.ratings import recalculate_book_rating
from bookshelf.services.votes import toggle_vote


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    for model in (ReviewVote, Review, Bookmark, BookUpvote, Book, User):
        db.execute(delete(model))
    db.commit()
    print("Data cleared.")


def create_users(db: Session) -> dict[str, User]:
    """Create sample users."""
    print("Creating users...")
    users_data = [
        {"uid": "seed-alice", "email": "alice@example.com", "name": "Alice Reader"},
        {"uid": "seed-bob", "email": "bob@example.com", "name": "Bob Pages"},
        {"uid": "seed-carol", "email": "carol@example.com", "name": "Carol Shelf"},
    ]

    users = {}
    for data in users_data:
        user = User(**data)
        db.add(user)
        users[data["uid"]] = user

    db.commit()
    print(f"Created {len(users)} users.")
    return users


def create_books(db: Session, users: dict[str, User]) -> list[Book]:
    """Create sample books on the users' shelves."""
    print("Creating books...")
    books_data = [
        {
            "owner": "seed-alice",
            "title": "1984",
            "author": "George Orwell",
            "category": "Fiction",
            "overview": "A dystopian novel set in a totalitarian society.",
            "total_pages": 328,
            "reading_status": ReadingStatus.READ,
        },
        {
            "owner": "seed-alice",
            "title": "Foundation",
            "author": "Isaac Asimov",
            "category": "Science Fiction",
            "overview": "The fall of the Galactic Empire and the plan to shorten the dark age.",
            "total_pages": 244,
            "reading_status": ReadingStatus.READING,
        },
        {
            "owner": "seed-bob",
            "title": "The Hobbit",
            "author": "J.R.R. Tolkien",
            "category": "Fantasy",
            "overview": "Bilbo Baggins embarks on a quest to reclaim the Lonely Mountain.",
            "total_pages": 310,
            "reading_status": ReadingStatus.WANT_TO_READ,
        },
        {
            "owner": "seed-carol",
            "title": "Murder on the Orient Express",
            "author": "Agatha Christie",
            "category": "Mystery",
            "overview": "Hercule Poirot investigates a murder on a train stuck in a snowdrift.",
            "total_pages": 256,
            "reading_status": ReadingStatus.READ,
        },
    ]

    books = []
    for data in books_data:
        owner = users[data.pop("owner")]
        status = data.pop("reading_status")
        book = Book(
            owner_uid=owner.uid,
            owner_email=owner.email,
            owner_name=owner.name,
            reading_status=status.value,
            **data,
        )
        db.add(book)
        books.append(book)

    db.commit()
    for book in books:
        db.refresh(book)

    print(f"Created {len(books)} books.")
    return books


def create_reviews(db: Session, users: dict[str, User], books: list[Book]) -> list[Review]:
    """Every user reviews every book they do not own."""
    print("Creating reviews...")
    reviews = []
    for index, book in enumerate(books):
        for offset, user in enumerate(users.values()):
            if user.uid == book.owner_uid:
                continue
            review = Review(
                book_id=book.id,
                user_uid=user.uid,
                user_name=user.name,
                rating=(index + offset) % 5 + 1,
                review_text=f"{user.name} on {book.title}",
            )
            db.add(review)
            reviews.append(review)

    db.commit()
    for book in books:
        recalculate_book_rating(db, book.id)

    print(f"Created {len(reviews)} reviews.")
    return reviews


def create_votes(db: Session, users: dict[str, User], reviews: list[Review]) -> int:
    """Book owners like or dislike the reviews of their books."""
    print("Creating votes...")
    count = 0
    owners = {book.id: book.owner_uid for book in db.query(Book).all()}
    for review in reviews:
        kind = VoteKind.LIKE if review.rating >= 3 else VoteKind.DISLIKE
        toggle_vote(db, review.id, owners[review.book_id], kind)
        count += 1

    print(f"Created {count} votes.")
    return count


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    # Create tables if they don't exist
    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        users = create_users(db)
        books = create_books(db, users)
        reviews = create_reviews(db, users, books)
        votes = create_votes(db, users, reviews)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)}")
        print(f"  - Books: {len(books)}")
        print(f"  - Reviews: {len(reviews)}")
        print(f"  - Votes: {votes}")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
