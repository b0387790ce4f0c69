"""
Test Suite for the Bookshelf API

Test Organization:
- conftest.py: Shared fixtures (test database, client, fake identity provider, sample data)
- test_auth.py: Bearer token handling, /api/v1/auth endpoints
- test_books.py: /api/v1/books endpoints, upvotes, bookmarks, cascading delete
- test_reviews.py: Review endpoints and the book rating aggregate
- test_votes.py: Like/dislike toggles
- test_users.py: Profiles and statistics
- test_services.py: Aggregate services called directly
- test_config.py: Settings validation
- test_identifiers.py: Opaque id generation and validation
- test_main.py: Service endpoints and error format

Running Tests:
    pytest
    pytest --cov=bookshelf --cov-report=html
    pytest tests/test_votes.py -v
"""
