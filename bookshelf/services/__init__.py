"""
Services Package

Business logic kept separate from HTTP handling (routers):

- identity.py: Firebase ID token verification and profile updates
- rate_limiter.py: Rate limiting with slowapi
- ratings.py: Book rating aggregate recomputation
- stats.py: User statistics computed on read
- users.py: Profile sync from identity token claims
- votes.py: Review like/dislike toggling and counter reconciliation
"""
