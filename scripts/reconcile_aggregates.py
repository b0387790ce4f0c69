#!/usr/bin/env python3
"""
Aggregate Reconciliation Script

Recomputes the denormalized counters from their detail rows:
- books.rating / books.total_reviews from reviews
- reviews.likes / reviews.dislikes from review_votes

Counters are updated in a separate step after each primary write, so a
crash between the two steps can leave them stale. Run this to repair them.

Usage:
    # From project root with venv activated:
    python scripts/reconcile_aggregates.py

    # Options:
    python scripts/reconcile_aggregates.py --only ratings
    python scripts/reconcile_aggregates.py --only votes
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bookshelf.database import SessionLocal
from bookshelf.services.ratings import recalculate_all_book_ratings
from bookshelf.services.votes import recalculate_all_review_votes

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def reconcile(ratings: bool = True, votes: bool = True) -> None:
    """
    Recompute the selected aggregates for every row.

    Args:
        ratings: Recompute book rating aggregates
        votes: Recompute review vote counters
    """
    logger.info("Starting aggregate reconciliation...")
    db = SessionLocal()

    try:
        if ratings:
            count = recalculate_all_book_ratings(db)
            logger.info(f"Book ratings recomputed: {count}")

        if votes:
            count = recalculate_all_review_votes(db)
            logger.info(f"Review vote counters recomputed: {count}")

        logger.info("Reconciliation complete!")
    finally:
        db.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Recompute book ratings and review vote counters"
    )
    parser.add_argument(
        "--only",
        choices=["ratings", "votes"],
        help="Reconcile a single aggregate family instead of both"
    )

    args = parser.parse_args()

    reconcile(
        ratings=args.only in (None, "ratings"),
        votes=args.only in (None, "votes"),
    )


if __name__ == "__main__":
    main()
