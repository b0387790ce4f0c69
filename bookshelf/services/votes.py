"""
Review Votes Service

Like/dislike toggling and the review vote counters.

The ReviewVote rows are the source of truth; Review.likes and
Review.dislikes are denormalized counters. Each toggle is a sequence of
independently committed steps in a fixed order:

1. Mutate the vote record (insert, delete, or flip its kind)
2. Adjust the counters with atomic in-place increments

If the process dies between the steps, the vote records are still correct
and recalculate_review_votes() resynchronizes the counters from them.
"""

from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from bookshelf.models import Review, ReviewVote, VoteKind


@dataclass(frozen=True)
class VoteOutcome:
    """Result of a toggle: the counter for the toggled kind and whether the user now holds that vote."""
    count: int
    active: bool


@dataclass(frozen=True)
class VoteStatus:
    """A user's current vote on a review."""
    liked: bool
    disliked: bool


def _adjust_counter(db: Session, review_id: str, kind: VoteKind, delta: int) -> None:
    column = getattr(Review, kind.counter)
    db.execute(
        update(Review)
        .where(Review.id == review_id)
        .values({kind.counter: column + delta})
        .execution_options(synchronize_session=False)
    )
    db.commit()


def _read_counter(db: Session, review_id: str, kind: VoteKind) -> int:
    column = getattr(Review, kind.counter)
    return db.execute(select(column).where(Review.id == review_id)).scalar_one()


def get_user_vote(db: Session, review_id: str, user_uid: str) -> ReviewVote | None:
    """Return the user's vote record on a review, if any."""
    stmt = select(ReviewVote).where(
        ReviewVote.review_id == review_id,
        ReviewVote.user_uid == user_uid,
    )
    return db.execute(stmt).scalar_one_or_none()


def toggle_vote(
    db: Session,
    review_id: str,
    user_uid: str,
    kind: VoteKind,
) -> VoteOutcome:
    """
    Toggle a like or dislike on a review.

    - Holding the same kind: the vote is withdrawn
    - Holding the opposite kind: the vote switches over
    - Holding nothing: the vote is cast

    The caller must have checked that the review exists.

    Args:
        db: Database session
        review_id: ID of the review
        user_uid: Voting user's uid
        kind: VoteKind.LIKE or VoteKind.DISLIKE

    Returns:
        VoteOutcome with the new counter value for `kind` and the
        user's resulting state on that axis
    """
    existing = get_user_vote(db, review_id, user_uid)

    if existing is not None and existing.kind == kind.value:
        db.delete(existing)
        db.commit()
        _adjust_counter(db, review_id, kind, -1)
        return VoteOutcome(count=_read_counter(db, review_id, kind), active=False)

    if existing is not None:
        existing.kind = kind.value
        db.commit()
        _adjust_counter(db, review_id, kind.opposite, -1)
    else:
        db.add(ReviewVote(review_id=review_id, user_uid=user_uid, kind=kind.value))
        db.commit()

    _adjust_counter(db, review_id, kind, 1)
    return VoteOutcome(count=_read_counter(db, review_id, kind), active=True)


def get_vote_status(db: Session, review_id: str, user_uid: str) -> VoteStatus:
    """Report whether the user currently likes or dislikes a review."""
    vote = get_user_vote(db, review_id, user_uid)
    kind = vote.kind if vote is not None else None
    return VoteStatus(
        liked=kind == VoteKind.LIKE.value,
        disliked=kind == VoteKind.DISLIKE.value,
    )


def recalculate_review_votes(db: Session, review_id: str) -> tuple[int, int]:
    """
    Rebuild a review's like/dislike counters from its vote records.

    Returns:
        (likes, dislikes) as written
    """
    stmt = (
        select(ReviewVote.kind, func.count(ReviewVote.id))
        .where(ReviewVote.review_id == review_id)
        .group_by(ReviewVote.kind)
    )
    counts = dict(db.execute(stmt).all())
    likes = counts.get(VoteKind.LIKE.value, 0)
    dislikes = counts.get(VoteKind.DISLIKE.value, 0)

    db.execute(
        update(Review)
        .where(Review.id == review_id)
        .values(likes=likes, dislikes=dislikes)
        .execution_options(synchronize_session=False)
    )
    db.commit()

    return likes, dislikes


def recalculate_all_review_votes(db: Session) -> int:
    """
    Rebuild vote counters for every review.

    Returns:
        Number of reviews updated
    """
    review_ids = db.execute(select(Review.id)).scalars().all()

    for review_id in review_ids:
        recalculate_review_votes(db, review_id)

    return len(review_ids)
