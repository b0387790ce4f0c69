"""
Opaque identifier helpers.

Books, reviews, votes, bookmarks and upvotes are keyed by a 32-character
lowercase hex token generated at insert time. Users are keyed by the
identity provider's uid instead.
"""

import re
import uuid

ID_LENGTH = 32

_ID_PATTERN = re.compile(r"[0-9a-f]{32}")


def new_id() -> str:
    """Generate a new opaque identifier."""
    return uuid.uuid4().hex


def is_valid_id(value: str) -> bool:
    """Check that a client-supplied identifier is well formed."""
    return _ID_PATTERN.fullmatch(value) is not None
