"""
Utilities Package

Helper functions used across the application.

- identifiers.py: Opaque ID generation and format validation
"""

from bookshelf.utils.identifiers import ID_LENGTH, is_valid_id, new_id

__all__ = ["ID_LENGTH", "is_valid_id", "new_id"]
