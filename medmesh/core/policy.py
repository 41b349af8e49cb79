"""
Duplicate-Key Policy

How a table reacts when an address is registered twice.
"""

from enum import Enum


class DuplicatePolicy(str, Enum):
    """Behavior of register() on an address already in the table."""

    REPLACE = "replace"  # Upsert in place, keeps insertion position
    REJECT = "reject"  # Raise DuplicateError, table unchanged
