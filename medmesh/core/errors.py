"""
Mesh Error Types

Failures raised by the neighbor table, the tiered selector and the
attending-call queue. All of them are recoverable by the caller.
"""

from typing import Any, Optional, Sequence


class MeshError(Exception):
    """Base class for neighbor/attending bookkeeping failures."""


class NotFoundError(MeshError, LookupError):
    """Lookup by address on an entry that is not in the table."""

    def __init__(self, ip: Any, table: str = "neighbor"):
        self.ip = ip
        self.table = table
        super().__init__(f"No {table} entry for {ip!r}")


class EmptyTableError(MeshError):
    """Selection attempted with zero neighbors."""

    def __init__(self, message: str = "Neighbor table is empty"):
        super().__init__(message)


class NoMatchError(MeshError):
    """Selection attempted but no tier matched any neighbor."""

    def __init__(self, tiers: Sequence[str], min_trust: Optional[float] = None):
        self.tiers = list(tiers)
        self.min_trust = min_trust
        message = f"No neighbor matches tiers {self.tiers}"
        if min_trust is not None:
            message += f" with trust > {min_trust}"
        super().__init__(message)


class DuplicateError(MeshError, ValueError):
    """Registration of an address already present (REJECT policy only)."""

    def __init__(self, ip: Any, table: str = "neighbor"):
        self.ip = ip
        self.table = table
        super().__init__(f"{table.capitalize()} {ip!r} is already registered")
