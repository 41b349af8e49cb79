"""
Neighbors - Per-round neighbor bookkeeping and liveness expiry
"""

from .table import (
    NeighborTable,
    NeighborRecord,
    Liveness,
    LIVENESS_TRANSITIONS,
)

__all__ = [
    "NeighborTable",
    "NeighborRecord",
    "Liveness",
    "LIVENESS_TRANSITIONS",
]
