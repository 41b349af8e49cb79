"""
Selection - Trust-tiered choice of a delegate neighbor
"""

from .tiers import (
    TrustTieredSelector,
    select_by_tiers,
    rank_by_tiers,
    DEFAULT_TIERS,
)

__all__ = [
    "TrustTieredSelector",
    "select_by_tiers",
    "rank_by_tiers",
    "DEFAULT_TIERS",
]
