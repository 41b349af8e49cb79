"""
Trust-Tiered Neighbor Selection

Picks the neighbor best suited to receive critical information.

Competence tiers are consulted in priority order (most specialized
first). Within a tier the most trusted neighbor wins; on equal trust the
neighbor registered first wins. The first tier with at least one match
decides, even if a later tier holds a neighbor with higher trust.

Example:
    A: doctor, trust 0.5
    B: doctor, trust 0.9
    C: nurse,  trust 0.7

    select_by_tiers(["doctor", "nurse"])    -> B
    select_by_tiers(["caregiver", "doctor"]) -> B
    select_by_tiers(["caregiver"])           -> NoMatchError
"""

from typing import Dict, Hashable, Iterable, List, Optional, Sequence
import logging

from ...core.errors import EmptyTableError, NoMatchError
from ..neighbors.table import NeighborRecord, NeighborTable

logger = logging.getLogger(__name__)


# Competences in simulation priority order
DEFAULT_TIERS = ("doctor", "nurse", "caregiver")


def _eligible(record: NeighborRecord, tier: str, min_trust: Optional[float]) -> bool:
    if record.competence != tier:
        return False
    return min_trust is None or record.trust > min_trust


def select_by_tiers(
    records: Iterable[NeighborRecord],
    tiers: Sequence[str],
    min_trust: Optional[float] = None
) -> Hashable:
    """
    Select the highest-trust neighbor of the first matching tier.

    Args:
        records: Neighbor records in insertion order
        tiers: Competence tags in priority order
        min_trust: Optional floor; neighbors with trust <= min_trust are skipped

    Returns:
        Address of the selected neighbor

    Raises:
        EmptyTableError: If there are no records
        NoMatchError: If no tier matches any neighbor
    """
    records = list(records)
    if not records:
        raise EmptyTableError()

    for tier in tiers:
        best: Optional[NeighborRecord] = None

        for record in records:
            if not _eligible(record, tier, min_trust):
                continue
            # Strictly greater: first registered keeps ties
            if best is None or record.trust > best.trust:
                best = record

        if best is not None:
            return best.ip

    raise NoMatchError(tiers, min_trust)


def rank_by_tiers(
    records: Iterable[NeighborRecord],
    tiers: Sequence[str],
    min_trust: Optional[float] = None
) -> List[Hashable]:
    """
    Order every eligible neighbor by (tier, descending trust, insertion).

    The first element is always what select_by_tiers() returns. A
    neighbor appears once, under the first tier naming its competence.
    """
    ranked: List[Hashable] = []
    seen_tiers = set()
    records = list(records)

    for tier in tiers:
        if tier in seen_tiers:
            continue
        seen_tiers.add(tier)

        matches = [r for r in records if _eligible(r, tier, min_trust)]
        # sort() is stable, so insertion order breaks trust ties
        matches.sort(key=lambda r: r.trust, reverse=True)
        ranked.extend(r.ip for r in matches)

    return ranked


class TrustTieredSelector:
    """
    Tiered selection over a live NeighborTable.

    Stateless apart from counters; reads the table at call time.
    """

    def __init__(self, table: NeighborTable, default_tiers: Sequence[str] = DEFAULT_TIERS):
        """
        Args:
            table: Neighbor table to select from
            default_tiers: Tiers used when a call passes none
        """
        self.table = table
        self.default_tiers = tuple(default_tiers)

        self.stats = {
            "selections": 0,
            "empty_table": 0,
            "no_match": 0,
        }

    def select_by_tiers(
        self,
        tiers: Optional[Sequence[str]] = None,
        min_trust: Optional[float] = None
    ) -> Hashable:
        """
        Select the neighbor to delegate critical data to.

        Args:
            tiers: Competence tags in priority order (default_tiers if None)
            min_trust: Optional trust floor

        Returns:
            Neighbor address

        Raises:
            EmptyTableError: No neighbors registered
            NoMatchError: No tier matched
        """
        tiers = self.default_tiers if tiers is None else tuple(tiers)

        try:
            ip = select_by_tiers(self.table.records(), tiers, min_trust)
        except EmptyTableError:
            self.stats["empty_table"] += 1
            raise
        except NoMatchError:
            self.stats["no_match"] += 1
            logger.debug(f"No neighbor for tiers {list(tiers)}")
            raise

        self.stats["selections"] += 1
        logger.debug(f"Selected {ip!r} for tiers {list(tiers)}")
        return ip

    def rank_by_tiers(
        self,
        tiers: Optional[Sequence[str]] = None,
        min_trust: Optional[float] = None
    ) -> List[Hashable]:
        tiers = self.default_tiers if tiers is None else tuple(tiers)
        return rank_by_tiers(self.table.records(), tiers, min_trust)

    def get_stats(self) -> Dict[str, int]:
        return dict(self.stats)
