"""
Neighbor Table - Tracks peers heard during discovery rounds

Each neighbor entry contains:
- ip: opaque network address (unique key)
- competence: category tag (doctor, nurse, caregiver, ...)
- interests: set of interest tags
- trust: caller-assigned trust score
- liveness: FRESH / STALE / REMOVED

Liveness follows a hello-protocol expiry cycle run once per round:

    mark_all_down()  ->  mark_up(ip) for every beacon heard  ->  prune_dead()

A neighbor survives a round only if it was heard from during that round.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Hashable, Iterable, List
import logging

from ...core.errors import DuplicateError, NotFoundError
from ...core.policy import DuplicatePolicy

logger = logging.getLogger(__name__)


class Liveness(Enum):
    """Presence state of a neighbor within the current round."""
    FRESH = "fresh"  # Heard this round
    STALE = "stale"  # Marked down, not yet pruned
    REMOVED = "removed"  # Pruned or unregistered (terminal)


# Legal transitions: event -> {from_state: to_state}
LIVENESS_TRANSITIONS = {
    "mark_down": {Liveness.FRESH: Liveness.STALE, Liveness.STALE: Liveness.STALE},
    "mark_up": {Liveness.STALE: Liveness.FRESH, Liveness.FRESH: Liveness.FRESH},
    "prune": {Liveness.STALE: Liveness.REMOVED},
    "unregister": {Liveness.FRESH: Liveness.REMOVED, Liveness.STALE: Liveness.REMOVED},
    "abort_round": {Liveness.STALE: Liveness.FRESH, Liveness.FRESH: Liveness.FRESH},
}


@dataclass
class NeighborRecord:
    """A single neighbor as seen by this node."""

    ip: Hashable
    competence: str
    interests: FrozenSet[str] = field(default_factory=frozenset)
    trust: float = 0.0
    liveness: Liveness = Liveness.FRESH

    @property
    def alive(self) -> bool:
        """True if the neighbor was heard in the current round."""
        return self.liveness == Liveness.FRESH

    def transition(self, event: str) -> Liveness:
        """
        Apply a liveness event.

        Args:
            event: One of mark_down, mark_up, prune, unregister, abort_round

        Returns:
            New liveness state

        Raises:
            ValueError: If the event is not legal from the current state
        """
        moves = LIVENESS_TRANSITIONS.get(event)
        if moves is None:
            raise ValueError(f"Unknown liveness event: {event}")
        if self.liveness not in moves:
            raise ValueError(f"Illegal liveness transition {event} from {self.liveness.value}")
        self.liveness = moves[self.liveness]
        return self.liveness

    def __repr__(self):
        return (
            f"Neighbor({self.ip!r}, competence={self.competence}, "
            f"trust={self.trust:.3f}, {self.liveness.value})"
        )


def _normalize_trust(trust: float) -> float:
    value = float(trust)
    if math.isnan(value):
        raise ValueError("Neighbor trust cannot be NaN")
    return value


class NeighborTable:
    """
    Neighbors of this node keyed by address.

    Features:
    - Insertion-ordered storage (ties in selection follow it)
    - Explicit duplicate policy (upsert or reject)
    - Mark-and-sweep liveness expiry
    - Lookups raise NotFoundError for unknown addresses
    """

    def __init__(self, duplicate_policy: DuplicatePolicy = DuplicatePolicy.REPLACE):
        """
        Create a neighbor table.

        Args:
            duplicate_policy: REPLACE (upsert) or REJECT repeated addresses
        """
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)

        # Map: ip -> NeighborRecord (insertion ordered)
        self._neighbors: Dict[Hashable, NeighborRecord] = {}

        # Statistics
        self.stats = {
            "registered": 0,
            "replaced": 0,
            "rejected": 0,
            "unregistered": 0,
            "pruned": 0,
            "rounds": 0,
        }

    def register(
        self,
        ip: Hashable,
        competence: str,
        interests: Iterable[str] = (),
        trust: float = 0.0
    ) -> NeighborRecord:
        """
        Register a neighbor heard from in this round.

        Args:
            ip: Neighbor address
            competence: Neighbor competence tag
            interests: Neighbor interest tags
            trust: Caller-computed trust score

        Returns:
            Snapshot of the stored record

        Raises:
            DuplicateError: If ip is present and the policy is REJECT
        """
        trust = _normalize_trust(trust)
        if isinstance(interests, str):
            interests = (interests,)
        interests = frozenset(interests)

        existing = self._neighbors.get(ip)
        if existing is not None:
            if self.duplicate_policy == DuplicatePolicy.REJECT:
                self.stats["rejected"] += 1
                logger.warning(f"Rejected duplicate neighbor {ip!r}")
                raise DuplicateError(ip, table="neighbor")

            # Upsert in place: dict keeps the original insertion position
            existing.competence = competence
            existing.interests = interests
            existing.trust = trust
            existing.transition("mark_up")
            self.stats["replaced"] += 1
            logger.debug(f"Updated neighbor {existing}")
            return replace(existing)

        record = NeighborRecord(
            ip=ip,
            competence=competence,
            interests=interests,
            trust=trust,
        )
        self._neighbors[ip] = record
        self.stats["registered"] += 1
        logger.debug(f"Registered neighbor {record}")
        return replace(record)

    def unregister(self, ip: Hashable) -> bool:
        """Remove a neighbor. Unknown addresses are ignored."""
        record = self._neighbors.pop(ip, None)
        if record is None:
            return False

        record.transition("unregister")
        self.stats["unregistered"] += 1
        logger.debug(f"Unregistered neighbor {ip!r}")
        return True

    def mark_all_down(self):
        """Mark every neighbor as not yet seen this round."""
        for record in self._neighbors.values():
            record.transition("mark_down")

        self.stats["rounds"] += 1

    def mark_up(self, ip: Hashable) -> bool:
        """
        Confirm a neighbor's presence in the current round.

        Unknown addresses are not registered implicitly.

        Returns:
            True if ip is a known neighbor
        """
        record = self._neighbors.get(ip)
        if record is None:
            return False

        record.transition("mark_up")
        return True

    def abort_round(self) -> int:
        """
        Abandon the current round without pruning.

        Every STALE neighbor goes back to FRESH, as if the round had
        never been opened.

        Returns:
            Number of neighbors restored
        """
        restored = 0
        for record in self._neighbors.values():
            if record.liveness == Liveness.STALE:
                restored += 1
            record.transition("abort_round")

        if restored:
            logger.debug(f"Aborted round, restored {restored} stale neighbors")

        return restored

    def prune_dead(self) -> List[Hashable]:
        """
        Remove every neighbor not heard from since mark_all_down().

        Returns:
            Addresses removed, in insertion order
        """
        dead = [ip for ip, record in self._neighbors.items() if record.liveness == Liveness.STALE]

        for ip in dead:
            self._neighbors.pop(ip).transition("prune")

        if dead:
            self.stats["pruned"] += len(dead)
            logger.debug(f"Pruned {len(dead)} dead neighbors: {dead}")

        return dead

    def _get(self, ip: Hashable) -> NeighborRecord:
        try:
            return self._neighbors[ip]
        except KeyError:
            raise NotFoundError(ip, table="neighbor") from None

    def is_empty(self) -> bool:
        return not self._neighbors

    def contains(self, ip: Hashable) -> bool:
        return ip in self._neighbors

    def list_ips(self) -> List[Hashable]:
        """Neighbor addresses in insertion order."""
        return list(self._neighbors)

    def is_alive(self, ip: Hashable) -> bool:
        return self._get(ip).alive

    def get_liveness(self, ip: Hashable) -> Liveness:
        return self._get(ip).liveness

    def get_trust(self, ip: Hashable) -> float:
        return self._get(ip).trust

    def get_competence(self, ip: Hashable) -> str:
        return self._get(ip).competence

    def get_interests(self, ip: Hashable) -> FrozenSet[str]:
        return self._get(ip).interests

    def get_neighbor(self, ip: Hashable) -> NeighborRecord:
        """Copy of the record for ip."""
        return replace(self._get(ip))

    def records(self) -> List[NeighborRecord]:
        """Copies of all records in insertion order."""
        return [replace(record) for record in self._neighbors.values()]

    def count(self) -> int:
        return len(self._neighbors)

    def get_stats(self) -> Dict[str, Any]:
        """Get table statistics."""
        alive = sum(1 for record in self._neighbors.values() if record.alive)
        return {
            **self.stats,
            "neighbors": len(self._neighbors),
            "alive": alive,
            "stale": len(self._neighbors) - alive,
            "duplicate_policy": self.duplicate_policy.value,
        }

    def __contains__(self, ip: Hashable) -> bool:
        return self.contains(ip)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self):
        return iter(self.list_ips())

    def __repr__(self):
        return f"NeighborTable(size={self.count()}, policy={self.duplicate_policy.value})"
