"""
Care Node - Neighbor bookkeeping and dispatch for one network node

Each node has:
- Its own address and profile (status, competence, interests, service)
- A neighbor table refreshed every discovery round
- A trust-tiered selector for delegating critical information
- A queue of pending attending calls

The host simulation delivers packets one at a time to the node's
callbacks; the node never schedules itself. A discovery round is:

    node.begin_round()
    node.on_beacon(ip, competence, interests, trust)   # per beacon heard
    node.end_round()                                    # prunes silent peers

All state is owned by the node instance and touched only from the host's
callbacks for this node, so no locking is done.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence
import logging

from ..config import NodeConfig
from ..core.policy import DuplicatePolicy
from ..core.profile import NodeProfile
from .attending.queue import CallRecord, PendingCallQueue
from .neighbors.table import NeighborTable
from .selection.tiers import DEFAULT_TIERS, TrustTieredSelector

logger = logging.getLogger(__name__)


@dataclass
class Beacon:
    """Discovery beacon heard from a peer."""

    ip: Hashable
    competence: str
    interests: List[str] = field(default_factory=list)
    trust: float = 0.0


class CareNode:
    """
    Neighbor-liveness and trust-tiered dispatch for a single node.
    """

    def __init__(
        self,
        address: Hashable,
        profile: Optional[NodeProfile] = None,
        tiers: Sequence[str] = DEFAULT_TIERS,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.REPLACE,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize a care node.

        Args:
            address: This node's own address (beacons from it are ignored)
            profile: This node's profile (defaults to a Normal "other" node)
            tiers: Default competence tiers for delegation
            duplicate_policy: Policy for both the neighbor table and call queue
            clock: Current-time source for attending-call timestamps
        """
        self.address = address
        self.profile = profile or NodeProfile()
        self.clock = clock

        self.neighbors = NeighborTable(duplicate_policy=duplicate_policy)
        self.selector = TrustTieredSelector(self.neighbors, default_tiers=tiers)
        self.attending = PendingCallQueue(clock=clock, duplicate_policy=duplicate_policy)

        self.round_open = False
        self.stats = {
            "rounds_completed": 0,
            "beacons_received": 0,
            "own_beacons_ignored": 0,
            "neighbors_discovered": 0,
        }

        logger.info(
            f"Initialized care node {address!r} "
            f"(competence={self.profile.competence}, status={self.profile.status.value})"
        )

    @classmethod
    def from_config(cls, config: NodeConfig, clock: Callable[[], float] = time.time) -> "CareNode":
        """Build a node from a NodeConfig."""
        return cls(
            address=config.node_address,
            profile=config.to_profile(),
            tiers=config.tiers,
            duplicate_policy=config.duplicate_policy,
            clock=clock,
        )

    # ----- Discovery rounds -----

    def begin_round(self):
        """Open a discovery round: every neighbor must be heard again."""
        if self.round_open:
            logger.warning(f"Round already open on {self.address!r}, restarting it")
        self.neighbors.mark_all_down()
        self.round_open = True

    def on_beacon(
        self,
        ip: Hashable,
        competence: str,
        interests: Iterable[str] = (),
        trust: float = 0.0
    ) -> bool:
        """
        Handle a discovery beacon from a peer.

        New peers are registered; known peers are marked up.

        Returns:
            True if the peer was newly registered
        """
        if ip == self.address:
            self.stats["own_beacons_ignored"] += 1
            return False

        self.stats["beacons_received"] += 1

        if self.neighbors.mark_up(ip):
            return False

        self.neighbors.register(ip, competence, interests, trust)
        self.stats["neighbors_discovered"] += 1
        return True

    def end_round(self) -> List[Hashable]:
        """
        Close the discovery round.

        Returns:
            Addresses of neighbors pruned for not being heard
        """
        pruned = self.neighbors.prune_dead()
        self.round_open = False
        self.stats["rounds_completed"] += 1

        if pruned:
            logger.info(f"Node {self.address!r} lost {len(pruned)} neighbors: {pruned}")

        return pruned

    def abort_round(self) -> int:
        """
        Abandon an open round without pruning anyone.

        Returns:
            Number of neighbors restored to FRESH
        """
        restored = self.neighbors.abort_round()
        self.round_open = False

        logger.info(f"Node {self.address!r} aborted discovery round ({restored} neighbors kept)")
        return restored

    def process_round(self, beacons: Iterable[Beacon]) -> List[Hashable]:
        """Run one full discovery round over the beacons heard in it."""
        self.begin_round()
        for beacon in beacons:
            self.on_beacon(beacon.ip, beacon.competence, beacon.interests, beacon.trust)
        return self.end_round()

    # ----- Attending calls -----

    def on_attending_call(self, ip: Hashable, critical_data: str, priority: int) -> CallRecord:
        """Register an attending call received from a peer."""
        call = self.attending.register_call(ip, critical_data, priority)
        logger.info(f"Node {self.address!r} attending call from {ip!r} (priority={priority})")
        return call

    def on_attending_closed(self, ip: Hashable) -> bool:
        return self.attending.close_call(ip)

    # ----- Delegation -----

    def choose_delegate(
        self,
        tiers: Optional[Sequence[str]] = None,
        min_trust: Optional[float] = None
    ) -> Hashable:
        """
        Choose the neighbor to hand critical data to.

        Raises:
            EmptyTableError: No neighbors
            NoMatchError: No neighbor in any tier
        """
        return self.selector.select_by_tiers(tiers, min_trust)

    def critical_info_for(self, ip: Hashable) -> str:
        """Critical information matching a neighbor's competence."""
        return self.profile.get_critical_info(self.neighbors.get_competence(ip))

    def matches_competence(self, competence: str) -> bool:
        """True if this node itself holds the requested competence."""
        return self.profile.has_equal_competence(competence)

    def get_stats(self) -> Dict[str, Any]:
        """Get node statistics."""
        return {
            "address": str(self.address),
            "competence": self.profile.competence,
            "status": self.profile.status.value,
            **self.stats,
            "neighbors": self.neighbors.get_stats(),
            "selector": self.selector.get_stats(),
            "attending": self.attending.get_stats(),
        }

    def __repr__(self):
        return (
            f"CareNode({self.address!r}, neighbors={self.neighbors.count()}, "
            f"pending_calls={self.attending.count()})"
        )
