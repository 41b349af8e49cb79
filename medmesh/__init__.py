"""
MedMesh - Neighbor liveness and trust-tiered dispatch for care networks

Each node of a mobile health-care network keeps track of the peers it
hears during discovery rounds, picks the most suitable neighbor to hand
critical information to, and tracks attending calls directed at it.

Quick Start:
    >>> from medmesh import CareNode, NodeProfile
    >>>
    >>> node = CareNode("10.1.1.1", profile=NodeProfile(competence="nurse"))
    >>>
    >>> # One discovery round
    >>> node.begin_round()
    >>> node.on_beacon("10.1.1.2", "doctor", ["cardio"], trust=0.9)
    True
    >>> node.on_beacon("10.1.1.3", "caregiver", [], trust=0.4)
    True
    >>> pruned = node.end_round()
    >>>
    >>> # Delegate critical data
    >>> node.choose_delegate(["doctor", "nurse", "caregiver"])
    '10.1.1.2'

Features:
    - Mark-and-sweep neighbor expiry per discovery round
    - Competence tiers with trust tie-breaking
    - Pending attending-call queue
    - Environment-driven configuration
"""

from .core.errors import (
    MeshError,
    NotFoundError,
    EmptyTableError,
    NoMatchError,
    DuplicateError,
)
from .core.policy import DuplicatePolicy
from .core.profile import NodeProfile, NodeStatus, get_critical_info
from .config import NodeConfig, load_config
from .p2p.neighbors.table import NeighborTable, NeighborRecord, Liveness
from .p2p.selection.tiers import TrustTieredSelector, select_by_tiers, rank_by_tiers, DEFAULT_TIERS
from .p2p.attending.queue import PendingCallQueue, CallRecord
from .p2p.node import CareNode, Beacon
from .p2p.discovery.rounds import DiscoveryRoundScheduler

__version__ = "0.1.0"
__author__ = "MedMesh Team"

__all__ = [
    "MeshError",
    "NotFoundError",
    "EmptyTableError",
    "NoMatchError",
    "DuplicateError",
    "DuplicatePolicy",
    "NodeProfile",
    "NodeStatus",
    "get_critical_info",
    "NodeConfig",
    "load_config",
    "NeighborTable",
    "NeighborRecord",
    "Liveness",
    "TrustTieredSelector",
    "select_by_tiers",
    "rank_by_tiers",
    "DEFAULT_TIERS",
    "PendingCallQueue",
    "CallRecord",
    "CareNode",
    "Beacon",
    "DiscoveryRoundScheduler",
]
