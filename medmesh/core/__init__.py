"""
Core types shared by the neighbor table, the selector and the
attending-call queue.
"""

from .errors import (
    MeshError,
    NotFoundError,
    EmptyTableError,
    NoMatchError,
    DuplicateError,
)
from .policy import DuplicatePolicy
from .profile import (
    NodeProfile,
    NodeStatus,
    get_critical_info,
    CRITICAL_INFO,
    DEFAULT_CRITICAL_INFO,
    DEFAULT_COMPETENCE,
)

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
    "CRITICAL_INFO",
    "DEFAULT_CRITICAL_INFO",
    "DEFAULT_COMPETENCE",
]
