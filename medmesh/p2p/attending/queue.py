"""
Pending Attending Calls

Requests for attention directed at this node, keyed by the requesting
peer's address. A call stays pending until the node closes it.

Calls are consulted by address only: there is no priority-ordered
dequeue and no expiry. The timestamp is stored for the caller.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Optional
import logging

from ...core.errors import DuplicateError, NotFoundError
from ...core.policy import DuplicatePolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallRecord:
    """An attending call waiting to be closed."""

    ip: Hashable
    critical_data: str
    priority: int
    timestamp: float

    def __repr__(self):
        return f"Call({self.ip!r}, priority={self.priority}, t={self.timestamp:.3f})"


class PendingCallQueue:
    """
    Attending calls keyed by peer address, in arrival order.

    Features:
    - Explicit duplicate policy (newer call replaces, or reject)
    - Timestamps from an injectable clock
    - Lookups raise NotFoundError for unknown addresses
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.REPLACE
    ):
        """
        Create an attending-call queue.

        Args:
            clock: Current-time source used when a call carries no timestamp
            duplicate_policy: REPLACE or REJECT a second call from the same peer
        """
        self.clock = clock
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)

        # Map: ip -> CallRecord (arrival ordered)
        self._calls: Dict[Hashable, CallRecord] = {}

        self.stats = {
            "calls_registered": 0,
            "calls_replaced": 0,
            "calls_rejected": 0,
            "calls_closed": 0,
        }

    def register_call(
        self,
        ip: Hashable,
        critical_data: str,
        priority: int,
        timestamp: Optional[float] = None
    ) -> CallRecord:
        """
        Register an attending call from a peer.

        Args:
            ip: Requesting peer address
            critical_data: Opaque critical data payload
            priority: Call priority (convention fixed by the caller)
            timestamp: Call time; stamped from the clock when None

        Returns:
            The stored CallRecord

        Raises:
            DuplicateError: If ip already has a pending call and the policy is REJECT
        """
        if ip in self._calls and self.duplicate_policy == DuplicatePolicy.REJECT:
            self.stats["calls_rejected"] += 1
            logger.warning(f"Rejected duplicate attending call from {ip!r}")
            raise DuplicateError(ip, table="attending call")

        if timestamp is None:
            timestamp = self.clock()

        call = CallRecord(
            ip=ip,
            critical_data=critical_data,
            priority=int(priority),
            timestamp=float(timestamp),
        )

        if ip in self._calls:
            self.stats["calls_replaced"] += 1
        else:
            self.stats["calls_registered"] += 1

        # Existing keys keep their position on reassignment
        self._calls[ip] = call
        logger.debug(f"Registered attending {call}")
        return call

    def close_call(self, ip: Hashable) -> bool:
        """Close the call from ip. Unknown addresses are ignored."""
        if self._calls.pop(ip, None) is None:
            return False

        self.stats["calls_closed"] += 1
        logger.debug(f"Closed attending call from {ip!r}")
        return True

    def _get(self, ip: Hashable) -> CallRecord:
        try:
            return self._calls[ip]
        except KeyError:
            raise NotFoundError(ip, table="attending call") from None

    def get_call(self, ip: Hashable) -> CallRecord:
        return self._get(ip)

    def get_critical_data(self, ip: Hashable) -> str:
        return self._get(ip).critical_data

    def get_priority(self, ip: Hashable) -> int:
        return self._get(ip).priority

    def get_timestamp(self, ip: Hashable) -> float:
        return self._get(ip).timestamp

    def list_ips(self) -> List[Hashable]:
        """Addresses with a pending call, in arrival order."""
        return list(self._calls)

    def calls(self) -> List[CallRecord]:
        return list(self._calls.values())

    def contains(self, ip: Hashable) -> bool:
        return ip in self._calls

    def is_empty(self) -> bool:
        return not self._calls

    def count(self) -> int:
        return len(self._calls)

    def get_stats(self) -> Dict[str, Any]:
        return {
            **self.stats,
            "pending": len(self._calls),
            "duplicate_policy": self.duplicate_policy.value,
        }

    def __contains__(self, ip: Hashable) -> bool:
        return self.contains(ip)

    def __len__(self) -> int:
        return self.count()

    def __repr__(self):
        return f"PendingCallQueue(pending={self.count()}, policy={self.duplicate_policy.value})"
