"""
Discovery Round Scheduler

Drives a node's periodic discovery rounds from an asyncio event loop, the
way a host's broadcast timer does:

    every round_interval seconds:
        begin_round()
        wait listen_window seconds  (host delivers beacons meanwhile)
        end_round()

The node's tables are only touched from the loop's thread.
"""

import asyncio
from typing import Any, Callable, Dict, Hashable, List, Optional
import logging

from ...config import NodeConfig
from ..node import CareNode

logger = logging.getLogger(__name__)


RoundCallback = Callable[[List[Hashable]], None]


class DiscoveryRoundScheduler:
    """
    Periodic mark-and-sweep of a node's neighbor table.
    """

    def __init__(
        self,
        node: CareNode,
        round_interval: float = 5.0,
        listen_window: float = 1.0,
        on_round_closed: Optional[RoundCallback] = None
    ):
        """
        Initialize the scheduler.

        Args:
            node: Node whose rounds are driven
            round_interval: Seconds between the start of two rounds
            listen_window: Seconds a round stays open for beacons
            on_round_closed: Called with the pruned addresses after each round
        """
        if listen_window > round_interval:
            raise ValueError(
                f"listen_window ({listen_window}s) exceeds round_interval ({round_interval}s)"
            )

        self.node = node
        self.round_interval = round_interval
        self.listen_window = listen_window
        self.on_round_closed = on_round_closed

        self.running = False
        self._task: Optional[asyncio.Task] = None

        self.stats = {
            "rounds_run": 0,
            "round_errors": 0,
        }

    @classmethod
    def from_config(
        cls,
        node: CareNode,
        config: NodeConfig,
        on_round_closed: Optional[RoundCallback] = None
    ) -> "DiscoveryRoundScheduler":
        """Build a scheduler using the configured round timing."""
        return cls(
            node,
            round_interval=config.round_interval,
            listen_window=config.listen_window,
            on_round_closed=on_round_closed,
        )

    async def start(self):
        """Start the round loop."""
        if self.running:
            logger.warning("Discovery round scheduler already running")
            return

        self.running = True
        self._task = asyncio.create_task(self._round_loop())

        logger.info(
            f"Discovery rounds started for {self.node.address!r} "
            f"(interval={self.round_interval}s, window={self.listen_window}s)"
        )

    async def stop(self):
        """Stop the round loop and wait for it to exit."""
        if not self.running:
            return

        self.running = False
        if self._task:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None

        # Abandon a truncated round without pruning
        if self.node.round_open:
            self.node.abort_round()

        logger.info(f"Discovery rounds stopped for {self.node.address!r}")

    async def run_round(self) -> List[Hashable]:
        """Run a single round now."""
        self.node.begin_round()
        await asyncio.sleep(self.listen_window)
        pruned = self.node.end_round()

        self.stats["rounds_run"] += 1
        if self.on_round_closed:
            self.on_round_closed(pruned)

        return pruned

    async def _round_loop(self):
        """Background task for periodic discovery rounds."""
        while self.running:
            try:
                await self.run_round()
                await asyncio.sleep(self.round_interval - self.listen_window)
            except asyncio.CancelledError:
                break
            except Exception as e:
                self.stats["round_errors"] += 1
                logger.warning(f"Error in discovery round: {e}", exc_info=True)
                await asyncio.sleep(self.round_interval)

    def get_stats(self) -> Dict[str, Any]:
        return {
            **self.stats,
            "running": self.running,
        }
