"""
Discovery - Periodic discovery rounds
"""

from .rounds import DiscoveryRoundScheduler

__all__ = ["DiscoveryRoundScheduler"]
