"""
Attending - Pending attending calls directed at this node
"""

from .queue import PendingCallQueue, CallRecord

__all__ = ["PendingCallQueue", "CallRecord"]
