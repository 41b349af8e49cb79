"""
Node Profile

This node's own role in the care network: health status, competence,
interests and service state. Read by the selection logic that decides
whether this node itself matches a requested competence and what
critical information to hand to a neighbor.

Critical information classes:
- doctor    -> InfoA
- nurse     -> InfoB
- caregiver -> InfoC
- anything else -> InfoD
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_COMPETENCE = "other"

CRITICAL_INFO = {
    "doctor": "InfoA",
    "nurse": "InfoB",
    "caregiver": "InfoC",
}
DEFAULT_CRITICAL_INFO = "InfoD"


class NodeStatus(str, Enum):
    """Health status of a node."""
    EMERGENCY = "emergency"
    NORMAL = "normal"


def get_critical_info(competence: str) -> str:
    """
    Map a competence tag to its critical information payload.

    Args:
        competence: Competence of another node

    Returns:
        Symbolic payload ("InfoA".."InfoD")
    """
    return CRITICAL_INFO.get(competence, DEFAULT_CRITICAL_INFO)


class NodeProfile(BaseModel):
    """Status, competence, interests and service fields of this node."""

    model_config = ConfigDict(validate_assignment=True)

    status: NodeStatus = Field(default=NodeStatus.NORMAL, description="Emergency or Normal")
    competence: str = Field(default=DEFAULT_COMPETENCE, description="Health competence of this node")
    interests: List[str] = Field(default_factory=list, description="Interest tags")
    service_status: bool = Field(default=False, description="Service received (True) or not (False)")
    service_priority: int = Field(default=0, ge=0, le=255, description="Service priority level")

    @property
    def is_emergency(self) -> bool:
        return self.status == NodeStatus.EMERGENCY

    def get_status(self) -> NodeStatus:
        return self.status

    def set_status(self, status: NodeStatus):
        self.status = status

    def get_competence(self) -> str:
        return self.competence

    def set_competence(self, competence: str):
        self.competence = competence

    def has_equal_competence(self, competence: str) -> bool:
        """Check if another node has the same competence as this one."""
        return self.competence == competence

    def get_interests(self) -> List[str]:
        return list(self.interests)

    def set_interests(self, interests: List[str]):
        self.interests = list(interests)

    def get_service_status(self) -> bool:
        return self.service_status

    def set_service_status(self, service_status: bool):
        self.service_status = service_status

    def get_service_priority(self) -> int:
        return self.service_priority

    def set_service_priority(self, priority: int):
        self.service_priority = priority

    @staticmethod
    def get_critical_info(competence: str) -> str:
        """Critical information to send to a node with `competence`."""
        return get_critical_info(competence)
