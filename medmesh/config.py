"""
Node Configuration

Attribute surface of a care-network node. Values come from environment
variables (MEDMESH_*) with the defaults below.

Variables:
- MEDMESH_NODE_ADDRESS     - This node's own address
- MEDMESH_STATUS           - emergency | normal
- MEDMESH_COMPETENCE       - Health competence of this node
- MEDMESH_INTERESTS        - Comma-separated interest tags
- MEDMESH_SERVICE_STATUS   - true | false
- MEDMESH_SERVICE_PRIORITY - 0..255
- MEDMESH_TIERS            - Comma-separated competence tiers, most specialized first
- MEDMESH_DUPLICATE_POLICY - replace | reject
- MEDMESH_ROUND_INTERVAL   - Seconds between discovery rounds
- MEDMESH_LISTEN_WINDOW    - Seconds a round stays open for beacons
- MEDMESH_LOG_LEVEL        - Log level for the CLI
"""

import os
from typing import List, Optional, Mapping

from pydantic import BaseModel, Field, model_validator

from .core.policy import DuplicatePolicy
from .core.profile import DEFAULT_COMPETENCE, NodeProfile, NodeStatus
from .p2p.selection.tiers import DEFAULT_TIERS


def _split_tags(value: str) -> List[str]:
    return [tag.strip() for tag in value.split(",") if tag.strip()]


class NodeConfig(BaseModel):
    """Care-network node configuration."""

    node_address: str = Field(default="10.1.1.1", description="This node's own address")

    # Profile
    status: NodeStatus = Field(default=NodeStatus.NORMAL, description="Emergency or Normal")
    competence: str = Field(default=DEFAULT_COMPETENCE, description="Health competence of this node")
    interests: List[str] = Field(default_factory=list, description="Interest tags")
    service_status: bool = Field(default=False, description="Service received")
    service_priority: int = Field(default=0, ge=0, le=255, description="Service priority level")

    # Selection and tables
    tiers: List[str] = Field(
        default_factory=lambda: list(DEFAULT_TIERS),
        description="Competence tiers in priority order"
    )
    duplicate_policy: DuplicatePolicy = Field(
        default=DuplicatePolicy.REPLACE,
        description="Handling of re-registered addresses (replace, reject)"
    )

    # Discovery rounds
    round_interval: float = Field(default=5.0, gt=0, description="Seconds between rounds")
    listen_window: float = Field(default=1.0, ge=0, description="Seconds a round stays open")

    log_level: str = Field(default="INFO", description="Log level")

    @model_validator(mode="after")
    def check_round_timing(self) -> "NodeConfig":
        if self.listen_window > self.round_interval:
            raise ValueError(
                f"listen_window ({self.listen_window}s) exceeds round_interval ({self.round_interval}s)"
            )
        return self

    def to_profile(self) -> NodeProfile:
        """Build this node's profile from the configuration."""
        return NodeProfile(
            status=self.status,
            competence=self.competence,
            interests=list(self.interests),
            service_status=self.service_status,
            service_priority=self.service_priority,
        )


def load_config(environ: Optional[Mapping[str, str]] = None) -> NodeConfig:
    """
    Load configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Validated NodeConfig
    """
    env = os.environ if environ is None else environ

    return NodeConfig(
        node_address=env.get("MEDMESH_NODE_ADDRESS", "10.1.1.1"),
        status=env.get("MEDMESH_STATUS", "normal").lower(),
        competence=env.get("MEDMESH_COMPETENCE", DEFAULT_COMPETENCE),
        interests=_split_tags(env.get("MEDMESH_INTERESTS", "")),
        service_status=env.get("MEDMESH_SERVICE_STATUS", "false").lower() == "true",
        service_priority=int(env.get("MEDMESH_SERVICE_PRIORITY", "0")),
        tiers=_split_tags(env.get("MEDMESH_TIERS", ",".join(DEFAULT_TIERS))),
        duplicate_policy=env.get("MEDMESH_DUPLICATE_POLICY", "replace").lower(),
        round_interval=float(env.get("MEDMESH_ROUND_INTERVAL", "5.0")),
        listen_window=float(env.get("MEDMESH_LISTEN_WINDOW", "1.0")),
        log_level=env.get("MEDMESH_LOG_LEVEL", "INFO").upper(),
    )
