"""
WifiNode: Access point / station node description

Lightweight, immutable record of one node in the infrastructure-mode
topology. Positions are fixed for the whole run (constant-position
mobility), so nothing here changes after the topology is built.

"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class NodeRole(Enum):
    ACCESS_POINT = "AccessPoint"
    STATION = "Station"


@dataclass(frozen=True)
class WifiNode:
    """
    One node of the Wi-Fi topology.

    Attributes:
        node_id: Identity within the topology (AP is 0, station i is i + 1)
        role: NodeRole.ACCESS_POINT or NodeRole.STATION
        position: (x, y, z) coordinates in meters, AP at the origin
        index: Station number 0..N-1, None for the access point
    """
    node_id: int
    role: NodeRole
    position: Tuple[float, float, float]
    index: Optional[int] = None

    @property
    def is_access_point(self) -> bool:
        return self.role is NodeRole.ACCESS_POINT

    @property
    def label(self) -> str:
        if self.is_access_point:
            return "AP"
        return f"STA{self.index:02d}"
