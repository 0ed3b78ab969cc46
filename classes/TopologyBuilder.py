"""
TopologyBuilder: Deterministic AP + station placement

Builds the infrastructure-mode layout used by every comparison run:
- Access point fixed at the origin
- Stations on the 12-slot reference star table, or on a ring for
  arbitrary station counts

The builder is a pure function of its inputs; the ns-3 mobility helpers
consume the resulting positions later, in WifiComparisonSimulation.

Copyright (c) 2025 WiFi Comparison Research Team
Licensed under the MIT License
"""

import ipaddress
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from Config import ScenarioConfigError, PLACEMENT_TABLE_SIZE
from WifiNode import WifiNode, NodeRole

# Reference star pattern around the AP (meters)
STA_X_COORDINATES = (50.0, -50.0, 0.0, 0.0, 40.0, -40.0, 30.0, -30.0, -30.0, 30.0, -40.0, 40.0)
STA_Y_COORDINATES = (0.0, 0.0, 50.0, -50.0, 30.0, -30.0, 40.0, -40.0, 40.0, -40.0, 30.0, -30.0)

AP_POSITION = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Topology:
    """Access point plus the ordered tuple of stations"""
    ap: WifiNode
    stations: Tuple[WifiNode, ...]

    @property
    def station_count(self) -> int:
        return len(self.stations)

    @property
    def nodes(self) -> List[WifiNode]:
        return [self.ap, *self.stations]

    def plan_addresses(self, subnet: str = "10.0.0.0/24") -> Dict[int, str]:
        """
        Map node_id to the IPv4 address the stack helper will hand out.

        Addresses are assigned AP first, then stations in index order, which
        is the order WifiComparisonSimulation installs the devices in.

        Raises:
            ScenarioConfigError: subnet is malformed or too small
        """
        try:
            network = ipaddress.ip_network(subnet)
        except ValueError as e:
            raise ScenarioConfigError(f"Invalid subnet '{subnet}': {e}") from e

        hosts = network.hosts()
        planned = {}
        for node in self.nodes:
            try:
                planned[node.node_id] = str(next(hosts))
            except StopIteration:
                raise ScenarioConfigError(
                    f"Subnet {subnet} cannot address {len(self.nodes)} nodes") from None
        return planned


def table_positions(station_count: int) -> List[Tuple[float, float, float]]:
    if station_count > PLACEMENT_TABLE_SIZE:
        raise ScenarioConfigError(
            f"station_count={station_count} exceeds the {PLACEMENT_TABLE_SIZE}-slot placement table")
    return [(STA_X_COORDINATES[i], STA_Y_COORDINATES[i], 0.0) for i in range(station_count)]


def ring_positions(station_count: int, radius: float = 50.0) -> List[Tuple[float, float, float]]:
    """Station i at angle 2*pi*i/N on a circle of the given radius."""
    if radius <= 0:
        raise ScenarioConfigError(f"ring radius must be positive, got {radius}")
    angles = 2.0 * np.pi * np.arange(station_count) / station_count
    xs = np.round(radius * np.cos(angles), 9)
    ys = np.round(radius * np.sin(angles), 9)
    # normalize -0.0
    return [(float(x) + 0.0, float(y) + 0.0, 0.0) for x, y in zip(xs, ys)]


def build(station_count: int, placement: str = "table", ring_radius: float = 50.0) -> Topology:
    """
    Build the AP and station set for a run.

    Args:
        station_count: Number of stations (>= 1)
        placement: "table" for the fixed 12-slot star, "ring" for any N
        ring_radius: Circle radius in meters for ring placement

    Returns:
        Topology with the AP at the origin and stations indexed 0..N-1

    Raises:
        ScenarioConfigError: station_count < 1, table exhausted, unknown placement
    """
    if station_count < 1:
        raise ScenarioConfigError(f"station_count must be >= 1, got {station_count}")

    if placement == "table":
        positions = table_positions(station_count)
    elif placement == "ring":
        positions = ring_positions(station_count, ring_radius)
    else:
        raise ScenarioConfigError(f"Unknown placement '{placement}'")

    ap = WifiNode(node_id=0, role=NodeRole.ACCESS_POINT, position=AP_POSITION)
    stations = tuple(
        WifiNode(node_id=i + 1, role=NodeRole.STATION, position=pos, index=i)
        for i, pos in enumerate(positions)
    )
    return Topology(ap=ap, stations=stations)


def build_from_config(config) -> Topology:
    return build(config.station_count, config.placement, config.ring_radius)
