"""
TrafficSchedule: Sink and per-station source descriptors

Turns a topology into the application plan the simulator installs:
- One packet sink on the AP, listening on the fixed destination port
- One always-on constant-rate source per station, installed only for the
  first active_count stations (the remaining stations stay silent)

Timing Strategy:
    - Sink listens over [server_start, server_stop]
    - Sources start after the sink is up: client_start + increment
      ("uniform", every source shares one offset) or
      client_start + increment * (i + 1) ("per-station")
    - Sources stop at client_stop

Copyright (c) 2025 WiFi Comparison Research Team
Licensed under the MIT License
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from Config import ScenarioConfigError, STAGGER_STRATEGIES
from WifiNode import WifiNode


@dataclass(frozen=True)
class Windows:
    """Client and server activity windows in seconds"""
    client_start: float
    client_stop: float
    server_start: float
    server_stop: float

    @classmethod
    def from_config(cls, config) -> "Windows":
        return cls(config.client_start, config.client_stop,
                   config.server_start, config.server_stop)


@dataclass(frozen=True)
class SinkDescriptor:
    node_id: int
    address: str
    port: int
    protocol: str
    start: float
    stop: float


@dataclass(frozen=True)
class SourceDescriptor:
    """
    Always-on traffic source owned by one station.

    Attributes:
        node_id: Owning station node id
        station_index: Station number 0..N-1
        destination_address: AP address the sink listens on
        destination_port: Sink port
        protocol: ns-3 socket factory type id
        packet_size: Payload bytes per packet
        data_rate: Bitrate string handed verbatim to the OnOff application
        on_time: Constant on period (s)
        off_time: Constant off period (s), 0 for a 100% duty cycle
        start: Scheduled start time (s)
        stop: Scheduled stop time (s)
        installed: False for stations beyond the active count
    """
    node_id: int
    station_index: int
    destination_address: str
    destination_port: int
    protocol: str
    packet_size: int
    data_rate: str
    start: float
    stop: float
    installed: bool
    on_time: float = 1.0
    off_time: float = 0.0


@dataclass(frozen=True)
class TrafficPlan:
    sink: SinkDescriptor
    sources: Tuple[SourceDescriptor, ...]

    @property
    def installed_sources(self) -> List[SourceDescriptor]:
        return [s for s in self.sources if s.installed]

    @property
    def active_count(self) -> int:
        return len(self.installed_sources)


def source_start_time(index: int, windows: Windows, increment: float, stagger: str) -> float:
    if stagger == "uniform":
        return windows.client_start + increment
    if stagger == "per-station":
        return windows.client_start + increment * (index + 1)
    raise ScenarioConfigError(
        f"Unknown stagger '{stagger}' (expected one of {STAGGER_STRATEGIES})")


def _check_windows(windows: Windows) -> None:
    if windows.client_stop <= windows.client_start:
        raise ScenarioConfigError(
            f"Client window [{windows.client_start}, {windows.client_stop}] has zero or negative length")
    if windows.server_start > windows.client_start or windows.server_stop < windows.client_stop:
        raise ScenarioConfigError(
            f"Server window [{windows.server_start}, {windows.server_stop}] must cover the client "
            f"window [{windows.client_start}, {windows.client_stop}]")


def schedule(stations: Sequence[WifiNode], active_count: int, rate: str, packet_size: int,
             protocol: str, windows: Windows, sink_address: str, ap_node_id: int = 0,
             port: int = 10, increment: float = 0.01, stagger: str = "uniform") -> TrafficPlan:
    """
    Build the sink descriptor and one source descriptor per station.

    Args:
        stations: Stations in index order
        active_count: Number of leading stations that carry traffic
        rate: Offered data rate string (e.g. "1Mbps"), not interpreted here
        packet_size: Bytes per packet, > 0
        protocol: Socket factory type id (e.g. "ns3::UdpSocketFactory")
        windows: Client/server timing windows
        sink_address: Address assigned to the AP
        ap_node_id: Node id owning the sink
        port: Destination port of the sink
        increment: Start offset after client_start
        stagger: "uniform" or "per-station"

    Returns:
        TrafficPlan with exactly one sink and len(stations) sources

    Raises:
        ScenarioConfigError: active_count outside 0..len(stations), bad packet
            size, server window not covering the client window, or a source
            start that does not fall strictly inside (server_start, client_stop)
    """
    if not 0 <= active_count <= len(stations):
        raise ScenarioConfigError(
            f"active_count={active_count} must be within 0..{len(stations)} stations")
    if packet_size <= 0:
        raise ScenarioConfigError(f"packet_size must be positive, got {packet_size}")
    _check_windows(windows)

    sink = SinkDescriptor(
        node_id=ap_node_id,
        address=sink_address,
        port=port,
        protocol=protocol,
        start=windows.server_start,
        stop=windows.server_stop,
    )

    sources = []
    for i, sta in enumerate(stations):
        installed = i < active_count
        start = source_start_time(i, windows, increment, stagger)
        if installed and not windows.server_start < start < windows.client_stop:
            raise ScenarioConfigError(
                f"Source start {start:.3f}s for station {i} must fall inside "
                f"({windows.server_start}, {windows.client_stop})")
        if not installed:
            start = min(start, windows.client_stop)
        sources.append(SourceDescriptor(
            node_id=sta.node_id,
            station_index=i,
            destination_address=sink_address,
            destination_port=port,
            protocol=protocol,
            packet_size=packet_size,
            data_rate=rate,
            start=start,
            stop=windows.client_stop,
            installed=installed,
        ))

    return TrafficPlan(sink=sink, sources=tuple(sources))


def schedule_from_config(config, topology, sink_address: str) -> TrafficPlan:
    return schedule(
        topology.stations,
        config.active_station_count,
        config.client_data_rate,
        config.packet_size,
        config.client_protocol,
        Windows.from_config(config),
        sink_address,
        ap_node_id=topology.ap.node_id,
        port=config.destination_port,
        increment=config.start_increment,
        stagger=config.stagger,
    )
