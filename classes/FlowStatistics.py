"""
FlowStatistics: Per-flow and cumulative throughput reduction

Reduces the FlowMonitor counters of a finished run into throughput
figures over the traffic observation window:

    offered_rate_mbps = tx_bytes * 8 / (stop - start) / 1e6
    throughput_mbps   = rx_bytes * 8 / (stop - start) / 1e6

The reserved control flow (id 0) never contributes to the per-flow list
or to the cumulative sum.

Copyright (c) 2025 WiFi Comparison Research Team
Licensed under the MIT License
"""

from dataclasses import dataclass
from typing import Mapping, Tuple

from Config import ObservationWindowError

CONTROL_FLOW_ID = 0


@dataclass(frozen=True)
class FlowRecord:
    """
    Final counters for one five-tuple as reported by the flow monitor.

    Attributes:
        flow_id: Flow monitor identifier
        source_address / destination_address: IPv4 endpoints
        source_port / destination_port: Transport ports
        protocol: IP protocol number (17 for UDP)
        tx_packets / tx_bytes: Sender-side counters
        rx_packets / rx_bytes: Receiver-side counters
    """
    flow_id: int
    source_address: str
    destination_address: str
    source_port: int
    destination_port: int
    protocol: int
    tx_packets: int
    tx_bytes: int
    rx_packets: int
    rx_bytes: int


@dataclass(frozen=True)
class FlowThroughput:
    flow_id: int
    source_address: str
    destination_address: str
    tx_packets: int
    tx_bytes: int
    offered_rate_mbps: float
    rx_packets: int
    rx_bytes: int
    throughput_mbps: float


@dataclass(frozen=True)
class AggregateResult:
    flows: Tuple[FlowThroughput, ...]
    cumulative_throughput_mbps: float
    window: Tuple[float, float]

    @property
    def duration(self) -> float:
        return self.window[1] - self.window[0]

    @property
    def flow_count(self) -> int:
        return len(self.flows)


def is_control_flow(flow_id: int) -> bool:
    """True for the reserved flow id that carries no measured data traffic."""
    return flow_id == CONTROL_FLOW_ID


def to_mbps(byte_count: int, duration: float) -> float:
    return byte_count * 8.0 / duration / 1000 / 1000


def window_duration(window: Tuple[float, float]) -> float:
    start, stop = window
    duration = stop - start
    if duration <= 0:
        raise ObservationWindowError(
            f"Observation window [{start}, {stop}] has zero or negative length")
    return duration


def aggregate(flow_records: Mapping[int, FlowRecord], window: Tuple[float, float]) -> AggregateResult:
    """
    Compute per-flow offered rate/throughput and the cumulative throughput.

    Args:
        flow_records: flow id -> FlowRecord snapshot of a completed run
        window: (start, stop) observation window in seconds

    Returns:
        AggregateResult with flows in ascending flow id order

    Raises:
        ObservationWindowError: stop <= start
    """
    duration = window_duration(window)

    flows = []
    cumulative_thr = 0.0
    for flow_id in sorted(flow_records):
        if is_control_flow(flow_id):
            continue
        rec = flow_records[flow_id]
        throughput = to_mbps(rec.rx_bytes, duration)
        flows.append(FlowThroughput(
            flow_id=flow_id,
            source_address=rec.source_address,
            destination_address=rec.destination_address,
            tx_packets=rec.tx_packets,
            tx_bytes=rec.tx_bytes,
            offered_rate_mbps=to_mbps(rec.tx_bytes, duration),
            rx_packets=rec.rx_packets,
            rx_bytes=rec.rx_bytes,
            throughput_mbps=throughput,
        ))
        cumulative_thr += throughput

    return AggregateResult(flows=tuple(flows),
                           cumulative_throughput_mbps=cumulative_thr,
                           window=(float(window[0]), float(window[1])))
