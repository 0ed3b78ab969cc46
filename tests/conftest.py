"""Shared fixtures for the Wi-Fi comparison tests."""
import pytest

from Config import ScenarioConfig
import TopologyBuilder
from FlowStatistics import FlowRecord


@pytest.fixture
def reference_config():
    """12 STAs, all active, client/server windows [1, 3] s."""
    return ScenarioConfig()


@pytest.fixture
def reference_topology():
    return TopologyBuilder.build(12)


def make_record(flow_id, tx_bytes=0, rx_bytes=0, src="10.0.0.2", dst="10.0.0.1",
                tx_packets=None, rx_packets=None):
    return FlowRecord(
        flow_id=flow_id,
        source_address=src,
        destination_address=dst,
        source_port=49153,
        destination_port=10,
        protocol=17,
        tx_packets=tx_packets if tx_packets is not None else tx_bytes // 1428,
        tx_bytes=tx_bytes,
        rx_packets=rx_packets if rx_packets is not None else rx_bytes // 1428,
        rx_bytes=rx_bytes,
    )


@pytest.fixture
def record_factory():
    return make_record
