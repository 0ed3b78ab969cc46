"""Tests for the flow statistics aggregator."""
import math

import pytest

import FlowStatistics
from FlowStatistics import aggregate, is_control_flow, CONTROL_FLOW_ID
from Config import ObservationWindowError, ScenarioConfigError


class TestControlFlowFilter:
    def test_predicate(self):
        assert CONTROL_FLOW_ID == 0
        assert is_control_flow(0)
        assert not is_control_flow(1)
        assert not is_control_flow(12)

    def test_control_flow_never_reported(self, record_factory):
        records = {
            0: record_factory(0, tx_bytes=9_999_999, rx_bytes=9_999_999),
            1: record_factory(1, tx_bytes=250_000, rx_bytes=250_000),
        }
        result = aggregate(records, (1.0, 3.0))
        assert [f.flow_id for f in result.flows] == [1]
        assert result.cumulative_throughput_mbps == pytest.approx(1.0)

    def test_only_control_flow(self, record_factory):
        result = aggregate({0: record_factory(0, tx_bytes=1000, rx_bytes=1000)}, (0.0, 1.0))
        assert result.flows == ()
        assert result.cumulative_throughput_mbps == 0.0


class TestNormalization:
    def test_one_megabyte_per_second_is_eight_mbps(self, record_factory):
        result = aggregate({1: record_factory(1, tx_bytes=1_000_000, rx_bytes=1_000_000)}, (0.0, 1.0))
        assert result.flows[0].throughput_mbps == pytest.approx(8.0)
        assert result.flows[0].offered_rate_mbps == pytest.approx(8.0)

    def test_doubling_rx_bytes_doubles_throughput(self, record_factory):
        single = aggregate({1: record_factory(1, rx_bytes=1_000_000)}, (0.0, 1.0))
        double = aggregate({1: record_factory(1, rx_bytes=2_000_000)}, (0.0, 1.0))
        assert double.flows[0].throughput_mbps == 2 * single.flows[0].throughput_mbps

    def test_offered_rate_uses_tx_bytes(self, record_factory):
        result = aggregate({1: record_factory(1, tx_bytes=500_000, rx_bytes=250_000)}, (1.0, 3.0))
        flow = result.flows[0]
        assert flow.offered_rate_mbps == pytest.approx(2.0)
        assert flow.throughput_mbps == pytest.approx(1.0)

    def test_window_duration(self, record_factory):
        result = aggregate({1: record_factory(1, rx_bytes=1)}, (1, 3))
        assert result.window == (1.0, 3.0)
        assert result.duration == 2.0


class TestCumulative:
    def test_cumulative_is_sum_of_flows(self, record_factory):
        records = {i: record_factory(i, tx_bytes=250_000, rx_bytes=200_000 + i * 1000,
                                     src=f"10.0.0.{i + 1}")
                   for i in range(1, 13)}
        result = aggregate(records, (1.0, 3.0))
        assert result.flow_count == 12
        assert result.cumulative_throughput_mbps == pytest.approx(
            sum(f.throughput_mbps for f in result.flows))

    def test_empty_records(self):
        result = aggregate({}, (1.0, 3.0))
        assert result.flows == ()
        assert result.cumulative_throughput_mbps == 0.0

    def test_counters_copied_through(self, record_factory):
        rec = record_factory(3, tx_bytes=14280, rx_bytes=11424, src="10.0.0.4",
                             tx_packets=10, rx_packets=8)
        flow = aggregate({3: rec}, (1.0, 3.0)).flows[0]
        assert (flow.source_address, flow.destination_address) == ("10.0.0.4", "10.0.0.1")
        assert (flow.tx_packets, flow.tx_bytes) == (10, 14280)
        assert (flow.rx_packets, flow.rx_bytes) == (8, 11424)


class TestOrdering:
    def test_ascending_flow_id(self, record_factory):
        records = {7: record_factory(7, rx_bytes=10),
                   2: record_factory(2, rx_bytes=10),
                   0: record_factory(0, rx_bytes=10),
                   5: record_factory(5, rx_bytes=10)}
        result = aggregate(records, (0.0, 1.0))
        assert [f.flow_id for f in result.flows] == [2, 5, 7]

    def test_stable_across_insertion_orders(self, record_factory):
        ids = [4, 1, 3, 2]
        a = aggregate({i: record_factory(i, rx_bytes=i * 1000) for i in ids}, (1.0, 3.0))
        b = aggregate({i: record_factory(i, rx_bytes=i * 1000) for i in sorted(ids)}, (1.0, 3.0))
        assert a == b


class TestWindowErrors:
    def test_zero_length_window_rejected(self, record_factory):
        with pytest.raises(ObservationWindowError):
            aggregate({1: record_factory(1, rx_bytes=1000)}, (2.0, 2.0))

    def test_negative_window_rejected(self, record_factory):
        with pytest.raises(ObservationWindowError):
            aggregate({1: record_factory(1, rx_bytes=1000)}, (3.0, 1.0))

    def test_rejected_even_without_records(self):
        with pytest.raises(ScenarioConfigError):
            aggregate({}, (1.0, 1.0))

    def test_results_are_finite(self, record_factory):
        result = aggregate({1: record_factory(1, tx_bytes=10**9, rx_bytes=10**9)}, (0.0, 1e-3))
        assert math.isfinite(result.cumulative_throughput_mbps)

    def test_to_mbps(self):
        assert FlowStatistics.to_mbps(125_000, 1.0) == pytest.approx(1.0)
