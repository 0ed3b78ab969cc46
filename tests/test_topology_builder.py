"""Tests for the topology builder."""
import math

import pytest

import TopologyBuilder
from Config import ScenarioConfig, ScenarioConfigError
from WifiNode import NodeRole


class TestTablePlacement:
    """Reference 12-slot star layout."""

    def test_ap_at_origin(self, reference_topology):
        ap = reference_topology.ap
        assert ap.role is NodeRole.ACCESS_POINT
        assert ap.position == (0.0, 0.0, 0.0)
        assert ap.index is None
        assert ap.label == "AP"

    def test_station_positions_follow_table(self, reference_topology):
        positions = [sta.position for sta in reference_topology.stations]
        assert positions[0] == (50.0, 0.0, 0.0)
        assert positions[1] == (-50.0, 0.0, 0.0)
        assert positions[2] == (0.0, 50.0, 0.0)
        assert positions[4] == (40.0, 30.0, 0.0)
        assert positions[11] == (40.0, -30.0, 0.0)

    def test_stations_are_indexed_and_distinct(self, reference_topology):
        stations = reference_topology.stations
        assert [s.index for s in stations] == list(range(12))
        assert all(s.role is NodeRole.STATION for s in stations)
        assert len({s.position for s in stations}) == 12
        assert len({s.node_id for s in reference_topology.nodes}) == 13

    def test_all_stations_fifty_meters_from_ap(self, reference_topology):
        for sta in reference_topology.stations:
            x, y, _ = sta.position
            assert math.hypot(x, y) == pytest.approx(50.0)

    def test_smaller_topology_uses_leading_slots(self, reference_topology):
        small = TopologyBuilder.build(4)
        assert small.station_count == 4
        assert small.stations == reference_topology.stations[:4]

    def test_thirteen_stations_rejected(self):
        with pytest.raises(ScenarioConfigError, match="placement table"):
            TopologyBuilder.build(13)

    def test_zero_stations_rejected(self):
        with pytest.raises(ScenarioConfigError):
            TopologyBuilder.build(0)

    def test_unknown_placement_rejected(self):
        with pytest.raises(ScenarioConfigError, match="placement"):
            TopologyBuilder.build(3, placement="grid")


class TestRingPlacement:
    """Parametric placement for arbitrary station counts."""

    def test_thirteen_stations_on_ring(self):
        topo = TopologyBuilder.build(13, placement="ring", ring_radius=50.0)
        assert topo.station_count == 13
        for sta in topo.stations:
            x, y, z = sta.position
            assert math.hypot(x, y) == pytest.approx(50.0)
            assert z == 0.0

    def test_first_station_on_positive_x_axis(self):
        topo = TopologyBuilder.build(4, placement="ring", ring_radius=20.0)
        assert topo.stations[0].position == (20.0, 0.0, 0.0)
        assert topo.stations[1].position == (0.0, 20.0, 0.0)
        assert topo.stations[2].position == (-20.0, 0.0, 0.0)
        assert topo.stations[3].position == (0.0, -20.0, 0.0)

    def test_non_positive_radius_rejected(self):
        with pytest.raises(ScenarioConfigError):
            TopologyBuilder.build(5, placement="ring", ring_radius=0.0)


class TestDeterminism:
    def test_identical_input_identical_topology(self):
        assert TopologyBuilder.build(12) == TopologyBuilder.build(12)
        assert (TopologyBuilder.build(20, placement="ring")
                == TopologyBuilder.build(20, placement="ring"))

    def test_build_from_config(self):
        cfg = ScenarioConfig(station_count=6, active_station_count=2)
        assert TopologyBuilder.build_from_config(cfg) == TopologyBuilder.build(6)


class TestAddressPlan:
    def test_ap_gets_first_address(self, reference_topology):
        plan = reference_topology.plan_addresses("10.0.0.0/24")
        assert plan[reference_topology.ap.node_id] == "10.0.0.1"
        assert plan[reference_topology.stations[0].node_id] == "10.0.0.2"
        assert plan[reference_topology.stations[11].node_id] == "10.0.0.13"

    def test_subnet_too_small(self, reference_topology):
        with pytest.raises(ScenarioConfigError, match="cannot address"):
            reference_topology.plan_addresses("10.0.0.0/29")

    def test_invalid_subnet(self, reference_topology):
        with pytest.raises(ScenarioConfigError, match="Invalid subnet"):
            reference_topology.plan_addresses("not-a-subnet")
