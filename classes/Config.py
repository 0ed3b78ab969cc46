"""
Wi-Fi Standards Comparison Configuration Parameters

This module defines the scenario parameters for the Wi-Fi comparison harness:
one access point, N client stations in infrastructure mode, constant UDP
traffic from every active station to the AP.

Parameter categories:
- Topology size and station placement
- Wireless standard, data mode and rate adaptation
- Client traffic (rate, packet size, protocol, port)
- Server/client timing windows and start stagger
- Run control (seed, output directory, tracing)

All values live in a frozen ScenarioConfig that is built once at startup
and handed to each component; nothing here is mutated at runtime.

Copyright (c) 2025 WiFi Comparison Research Team
Licensed under the MIT License
"""

import ipaddress
from dataclasses import dataclass, asdict, replace as dc_replace
from typing import Optional, Tuple


class ScenarioConfigError(ValueError):
    """Raised for operator/programmer configuration mistakes, before any simulated time advances."""


class ObservationWindowError(ScenarioConfigError):
    """Zero or negative length throughput window (division by zero hazard)."""


# ============================================================================
# Supported Wi-Fi standards
# ============================================================================
# ns-3 enum name, band, channel width (MHz), the data modes usable with the
# ConstantRateWifiManager, the control mode (None: same as the data mode) and
# the log-distance reference loss at 1 m for the band (free space, dB).
# HT modes cannot carry control frames.
WIFI_STANDARDS = {
    "80211a": {
        "ns3_standard": "WIFI_STANDARD_80211a",
        "band": "BAND_5GHZ",
        "reference_loss": 46.6777,
        "channel_width": 20,
        "data_modes": ("OfdmRate6Mbps", "OfdmRate12Mbps"),
        "control_mode": None,
    },
    "80211b": {
        "ns3_standard": "WIFI_STANDARD_80211b",
        "band": "BAND_2_4GHZ",
        "reference_loss": 40.0460,
        "channel_width": 22,
        "data_modes": ("DsssRate5_5Mbps", "DsssRate11Mbps"),
        "control_mode": None,
    },
    "80211g": {
        "ns3_standard": "WIFI_STANDARD_80211g",
        "band": "BAND_2_4GHZ",
        "reference_loss": 40.0460,
        "channel_width": 20,
        "data_modes": ("ErpOfdmRate6Mbps", "ErpOfdmRate12Mbps"),
        "control_mode": None,
    },
    "80211n_2_4GHZ": {
        "ns3_standard": "WIFI_STANDARD_80211n",
        "band": "BAND_2_4GHZ",
        "reference_loss": 40.0460,
        "channel_width": 20,
        "data_modes": ("HtMcs0", "HtMcs1"),
        "control_mode": "ErpOfdmRate6Mbps",
    },
    "80211n_5GHZ": {
        "ns3_standard": "WIFI_STANDARD_80211n",
        "band": "BAND_5GHZ",
        "reference_loss": 46.6777,
        "channel_width": 40,
        "data_modes": ("HtMcs0", "HtMcs1"),
        "control_mode": "OfdmRate6Mbps",
    },
}

STAGGER_STRATEGIES = ("uniform", "per-station")
PLACEMENT_STRATEGIES = ("table", "ring")

# Station slots of the reference star layout (meters, AP at origin)
PLACEMENT_TABLE_SIZE = 12


@dataclass(frozen=True)
class ScenarioConfig:
    """Immutable parameter set for one Wi-Fi comparison run"""

    # ============================================================================
    # Topology
    # ============================================================================
    station_count: int = 12
    active_station_count: int = 12
    placement: str = "table"
    ring_radius: float = 50.0

    # ============================================================================
    # Wi-Fi PHY/MAC
    # ============================================================================
    wifi_standard: str = "80211n_2_4GHZ"
    wifi_data_mode: Optional[str] = None
    rate_adaptation: str = "ns3::ConstantRateWifiManager"
    path_loss_exponent: float = 3.2
    rts_cts: bool = False
    rts_cts_threshold: int = 1000
    ssid: str = "ns-3-ssid"
    beacon_interval: float = 5.0

    # ============================================================================
    # Client traffic
    # ============================================================================
    client_data_rate: str = "1Mbps"
    client_protocol: str = "ns3::UdpSocketFactory"
    destination_port: int = 10
    packet_size: int = 1400
    subnet: str = "10.0.0.0/24"

    # ============================================================================
    # Timing (seconds)
    # ============================================================================
    client_start: float = 1.0
    client_stop: float = 3.0
    server_start: float = 1.0
    server_stop: float = 3.0
    start_increment: float = 0.01
    stagger: str = "uniform"

    # ============================================================================
    # Run control
    # ============================================================================
    seed: int = 12345
    run: int = 0
    trace_enabled: bool = False
    output_dir: str = "wifi_comparison_results"

    @property
    def data_mode(self) -> str:
        """Data mode handed to the rate manager; defaults to the standard's first mode."""
        if self.wifi_data_mode:
            return self.wifi_data_mode
        return WIFI_STANDARDS[self.wifi_standard]["data_modes"][0]

    @property
    def control_mode(self) -> str:
        return WIFI_STANDARDS[self.wifi_standard]["control_mode"] or self.data_mode

    @property
    def reference_loss(self) -> float:
        return WIFI_STANDARDS[self.wifi_standard]["reference_loss"]

    @property
    def observation_window(self) -> Tuple[float, float]:
        return (self.client_start, self.client_stop)

    def replace(self, **changes) -> "ScenarioConfig":
        return dc_replace(self, **changes)

    def to_dict(self) -> dict:
        return asdict(self)

    def validate(self) -> "ScenarioConfig":
        """
        Check every configuration constraint and fail fast.

        Returns:
            self, so calls can be chained

        Raises:
            ScenarioConfigError: with a message naming the offending parameter
        """
        if self.station_count < 1:
            raise ScenarioConfigError(f"station_count must be >= 1, got {self.station_count}")
        if self.placement not in PLACEMENT_STRATEGIES:
            raise ScenarioConfigError(
                f"Unknown placement '{self.placement}' (expected one of {PLACEMENT_STRATEGIES})")
        if self.placement == "table" and self.station_count > PLACEMENT_TABLE_SIZE:
            raise ScenarioConfigError(
                f"station_count={self.station_count} exceeds the {PLACEMENT_TABLE_SIZE}-slot "
                f"placement table; use placement='ring' for larger topologies")
        if self.placement == "ring" and self.ring_radius <= 0:
            raise ScenarioConfigError(f"ring_radius must be positive, got {self.ring_radius}")
        if not 0 <= self.active_station_count <= self.station_count:
            raise ScenarioConfigError(
                f"active_station_count={self.active_station_count} must be within "
                f"0..station_count ({self.station_count})")

        if self.wifi_standard not in WIFI_STANDARDS:
            raise ScenarioConfigError(
                f"Unknown wifi_standard '{self.wifi_standard}' "
                f"(expected one of {sorted(WIFI_STANDARDS)})")
        if self.packet_size <= 0:
            raise ScenarioConfigError(f"packet_size must be positive, got {self.packet_size}")
        if not 0 < self.destination_port < 65536:
            raise ScenarioConfigError(f"destination_port out of range: {self.destination_port}")

        if self.client_stop <= self.client_start:
            raise ObservationWindowError(
                f"Observation window [{self.client_start}, {self.client_stop}] has zero or negative length")
        if self.server_start > self.client_start or self.server_stop < self.client_stop:
            raise ScenarioConfigError(
                f"Server window [{self.server_start}, {self.server_stop}] must cover the client "
                f"window [{self.client_start}, {self.client_stop}]")
        if self.stagger not in STAGGER_STRATEGIES:
            raise ScenarioConfigError(
                f"Unknown stagger '{self.stagger}' (expected one of {STAGGER_STRATEGIES})")
        if self.start_increment <= 0:
            raise ScenarioConfigError(f"start_increment must be positive, got {self.start_increment}")
        steps = self.active_station_count if self.stagger == "per-station" else 1
        if self.client_start + self.start_increment * max(steps, 1) >= self.client_stop:
            raise ScenarioConfigError(
                f"Staggered source starts (increment {self.start_increment}s) do not fit "
                f"before client_stop={self.client_stop}s")

        try:
            network = ipaddress.ip_network(self.subnet)
        except ValueError as e:
            raise ScenarioConfigError(f"Invalid subnet '{self.subnet}': {e}") from e
        if network.num_addresses - 2 < self.station_count + 1:
            raise ScenarioConfigError(
                f"Subnet {self.subnet} cannot address {self.station_count} stations plus the AP")
        return self


DEFAULT_CONFIG = ScenarioConfig()
