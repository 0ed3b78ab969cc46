"""
Wi-Fi Standards Comparison: ns-3 scenario orchestrator

This module runs one comparison scenario on ns-3 (Python bindings):

Key Responsibilities:
    - Network Infrastructure Setup: one AP and N stations in infrastructure
      mode, Yans channel with log-distance path loss, selectable 802.11
      standard with constant-rate data/control modes
    - Placement: positions from TopologyBuilder installed with
      ConstantPositionMobilityModel
    - Traffic: PacketSink on the AP and one always-on OnOff source per
      active station, timed by the TrafficSchedule plan
    - Measurement: FlowMonitor on every node; final counters converted to
      FlowRecord objects and reduced by FlowStatistics

Network Topology:
    - Wi-Fi subnet: 10.0.0.0/24 by default (AP gets the first address)
    - AP at the origin, stations on the reference star (or a ring)
    - Uplink only: every active station sends to the AP sink port

The simulator run itself is a single blocking call; configuration is
validated before any ns-3 object is created.

Copyright (c) 2025 WiFi Comparison Research Team
Licensed under the MIT License
"""

from ns import ns
import ipaddress
from dataclasses import dataclass
from typing import Dict, Optional

from Config import ScenarioConfig, WIFI_STANDARDS
import TopologyBuilder
import TrafficSchedule
import FlowStatistics
from FlowStatistics import FlowRecord
from ResultCollector import ResultCollector, render_report

# 802.11 time unit
TU_MICROSECONDS = 1024


@dataclass(frozen=True)
class ScenarioOutcome:
    config: ScenarioConfig
    topology: TopologyBuilder.Topology
    plan: TrafficSchedule.TrafficPlan
    flow_records: Dict[int, FlowRecord]
    result: FlowStatistics.AggregateResult
    sim_time_end: float


def _address_str(addr) -> str:
    return str(ipaddress.IPv4Address(int(addr.Get())))


def _beacon_interval(seconds: float):
    # ApWifiMac only accepts multiples of one TU
    tus = max(1, int(round(seconds * 1e6 / TU_MICROSECONDS)))
    return ns.MicroSeconds(tus * TU_MICROSECONDS)


class WifiComparisonSimulation:
    def __init__(self, config: ScenarioConfig, collector: Optional[ResultCollector] = None):
        """
        Prepare a comparison run.

        Validates the configuration, builds the topology and the traffic
        plan. No ns-3 object is created until run().

        Args:
            config: Scenario parameters
            collector: Optional ResultCollector for CSV/JSON export

        Raises:
            ScenarioConfigError: invalid configuration
        """
        self.config = config.validate()
        self.collector = collector
        self.run_id = None
        self.verbose = True

        self.topology = TopologyBuilder.build_from_config(config)
        self.addresses = self.topology.plan_addresses(config.subnet)
        self.plan = TrafficSchedule.schedule_from_config(
            config, self.topology, self.addresses[self.topology.ap.node_id])

        self.flow_monitor = None
        self.flowmon_helper = None

    def _log(self, msg: str) -> None:
        if self.verbose:
            print(msg)

    def _enable_tracing(self) -> None:
        if self.config.trace_enabled:
            ns.LogComponentEnable("OnOffApplication", ns.LOG_LEVEL_INFO)
            ns.LogComponentEnable("PacketSink", ns.LOG_LEVEL_INFO)

    def _setup_infrastructure(self) -> None:
        """
        Build the ns-3 nodes, Wi-Fi devices, mobility and IP stack.

        Network Configuration:
            - Propagation: ConstantSpeed delay + LogDistance loss
              (Exponent = config.path_loss_exponent, ReferenceLoss from the
              standard's band)
            - PHY: YansWifiPhy on the standard's band and channel width
            - Rate control: config.rate_adaptation with DataMode/ControlMode
              and, when RTS/CTS is on, RtsCtsThreshold on the station manager
            - MAC: StaWifiMac without active probing, ApWifiMac beaconing
              every config.beacon_interval seconds
            - Addressing: AP interface assigned before the stations, matching
              Topology.plan_addresses()
        """
        cfg = self.config
        std = WIFI_STANDARDS[cfg.wifi_standard]

        self.stas = ns.NodeContainer()
        self.stas.Create(self.topology.station_count)

        self.apNode = ns.NodeContainer()
        self.apNode.Create(1)

        # ---------------- Wi-Fi: channel/phy/mac/devices ----------------
        channel = ns.YansWifiChannelHelper()
        channel.SetPropagationDelay("ns3::ConstantSpeedPropagationDelayModel")
        channel.AddPropagationLoss("ns3::LogDistancePropagationLossModel",
                                   "Exponent", ns.DoubleValue(cfg.path_loss_exponent),
                                   "ReferenceLoss", ns.DoubleValue(cfg.reference_loss))

        phy = ns.YansWifiPhyHelper()
        phy.SetChannel(channel.Create())
        phy.Set("ChannelSettings",
                ns.StringValue(f"{{0, {std['channel_width']}, {std['band']}, 0}}"))

        wifi = ns.WifiHelper()
        wifi.SetStandard(getattr(ns, std["ns3_standard"]))
        manager_attrs = ["DataMode", ns.StringValue(cfg.data_mode),
                         "ControlMode", ns.StringValue(cfg.control_mode)]
        if cfg.rts_cts:
            manager_attrs += ["RtsCtsThreshold", ns.UintegerValue(cfg.rts_cts_threshold)]
        wifi.SetRemoteStationManager(cfg.rate_adaptation, *manager_attrs)

        ssid = ns.Ssid(cfg.ssid)
        mac = ns.WifiMacHelper()

        mac.SetType("ns3::StaWifiMac",
                    "Ssid", ns.SsidValue(ssid),
                    "ActiveProbing", ns.BooleanValue(False))
        staDevices = wifi.Install(phy, mac, self.stas)

        mac.SetType("ns3::ApWifiMac",
                    "Ssid", ns.SsidValue(ssid),
                    "BeaconGeneration", ns.BooleanValue(True),
                    "BeaconInterval", ns.TimeValue(_beacon_interval(cfg.beacon_interval)),
                    # first beacon at t=0, so passive stations join before client_start
                    "EnableBeaconJitter", ns.BooleanValue(False))
        apDevice = wifi.Install(phy, mac, self.apNode)

        # ---------------- Mobility ---------------
        staMob = ns.MobilityHelper()
        staPos = ns.CreateObject[ns.ListPositionAllocator]()
        for sta in self.topology.stations:
            staPos.Add(ns.Vector(*sta.position))
        staMob.SetPositionAllocator(staPos)
        staMob.SetMobilityModel("ns3::ConstantPositionMobilityModel")
        staMob.Install(self.stas)

        apMob = ns.MobilityHelper()
        apPos = ns.CreateObject[ns.ListPositionAllocator]()
        apPos.Add(ns.Vector(*self.topology.ap.position))
        apMob.SetPositionAllocator(apPos)
        apMob.SetMobilityModel("ns3::ConstantPositionMobilityModel")
        apMob.Install(self.apNode)

        # ---------------- Internet stack ---------------
        stack = ns.InternetStackHelper()
        stack.Install(self.apNode)
        stack.Install(self.stas)

        network = ipaddress.ip_network(cfg.subnet)
        wifiAddr = ns.Ipv4AddressHelper()
        wifiAddr.SetBase(ns.Ipv4Address(str(network.network_address)),
                         ns.Ipv4Mask(str(network.netmask)))
        self.apIface = wifiAddr.Assign(apDevice)
        self.staIfaces = wifiAddr.Assign(staDevices)

        # fixed stream numbers keep repeated runs in one process identical
        streams = wifi.AssignStreams(staDevices, 0)
        streams += wifi.AssignStreams(apDevice, streams)
        streams += stack.AssignStreams(self.stas, streams)
        stack.AssignStreams(self.apNode, streams)

        ap_addr = _address_str(self.apIface.GetAddress(0))
        if ap_addr != self.plan.sink.address:
            raise RuntimeError(
                f"AP was assigned {ap_addr}, traffic plan expects {self.plan.sink.address}")

        self._log(f"✅ Configured 802.11 {cfg.wifi_standard} network: "
                  f"{self.topology.station_count} STAs, AP at {ap_addr}, "
                  f"DataMode={cfg.data_mode}, RTS/CTS={'on' if cfg.rts_cts else 'off'}")

    def _install_applications(self) -> None:
        """
        Install the AP sink and the active stations' OnOff sources.

        Each source is always on (OnTime=1, OffTime=0) at the configured
        data rate and packet size; silent stations get no application.
        """
        sink = self.plan.sink
        sinkHelper = ns.PacketSinkHelper(
            sink.protocol, ns.InetSocketAddress(ns.Ipv4Address.GetAny(), sink.port).ConvertTo())
        self.sinkApps = sinkHelper.Install(self.apNode)
        self.sinkApps.Start(ns.Seconds(sink.start))
        self.sinkApps.Stop(ns.Seconds(sink.stop))

        self.clientApps = ns.ApplicationContainer()
        for src in self.plan.installed_sources:
            remote = ns.InetSocketAddress(ns.Ipv4Address(src.destination_address), src.destination_port)
            onoff = ns.OnOffHelper(src.protocol, remote.ConvertTo())
            onoff.SetAttribute("PacketSize", ns.UintegerValue(src.packet_size))
            onoff.SetAttribute("OnTime", ns.StringValue(f"ns3::ConstantRandomVariable[Constant={src.on_time:g}]"))
            onoff.SetAttribute("OffTime", ns.StringValue(f"ns3::ConstantRandomVariable[Constant={src.off_time:g}]"))
            onoff.SetAttribute("DataRate", ns.StringValue(src.data_rate))

            apps = onoff.Install(self.stas.Get(src.station_index))
            apps.Start(ns.Seconds(src.start))
            apps.Stop(ns.Seconds(src.stop))
            self.clientApps.Add(apps)

        self._log(f"ℹ️  Installed {self.plan.active_count}/{len(self.plan.sources)} traffic sources "
                  f"({self.config.stagger} stagger, {self.config.client_data_rate} each)")

    def _collect_flow_records(self) -> Dict[int, FlowRecord]:
        """Convert FlowMonitor stats and classifier five-tuples into FlowRecords"""
        self.flow_monitor.CheckForLostPackets()
        classifier = self.flowmon_helper.GetClassifier()

        records = {}
        for flow_id, flow_stats in self.flow_monitor.GetFlowStats():
            t = classifier.FindFlow(flow_id)
            records[int(flow_id)] = FlowRecord(
                flow_id=int(flow_id),
                source_address=_address_str(t.sourceAddress),
                destination_address=_address_str(t.destinationAddress),
                source_port=int(t.sourcePort),
                destination_port=int(t.destinationPort),
                protocol=int(t.protocol),
                tx_packets=int(flow_stats.txPackets),
                tx_bytes=int(flow_stats.txBytes),
                rx_packets=int(flow_stats.rxPackets),
                rx_bytes=int(flow_stats.rxBytes),
            )
        return records

    def run(self) -> ScenarioOutcome:
        """
        Execute the scenario and reduce its flow statistics.

        Execution Flow:
            1. Enable component tracing if requested
            2. Build infrastructure and install applications
            3. Install FlowMonitor on all nodes
            4. Run the simulator until client_stop (blocking)
            5. Read flow counters, destroy the simulator
            6. Aggregate over the client observation window
            7. Export results through the collector, if any

        Error Handling:
            - Substrate errors propagate unchanged
            - Simulator is always destroyed in the finally block

        Returns:
            ScenarioOutcome with topology, plan, raw records and result
        """
        cfg = self.config
        if self.collector is not None:
            self.collector.init_data_files(self.run_id or "run", output_dir=cfg.output_dir)

        try:
            self._enable_tracing()
            self._setup_infrastructure()
            self._install_applications()

            self.flowmon_helper = ns.FlowMonitorHelper()
            self.flow_monitor = self.flowmon_helper.InstallAll()

            ns.Simulator.Stop(ns.Seconds(cfg.client_stop))

            self._log(f"Starting simulator run (stop time: {cfg.client_stop}s)...")
            ns.Simulator.Run()

            sim_end = ns.Simulator.Now().GetSeconds()
            self._log(f"Simulator finished at {sim_end}s")

            records = self._collect_flow_records()
        finally:
            ns.Simulator.Destroy()

        result = FlowStatistics.aggregate(records, cfg.observation_window)

        if self.collector is not None:
            self.collector.sim_time_end_seconds = float(sim_end)
            self.collector.record_result(result)
            self.collector.generate_summary_report(cfg, result)

        return ScenarioOutcome(config=cfg, topology=self.topology, plan=self.plan,
                               flow_records=records, result=result, sim_time_end=float(sim_end))

    def print_report(self, outcome: ScenarioOutcome) -> None:
        print(render_report(outcome.result), end="")
