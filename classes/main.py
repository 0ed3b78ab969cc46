"""
Wi-Fi Standards Comparison: main entry point

This is the main entry point for running a comparison scenario. It provides:
- Command-line argument parsing for scenario parameters
- RNG seeding for reproducibility
- Simulation orchestration and report output

Usage:
    python main.py --isRtsCts=false --wifiStaNodesCount=12 --activeStaNodesCount=12 \\
        --data_rate_for_wifi=HtMcs0

Options:
    --wifiStaNodesCount INT     Number of Wi-Fi STA nodes (default: 12)
    --activeStaNodesCount INT   Number of STA nodes carrying traffic (default: 12)
    --standard NAME             Wi-Fi standard (default: 80211n_2_4GHZ)
    --data_rate_for_wifi MODE   Constant-rate data mode (default: standard's first mode)
    --data_rate_for_client RATE Offered rate per client (default: 1Mbps)
    --isRtsCts {true,false}     Enable RTS/CTS (default: false)
    --stagger {uniform,per-station}
    --placement {table,ring}
    --seed INT / --run INT      RNG seed and run number
    --output DIR                Result directory
    --trace                     Enable OnOffApplication/PacketSink logging
    --no-output                 Print the report only, write no files
"""

from ns import ns
import random
import numpy as np
from WifiComparisonSimulation import WifiComparisonSimulation
from ResultCollector import ResultCollector
from Config import DEFAULT_CONFIG, WIFI_STANDARDS, STAGGER_STRATEGIES, PLACEMENT_STRATEGIES, ScenarioConfigError
import argparse, time
import sys


def str2bool(value):
    if isinstance(value, bool):
        return value
    if value.lower() in ("1", "true", "yes", "on"):
        return True
    if value.lower() in ("0", "false", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean, got '{value}'")


def parse_args(argv=None):
    """
    Parse command-line arguments for scenario configuration.

    Returns:
        Namespace object with parsed arguments
    """
    d = DEFAULT_CONFIG
    p = argparse.ArgumentParser(description="Compare Wi-Fi standards in a 1 AP / N STA scenario")
    p.add_argument("--wifiStaNodesCount", type=int, default=d.station_count,
                   help="Set number of Wifi STA Nodes")
    p.add_argument("--activeStaNodesCount", type=int, default=d.active_station_count,
                   help="Set number of active Wifi STA Nodes")
    p.add_argument("--standard", choices=sorted(WIFI_STANDARDS), default=d.wifi_standard)
    p.add_argument("--data_rate_for_wifi", type=str, default=d.wifi_data_mode,
                   help="Set Data Rate for WIFI Standard")
    p.add_argument("--data_rate_for_client", type=str, default=d.client_data_rate,
                   help="Set Data Rate for Client")
    p.add_argument("--isRtsCts", type=str2bool, default=d.rts_cts, help="Set RTS/CTS")
    p.add_argument("--stagger", choices=STAGGER_STRATEGIES, default=d.stagger)
    p.add_argument("--placement", choices=PLACEMENT_STRATEGIES, default=d.placement)
    p.add_argument("--seed", type=int, default=d.seed)
    p.add_argument("--run",  type=int, default=d.run)
    p.add_argument("--output", type=str, default=d.output_dir)
    p.add_argument("--trace", action="store_true", help="Enable detailed application trace")
    p.add_argument("--no-output", dest="no_output", action="store_true")
    return p.parse_args(argv)


def config_from_args(args):
    return DEFAULT_CONFIG.replace(
        station_count=args.wifiStaNodesCount,
        active_station_count=args.activeStaNodesCount,
        wifi_standard=args.standard,
        wifi_data_mode=args.data_rate_for_wifi,
        client_data_rate=args.data_rate_for_client,
        rts_cts=args.isRtsCts,
        stagger=args.stagger,
        placement=args.placement,
        seed=args.seed,
        run=args.run,
        output_dir=args.output,
        trace_enabled=args.trace,
    )


def run_simulation(argv=None):
    """
    Execute a single comparison run with the configured parameters.

    This function:
    1. Parses command-line arguments into a ScenarioConfig
    2. Validates it (configuration errors exit with status 2)
    3. Seeds all RNGs (ns-3, Python random, numpy) for reproducibility
    4. Runs the scenario and prints the flow report
    """
    args = parse_args(argv)
    config = config_from_args(args)

    try:
        config.validate()
    except ScenarioConfigError as e:
        print(f"❌ Invalid configuration: {e}")
        sys.exit(2)

    print(f"🔧 Configuration: standard={config.wifi_standard}, DataMode={config.data_mode}, "
          f"STAs={config.station_count}, active={config.active_station_count}, "
          f"client rate={config.client_data_rate}, RTS/CTS={config.rts_cts}")

    ns.RngSeedManager.SetSeed(config.seed)
    ns.RngSeedManager.SetRun(config.run)

    random.seed(config.seed)
    np.random.seed(config.seed)

    collector = None if args.no_output else ResultCollector()

    try:
        sim = WifiComparisonSimulation(config, collector=collector)

        sim.run_id = f"{time.strftime('%Y%m%d_%H%M%S')}_{config.wifi_standard}_seed{config.seed}_run{config.run}"

        outcome = sim.run()
        sim.print_report(outcome)
        print("✅ Simulation completed successfully")
        return outcome

    except Exception as e:
        print(f"❌ Simulation failed: {e}")
        import traceback
        traceback.print_exc()
        raise


def main():
    run_simulation()


if __name__ == "__main__":
    main()
