"""
Wi-Fi Comparison Validation Test Script

This script runs the reference scenario (12 STAs, all active, 802.11n
2.4 GHz, client and server windows [1, 3] s) and verifies:
- One measured flow per active station, all towards the AP
- Every flow delivers data (rx bytes > 0) and the cumulative is positive
- Control flow excluded from the report
- Cumulative throughput equals the sum of the per-flow throughputs

Used for pre-flight checks before sweeping standards or station counts.

Copyright (c) 2025 WiFi Comparison Research Team
"""

from ns import ns
import math
import random
import numpy as np
from WifiComparisonSimulation import WifiComparisonSimulation
from Config import DEFAULT_CONFIG


def validate_simulation():
    """
    Run the reference 12/12 scenario without writing result files.

    Returns:
        True if validation passed, False otherwise
    """
    print("🧪 RUNNING VALIDATION TEST")

    config = DEFAULT_CONFIG.replace(station_count=12, active_station_count=12,
                                    client_start=1.0, client_stop=3.0,
                                    server_start=1.0, server_stop=3.0)

    test_seed = 42
    ns.RngSeedManager.SetSeed(test_seed)
    ns.RngSeedManager.SetRun(0)
    random.seed(test_seed)
    np.random.seed(test_seed)

    sim = WifiComparisonSimulation(config)
    sim.run_id = "validation_test"

    try:
        outcome = sim.run()
    except Exception as e:
        print(f"❌ Validation failed: {e}")
        return False

    result = outcome.result
    ap_address = outcome.plan.sink.address
    flow_sum = sum(f.throughput_mbps for f in result.flows)
    to_ap = sum(1 for f in result.flows if f.destination_address == ap_address)
    delivering = sum(1 for f in result.flows if f.rx_bytes > 0)

    print(f"✅ Validation Results:")
    print(f"   Flows measured:        {result.flow_count}")
    print(f"   Flows towards AP:      {to_ap}")
    print(f"   Flows delivering data: {delivering}")
    print(f"   Window duration:       {result.duration:.1f}s")
    print(f"   Cumulative throughput: {result.cumulative_throughput_mbps:.4f} Mbps")
    print(f"   Sum of flows:          {flow_sum:.4f} Mbps")

    return (result.flow_count == 12 and to_ap == 12 and delivering == 12
            and result.cumulative_throughput_mbps > 0
            and math.isclose(flow_sum, result.cumulative_throughput_mbps, rel_tol=1e-12))


if __name__ == "__main__":
    success = validate_simulation()
    if success:
        print("🎉 VALIDATION PASSED - Ready for standard comparison sweeps!")
    else:
        print("🚨 VALIDATION FAILED - Check configuration")
