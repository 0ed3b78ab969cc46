"""
ResultCollector: Report rendering and result export

This module turns an AggregateResult into:
1. The console report (one block per flow plus the cumulative line)
2. flows_{run_id}.csv with one row per measured flow
3. scenario_summary.json with the run configuration and headline figures

Copyright (c) 2025 WiFi Comparison Research Team
Licensed under the MIT License
"""

import csv
import json
from pathlib import Path
import time as time_module

FLOW_HEADERS = [
    'run_id', 'flow_id', 'source_address', 'destination_address',
    'tx_packets', 'tx_bytes', 'offered_rate_mbps',
    'rx_packets', 'rx_bytes', 'throughput_mbps',
    'window_start', 'window_stop'
]


def render_report(result) -> str:
    """
    Format per-flow statistics and the cumulative throughput as text.

    Args:
        result: AggregateResult (control flow already excluded)

    Returns:
        Report text, one block per flow followed by the cumulative line
    """
    lines = []
    for flow in result.flows:
        lines.append(f" Flow: {flow.flow_id} ({flow.source_address} -> {flow.destination_address})")
        lines.append(f" Tx Packets: {flow.tx_packets}")
        lines.append(f" Tx Bytes: {flow.tx_bytes}")
        lines.append(f" TxOffered: {flow.offered_rate_mbps:.6g} Mbps")
        lines.append(f" Rx Packets: {flow.rx_packets}")
        lines.append(f" Rx Bytes: {flow.rx_bytes}")
        lines.append(f" Throughput: {flow.throughput_mbps:.6g} Mbps")
    lines.append("")
    lines.append(f"Cumulative Throughput is : {result.cumulative_throughput_mbps:.6g}Mbps")
    return "\n".join(lines) + "\n"


class ResultCollector:
    """
    Collects flow results of a run and exports them as CSV/JSON.

    Rows are kept in memory (flow_data) and appended to the CSV as they are
    recorded.
    """
    def __init__(self):
        self.flow_data = []
        self.run_id = None
        self.output_dir = None
        self.flow_file = None

        self.simulation_start_time = None
        self.sim_time_end_seconds = 0.0
        self.wall_clock_seconds = 0.0

    def init_data_files(self, run_id, output_dir="results"):
        """
        Create the output directory and the flow CSV with its header row.

        Args:
            run_id: Unique identifier for this simulation run
            output_dir: Directory path for result output
        """
        self.run_id = run_id
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.flow_file = self.output_dir / f"flows_{run_id}.csv"
        with open(self.flow_file, 'w', newline='') as f:
            csv.writer(f).writerow(FLOW_HEADERS)

        self.simulation_start_time = time_module.time()

    def record_result(self, result):
        """Record one row per flow of an AggregateResult"""
        self._require_initialized()
        start, stop = result.window
        for flow in result.flows:
            row = {
                'run_id': self.run_id,
                'flow_id': flow.flow_id,
                'source_address': flow.source_address,
                'destination_address': flow.destination_address,
                'tx_packets': flow.tx_packets,
                'tx_bytes': flow.tx_bytes,
                'offered_rate_mbps': flow.offered_rate_mbps,
                'rx_packets': flow.rx_packets,
                'rx_bytes': flow.rx_bytes,
                'throughput_mbps': flow.throughput_mbps,
                'window_start': start,
                'window_stop': stop,
            }
            self.flow_data.append(row)
            self._append_to_csv(self.flow_file, row)

    def _require_initialized(self):
        if self.flow_file is None:
            raise RuntimeError("ResultCollector.init_data_files() must be called before recording results")

    def _append_to_csv(self, filename, row_dict):
        with open(filename, 'a', newline='') as f:
            dw = csv.DictWriter(f, fieldnames=FLOW_HEADERS)
            dw.writerow({k: row_dict.get(k, "") for k in FLOW_HEADERS})

    def generate_summary_report(self, config, result):
        """
        Write scenario_summary.json for the run.

        Contains the full configuration, flow count, cumulative throughput,
        simulated end time and wall-clock duration.

        Returns:
            Dictionary containing the summary
        """
        self._require_initialized()
        self.wall_clock_seconds = time_module.time() - (self.simulation_start_time or time_module.time())
        summary = {
            'run_id': self.run_id,
            'config': config.to_dict(),
            'flow_count': result.flow_count,
            'cumulative_throughput_mbps': result.cumulative_throughput_mbps,
            'window': list(result.window),
            'sim_time_seconds': self.sim_time_end_seconds,
            'wall_clock_seconds': self.wall_clock_seconds,
            'data_files': {
                'flows': str(self.flow_file),
            }
        }

        summary_file = self.output_dir / "scenario_summary.json"
        with open(summary_file, 'w') as f:
            json.dump(summary, f, indent=2)

        return summary
