"""Statistics exporters.

CSV for the aggregate numbers and the per-access log, JSON and PDF for the
running hit-rate chart. All of them write to an explicit path and let
OSError propagate.
"""
import csv
import json
from typing import Dict, List

from src.data.access_log import AccessLog, Statistics


def export_chart_json(hit_rate_history: List[float], stats: Dict[str, float], fpath: str) -> str:
    """Export hit-rate history and stats to a JSON file. Returns the saved path."""
    data = {
        'hit_rate_history': list(hit_rate_history),
        'stats': stats
    }
    with open(fpath, 'w', encoding='utf-8') as fh:
        json.dump(data, fh, indent=2)
    return fpath


def export_chart_pdf(hit_rate_history: List[float], fpath: str) -> str:
    """Render the hit-rate history to a PDF using matplotlib and save it."""
    # Agg has no display requirement
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    data = list(hit_rate_history) or [0]
    fig, ax = plt.subplots(figsize=(6, 2))
    ax.plot(range(1, len(data) + 1), data, color='#FFA500', linewidth=2)
    ax.fill_between(range(1, len(data) + 1), data, color='#FFA500', alpha=0.1)
    ax.set_ylim(0, 1)
    ax.set_xlabel('Access')
    ax.set_ylabel('Hit rate')
    ax.grid(False)
    fig.tight_layout()
    try:
        fig.savefig(fpath, format='pdf', dpi=150)
    finally:
        plt.close(fig)
    return fpath


class Exporter:
    @staticmethod
    def export_stats_csv(path: str, stats: Statistics):
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(['accesses', 'hits', 'misses', 'hit_rate', 'miss_rate'])
            writer.writerow([stats.accesses, stats.hits, stats.misses, stats.hit_rate, stats.miss_rate])

    @staticmethod
    def export_log_csv(path: str, log: AccessLog):
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(['step', 'address', 'hit', 'set_index', 'evicted'])
            for o in log:
                writer.writerow([o.step, o.address, int(o.hit), o.set_index, int(o.evicted)])
