"""Entry point for the cache eviction simulator.

Usage:
    python run.py                              # sequential pattern, default cache
    python run.py --pattern thrashing --associativity 2
    python run.py --addresses 0,16,32,0 --trace
    python run.py --pattern col_major --csv stats.csv --pdf hit_rate.pdf
"""
import argparse
import logging
import sys

from src.core.cache import CacheConfig
from src.core.errors import CacheSimulationError
from src.data.stats_export import Exporter, export_chart_json, export_chart_pdf
from src.simulation.patterns import PATTERNS
from src.simulation.simulation import Simulation


def _parse_addresses(text: str):
    return [int(a.strip(), 0) for a in text.split(',') if a.strip()]


def build_parser() -> argparse.ArgumentParser:
    defaults = CacheConfig()
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("--pattern", default="sequential", choices=sorted(PATTERNS), help="access pattern to simulate")
    ap.add_argument("--addresses", type=_parse_addresses, help="comma separated trace, overrides --pattern")
    ap.add_argument("--array-size", type=int, default=defaults.array_size)
    ap.add_argument("--line-size", type=int, default=defaults.line_size)
    ap.add_argument("--cache-lines", type=int, default=defaults.cache_lines)
    ap.add_argument("--associativity", type=int, default=defaults.associativity)
    ap.add_argument("--passes", type=int, default=1, help="run the trace this many times on a warm cache")
    ap.add_argument("--trace", action="store_true", help="print one line per access")
    ap.add_argument("--csv", help="write aggregate statistics to this CSV file")
    ap.add_argument("--log-csv", help="write the per-access log to this CSV file")
    ap.add_argument("--json", help="write hit-rate history and statistics to this JSON file")
    ap.add_argument("--pdf", help="write the hit-rate chart to this PDF file")
    ap.add_argument("--list-patterns", action="store_true")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if args.list_patterns:
        for key, pattern in PATTERNS.items():
            print(f"{key:12} {pattern.label}: {pattern.description}")
        return 0

    try:
        config = CacheConfig(
            array_size=args.array_size,
            line_size=args.line_size,
            cache_lines=args.cache_lines,
            associativity=args.associativity,
        ).validate()
        sim = Simulation(config, pattern=args.pattern, addresses=args.addresses)
        results = sim.run_simulation(num_passes=args.passes)
    except CacheSimulationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.trace:
        for info in results:
            outcome = 'HIT ' if info['hit'] else 'MISS'
            line = f"{info['step']:5d}  A[{info['address']}]  {outcome}  set {info['set_index']} way {info['way_index']}"
            if info['evicted']:
                line += f"  evicted tag {info['victim_tag']}"
            print(line)

    log = sim.simulator.log
    s = sim.simulator.statistics
    print('Sets x ways:', f"{config.num_sets} x {config.associativity}")
    print('Accesses:', s.accesses)
    print('Hits:', s.hits)
    print('Misses:', s.misses)
    print('Evictions:', log.evictions)
    print('Hit rate:', f"{s.hit_rate * 100:.1f}%")

    if args.csv:
        Exporter.export_stats_csv(args.csv, s)
    if args.log_csv:
        Exporter.export_log_csv(args.log_csv, log)
    if args.json:
        export_chart_json(log.hit_rate_history(), s.as_dict(), args.json)
    if args.pdf:
        export_chart_pdf(log.hit_rate_history(), args.pdf)
    return 0


if __name__ == '__main__':
    sys.exit(main())
