#!/usr/bin/env python3
"""
CLI for the fire station facility lookup.

Usage:
    python run_lookup.py "bulli"
    python run_lookup.py --lat -33.8688 --lon 151.2093 --limit 5
    python run_lookup.py "eng" --lat -33.8688 --lon 151.2093
    python run_lookup.py --count --csv data/rfs-facilities.csv
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from facility_lookup.config import Config
from facility_lookup.engine import FacilityLookupEngine


def setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main():
    parser = argparse.ArgumentParser(description="Fire station facility lookup")
    parser.add_argument("query", nargs="?", help="Station name, suburb or brigade")
    parser.add_argument("--lat", type=float, help="Latitude to rank nearest stations from")
    parser.add_argument("--lon", type=float, help="Longitude to rank nearest stations from")
    parser.add_argument("--limit", type=int, default=10, help="Max results")
    parser.add_argument("--csv", help="Path to the facilities CSV")
    parser.add_argument("--url", default="", help="Download the CSV from this URL if missing")
    parser.add_argument("--count", action="store_true", help="Print loaded station counts by state")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    args = parser.parse_args()
    setup_logging(args.verbose)

    if not args.query and args.lat is None and not args.count:
        parser.print_help()
        sys.exit(1)

    config = Config(dataset_url=args.url)
    if args.csv:
        config.dataset_path = Path(args.csv)

    engine = FacilityLookupEngine(config)
    t0 = time.time()
    report = engine.load()
    if not report.available:
        print(f"Facilities dataset not available at {config.dataset_path}", file=sys.stderr)
        sys.exit(2)

    if args.count:
        print(json.dumps({"count": engine.get_count(), "by_state": report.by_state,
                          "skipped": report.skipped}, indent=2))
        return

    t1 = time.time()
    results = engine.lookup(args.query, args.lat, args.lon, args.limit)
    lookup_ms = (time.time() - t1) * 1000
    print(json.dumps([r.to_dict() for r in results], indent=2))
    print(f"{len(results)} results in {lookup_ms:.1f}ms (load {t1 - t0:.1f}s)", file=sys.stderr)


if __name__ == "__main__":
    main()
