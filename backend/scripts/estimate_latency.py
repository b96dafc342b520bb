from __future__ import annotations

import argparse
import asyncio
import json
import sys

from fiberlatency import configure_logging
from fiberlatency.pipeline import PipelineError, run


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Estimate theoretical fiber-optic latency between two places."
    )
    parser.add_argument("origin", help="Origin address or city")
    parser.add_argument("destination", help="Destination address or city")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    args = parser.parse_args(argv)

    configure_logging()

    try:
        result = asyncio.run(run(args.origin, args.destination))
    except PipelineError as e:
        print(e.message, file=sys.stderr)
        return 1

    shown = result.estimate.formatted()
    if args.json:
        print(json.dumps(shown))
        return 0

    print(
        "The distance between the origin and destination is "
        f"{shown['distance_km']} km ({shown['distance_miles']} miles)."
    )
    print(
        "The theoretical one-way latency based on the speed of light in fiber optic cables is "
        f"{shown['one_way_ms']} ms."
    )
    print(
        "The theoretical round-trip latency based on the speed of light in fiber optic cables is "
        f"{shown['round_trip_ms']} ms."
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
