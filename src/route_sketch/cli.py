# route_sketch/cli.py
"""Command-line entry: fit a figure near a coordinate and print the route as GeoJSON."""

import argparse
import json
import sys
from pathlib import Path

from route_sketch.app.build import build
from route_sketch.domain.fitting.fitting_assembly import display_steps
from route_sketch.domain.fitting.fitting_shapes import shape_names
from route_sketch.io import geojson
from route_sketch.io.recorder import AsyncSink, JsonlSink, MemorySink


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="route-sketch", description=__doc__)
    p.add_argument("--config", type=Path, help="JSON config file (AppModel)")
    p.add_argument("--shape", choices=shape_names())
    p.add_argument("--lat", type=float, help="origin latitude (overrides geolocation)")
    p.add_argument("--lon", type=float, help="origin longitude")
    dist = p.add_mutually_exclusive_group(required=True)
    dist.add_argument("--miles", type=float)
    dist.add_argument("--meters", type=float)
    p.add_argument("--effort", choices=["lite", "normal", "max"])
    p.add_argument("--strategy", choices=["route", "match"])
    p.add_argument("--offline", action="store_true", help="straight-line router, no grid lookup")
    p.add_argument("--out", type=Path, help="write GeoJSON here instead of stdout")
    p.add_argument("--events", type=Path, help="append analytics events as JSONL")
    p.add_argument("--quiet", action="store_true", help="no structured logs")
    args = p.parse_args(argv)
    if (args.lat is None) != (args.lon is None):
        p.error("--lat and --lon must be given together")
    return args


def load_config(args: argparse.Namespace) -> dict:
    cfg = json.loads(args.config.read_text()) if args.config else {}
    if args.shape:
        cfg["shape"] = args.shape
    search = cfg.setdefault("search", {})
    if args.effort:
        search["effort"] = args.effort
    if args.strategy:
        search["strategy"] = args.strategy
    if args.offline:
        cfg["router"] = {"kind": "straight"}
        cfg["bearing"] = {"kind": "fixed"}
    if args.lat is not None and args.lon is not None:
        cfg["geolocation"] = {"kind": "fixed", "lat": args.lat, "lon": args.lon}
    return cfg


def main(argv=None) -> int:
    args = parse_args(argv)
    events = args.events.open("a") if args.events else None
    # stop() drains the queue before the file closes
    sink = AsyncSink(JsonlSink(events)) if events else MemorySink()
    try:
        app = build(load_config(args), use_logging=not args.quiet, sinks=[sink])
        session = app.session
        route = (
            session.build_miles(args.miles) if args.miles is not None else session.build(args.meters)
        )
        print(session.status, file=sys.stderr)
        if route is None:
            return 1

        for line in display_steps(route):
            print(line, file=sys.stderr)
        text = geojson.dumps(route, indent=2)
        if args.out:
            args.out.write_text(text)
        else:
            print(text)
        return 0
    finally:
        if events:
            sink.stop()
            events.close()


if __name__ == "__main__":
    sys.exit(main())
