#!/usr/bin/env python
"""
Command-line interface for OSM Router

Usage:
    python cli.py route --map map.osm --start 10 10 --end 90 90 --output route.json
    python cli.py batch --map map.osm --input queries.csv --output ./routes/
    python cli.py info --map map.osm
"""

import os
import re
import sys
import csv
import json
import argparse

from loguru import logger

from osm_router.config import get_config, load_env_overrides, validate_config
from osm_router.map import MapModel, ParseError
from osm_router.routing import GraphError, RouteGraph, RoutePlanner
from osm_router.schemas import RouteSummary, build_route_summary


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def percent(value: str) -> float:
    """argparse type for a map coordinate, bounded by the routing config"""
    routing = get_config().routing
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not routing.min_coordinate_percent <= number <= routing.max_coordinate_percent:
        raise argparse.ArgumentTypeError(
            f"must be between {routing.min_coordinate_percent} and "
            f"{routing.max_coordinate_percent}, got {number}"
        )
    return number


def summary_filename(name: str, index: int, used: set) -> str:
    """
    File name for one batch query

    The name is reduced to lowercase letters, digits, '_' and '-' so it
    cannot leave the output directory. Unnamed rows become route_NNN and a
    repeated name gets the row number appended.
    """
    stem = re.sub(r"[^a-z0-9_-]+", "_", name.strip().lower()).strip("_")
    if not stem:
        stem = f"route_{index:03d}"
    if stem in used:
        logger.warning(f"Duplicate route name {name!r}, saving as {stem}_{index:03d}")
        stem = f"{stem}_{index:03d}"
    used.add(stem)
    return f"{stem}.json"


def save_summary(summary: RouteSummary, output_path: str) -> str:
    """Save a route summary to a JSON file"""
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(summary.model_dump(), f, indent=2, ensure_ascii=False)

    logger.info(f"Saved route to {output_path}")
    return output_path


def load_graph(map_path: str):
    """Load the map and build its route graph; returns (model, graph) or None on failure"""
    try:
        model = MapModel.from_file(map_path)
    except (FileNotFoundError, ParseError) as e:
        logger.error(f"Failed to load map: {e}")
        return None
    return model, RouteGraph(model)


def cmd_route(args):
    """Find the shortest route between two points"""
    setup_logging(args.verbose)

    loaded = load_graph(args.map or get_config().map_file)
    if loaded is None:
        return 1
    model, graph = loaded

    start_x, start_y = args.start
    end_x, end_y = args.end
    logger.info(f"Routing from ({start_x}, {start_y}) to ({end_x}, {end_y})")

    try:
        planner = RoutePlanner(graph, start_x, start_y, end_x, end_y)
    except GraphError as e:
        logger.error(str(e))
        return 1

    result = planner.a_star_search()
    summary = build_route_summary(model, planner, result)

    if args.output:
        save_summary(summary, args.output)

    if args.summary:
        print(json.dumps({
            "status": summary.status,
            "distance_m": summary.distance_m,
            "nodes": summary.node_count,
            "start": summary.start.node_id,
            "end": summary.end.node_id,
        }, indent=2))

    if not result.found:
        logger.error("No route found between the selected points")
        return 2

    logger.info(f"✓ Distance: {planner.get_distance():.1f} m")
    return 0


def cmd_batch(args):
    """Route every query in a CSV file over one map"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    # Read queries from CSV
    queries = []
    with open(args.input, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                queries.append({
                    "name": row.get("name") or "",
                    "start": (percent(row["start_x"]), percent(row["start_y"])),
                    "end": (percent(row["end_x"]), percent(row["end_y"])),
                })
            except (KeyError, argparse.ArgumentTypeError) as e:
                logger.warning(f"Skipping invalid row: {e}")

    if not queries:
        logger.error("No valid queries found in CSV")
        return 1

    loaded = load_graph(args.map or get_config().map_file)
    if loaded is None:
        return 1
    model, graph = loaded

    os.makedirs(args.output, exist_ok=True)
    found = 0
    missing = 0
    used_names = set()

    for i, query in enumerate(queries, 1):
        filename = summary_filename(query["name"], i, used_names)
        name = query["name"] or filename[:-len(".json")]
        logger.info(f"[{i}/{len(queries)}] {name}: {query['start']} -> {query['end']}")

        try:
            planner = RoutePlanner(graph, *query["start"], *query["end"])
        except GraphError as e:
            logger.error(str(e))
            return 1

        result = planner.a_star_search()
        save_summary(build_route_summary(model, planner, result), os.path.join(args.output, filename))

        if result.found:
            logger.info(f"  ✓ {result.distance:.1f} m")
            found += 1
        else:
            logger.warning("  ✗ No route")
            missing += 1

    logger.info(f"\nComplete: {found} routed, {missing} without route")
    return 0 if missing == 0 else 2


def cmd_info(args):
    """Print what a map file contains"""
    setup_logging(args.verbose)

    map_path = args.map or get_config().map_file
    try:
        model = MapModel.from_file(map_path)
    except (FileNotFoundError, ParseError) as e:
        logger.error(f"Failed to load map: {e}")
        return 1

    bounds = model.bounds
    info = {
        "map": map_path,
        "bounds": {
            "min_lat": bounds.min_lat,
            "min_lon": bounds.min_lon,
            "max_lat": bounds.max_lat,
            "max_lon": bounds.max_lon,
        },
        "metric_scale_m": model.metric_scale,
        "nodes": len(model.nodes),
        "ways": len(model.ways),
        "roads": len(model.roads),
        "railways": len(model.railways),
        "buildings": len(model.buildings),
        "leisures": len(model.leisures),
        "waters": len(model.waters),
        "landuses": len(model.landuses),
    }
    print(json.dumps(info, indent=2))
    return 0


def main():
    load_env_overrides(get_config())
    validate_config(get_config())

    parser = argparse.ArgumentParser(
        description="OSM Router CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Route between two points (percent of the map's bounding box):
    python cli.py route --map map.osm --start 10 10 --end 90 90

  Save the route as JSON:
    python cli.py route --map map.osm --start 10 10 --end 90 90 --output route.json

  Route every row of a CSV (columns: name,start_x,start_y,end_x,end_y):
    python cli.py batch --map map.osm --input queries.csv --output ./routes/

  Show map contents:
    python cli.py info --map map.osm
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Route command
    route_parser = subparsers.add_parser("route", help="Find the shortest route between two points")
    route_parser.add_argument("--map", "-f", help="OSM XML map file")
    route_parser.add_argument("--start", nargs=2, type=percent, required=True, metavar=("X", "Y"),
                              help="Start point, percent of map width/height (0-100)")
    route_parser.add_argument("--end", nargs=2, type=percent, required=True, metavar=("X", "Y"),
                              help="End point, percent of map width/height (0-100)")
    route_parser.add_argument("--output", "-o", help="Output JSON file")
    route_parser.add_argument("--summary", "-s", action="store_true", help="Print summary to stdout")
    route_parser.set_defaults(func=cmd_route)

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Route every query in a CSV file")
    batch_parser.add_argument("--map", "-f", help="OSM XML map file")
    batch_parser.add_argument("--input", "-i", required=True,
                              help="Input CSV file (columns: name,start_x,start_y,end_x,end_y)")
    batch_parser.add_argument("--output", "-o", default=get_config().output_dir, help="Output directory")
    batch_parser.set_defaults(func=cmd_batch)

    # Info command
    info_parser = subparsers.add_parser("info", help="Show map contents")
    info_parser.add_argument("--map", "-f", help="OSM XML map file")
    info_parser.set_defaults(func=cmd_info)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
