#!/usr/bin/env python
"""
Command-line interface for osmlib

Usage:
    python cli.py get node 3437
    python cli.py bbox 7.40 53.20 7.42 53.21 --output area.osm
    python cli.py parse area.osm --backend expat --geojson area.json
"""

import sys
import argparse
import xml.etree.ElementTree as ET

from loguru import logger

from osmlib import BBoxCallbacks, Database, OSMAPIClient, StreamParser
from osmlib.parser import BACKENDS


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def cmd_get(args):
    """Fetch one object and print or save its XML"""
    setup_logging(args.verbose)

    api = OSMAPIClient(base_uri=args.base_uri, backend=args.backend)
    try:
        obj = api.get_object(args.type, args.id)
        if obj is None:
            logger.error(f"No {args.type} {args.id} in API response")
            return 1

        element = obj.to_xml()
        ET.indent(element, space="  ")
        text = ET.tostring(element, encoding="unicode")
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(text + "\n")
            logger.info(f"✓ Saved {args.type} {args.id}: {args.output}")
        else:
            print(text)
        if obj.is_tagged():
            logger.info(f"  Tags: {obj.tags}")
        return 0

    except Exception as e:
        logger.error(f"Failed to get {args.type} {args.id}: {e}")
        return 1


def cmd_bbox(args):
    """Fetch all objects in a bounding box and save them as OSM XML"""
    setup_logging(args.verbose)

    api = OSMAPIClient(base_uri=args.base_uri, backend=args.backend)
    db = None
    try:
        db = api.get_bbox(args.left, args.bottom, args.right, args.top)
        db.save(args.output)
        logger.info(f"✓ Generated: {args.output}")
        logger.info(f"  Nodes: {len(db.nodes)}  Ways: {len(db.ways)}  Relations: {len(db.relations)}")
        return 0

    except Exception as e:
        logger.error(f"Failed to fetch bbox: {e}")
        return 1

    finally:
        if db is not None:
            db.clear()


def cmd_parse(args):
    """Parse an OSM file into a database, optionally write GeoJSON"""
    setup_logging(args.verbose)

    db = Database()
    try:
        bbox = StreamParser(
            filename=args.input,
            db=db,
            callbacks=BBoxCallbacks(),
            backend=args.backend,
        ).parse()

        logger.info(f"✓ Parsed: {args.input}")
        logger.info(f"  Nodes: {len(db.nodes)}  Ways: {len(db.ways)}  Relations: {len(db.relations)}")
        if bbox is not None:
            logger.info(f"  Bounds: {bbox[0]}, {bbox[1]}, {bbox[2]}, {bbox[3]}")

        if args.geojson:
            collection = db.to_feature_collection()
            with open(args.geojson, "w", encoding="utf-8") as f:
                f.write(collection.model_dump_json(indent=2))
            logger.info(f"✓ GeoJSON: {args.geojson} ({len(collection.features)} features)")
        return 0

    except Exception as e:
        logger.error(f"Failed to parse {args.input}: {e}")
        return 1

    finally:
        db.clear()


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="osmlib CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Print a node:
    python cli.py get node 3437

  Download a region:
    python cli.py bbox 7.40 53.20 7.42 53.21 --output area.osm

  Parse a file and export GeoJSON:
    python cli.py parse area.osm --geojson area.json
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--backend", choices=sorted(BACKENDS), help="XML parser backend")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Get command
    get_parser = subparsers.add_parser("get", help="Fetch one node, way or relation")
    get_parser.add_argument("type", choices=["node", "way", "relation"], help="Object type")
    get_parser.add_argument("id", type=int, help="Object id")
    get_parser.add_argument("--output", "-o", help="Output XML file (stdout if not specified)")
    get_parser.add_argument("--base-uri", help="API base URI")
    get_parser.set_defaults(func=cmd_get)

    # Bbox command
    bbox_parser = subparsers.add_parser("bbox", help="Fetch all objects in a bounding box")
    bbox_parser.add_argument("left", type=float, help="Western longitude")
    bbox_parser.add_argument("bottom", type=float, help="Southern latitude")
    bbox_parser.add_argument("right", type=float, help="Eastern longitude")
    bbox_parser.add_argument("top", type=float, help="Northern latitude")
    bbox_parser.add_argument("--output", "-o", required=True, help="Output OSM file")
    bbox_parser.add_argument("--base-uri", help="API base URI")
    bbox_parser.set_defaults(func=cmd_bbox)

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse an OSM file")
    parse_parser.add_argument("input", help="Input OSM file")
    parse_parser.add_argument("--geojson", help="Write tagged nodes and ways as GeoJSON")
    parse_parser.set_defaults(func=cmd_parse)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
