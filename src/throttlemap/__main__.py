"""Command-line interface.

    throttlemap                      launch the editor
    throttlemap export --points "0,0 512,16000 1023,32767" --method Cosine
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from throttlemap.config import DEFAULT_INTERPOLATION, EXPORT_ARRAY_NAME
from throttlemap.logging_config import setup_logging
from throttlemap.model.curve import ThrottleCurve
from throttlemap.model.export import TableExporter
from throttlemap.model.interpolation import InterpolatorNotSelectedError, all_identifiers
from throttlemap.model.points import Point

logger = logging.getLogger(__name__)


def parse_points(text: str) -> List[Point]:
    """Parse "x,y x,y ..." into Points."""
    points = []
    for token in text.split():
        try:
            x, y = token.split(",")
            points.append(Point(int(x), int(y)))
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"Invalid point {token!r}, expected 'input,output'") from e
    if not points:
        raise argparse.ArgumentTypeError("At least one point is required")
    return points


def run_export(args: argparse.Namespace) -> int:
    curve = ThrottleCurve()
    curve.load(args.points, args.method)
    if args.deadzone is not None:
        curve.move_deadzone(args.deadzone)

    exporter = TableExporter(array_name=args.name)
    try:
        result = exporter.export(curve)
    except InterpolatorNotSelectedError:
        logger.error(f"Unknown interpolation method {args.method!r}, choose from {all_identifiers()}")
        return 1

    for warning in result.warnings:
        logger.warning(warning)

    if args.out:
        Path(args.out).write_text(result.code, encoding="utf-8")
        logger.info(f"Wrote {args.out}")
    else:
        sys.stdout.write(result.code)
    return 0


def run_gui(args: argparse.Namespace) -> int:
    from throttlemap.main import main as gui_main

    return gui_main(level=args.log_level, log_file=args.log_file)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="throttlemap",
        description="Throttle curve editor and firmware table exporter",
    )
    p.add_argument("--log-level", default="INFO", type=lambda s: getattr(logging, s.upper()),
                   help="Logging level (default: INFO)")
    p.add_argument("--log-file", default=None, help="Optional log file")
    sub = p.add_subparsers(dest="cmd")

    sub.add_parser("gui", help="Launch the interactive editor (default)")

    export = sub.add_parser("export", help="Print the firmware lookup table for a point list")
    export.add_argument("--points", required=True, type=parse_points,
                        help='Control points as "x,y x,y ..."')
    export.add_argument("--method", default=DEFAULT_INTERPOLATION,
                        help=f"Interpolation method: {', '.join(all_identifiers())}")
    export.add_argument("--deadzone", type=int, default=None, help="Deadzone position (input units)")
    export.add_argument("--name", default=EXPORT_ARRAY_NAME, help="C array name")
    export.add_argument("--out", default=None, help="Write to file instead of stdout")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.cmd == "export":
        # stdout carries the table, so logs go to stderr
        setup_logging(level=args.log_level, log_file=args.log_file, stream=sys.stderr)
        return run_export(args)
    return run_gui(args)


if __name__ == "__main__":
    sys.exit(main())
