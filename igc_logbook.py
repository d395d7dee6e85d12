#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
igc_logbook.py — converts a folder of IGC files (plus logbook spreadsheets)
into a JSON logbook.

Usage:
  igc-logbook build  SRC_DIR [--sites sites.csv] [--locations locations.txt] [--out logbook.json]
  igc-logbook table  logbook.json

`build` writes the JSON array to stdout unless --out is given. Diagnostics go
to stderr (or --log-file). Exit codes: 0 ok, 1 input error, 2 usage.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import launch_sites
import logbook
from flight_record import LogbookError
from launch_sites import load_launch_sites, load_location_labels
from logbook import build_logbook, read_logbook, write_logbook
from logbook_table import print_table
from tuning_loader import DEFAULT_TUNING_PATH, apply_tuning, load_tuning

__version__ = "1.0"

logger = logging.getLogger("igc_logbook")

TUNABLE = {
    launch_sites: {"LAUNCH_RADIUS_M"},
    logbook: {"IGC_SUFFIX", "CSV_SUFFIX"},
}


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    fmt = "%(asctime)s %(levelname)s %(message)s"
    root = logging.getLogger()
    root.handlers.clear()
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(filename=log_file, level=level, format=fmt)
    else:
        logging.basicConfig(stream=sys.stderr, level=level, format=fmt)


def _cmd_build(args: argparse.Namespace) -> int:
    sites = load_launch_sites(args.sites) if args.sites else None
    labels = load_location_labels(args.locations) if args.locations else None
    records = build_logbook(args.src_dir, sites=sites, labels=labels)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as f:
            write_logbook(records, f, indent=args.indent)
        logger.info("[OK] wrote %d flight(s) → %s", len(records), out_path)
    else:
        write_logbook(records, sys.stdout, indent=args.indent)
    return 0


def _cmd_table(args: argparse.Namespace) -> int:
    records = read_logbook(args.logbook)
    print_table(records)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="igc-logbook", description="Converts igc files to a JSON logbook")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ap.add_argument("--log-file", default=None, help="Write log to this file instead of stderr")
    ap.add_argument("--tuning", default=DEFAULT_TUNING_PATH,
                    help=f"key,value parameter overrides (default: {DEFAULT_TUNING_PATH})")
    sub = ap.add_subparsers(dest="command", required=True)

    b = sub.add_parser("build", help="Builds a logbook from source files")
    b.add_argument("src_dir", help="Directory to find igc (and csv logbook) files in")
    b.add_argument("--sites", default=None, help="Launch sites file (.csv or .json: name, lat, lon)")
    b.add_argument("--locations", default=None, help="Location labels file (.json array or one per line)")
    b.add_argument("--out", default=None, help="Write JSON here instead of stdout")
    b.add_argument("--indent", type=int, default=None, help="Pretty-print JSON with this indent")
    b.set_defaults(func=_cmd_build)

    t = sub.add_parser("table", help="Prints a built logbook as a console table")
    t.add_argument("logbook", help="JSON logbook written by `build`")
    t.set_defaults(func=_cmd_table)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.log_file)
    apply_tuning(load_tuning(args.tuning), TUNABLE)
    try:
        return args.func(args)
    except (LogbookError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
