#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
logbook.py — builds the numbered logbook from a source directory.

Stages, in order:
  extract (IGC -> FlightRecord)  ->  match launch sites  ->  merge with
  spreadsheet records  ->  resolve locations  ->  sort by launch time and number

Locations are resolved after the merge so spreadsheet rows that name a launch
but no location get one too; rows that already carry a location keep it.
Each stage takes a list of records and returns a new list; the launch-site and
location stages are skipped when their reference data is absent.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import IO, List, Optional, Sequence, Tuple

from flight_metrics import extract_flight, launch_fix
from flight_record import FlightRecord, LogbookError, MalformedInputError
from igc_utils import parse_igc
from launch_sites import LaunchSite, assign_launch_sites, assign_locations
from manual_records import load_manual_records

logger = logging.getLogger(__name__)

# Source file suffixes (overridable via tuning_loader)
IGC_SUFFIX = ".igc"
CSV_SUFFIX = ".csv"


def _files_with_suffix(src_dir: Path, suffix: str) -> List[Path]:
    suffix = suffix.lower()
    return sorted(p for p in src_dir.iterdir() if p.is_file() and p.name.lower().endswith(suffix))


# ------------------------------------------------------------
# Stages
# ------------------------------------------------------------
def extract_tracks(igc_paths: Sequence[Path]) -> Tuple[List[FlightRecord], List[Tuple[float, float]]]:
    """Parse and summarise every IGC file. Any failure aborts, naming the file."""
    records: List[FlightRecord] = []
    launches: List[Tuple[float, float]] = []
    for p in igc_paths:
        track = parse_igc(p)
        try:
            rec = extract_flight(track, file_name=p.name)
        except LogbookError as exc:
            raise type(exc)(f"{p.name}: {exc}") from exc
        fix0 = launch_fix(track.fixes)
        records.append(rec)
        launches.append((float(fix0["lat"]), float(fix0["lon"])))
        logger.info("[igc] %s: %.0f s, %.0f m track", p.name, rec.duration_seconds, rec.track_length_meters)
    return records, launches


def merge_records(track_records: Sequence[FlightRecord], manual: Sequence[FlightRecord]) -> List[FlightRecord]:
    """Track-log records first, then spreadsheet records; no de-duplication."""
    return list(track_records) + list(manual)


def sequence_records(records: Sequence[FlightRecord]) -> List[FlightRecord]:
    """Stable sort by launch time (missing = 0) and number from 1."""
    ordered = sorted(records, key=lambda r: r.launch_time if r.launch_time is not None else 0)
    return [replace(r, flight_number=i + 1) for i, r in enumerate(ordered)]


# ------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------
def build_logbook(
    src_dir: str | Path,
    sites: Optional[Sequence[LaunchSite]] = None,
    labels: Optional[Sequence[str]] = None,
) -> List[FlightRecord]:
    src_dir = Path(src_dir)
    if not src_dir.is_dir():
        raise FileNotFoundError(f"Source directory not found: {src_dir}")

    igc_paths = _files_with_suffix(src_dir, IGC_SUFFIX)
    csv_paths = _files_with_suffix(src_dir, CSV_SUFFIX)
    logger.info("Found %d IGC and %d spreadsheet file(s) in %s", len(igc_paths), len(csv_paths), src_dir)

    tracks, launches = extract_tracks(igc_paths)
    tracks = assign_launch_sites(tracks, launches, sites)

    manual: List[FlightRecord] = []
    for p in csv_paths:
        manual.extend(load_manual_records(p))

    merged = merge_records(tracks, manual)
    merged = assign_locations(merged, labels)
    logbook = sequence_records(merged)
    logger.info("Logbook has %d flight(s)", len(logbook))
    return logbook


# ------------------------------------------------------------
# JSON document
# ------------------------------------------------------------
def write_logbook(records: Sequence[FlightRecord], out: Optional[IO[str]] = None, indent: Optional[int] = None) -> None:
    out = out if out is not None else sys.stdout
    json.dump([r.to_dict() for r in records], out, indent=indent, ensure_ascii=False)
    out.write("\n")


def read_logbook(path: str | Path) -> List[FlightRecord]:
    """Load a document written by write_logbook()."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise MalformedInputError(f"{path.name}: invalid JSON ({exc})") from exc
    if not isinstance(data, list) or not all(isinstance(x, dict) for x in data):
        raise MalformedInputError(f"{path.name}: expected a JSON array of flight objects")
    return [FlightRecord.from_dict(x) for x in data]
