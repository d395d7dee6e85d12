#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
igc_utils.py — IGC track-log parsing and geodesic helpers used by the logbook.

Provides:
  - parse_igc(path) -> IgcTrack(date, glider_type, task_comment, fixes)
  - parse_igc_text(text) -> same, from already-read content
  - haversine_m(lat1, lon1, lat2, lon2) -> meters (scalars or numpy arrays)

The fixes DataFrame has columns: timestamp (int ms since epoch, UTC),
lat (deg), lon (deg), alt (m).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from flight_record import IgcParseError

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371000.0
FIX_COLUMNS = ["timestamp", "lat", "lon", "alt"]

_DAY_MS = 24 * 3600 * 1000


@dataclass(frozen=True)
class IgcTrack:
    date: str
    glider_type: Optional[str]
    task_comment: Optional[str]
    fixes: pd.DataFrame


# ------------------------------------------------------------
# Geodesy
# ------------------------------------------------------------
def haversine_m(lat1, lon1, lat2, lon2):
    """Great-circle distance in meters. Accepts scalars or numpy arrays."""
    p1 = np.radians(lat1); p2 = np.radians(lat2)
    dphi = np.radians(np.subtract(lat2, lat1))
    dlmb = np.radians(np.subtract(lon2, lon1))
    a = np.sin(dphi / 2.0) ** 2 + np.cos(p1) * np.cos(p2) * np.sin(dlmb / 2.0) ** 2
    # float rounding can push `a` just above 1 near antipodes
    return 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


# ------------------------------------------------------------
# Header records
# ------------------------------------------------------------
def _header_value(line: str) -> str:
    # HFGTYGLIDERTYPE:Ozone Rush 5  ->  "Ozone Rush 5"
    body = line[5:]
    if ":" in body:
        body = body.split(":", 1)[1]
    return body.strip()


def _parse_hfdte(line: str) -> date:
    # HFDTE150723  or  HFDTEDATE:150723,01
    body = _header_value(line) if ":" in line else line[5:].strip()
    digits = body.split(",", 1)[0].strip()
    if len(digits) < 6 or not digits[:6].isdigit():
        raise IgcParseError(f"Bad HFDTE header: {line.strip()!r}")
    dd, mm, yy = int(digits[0:2]), int(digits[2:4]), int(digits[4:6])
    year = 2000 + yy if yy < 80 else 1900 + yy
    try:
        return date(year, mm, dd)
    except ValueError as exc:
        raise IgcParseError(f"Bad HFDTE header: {line.strip()!r}") from exc


def _parse_task_comment(line: str) -> str:
    # First C record: C DDMMYY HHMMSS DDMMYY NNNN TT <text>
    return line[25:].strip() if len(line) > 25 else ""


# ------------------------------------------------------------
# B records
# ------------------------------------------------------------
def _parse_b_record(line: str):
    """Returns (seconds_of_day, lat, lon, alt) or None for a short/garbled line."""
    if len(line) < 35:
        return None
    try:
        hh = int(line[1:3]); mm = int(line[3:5]); ss = int(line[5:7])
        lat_deg = int(line[7:9]); lat_min = int(line[9:11]); lat_thou = int(line[11:14]); lat_hem = line[14]
        lon_deg = int(line[15:18]); lon_min = int(line[18:20]); lon_thou = int(line[20:23]); lon_hem = line[23]
    except ValueError:
        return None

    try:
        p_alt = int(line[25:30])
    except ValueError:
        p_alt = 0
    try:
        g_alt = int(line[30:35])
    except ValueError:
        g_alt = 0
    alt = float(g_alt if g_alt != 0 else p_alt)

    lat = lat_deg + (lat_min + lat_thou / 1000.0) / 60.0
    if lat_hem.upper() == "S":
        lat = -lat
    lon = lon_deg + (lon_min + lon_thou / 1000.0) / 60.0
    if lon_hem.upper() in ("W", "O"):  # 'O' sometimes used for West
        lon = -lon

    return hh * 3600 + mm * 60 + ss, lat, lon, alt


# ------------------------------------------------------------
# Core parsers
# ------------------------------------------------------------
def parse_igc_text(text: str) -> IgcTrack:
    """
    Parse IGC content into header fields and a fixes DataFrame.

    Raises IgcParseError when the date header is missing or bad, or when no
    B record can be read.
    """
    flight_date: Optional[date] = None
    glider_type: Optional[str] = None
    task_comment: Optional[str] = None
    secs, lats, lons, alts = [], [], [], []

    for raw in text.splitlines():
        line = raw.rstrip("\r\n")
        if not line:
            continue
        tag = line[0].upper()
        if tag == "H":
            code = line[2:5].upper()
            if code == "DTE":
                flight_date = _parse_hfdte(line)
            elif code == "GTY" and glider_type is None:
                glider_type = _header_value(line) or None
        elif tag == "C" and task_comment is None:
            task_comment = _parse_task_comment(line)
        elif tag == "B":
            fix = _parse_b_record(line)
            if fix is None:
                logger.debug("Skipping unreadable B record: %r", line)
                continue
            s, lat, lon, alt = fix
            secs.append(s); lats.append(lat); lons.append(lon); alts.append(alt)

    if flight_date is None:
        raise IgcParseError("Missing HFDTE (flight date) header")
    if not secs:
        raise IgcParseError("No B records (fixes) found")

    midnight = datetime(flight_date.year, flight_date.month, flight_date.day, tzinfo=timezone.utc)
    base_ms = int(midnight.timestamp() * 1000)

    # Clock rolls past 00:00 UTC on long flights; shift later fixes by a day.
    sec_arr = np.asarray(secs, dtype=np.int64) * 1000
    rollover = np.concatenate([[0], np.cumsum(np.diff(sec_arr) < -_DAY_MS // 2)])
    timestamps = base_ms + sec_arr + rollover * _DAY_MS

    fixes = pd.DataFrame({
        "timestamp": timestamps.astype(np.int64),
        "lat": lats,
        "lon": lons,
        "alt": alts,
    })[FIX_COLUMNS]

    return IgcTrack(
        date=flight_date.isoformat(),
        glider_type=glider_type,
        task_comment=task_comment,
        fixes=fixes,
    )


def parse_igc(path: str | Path) -> IgcTrack:
    """Read and parse an IGC file; parse errors are re-raised naming the file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8", errors="ignore")
    except OSError as exc:
        raise IgcParseError(f"{path.name}: cannot read file ({exc})") from exc
    try:
        track = parse_igc_text(text)
    except IgcParseError as exc:
        raise IgcParseError(f"{path.name}: {exc}") from exc
    logger.debug("Parsed %s: %d fixes on %s", path.name, len(track.fixes), track.date)
    return track
