#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
launch_sites.py — reference data (launch sites, location labels) and the two
enrichment stages that use it.

  match_launch(lat, lon, sites)      -> (site, d_m) of the nearest site inside
                                        LAUNCH_RADIUS_M, else None
  resolve_location(name, labels)     -> first label contained in the launch name
  assign_launch_sites(records, ...)  -> new records with launch_name set
  assign_locations(records, labels)  -> new records with location set

Both stages are no-ops when their reference data is missing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from flight_record import FlightRecord, MalformedInputError
from igc_utils import haversine_m

logger = logging.getLogger(__name__)

# Matching threshold (overridable via tuning_loader)
LAUNCH_RADIUS_M = 1000.0

_LAT_NAMES = ("lat", "latitude")
_LON_NAMES = ("lon", "lng", "long", "longitude")


@dataclass(frozen=True)
class LaunchSite:
    name: str
    lat: float
    lon: float


# ------------------------------------------------------------
# Loaders
# ------------------------------------------------------------
def _pick(cols: dict, names) -> Optional[str]:
    for n in names:
        if n in cols:
            return cols[n]
    return None


def _sites_from_frame(df: pd.DataFrame, source: str) -> List[LaunchSite]:
    cols = {str(c).strip().lower(): c for c in df.columns}
    name_c = cols.get("name")
    lat_c = _pick(cols, _LAT_NAMES)
    lon_c = _pick(cols, _LON_NAMES)
    if not (name_c and lat_c and lon_c):
        raise MalformedInputError(
            f"{source}: launch sites need name/lat/lon columns, got {list(df.columns)}"
        )
    lat = pd.to_numeric(df[lat_c], errors="coerce")
    lon = pd.to_numeric(df[lon_c], errors="coerce")
    bad = lat.isna() | lon.isna() | df[name_c].isna()
    if bad.any():
        rows = [int(i) + 1 for i in np.flatnonzero(bad.to_numpy())]
        raise MalformedInputError(f"{source}: bad launch site row(s) {rows}")
    return [
        LaunchSite(name=str(n).strip(), lat=float(a), lon=float(o))
        for n, a, o in zip(df[name_c], lat, lon)
    ]


def load_launch_sites(path: str | Path) -> List[LaunchSite]:
    """Load sites from .csv or .json (array of objects). Bad data is fatal."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Launch sites file not found: {path}")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            data = pd.read_csv(path)
    except (OSError, ValueError, pd.errors.ParserError) as exc:
        raise MalformedInputError(f"{path.name}: cannot read launch sites ({exc})") from exc
    if isinstance(data, pd.DataFrame):
        df = data
    elif isinstance(data, list) and all(isinstance(x, dict) for x in data):
        df = pd.DataFrame(data) if data else pd.DataFrame(columns=["name", "lat", "lon"])
    else:
        raise MalformedInputError(f"{path.name}: expected a JSON array of site objects")
    sites = _sites_from_frame(df, path.name)
    logger.info("Loaded %d launch site(s) from %s", len(sites), path)
    return sites


def load_location_labels(path: str | Path) -> List[str]:
    """Labels from a JSON array of strings, or one label per line."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Locations file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedInputError(f"{path.name}: cannot read locations ({exc})") from exc
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise MalformedInputError(f"{path.name}: invalid JSON ({exc})") from exc
        if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
            raise MalformedInputError(f"{path.name}: expected a JSON array of strings")
        labels = [x for x in data if x]
    else:
        labels = [
            ln.strip() for ln in text.splitlines()
            if ln.strip() and not ln.strip().startswith("#")
        ]
    logger.info("Loaded %d location label(s) from %s", len(labels), path)
    return labels


# ------------------------------------------------------------
# Matching
# ------------------------------------------------------------
def match_launch(
    lat: float,
    lon: float,
    sites: Sequence[LaunchSite],
    radius_m: Optional[float] = None,
) -> Optional[Tuple[LaunchSite, float]]:
    if not sites:
        return None
    radius = LAUNCH_RADIUS_M if radius_m is None else radius_m
    site_lat = np.array([s.lat for s in sites], dtype=float)
    site_lon = np.array([s.lon for s in sites], dtype=float)
    d = haversine_m(lat, lon, site_lat, site_lon)
    i = int(np.argmin(d))  # first minimum wins on ties
    d_min = float(d[i])
    if d_min < radius:
        return sites[i], d_min
    return None


def resolve_location(launch_name: Optional[str], labels: Sequence[str]) -> Optional[str]:
    if not launch_name:
        return None
    for label in labels:
        if label in launch_name:
            return label
    return None


def assign_launch_sites(
    records: Sequence[FlightRecord],
    launches: Sequence[Tuple[float, float]],
    sites: Optional[Sequence[LaunchSite]],
) -> List[FlightRecord]:
    """Pair records with their (lat, lon) launch points and set launch_name."""
    if not sites:
        return list(records)
    if len(records) != len(launches):
        raise ValueError("records and launches must have the same length")
    out = []
    for rec, (lat, lon) in zip(records, launches):
        hit = match_launch(lat, lon, sites)
        if hit is None:
            logger.debug("%s: no launch site within %.0f m", rec.file_name, LAUNCH_RADIUS_M)
            out.append(rec)
            continue
        site, d_m = hit
        logger.debug("%s: launch %s (%.0f m)", rec.file_name, site.name, d_m)
        out.append(replace(rec, launch_name=site.name))
    return out


def assign_locations(records: Sequence[FlightRecord], labels: Optional[Sequence[str]]) -> List[FlightRecord]:
    if not labels:
        return list(records)
    out = []
    for rec in records:
        if rec.location is not None:
            out.append(rec)
            continue
        label = resolve_location(rec.launch_name, labels)
        out.append(rec if label is None else replace(rec, location=label))
    return out
