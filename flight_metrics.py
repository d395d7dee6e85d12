#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
flight_metrics.py — per-flight summary statistics from an IGC fixes table.

Metrics (fix 0 is the launch):
  duration_s       last − first timestamp, seconds (needs >= 2 fixes)
  max_distance_m   furthest great-circle distance from launch
  max_altitude_m   highest altitude
  track_length_m   sum of leg lengths between consecutive fixes
  altitude_gain_m  sum of positive altitude deltas between consecutive fixes
"""

from __future__ import annotations

from typing import Mapping, Optional

import numpy as np
import pandas as pd

from flight_record import FlightRecord, InvalidInputError
from igc_utils import IgcTrack, haversine_m


def distance(a: Mapping, b: Mapping) -> float:
    """Surface distance in meters between two points with 'lat'/'lon' keys."""
    return float(haversine_m(a["lat"], a["lon"], b["lat"], b["lon"]))


def _legs_m(fixes: pd.DataFrame) -> np.ndarray:
    lat = fixes["lat"].to_numpy(dtype=float)
    lon = fixes["lon"].to_numpy(dtype=float)
    if len(lat) < 2:
        return np.zeros(0)
    return haversine_m(lat[:-1], lon[:-1], lat[1:], lon[1:])


def duration_s(fixes: pd.DataFrame) -> float:
    if len(fixes) < 2:
        raise InvalidInputError(f"Need at least 2 fixes for a duration, got {len(fixes)}")
    ts = fixes["timestamp"]
    return (int(ts.iloc[-1]) - int(ts.iloc[0])) / 1000.0


def max_distance_m(fixes: pd.DataFrame) -> float:
    if fixes.empty:
        return 0.0
    lat = fixes["lat"].to_numpy(dtype=float)
    lon = fixes["lon"].to_numpy(dtype=float)
    return float(np.max(haversine_m(lat[0], lon[0], lat, lon)))


def max_altitude_m(fixes: pd.DataFrame) -> float:
    return float(fixes["alt"].max())


def track_length_m(fixes: pd.DataFrame) -> float:
    return float(np.sum(_legs_m(fixes)))


def altitude_gain_m(fixes: pd.DataFrame) -> float:
    dh = fixes["alt"].astype(float).diff().fillna(0.0)
    return float(dh.clip(lower=0.0).sum())


def launch_fix(fixes: pd.DataFrame) -> pd.Series:
    return fixes.iloc[0]


def extract_flight(track: IgcTrack, file_name: Optional[str] = None) -> FlightRecord:
    """
    Build a FlightRecord from a parsed IGC track.

    Raises InvalidInputError if the track has fewer than 2 fixes.
    """
    fixes = track.fixes
    if fixes.empty:
        raise InvalidInputError("Track has no fixes")

    return FlightRecord(
        date=track.date,
        wing=track.glider_type or None,
        duration_seconds=duration_s(fixes),
        max_distance_meters=max_distance_m(fixes),
        max_altitude_meters=max_altitude_m(fixes),
        track_length_meters=track_length_m(fixes),
        altitude_gain_meters=altitude_gain_m(fixes),
        comment=track.task_comment or None,
        file_name=file_name,
        launch_time=int(fixes["timestamp"].iloc[0]),
    )
