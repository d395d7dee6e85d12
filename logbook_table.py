#!/usr/bin/env python3
"""
logbook_table.py

Renders a built logbook as an aligned console table, one flight per line,
followed by totals (flights, airtime, track length, altitude gain).
Missing values print as '-'.
"""

from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from flight_record import FlightRecord

HEADERS = [
    ("flightNumber",        6),
    ("date",               12),
    ("wing",               18),
    ("launchName",         22),
    ("location",           16),
    ("durationSeconds",    10),
    ("maxAltitudeMeters",  10),
    ("altitudeGainMeters", 10),
    ("maxDistanceMeters",  10),
    ("trackLengthMeters",  10),
]

TITLES = {
    "flightNumber": "#",
    "durationSeconds": "dur_min",
    "maxAltitudeMeters": "max_alt",
    "altitudeGainMeters": "gain_m",
    "maxDistanceMeters": "dist_km",
    "trackLengthMeters": "track_km",
}


def fmt_cell(col: str, val) -> str:
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return "-"
    try:
        if col == "durationSeconds":
            return f"{float(val) / 60.0:.1f}"
        if col in ("maxDistanceMeters", "trackLengthMeters"):
            return f"{float(val) / 1000.0:.1f}"
        if col in ("maxAltitudeMeters", "altitudeGainMeters"):
            return f"{float(val):.0f}"
    except (TypeError, ValueError):
        return str(val)
    return str(val)


def logbook_frame(records: Sequence[FlightRecord]) -> pd.DataFrame:
    df = pd.DataFrame([r.to_dict() for r in records])
    for col, _ in HEADERS:
        if col not in df.columns:
            df[col] = None
    return df


def format_table(records: Sequence[FlightRecord]) -> str:
    df = logbook_frame(records)
    lines: List[str] = []
    header = ""
    for col, w in HEADERS:
        header += f"{TITLES.get(col, col):<{w}}"
    lines.append(header.rstrip())
    lines.append("-" * len(header.rstrip()))
    for _, r in df.iterrows():
        line = ""
        for col, w in HEADERS:
            cell = fmt_cell(col, r[col])
            # keep one space between columns when text is wider than the column
            if len(cell) >= w:
                cell = cell[: w - 2] + "~"
            line += f"{cell:<{w}}"
        lines.append(line.rstrip())

    airtime_h = pd.to_numeric(df["durationSeconds"], errors="coerce").sum() / 3600.0
    track_km = pd.to_numeric(df["trackLengthMeters"], errors="coerce").sum() / 1000.0
    gain_m = pd.to_numeric(df["altitudeGainMeters"], errors="coerce").sum()
    lines.append("")
    lines.append(
        f"flights: {len(df)}   airtime: {airtime_h:.1f} h   "
        f"track: {track_km:.1f} km   gain: {gain_m:.0f} m"
    )
    return "\n".join(lines)


def print_table(records: Sequence[FlightRecord]) -> None:
    if not records:
        print("[table] Logbook is empty.")
        return
    print(format_table(records))
