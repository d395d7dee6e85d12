#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
manual_records.py — hand-maintained logbook spreadsheets (CSV) -> FlightRecords.

Columns are matched by wire name (date, wing, durationSeconds, ...); typing
comes from flight_record.FIELD_TYPES, other columns pass through as text.
Rules per row:
  - empty cells are absent
  - int columns that do not parse are absent (not 0, not an error)
  - a row without a date is rejected; other rows carry on
  - missing launchTime = date (UTC) + row index in ms, so rows sharing a date
    keep their file order after sorting
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from flight_record import ATTR_NAMES, FIELD_TYPES, FlightRecord, MalformedInputError

logger = logging.getLogger(__name__)

# pandas reads these relative to the clock, which would make launch times drift
RELATIVE_DATE_WORDS = {"now", "today"}


def _to_int(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        f = float(raw)
    except ValueError:
        return None
    if not math.isfinite(f):
        return None
    return int(f)


def date_to_epoch_ms(text: str) -> int:
    """Epoch ms for a date (or date-time) string; naive values are read as UTC."""
    if str(text).strip().lower() in RELATIVE_DATE_WORDS:
        raise MalformedInputError(f"Relative date {text!r} is not allowed")
    try:
        ts = pd.Timestamp(text)
    except (ValueError, TypeError) as exc:
        raise MalformedInputError(f"Unparseable date {text!r}") from exc
    if pd.isna(ts):
        raise MalformedInputError(f"Unparseable date {text!r}")
    ts = ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")
    return int(ts.value // 1_000_000)


def cast_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Typed copy of a raw row; absent values are dropped, unknown columns kept as text."""
    out: Dict[str, Any] = {}
    for key, raw in row.items():
        key = str(key).strip()
        kind = FIELD_TYPES.get(key, "str")
        if raw is None or key == "":
            continue
        val = str(raw).strip()
        if val == "":
            continue
        if kind == "int":
            num = _to_int(val)
            if num is None:
                logger.debug("Dropping %s=%r (not an integer)", key, val)
                continue
            out[key] = num
        else:
            out[key] = val
    return out


def normalize_row(row: Mapping[str, Any], row_index: int) -> FlightRecord:
    """
    One spreadsheet row -> FlightRecord.

    Raises MalformedInputError if the row has no date, or the date cannot be
    parsed while launchTime has to be derived from it.
    """
    typed = cast_row(row)
    if "date" not in typed:
        raise MalformedInputError("Row has no 'date'")
    if "launchTime" not in typed:
        typed["launchTime"] = date_to_epoch_ms(typed["date"]) + row_index
    known = {ATTR_NAMES[k]: v for k, v in typed.items() if k in FIELD_TYPES}
    extras = tuple((k, v) for k, v in typed.items() if k not in FIELD_TYPES)
    return FlightRecord(**known, extras=extras)


def read_rows(path: str | Path) -> List[Dict[str, str]]:
    """All cells as raw strings, in file order."""
    path = Path(path)
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, index_col=False)
    except (OSError, ValueError, pd.errors.ParserError) as exc:
        raise MalformedInputError(f"{path.name}: cannot read spreadsheet ({exc})") from exc
    return df.to_dict(orient="records")


def load_manual_records(path: str | Path) -> List[FlightRecord]:
    path = Path(path)
    rows = read_rows(path)
    records: List[FlightRecord] = []
    rejected = 0
    for i, row in enumerate(rows):
        try:
            records.append(normalize_row(row, i))
        except MalformedInputError as exc:
            rejected += 1
            # +2: header line, 1-based
            logger.warning("%s row %d rejected: %s", path.name, i + 2, exc)
    logger.info("Loaded %d manual record(s) from %s (%d rejected)", len(records), path.name, rejected)
    return records
