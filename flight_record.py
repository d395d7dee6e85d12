#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
flight_record.py — the logbook row type, its wire field table, and the errors
raised while building a logbook.

FlightRecord is immutable; pipeline stages return new records with
dataclasses.replace(). to_dict() gives the JSON object (camelCase keys,
absent fields omitted).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple


# ------------------------------------------------------------
# Errors
# ------------------------------------------------------------
class LogbookError(Exception):
    """Base class for logbook build failures."""


class MalformedInputError(LogbookError, ValueError):
    """A file or row cannot be used at all (unreadable, corrupt, missing date)."""


class IgcParseError(MalformedInputError):
    """IGC content without a usable date header or fixes."""


class InvalidInputError(LogbookError, ValueError):
    """Input is readable but a value cannot be derived from it (e.g. < 2 fixes)."""


# ------------------------------------------------------------
# Wire fields
# ------------------------------------------------------------
# attribute name -> JSON key, in output order
WIRE_NAMES: Dict[str, str] = {
    "flight_number":        "flightNumber",
    "date":                 "date",
    "wing":                 "wing",
    "duration_seconds":     "durationSeconds",
    "max_distance_meters":  "maxDistanceMeters",
    "max_altitude_meters":  "maxAltitudeMeters",
    "track_length_meters":  "trackLengthMeters",
    "altitude_gain_meters": "altitudeGainMeters",
    "comment":              "comment",
    "file_name":            "fileName",
    "launch_name":          "launchName",
    "location":             "location",
    "launch_time":          "launchTime",
}
ATTR_NAMES: Dict[str, str] = {v: k for k, v in WIRE_NAMES.items()}

# How tabular (spreadsheet) values are typed, keyed by wire name.
FIELD_TYPES: Dict[str, str] = {
    "date":               "str",
    "wing":               "str",
    "durationSeconds":    "int",
    "maxDistanceMeters":  "int",
    "maxAltitudeMeters":  "int",
    "trackLengthMeters":  "int",
    "altitudeGainMeters": "int",
    "comment":            "str",
    "fileName":           "str",
    "launchName":         "str",
    "location":           "str",
    "launchTime":         "int",
    "flightNumber":       "int",
}


@dataclass(frozen=True)
class FlightRecord:
    date: str
    wing: Optional[str] = None
    duration_seconds: Optional[float] = None
    max_distance_meters: Optional[float] = None
    max_altitude_meters: Optional[float] = None
    track_length_meters: Optional[float] = None
    altitude_gain_meters: Optional[float] = None
    comment: Optional[str] = None
    file_name: Optional[str] = None
    launch_name: Optional[str] = None
    location: Optional[str] = None
    launch_time: Optional[int] = None
    flight_number: Optional[int] = None
    # spreadsheet columns outside FIELD_TYPES, passed through as (key, value)
    extras: Tuple[Tuple[str, Any], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """JSON object for this record; None-valued fields are left out."""
        out: Dict[str, Any] = {}
        for attr, key in WIRE_NAMES.items():
            val = getattr(self, attr)
            if val is not None:
                out[key] = val
        for key, val in self.extras:
            if key not in out and key not in ATTR_NAMES:
                out[key] = val
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlightRecord":
        """Inverse of to_dict(). Unknown keys become extras; 'date' is required."""
        if data.get("date") in (None, ""):
            raise MalformedInputError("Record has no 'date'")
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        extras = []
        for key, val in data.items():
            attr = ATTR_NAMES.get(key)
            if attr in known:
                if val is not None:
                    kwargs[attr] = val
            elif val is not None:
                extras.append((key, val))
        return cls(**kwargs, extras=tuple(extras))
