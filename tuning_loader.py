#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
tuning_loader.py
Loads logbook parameters from a small CSV and applies them to module globals.

CSV format (no header required):
    key,value
    LAUNCH_RADIUS_M,1000
    IGC_SUFFIX,.igc
Lines may also be written as `key = value`.
Blank lines and lines starting with '#' are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Iterable

logger = logging.getLogger(__name__)

DEFAULT_TUNING_PATH = "config/logbook_params.csv"


def _coerce(val: str) -> Any:
    s = val.strip()
    if s.lower() in ("true", "false"):
        return s.lower() == "true"
    try:
        if "." in s or "e" in s.lower():
            return float(s)
        return int(s)
    except ValueError:
        return s


def load_tuning(csv_path: str | Path = DEFAULT_TUNING_PATH) -> Dict[str, Any]:
    p = Path(csv_path)
    if not p.exists():
        logger.debug("No tuning file at %s; using defaults", p)
        return {}
    params: Dict[str, Any] = {}
    for n, line in enumerate(p.read_text(encoding="utf-8", errors="ignore").splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "," in line:
            key, val = line.split(",", 1)
        elif "=" in line:
            key, val = line.split("=", 1)
        else:
            logger.warning("%s:%d: malformed tuning line skipped: %r", p, n, line)
            continue
        key = key.strip()
        if key:
            params[key] = _coerce(val)
    logger.info("Loaded %d tuning value(s) from %s", len(params), p)
    return params


def override_globals(target: ModuleType | dict, params: Dict[str, Any], allowed: Iterable[str] | None = None) -> Dict[str, Any]:
    """Set allowed keys on a module (or globals() dict). Returns what was applied."""
    if not params:
        return {}
    g = target if isinstance(target, dict) else vars(target)
    allowed = set(allowed) if allowed is not None else None
    applied: Dict[str, Any] = {}
    for k, v in params.items():
        if allowed is not None and k not in allowed:
            continue
        g[k] = v
        applied[k] = v
    return applied


def apply_tuning(params: Dict[str, Any], targets: Dict[ModuleType, Iterable[str]]) -> None:
    """Distribute tuning values across modules; keys nobody claims are reported."""
    claimed = set()
    for module, allowed in targets.items():
        applied = override_globals(module, params, allowed)
        for k, v in applied.items():
            logger.debug("tuning %s.%s = %r", module.__name__, k, v)
        claimed.update(applied)
    for k in sorted(set(params) - claimed):
        logger.warning("Unknown tuning key ignored: %s", k)
