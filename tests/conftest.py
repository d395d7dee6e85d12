from typing import Iterable, Optional, Tuple

import pandas as pd
import pytest

# 2023-07-15 00:00:00 UTC
DAY_MS = 1689379200000


def b_record(secs: int, lat: float, lon: float, alt: int) -> str:
    hh, rem = divmod(secs, 3600)
    mm, ss = divmod(rem, 60)
    lat_h = "N" if lat >= 0 else "S"
    lon_h = "E" if lon >= 0 else "W"
    lat, lon = abs(lat), abs(lon)
    lat_d = int(lat); lat_m = round((lat - lat_d) * 60000)
    lon_d = int(lon); lon_m = round((lon - lon_d) * 60000)
    return (f"B{hh:02d}{mm:02d}{ss:02d}{lat_d:02d}{lat_m:05d}{lat_h}"
            f"{lon_d:03d}{lon_m:05d}{lon_h}A{alt:05d}{alt:05d}")


def igc_text(
    fixes: Iterable[Tuple[int, float, float, int]],
    date: str = "150723",
    glider: Optional[str] = "Ozone Rush 5",
    comment: Optional[str] = None,
) -> str:
    lines = ["AXCT1234567890", f"HFDTE{date}"]
    if glider is not None:
        lines.append(f"HFGTYGLIDERTYPE:{glider}")
    if comment is not None:
        lines.append(f"C{date}101010{date}000102{comment}")
    lines.extend(b_record(*f) for f in fixes)
    return "\n".join(lines) + "\n"


def fixes_frame(rows) -> pd.DataFrame:
    """rows: (timestamp_ms, lat, lon, alt)"""
    return pd.DataFrame(list(rows), columns=["timestamp", "lat", "lon", "alt"])


@pytest.fixture
def write_igc(tmp_path):
    def _write(name, fixes, **kw):
        p = tmp_path / name
        p.write_text(igc_text(fixes, **kw), encoding="utf-8")
        return p
    return _write
