from flight_record import FlightRecord
from logbook_table import fmt_cell, format_table


def test_fmt_cell_units():
    assert fmt_cell("durationSeconds", 5400) == "90.0"
    assert fmt_cell("trackLengthMeters", 12500.0) == "12.5"
    assert fmt_cell("maxAltitudeMeters", 1999.6) == "2000"
    assert fmt_cell("wing", None) == "-"
    assert fmt_cell("location", float("nan")) == "-"


def test_format_table_rows_and_totals():
    recs = [
        FlightRecord(date="2023-07-15", wing="Ozone Rush 5", duration_seconds=3600.0,
                     track_length_meters=20000.0, altitude_gain_meters=800.0, flight_number=1),
        FlightRecord(date="2023-07-16", duration_seconds=1800.0, flight_number=2),
    ]
    lines = format_table(recs).splitlines()
    assert lines[0].startswith("#")
    assert lines[2].split()[:3] == ["1", "2023-07-15", "Ozone"]
    assert lines[3].split()[:3] == ["2", "2023-07-16", "-"]
    assert lines[-1] == "flights: 2   airtime: 1.5 h   track: 20.0 km   gain: 800 m"
