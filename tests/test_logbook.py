import json

import pytest

from flight_record import FlightRecord, IgcParseError, InvalidInputError
from launch_sites import LaunchSite
from logbook import build_logbook, merge_records, read_logbook, sequence_records, write_logbook

from conftest import DAY_MS

NINE = 9 * 3600
TEN_THIRTY = 10 * 3600 + 30 * 60


def _climb(start, lat=45.8114, lon=6.2297):
    return [
        (start,       lat,         lon, 1250),
        (start + 60,  lat + 0.005, lon, 1400),
        (start + 120, lat + 0.010, lon, 1300),
    ]


def test_sequence_is_stable_and_numbered():
    recs = [FlightRecord(date="d", launch_time=t, comment=str(i)) for i, t in enumerate([300, 100, 100, 200])]
    out = sequence_records(recs)
    assert [r.comment for r in out] == ["1", "2", "3", "0"]
    assert [r.flight_number for r in out] == [1, 2, 3, 4]
    by_index = {r.comment: r.flight_number for r in out}
    assert [by_index[str(i)] for i in range(4)] == [4, 1, 2, 3]


def test_missing_launch_time_sorts_first():
    out = sequence_records([FlightRecord(date="b", launch_time=5), FlightRecord(date="a")])
    assert [r.date for r in out] == ["a", "b"]


def test_merge_keeps_order_and_duplicates():
    a = FlightRecord(date="a", launch_time=1)
    b = FlightRecord(date="b", launch_time=1)
    assert merge_records([a], [b, a]) == [a, b, a]


def test_output_round_trip_keeps_numbers(tmp_path):
    recs = sequence_records([FlightRecord(date="d", launch_time=t) for t in [300, 100, 100, 200]])
    p = tmp_path / "logbook.json"
    with p.open("w") as f:
        write_logbook(recs, f)
    again = sequence_records(merge_records(read_logbook(p), []))
    assert [r.flight_number for r in again] == [r.flight_number for r in recs]
    assert again == recs


def test_output_omits_absent_fields(tmp_path):
    p = tmp_path / "logbook.json"
    with p.open("w") as f:
        write_logbook(sequence_records([FlightRecord(date="2023-01-01", launch_time=0)]), f)
    assert json.loads(p.read_text()) == [{"flightNumber": 1, "date": "2023-01-01", "launchTime": 0}]


def test_build_end_to_end(tmp_path, write_igc):
    write_igc("b_1030.igc", _climb(TEN_THIRTY))
    write_igc("a_0900.igc", _climb(NINE), comment="Triangle 30k")
    (tmp_path / "manual.csv").write_text(
        "date,wing,durationSeconds,launchName,launchTime\n"
        "2023-07-15,Skywalk Chili,1800,Annecy Planfait,\n"
        f"2023-07-15,Skywalk Chili,600,,{DAY_MS + NINE * 1000}\n"
    )
    sites = [LaunchSite("Annecy Forclaz", 45.8114, 6.2297)]
    book = build_logbook(tmp_path, sites=sites, labels=["Chamonix", "Annecy"])

    assert [r.flight_number for r in book] == [1, 2, 3, 4]
    # manual row without time -> 2023-07-15 00:00:00.000, before the 09:00 flight
    assert book[0].file_name is None and book[0].launch_time == DAY_MS
    assert book[0].location == "Annecy"
    # equal launch times: track log before spreadsheet row
    assert book[1].file_name == "a_0900.igc" and book[1].launch_time == DAY_MS + NINE * 1000
    assert book[2].file_name is None and book[2].launch_time == DAY_MS + NINE * 1000
    assert book[3].file_name == "b_1030.igc"

    first = book[1]
    assert first.launch_name == "Annecy Forclaz"
    assert first.location == "Annecy"
    assert first.comment == "Triangle 30k"
    assert first.wing == "Ozone Rush 5"
    assert first.duration_seconds == 120.0
    assert first.altitude_gain_meters == 150.0
    assert first.max_altitude_meters == 1400.0
    assert book[3].comment is None


def test_build_without_reference_data(tmp_path, write_igc):
    write_igc("a.igc", _climb(NINE))
    book = build_logbook(tmp_path)
    assert len(book) == 1
    assert book[0].launch_name is None and book[0].location is None


def test_bad_track_log_aborts(tmp_path, write_igc):
    write_igc("good.igc", _climb(NINE))
    (tmp_path / "bad.igc").write_text("AXCT\nHFDTE150723\n")
    with pytest.raises(IgcParseError, match="bad.igc"):
        build_logbook(tmp_path)


def test_single_fix_track_aborts(tmp_path, write_igc):
    write_igc("short.igc", _climb(NINE)[:1])
    with pytest.raises(InvalidInputError, match="short.igc"):
        build_logbook(tmp_path)


def test_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_logbook(tmp_path / "nope")
