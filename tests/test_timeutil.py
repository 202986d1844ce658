from datetime import datetime, timedelta, timezone

from alatmon.timeutil import format_timestamp, to_wib


def test_naive_timestamp_shifted_seven_hours():
    assert to_wib(datetime(2024, 12, 31, 20, 30, 15)) == datetime(2025, 1, 1, 3, 30, 15)


def test_aware_utc_timestamp_shifted_seven_hours():
    ts = datetime(2024, 3, 10, 1, 2, 3, 456789, tzinfo=timezone.utc)
    assert to_wib(ts) == datetime(2024, 3, 10, 8, 2, 3, 456789)
    assert to_wib(ts).tzinfo is None


def test_aware_non_utc_timestamp_normalised_first():
    ts = datetime(2024, 3, 10, 10, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_wib(ts) == datetime(2024, 3, 10, 15, 0)


def test_format_drops_microseconds():
    assert format_timestamp(datetime(2024, 5, 1, 10, 0, 0, 999999)) == "2024-05-01 10:00:00"
