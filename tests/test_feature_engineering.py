import pandas as pd
import pytest
from datetime import datetime, timezone

from sleep_nudge.core.data_processing.csv_ingestion import parse_csv
from sleep_nudge.core.data_processing.feature_engineering import (
    HISTORY_COLUMNS,
    build_history_table,
    derive_night,
    derive_nights,
    parse_timestamp,
    to_epoch_minutes,
)
from sleep_nudge.core.errors import InvalidTimestamp
from sleep_nudge.core.models.data_models import NightSource, RawNight


def _minutes(value: str) -> int:
    return to_epoch_minutes(datetime.fromisoformat(value).replace(tzinfo=timezone.utc))


def _night(date, start, end, source=None):
    return RawNight(date=date, sleep_start=start, sleep_end=end, source=source)


def test_duration_and_midsleep_for_overnight_interval():
    night = _night("2024-01-01", "2023-12-31T23:00:00.000Z", "2024-01-01T07:30:00.000Z")

    derived = derive_night(night)

    assert derived.duration_min == 510
    assert derived.midsleep_min_epoch == _minutes("2023-12-31T23:00:00") + 255
    assert derived.date == "2024-01-01"


def test_odd_duration_midsleep_is_floored():
    derived = derive_night(_night("2024-01-01", "2024-01-01T01:00:00Z", "2024-01-01T01:07:00Z"))

    assert derived.duration_min == 7
    assert derived.midsleep_min_epoch == _minutes("2024-01-01T01:00:00") + 3


def test_end_before_start_is_clamped_to_zero():
    derived = derive_night(_night("2024-01-01", "2024-01-01T23:00:00Z", "2024-01-01T07:00:00Z"))

    assert derived.duration_min == 0
    assert derived.midsleep_min_epoch == _minutes("2024-01-01T23:00:00")


def test_equal_start_and_end_is_zero_duration():
    derived = derive_night(_night("2024-01-01", "2024-01-01T02:00:00Z", "2024-01-01T02:00:00Z"))

    assert derived.duration_min == 0


def test_sub_minute_precision_is_truncated():
    derived = derive_night(_night("2024-01-01", "2024-01-01T01:00:59.999Z", "2024-01-01T08:30:30Z"))

    assert derived.duration_min == 450
    assert derived.midsleep_min_epoch == _minutes("2024-01-01T01:00:00") + 225


def test_epoch_minutes_floor_before_epoch():
    assert to_epoch_minutes(datetime(1969, 12, 31, 23, 59, 30, tzinfo=timezone.utc)) == -1
    assert to_epoch_minutes(datetime(1970, 1, 1, 0, 1, 0, tzinfo=timezone.utc)) == 1


def test_offsets_are_converted_to_utc():
    assert parse_timestamp("2024-01-01T03:00:00+02:00") == datetime(2024, 1, 1, 1, 0, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01T01:00:00") == datetime(2024, 1, 1, 1, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [
    "2024-01-01T01:00:00.5Z",
    "2024-01-01T01:00:00.123456Z",
    "2024-01-01T03:00:00.5+02:00",
])
def test_any_fraction_length_is_accepted(value):
    parsed = parse_timestamp(value)

    assert isinstance(parsed, pd.Timestamp)
    assert to_epoch_minutes(parsed) == _minutes("2024-01-01T01:00:00")


def test_fractional_seconds_survive_csv_import():
    text = (
        "date,sleep_start,sleep_end\n"
        "2024-01-01,2024-01-01T01:00:00.5Z,2024-01-01T08:00:00.25Z\n"
    )

    night = derive_night(parse_csv(text).nights[0])

    assert night.duration_min == 420


@pytest.mark.parametrize("value", ["", "   ", "not-a-time", "2024-13-01T00:00:00Z", None])
def test_invalid_timestamps_raise(value):
    with pytest.raises(InvalidTimestamp):
        parse_timestamp(value)


def test_derive_night_reports_the_bad_field():
    night = _night("2024-01-01", "2024-01-01T01:00:00Z", "yesterday")

    with pytest.raises(InvalidTimestamp) as excinfo:
        derive_night(night)

    assert excinfo.value.field == "sleep_end"
    assert "yesterday" in str(excinfo.value)


def test_derive_nights_orders_most_recent_first():
    nights = [
        _night("2024-01-02", "2024-01-02T01:00:00Z", "2024-01-02T08:00:00Z"),
        _night("2024-01-03", "2024-01-03T01:00:00Z", "2024-01-03T08:00:00Z"),
        _night("2024-01-01", "2024-01-01T01:00:00Z", "2024-01-01T08:00:00Z"),
    ]

    derived = derive_nights(nights)

    assert [d.date for d in derived] == ["2024-01-03", "2024-01-02", "2024-01-01"]


def test_history_table_rows_and_clock_times():
    nights = [
        _night("2024-01-01", "2024-01-01T01:00:00Z", "2024-01-01T08:30:00Z", NightSource.CSV),
        _night("2024-01-02", "2024-01-01T23:45:00Z", "2024-01-02T07:15:00Z"),
    ]

    history = build_history_table(derive_nights(nights))

    assert list(history.columns) == HISTORY_COLUMNS
    assert history.iloc[0]["date"] == "2024-01-02"
    assert history.iloc[0]["sleep_start"] == "23:45"
    assert history.iloc[0]["sleep_end"] == "07:15"
    assert history.iloc[0]["midsleep"] == "03:30"
    assert history.iloc[1]["duration_min"] == 450
    assert history.iloc[1]["duration_hours"] == 7.5
    assert history.iloc[1]["source"] == "csv"


def test_history_table_limit_and_empty():
    nights = [
        _night(f"2024-01-{day:02d}", f"2024-01-{day:02d}T01:00:00Z", f"2024-01-{day:02d}T08:00:00Z")
        for day in range(1, 11)
    ]

    assert len(build_history_table(derive_nights(nights), limit=4)) == 4

    empty = build_history_table([])
    assert empty.empty
    assert list(empty.columns) == HISTORY_COLUMNS
