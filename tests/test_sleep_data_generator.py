from datetime import date, datetime, timezone

from sleep_nudge.core.data_processing.feature_engineering import derive_night, to_epoch_minutes
from sleep_nudge.core.models.data_models import NightSource
from sleep_nudge.data_generation.sleep_data_generator import SleepDataGenerator, to_iso

TODAY = date(2024, 1, 10)


def test_to_iso_uses_milliseconds_and_z():
    ts = datetime(2024, 1, 1, 4, 30, 0, 123456, tzinfo=timezone.utc)

    assert to_iso(ts) == "2024-01-01T04:30:00.123Z"


def test_make_fake_night():
    night = SleepDataGenerator().make_fake_night(2, drift_min=30, today=TODAY)

    assert night.date == "2024-01-08"
    assert night.sleep_start == "2024-01-08T04:30:00.000Z"
    assert night.sleep_end == "2024-01-08T13:00:00.000Z"
    assert night.source == NightSource.SEED


def test_night_from_midsleep_is_centred():
    midsleep = to_epoch_minutes(datetime(2024, 1, 1, 4, 0, tzinfo=timezone.utc))

    night = SleepDataGenerator().night_from_midsleep(midsleep, 120, source=NightSource.MANUAL_LATE)

    assert night.date == "2024-01-01"
    assert night.sleep_start == "2024-01-01T02:00:00.000Z"
    assert night.sleep_end == "2024-01-01T10:00:00.000Z"
    assert derive_night(night).midsleep_min_epoch == midsleep + 120


def test_night_from_midsleep_dates_by_start():
    midsleep = to_epoch_minutes(datetime(2024, 1, 2, 1, 0, tzinfo=timezone.utc))

    night = SleepDataGenerator().night_from_midsleep(midsleep)

    assert night.date == "2024-01-01"
    assert night.sleep_start == "2024-01-01T21:00:00.000Z"


def test_demo_week():
    nights = SleepDataGenerator().generate_demo_week(today=TODAY)

    assert [n.date for n in nights] == [f"2024-01-{day:02d}" for day in range(10, 3, -1)]
    assert [derive_night(n).duration_min for n in nights] == [690, 660, 600, 570, 540, 510, 480]


def test_demo_week_jitter_is_reproducible_with_a_seed():
    first = SleepDataGenerator(seed=7).generate_demo_week(today=TODAY, jitter_min=15)
    second = SleepDataGenerator(seed=7).generate_demo_week(today=TODAY, jitter_min=15)

    assert first == second
    for night, drift in zip(first, [210, 180, 120, 90, 60, 30, 0]):
        assert abs(derive_night(night).duration_min - 480 - drift) <= 15


def test_custom_sleep_length():
    night = SleepDataGenerator(sleep_hours=6).make_fake_night(0, today=TODAY)

    assert derive_night(night).duration_min == 360
