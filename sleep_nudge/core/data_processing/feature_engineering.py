"""
Module for deriving per-night timing features from raw sleep intervals.

All derived values are expressed in whole UTC minutes since the Unix epoch so
that nights logged from different offsets can be compared directly.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List

import pandas as pd

from sleep_nudge.core.errors import InvalidTimestamp
from sleep_nudge.core.models.data_models import DerivedNight, RawNight
from sleep_nudge.utils.constants import default_values

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MINUTES_PER_DAY = 24 * 60

HISTORY_COLUMNS = [
    'date', 'sleep_start', 'sleep_end', 'duration_min',
    'duration_hours', 'midsleep', 'source'
]


def parse_timestamp(value, field=None):
    """
    Parse an ISO-8601 timestamp into a UTC pandas Timestamp.

    A trailing 'Z' means UTC and naive values are read as UTC; explicit
    offsets are converted.

    Raises:
        InvalidTimestamp: if the value is empty or not ISO-8601
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidTimestamp(value, field=field)

    try:
        parsed = pd.to_datetime(value.strip(), utc=True, format='ISO8601')
    except (ValueError, OverflowError):
        raise InvalidTimestamp(value, field=field)

    if pd.isna(parsed):
        raise InvalidTimestamp(value, field=field)
    return parsed


def to_epoch_minutes(ts):
    """Whole minutes since the epoch, floored."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return (ts - EPOCH) // timedelta(minutes=1)


def derive_night(night: RawNight) -> DerivedNight:
    """
    Compute duration and midsleep for one night.

    An end at or before the start (no overnight rollover applied) gives a
    duration of 0, never a negative one.
    """
    start_min = to_epoch_minutes(parse_timestamp(night.sleep_start, 'sleep_start'))
    end_min = to_epoch_minutes(parse_timestamp(night.sleep_end, 'sleep_end'))

    duration_min = max(0, end_min - start_min)
    if end_min <= start_min:
        logger.debug(f"Night {night.date} ends before it starts, clamping duration to 0")

    return DerivedNight(
        **night.model_dump(),
        duration_min=duration_min,
        midsleep_min_epoch=start_min + duration_min // 2,
    )


def derive_nights(nights: Iterable[RawNight]) -> List[DerivedNight]:
    """Derive every night and order the result most recent first."""
    derived = [derive_night(n) for n in nights]
    derived.sort(
        key=lambda d: (d.midsleep_min_epoch - d.duration_min // 2, d.date),
        reverse=True
    )
    return derived


def format_minute_of_day(minutes):
    """Render an epoch minute value as a 24-hour UTC 'HH:MM' string"""
    minute_of_day = minutes % MINUTES_PER_DAY
    return f"{minute_of_day // 60:02d}:{minute_of_day % 60:02d}"


def build_history_table(derived: List[DerivedNight], limit=None):
    """
    Build the recent nights table shown alongside the baseline.

    Args:
        derived: Nights ordered most recent first
        limit: Maximum rows to keep (defaults to the configured history limit)

    Returns:
        DataFrame: One row per night with clock times in UTC
    """
    if limit is None:
        limit = default_values['history_limit']

    rows = []
    for night in derived[:limit]:
        start_min = night.midsleep_min_epoch - night.duration_min // 2
        rows.append({
            'date': night.date,
            'sleep_start': format_minute_of_day(start_min),
            'sleep_end': format_minute_of_day(start_min + night.duration_min),
            'duration_min': night.duration_min,
            'duration_hours': round(night.duration_min / 60, 1),
            'midsleep': format_minute_of_day(night.midsleep_min_epoch),
            'source': night.source.value if night.source else None,
        })

    if not rows:
        return pd.DataFrame(columns=HISTORY_COLUMNS)

    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)
