import logging
from datetime import datetime, time, timedelta, timezone

import numpy as np

from sleep_nudge.core.data_processing.feature_engineering import EPOCH
from sleep_nudge.core.models.data_models import NightSource, RawNight
from sleep_nudge.utils.constants import default_values, demo_week_drifts

logger = logging.getLogger(__name__)


def to_iso(ts):
    """UTC ISO-8601 with millisecond precision and a 'Z' suffix"""
    ts = ts.astimezone(timezone.utc)
    return ts.strftime('%Y-%m-%dT%H:%M:%S') + f".{ts.microsecond // 1000:03d}Z"


class SleepDataGenerator:
    """
    Synthetic night generator for demos and manual logging.
    Produces nights in the same shape a CSV import would.
    """
    def __init__(self, seed=None, sleep_hours=None):
        self.rng = np.random.default_rng(seed)
        self.sleep_minutes = int((sleep_hours or default_values['default_sleep_hours']) * 60)

    def make_fake_night(self, day_offset, base_hour=4, base_minute=30, drift_min=0,
                        today=None, source=NightSource.SEED):
        """Night dated day_offset days before today, starting at the base UTC time
        and lasting the default sleep length plus drift_min"""
        if today is None:
            today = datetime.now(timezone.utc).date()
        day = today - timedelta(days=day_offset)

        start = datetime.combine(day, time(base_hour, base_minute), tzinfo=timezone.utc)
        end = start + timedelta(minutes=self.sleep_minutes + drift_min)
        return RawNight(
            date=day.isoformat(),
            sleep_start=to_iso(start),
            sleep_end=to_iso(end),
            source=source
        )

    def night_from_midsleep(self, midsleep_min_epoch, offset_min=0, source=None):
        """Night of the default length centred on midsleep + offset, dated by its start"""
        midsleep = EPOCH + timedelta(minutes=midsleep_min_epoch + offset_min)
        half = timedelta(minutes=self.sleep_minutes // 2)
        start = midsleep - half
        end = midsleep + half
        return RawNight(
            date=start.date().isoformat(),
            sleep_start=to_iso(start),
            sleep_end=to_iso(end),
            source=source
        )

    def generate_demo_week(self, today=None, jitter_min=0):
        """
        Seven nights ending today, each running longer than the one before.

        Args:
            today: Date of the most recent night (defaults to today, UTC)
            jitter_min: Random +/- minutes added to each night's drift

        Returns:
            list: RawNight records, most recent first
        """
        nights = []
        for day_offset, drift in enumerate(demo_week_drifts):
            if jitter_min:
                drift += int(self.rng.integers(-jitter_min, jitter_min + 1))
            nights.append(self.make_fake_night(day_offset, drift_min=drift, today=today))

        logger.info(f"Generated {len(nights)} demo nights")
        return nights
