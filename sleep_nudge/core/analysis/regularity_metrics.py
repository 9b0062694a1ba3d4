"""
Module for calculating the sleep-regularity baseline and drift.

The baseline is the floored mean midsleep of the most recent nights. Drift
compares the latest night against that baseline, and regularity loss sums the
absolute deviation of every night in the window from it, in minutes.

Midsleeps are absolute epoch minutes and are averaged as they are. With
align_days set, nights from different days are first shifted by whole days
onto the most recent night's day (within +/- 12 hours of its midsleep), so
only the clock time of each night feeds the baseline.
"""

from typing import List, Sequence

from sleep_nudge.core.data_processing.feature_engineering import MINUTES_PER_DAY
from sleep_nudge.core.models.data_models import DerivedNight, RegularityStats
from sleep_nudge.utils.constants import BASELINE_WINDOW_DAYS, DRIFT_THRESHOLD_MIN

HALF_DAY = MINUTES_PER_DAY // 2


def select_baseline_window(derived: Sequence[DerivedNight], window_days=BASELINE_WINDOW_DAYS) -> List[DerivedNight]:
    """
    Take the baseline window from nights ordered most recent first.

    Args:
        derived: Derived nights, most recent first
        window_days: Maximum nights in the window

    Returns:
        list: Up to window_days nights, most recent first
    """
    return list(derived[:window_days])


def align_to_reference(midsleep, reference):
    """Shift midsleep by whole days into (reference - 12h, reference + 12h]"""
    days = (reference - midsleep + HALF_DAY) // MINUTES_PER_DAY
    return midsleep + days * MINUTES_PER_DAY


def calculate_regularity_stats(window: Sequence[DerivedNight], drift_threshold_min=DRIFT_THRESHOLD_MIN,
                               align_days=False) -> RegularityStats:
    """
    Calculate baseline, lateness, regularity loss and drift for a window.

    Args:
        window: Derived nights, most recent first, already cut to the window
        drift_threshold_min: Absolute lateness (inclusive) that counts as drift
        align_days: Align midsleeps onto the most recent night's day first (off by default)

    Returns:
        RegularityStats: Snapshot for this window
    """
    coverage = len(window)
    if coverage == 0:
        return RegularityStats(
            coverage=0,
            baseline_mid=None,
            recent_lateness=0,
            regularity_loss=0,
            drift=False
        )

    midsleeps = [night.midsleep_min_epoch for night in window]
    if align_days:
        reference = midsleeps[0]
        midsleeps = [align_to_reference(mid, reference) for mid in midsleeps]

    # Floor division keeps the mean floored for negative epochs too
    baseline_mid = sum(midsleeps) // coverage
    recent_lateness = midsleeps[0] - baseline_mid

    if coverage > 1:
        regularity_loss = sum(abs(mid - baseline_mid) for mid in midsleeps)
    else:
        regularity_loss = 0

    return RegularityStats(
        coverage=coverage,
        baseline_mid=baseline_mid,
        recent_lateness=recent_lateness,
        regularity_loss=regularity_loss,
        drift=abs(recent_lateness) >= drift_threshold_min
    )


def summarize_nights(derived: Sequence[DerivedNight], window_days=BASELINE_WINDOW_DAYS,
                     drift_threshold_min=DRIFT_THRESHOLD_MIN, align_days=False) -> RegularityStats:
    """Select the baseline window and calculate its stats"""
    window = select_baseline_window(derived, window_days)
    return calculate_regularity_stats(window, drift_threshold_min, align_days)
