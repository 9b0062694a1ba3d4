import pytest

from sleep_nudge.core.analysis.risk_classifier import classify_risk, risk_label
from sleep_nudge.core.models.data_models import NudgeKind, RegularityStats, RiskLevel
from sleep_nudge.core.recommendation.nudge_generator import (
    build_nudge,
    explain_stats,
    format_clock,
    format_lateness,
)


def _stats(coverage, drift=False, baseline_mid=510, recent_lateness=0, regularity_loss=0):
    return RegularityStats(
        coverage=coverage,
        baseline_mid=baseline_mid if coverage else None,
        recent_lateness=recent_lateness,
        regularity_loss=regularity_loss,
        drift=drift,
    )


@pytest.mark.parametrize("coverage", [0, 1, 2])
def test_short_history_is_insufficient_even_with_drift(coverage):
    assert classify_risk(_stats(coverage, drift=True)) == RiskLevel.INSUFFICIENT_DATA


def test_drift_with_enough_nights_is_high():
    assert classify_risk(_stats(3, drift=True)) == RiskLevel.HIGH


def test_no_drift_with_enough_nights_is_low():
    assert classify_risk(_stats(7, drift=False)) == RiskLevel.LOW


def test_minimum_nights_is_configurable():
    stats = _stats(4, drift=True)

    assert classify_risk(stats, min_nights_for_decision=5) == RiskLevel.INSUFFICIENT_DATA
    assert classify_risk(stats, min_nights_for_decision=4) == RiskLevel.HIGH


def test_risk_labels():
    assert risk_label(RiskLevel.INSUFFICIENT_DATA) == "Insufficient data (need >= 3 nights)"
    assert risk_label(RiskLevel.INSUFFICIENT_DATA, 5) == "Insufficient data (need >= 5 nights)"
    assert risk_label(RiskLevel.HIGH) == "HIGH (nudge would fire)"
    assert risk_label(RiskLevel.LOW) == "LOW"


@pytest.mark.parametrize("minutes, expected", [
    (None, "n/a"),
    (0, "12:00 AM"),
    (510, "8:30 AM"),
    (720, "12:00 PM"),
    (1439, "11:59 PM"),
    (-30, "11:30 PM"),
    (19_444 * 1440 + 645, "10:45 AM"),
])
def test_format_clock(minutes, expected):
    assert format_clock(minutes) == expected


def test_format_lateness():
    assert format_lateness(0) == "on baseline"
    assert format_lateness(180) == "3h 0m later than baseline"
    assert format_lateness(-95) == "1h 35m earlier than baseline"


def test_explain_stats():
    stats = _stats(7, drift=True, recent_lateness=180, regularity_loss=360)

    assert explain_stats(stats) == (
        "Baseline 8:30 AM; last night 3h 0m later than baseline; "
        "regularity loss 360 min over 7 nights."
    )
    assert explain_stats(_stats(0)) == "No nights logged yet."
    assert explain_stats(_stats(1)).endswith("over 1 night.")


def test_insufficient_data_nudge_never_fires():
    nudge = build_nudge(_stats(2, drift=True), RiskLevel.INSUFFICIENT_DATA)

    assert nudge.should_fire is False
    assert nudge.title == "Not enough data"
    assert "at least 3 recent nights" in nudge.body


def test_immediate_nudge_copy():
    high = build_nudge(_stats(7, drift=True), RiskLevel.HIGH)
    low = build_nudge(_stats(7), RiskLevel.LOW)

    assert high.should_fire is True
    assert high.title == "Heads up"
    assert high.body == "Bedtime drift detected. Baseline 8:30 AM."
    assert low.should_fire is False
    assert low.title == "No drift tonight"
    assert low.body == "No drift tonight. Baseline 8:30 AM."


def test_bedtime_nudge_copy():
    high = build_nudge(_stats(7, drift=True), RiskLevel.HIGH, kind="bedtime")
    low = build_nudge(_stats(7), RiskLevel.LOW, kind=NudgeKind.BEDTIME)

    assert high.kind == NudgeKind.BEDTIME
    assert high.title == "Bedtime nudge"
    assert high.body.startswith("You are trending late tonight")
    assert low.body == "Looking steady. Nice work keeping a regular schedule."
