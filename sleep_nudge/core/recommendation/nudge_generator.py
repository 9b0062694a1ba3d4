"""
Module for rendering nudge messages and stat explanations.

The notification layer decides how and when to show these; this module only
supplies the decision and the text that explains it.
"""

from sleep_nudge.core.data_processing.feature_engineering import MINUTES_PER_DAY
from sleep_nudge.core.models.data_models import NudgeKind, NudgeMessage, RegularityStats, RiskLevel
from sleep_nudge.utils.constants import MIN_NIGHTS_FOR_DECISION, nudge_messages


def format_clock(minutes):
    """Render minutes (epoch or minute-of-day) as a 12-hour UTC clock time."""
    if minutes is None:
        return "n/a"
    minute_of_day = minutes % MINUTES_PER_DAY
    h24 = minute_of_day // 60
    mm = minute_of_day % 60
    ampm = "PM" if h24 >= 12 else "AM"
    h = ((h24 + 11) % 12) + 1
    return f"{h}:{mm:02d} {ampm}"


def format_lateness(minutes):
    """Render signed lateness relative to the baseline."""
    if minutes == 0:
        return "on baseline"
    direction = "later" if minutes > 0 else "earlier"
    hours, mins = divmod(abs(minutes), 60)
    return f"{hours}h {mins}m {direction} than baseline"


def explain_stats(stats: RegularityStats):
    """
    Build the one-line explanation shown next to a risk level.

    Example:
        "Baseline 8:30 AM; last night 3h 0m later than baseline;
        regularity loss 360 min over 7 nights."
    """
    if stats.coverage == 0:
        return "No nights logged yet."

    nights = "night" if stats.coverage == 1 else "nights"
    return (
        f"Baseline {format_clock(stats.baseline_mid)}; "
        f"last night {format_lateness(stats.recent_lateness)}; "
        f"regularity loss {stats.regularity_loss} min over {stats.coverage} {nights}."
    )


def build_nudge(stats: RegularityStats, risk_level: RiskLevel, kind=NudgeKind.IMMEDIATE,
                min_nights_for_decision=MIN_NIGHTS_FOR_DECISION) -> NudgeMessage:
    """
    Build the nudge the notification layer would display.

    Args:
        stats: Current regularity stats
        risk_level: Classified risk for those stats
        kind: IMMEDIATE (fire now) or BEDTIME (scheduled wind-down reminder)
        min_nights_for_decision: Used in the not-enough-data copy

    Returns:
        NudgeMessage: should_fire is only set for HIGH risk
    """
    kind = NudgeKind(kind)

    if risk_level == RiskLevel.INSUFFICIENT_DATA:
        copy = nudge_messages['insufficient_data']
        return NudgeMessage(
            kind=kind,
            should_fire=False,
            risk_level=risk_level,
            title=copy['title'],
            body=copy['body'].format(min_nights=min_nights_for_decision)
        )

    drifted = risk_level == RiskLevel.HIGH
    copy = nudge_messages[kind.value]

    if kind == NudgeKind.IMMEDIATE:
        reason = copy['drift_reason'] if drifted else copy['steady_reason']
        body = copy['body'].format(reason=reason, baseline=format_clock(stats.baseline_mid))
    else:
        body = copy['drift_body'] if drifted else copy['steady_body']

    return NudgeMessage(
        kind=kind,
        should_fire=drifted,
        risk_level=risk_level,
        title=copy['drift_title'] if drifted else copy['steady_title'],
        body=body
    )
