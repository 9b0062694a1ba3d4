"""
Module for mapping regularity stats to a nudge risk level.
"""

from sleep_nudge.core.models.data_models import RegularityStats, RiskLevel
from sleep_nudge.utils.constants import MIN_NIGHTS_FOR_DECISION, risk_level_descriptions


def classify_risk(stats: RegularityStats, min_nights_for_decision=MIN_NIGHTS_FOR_DECISION) -> RiskLevel:
    """
    Classify the risk that tonight's sleep has drifted.

    Fewer than min_nights_for_decision nights is always INSUFFICIENT_DATA,
    whatever the drift flag says.
    """
    if stats.coverage < min_nights_for_decision:
        return RiskLevel.INSUFFICIENT_DATA
    if stats.drift:
        return RiskLevel.HIGH
    return RiskLevel.LOW


def risk_label(level: RiskLevel, min_nights_for_decision=MIN_NIGHTS_FOR_DECISION) -> str:
    """Display text for a risk level"""
    return risk_level_descriptions[level.value].format(min_nights=min_nights_for_decision)
