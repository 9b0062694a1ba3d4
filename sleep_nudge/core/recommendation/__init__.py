"""
Recommendation module for sleep regularity.

This module renders the nudges and explanations handed to the
notification layer.
"""

from sleep_nudge.core.recommendation.nudge_generator import build_nudge, explain_stats, format_clock

__all__ = ['build_nudge', 'explain_stats', 'format_clock']
