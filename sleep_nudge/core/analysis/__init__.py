"""
Analysis module for sleep regularity.

This module contains the baseline, drift and risk calculations.
"""

from sleep_nudge.core.analysis.regularity_metrics import calculate_regularity_stats, select_baseline_window, summarize_nights
from sleep_nudge.core.analysis.risk_classifier import classify_risk, risk_label

__all__ = ['calculate_regularity_stats', 'select_baseline_window', 'summarize_nights', 'classify_risk', 'risk_label']
