"""
Constants used throughout the Sleep Regularity Nudge Kit.
This includes default thresholds, CSV schema names and display descriptions.
"""

# Default values for the regularity engine
BASELINE_WINDOW_DAYS = 7  # Most recent nights used for the baseline
DRIFT_THRESHOLD_MIN = 90  # Lateness (either direction) that counts as drift
MIN_NIGHTS_FOR_DECISION = 3  # Fewer nights than this never trigger a nudge

default_values = {
    'baseline_window_days': BASELINE_WINDOW_DAYS,
    'drift_threshold_min': DRIFT_THRESHOLD_MIN,
    'min_nights_for_decision': MIN_NIGHTS_FOR_DECISION,
    'history_limit': 21,  # Rows shown in the recent nights table
    'late_night_offset_min': 120,  # How much later a "late" manual night is logged
    'default_sleep_hours': 8,  # Length of synthetic nights
}

# CSV schema
CSV_DELIMITER = ','
CSV_COLUMNS = ['date', 'sleep_start', 'sleep_end']
REQUIRED_CSV_COLUMNS = set(CSV_COLUMNS)

# Drift added to each night of the demo week, most recent first
demo_week_drifts = [210, 180, 120, 90, 60, 30, 0]

# Risk level descriptions for UI and reporting
risk_level_descriptions = {
    'insufficient_data': 'Insufficient data (need >= {min_nights} nights)',
    'high': 'HIGH (nudge would fire)',
    'low': 'LOW',
}

# Nudge copy shown by the notification layer
nudge_messages = {
    'insufficient_data': {
        'title': 'Not enough data',
        'body': 'We need at least {min_nights} recent nights to decide whether to fire a nudge.',
    },
    'immediate': {
        'drift_title': 'Heads up',
        'steady_title': 'No drift tonight',
        'drift_reason': 'Bedtime drift detected',
        'steady_reason': 'No drift tonight',
        'body': '{reason}. Baseline {baseline}.',
    },
    'bedtime': {
        'drift_title': 'Bedtime nudge',
        'steady_title': 'No drift tonight',
        'drift_body': 'You are trending late tonight. Consider starting wind down.',
        'steady_body': 'Looking steady. Nice work keeping a regular schedule.',
    },
}
