"""
Data processing module for sleep nights.

This module contains feature derivation and CSV import/export.
"""

from sleep_nudge.core.data_processing.feature_engineering import derive_night, derive_nights, build_history_table
from sleep_nudge.core.data_processing.csv_ingestion import parse_csv, parse_csv_to_nights, export_nights_csv

__all__ = ['derive_night', 'derive_nights', 'build_history_table', 'parse_csv', 'parse_csv_to_nights', 'export_nights_csv']
