"""
Core modules for the Sleep Regularity Nudge Kit.

This package contains the functionality for:
- Deriving per-night sleep timing features
- Computing a rolling midsleep baseline and drift
- Classifying nudge risk
- Importing and exporting sleep history as CSV
"""

__version__ = "0.1.0"
