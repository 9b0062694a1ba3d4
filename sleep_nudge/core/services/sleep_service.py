# sleep_nudge/core/services/sleep_service.py
import logging
from datetime import datetime, timezone

from sleep_nudge.core.analysis.regularity_metrics import HALF_DAY, summarize_nights
from sleep_nudge.core.analysis.risk_classifier import classify_risk, risk_label
from sleep_nudge.core.data_processing.csv_ingestion import export_nights_csv, parse_csv
from sleep_nudge.core.data_processing.feature_engineering import (
    MINUTES_PER_DAY,
    build_history_table,
    derive_night,
    derive_nights,
    to_epoch_minutes,
)
from sleep_nudge.core.models.data_models import (
    ImportSummary,
    NightSource,
    NudgeKind,
    RegularityAssessment,
    RegularityConfig,
)
from sleep_nudge.core.recommendation.nudge_generator import build_nudge, explain_stats
from sleep_nudge.core.repositories.night_repository import NightRepository
from sleep_nudge.data_generation.sleep_data_generator import SleepDataGenerator
from sleep_nudge.utils.constants import default_values

logger = logging.getLogger(__name__)

# Midsleep assumed for a manual night when there is no baseline yet
NO_BASELINE_MIDSLEEP_OFFSET_MIN = 4 * 60


class SleepRegularityService:
    def __init__(self, repository=None, config=None, generator=None,
                 history_limit=None, late_night_offset_min=None):
        self.repository = repository if repository is not None else NightRepository()
        self.config = config or RegularityConfig()
        self.generator = generator or SleepDataGenerator()
        self.history_limit = history_limit if history_limit is not None else default_values['history_limit']
        self.late_night_offset_min = (
            late_night_offset_min if late_night_offset_min is not None
            else default_values['late_night_offset_min']
        )

    @classmethod
    def from_config_manager(cls, config_manager, repository=None, **overrides):
        """Build a service from YAML settings; overrides replace regularity values"""
        return cls(
            repository=repository,
            config=config_manager.regularity_config(**overrides),
            generator=SleepDataGenerator(sleep_hours=config_manager.get('manual_logging.sleep_hours')),
            history_limit=config_manager.get('history.limit'),
            late_night_offset_min=config_manager.get('manual_logging.late_night_offset_min')
        )

    def derived_nights(self):
        return derive_nights(self.repository.read_all())

    def stats(self):
        return summarize_nights(
            self.derived_nights(),
            window_days=self.config.baseline_window_days,
            drift_threshold_min=self.config.drift_threshold_min,
            align_days=self.config.align_days
        )

    def risk_level(self, stats=None):
        if stats is None:
            stats = self.stats()
        return classify_risk(stats, self.config.min_nights_for_decision)

    def assess(self):
        """Stats, risk level and explanation for the current store"""
        stats = self.stats()
        level = self.risk_level(stats)
        return RegularityAssessment(
            stats=stats,
            risk_level=level,
            risk_label=risk_label(level, self.config.min_nights_for_decision),
            explanation=explain_stats(stats)
        )

    def log_night(self, night):
        # Reject bad timestamps before they reach the store
        derive_night(night)
        self.repository.upsert_night(night)
        return self.assess()

    def _anchor_midsleep(self, now=None):
        """Next baseline clock time at least 12 hours after the latest midsleep"""
        derived = self.derived_nights()
        baseline_mid = summarize_nights(
            derived, window_days=self.config.baseline_window_days, align_days=self.config.align_days
        ).baseline_mid
        if baseline_mid is None:
            if now is None:
                now = datetime.now(timezone.utc)
            return to_epoch_minutes(now) + NO_BASELINE_MIDSLEEP_OFFSET_MIN

        earliest = derived[0].midsleep_min_epoch + HALF_DAY
        return earliest + (baseline_mid - earliest) % MINUTES_PER_DAY

    def log_on_track_night(self, now=None):
        """Log a night centred on the current baseline"""
        night = self.generator.night_from_midsleep(
            self._anchor_midsleep(now), 0, source=NightSource.MANUAL_ON_TIME
        )
        return self.log_night(night)

    def log_late_night(self, now=None, offset_min=None):
        """Log a night centred later than the current baseline"""
        if offset_min is None:
            offset_min = self.late_night_offset_min
        night = self.generator.night_from_midsleep(
            self._anchor_midsleep(now), offset_min, source=NightSource.MANUAL_LATE
        )
        return self.log_night(night)

    def seed_demo_week(self, today=None, jitter_min=0):
        """Replace the store with the demo week"""
        self.repository.write_all(self.generator.generate_demo_week(today=today, jitter_min=jitter_min))
        return self.assess()

    def import_csv(self, text):
        """
        Replace the store with the nights in a CSV export.

        Any unparseable timestamp rejects the import and leaves the store
        untouched; rows missing fields are skipped and counted.
        """
        result = parse_csv(text, validate_timestamps=True)
        self.repository.write_all(result.nights)

        imported = len(result.nights)
        message = f"{imported} of {result.total_rows} rows imported"
        logger.info(message)
        return ImportSummary(
            imported=imported,
            total_rows=result.total_rows,
            skipped_rows=result.skipped_rows,
            message=message
        )

    def export_csv(self):
        nights = sorted(self.repository.read_all(), key=lambda n: n.date)
        return export_nights_csv(nights)

    def history(self, limit=None):
        if limit is None:
            limit = self.history_limit
        if limit < 0:
            raise ValueError(f"History limit must be non-negative, got {limit}")
        return build_history_table(self.derived_nights(), limit)

    def nudge(self, kind=NudgeKind.IMMEDIATE):
        stats = self.stats()
        return build_nudge(
            stats,
            self.risk_level(stats),
            kind=kind,
            min_nights_for_decision=self.config.min_nights_for_decision
        )

    def clear(self):
        self.repository.clear()
