# sleep_nudge/core/models/data_models.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from enum import Enum

from sleep_nudge.utils.constants import (
    BASELINE_WINDOW_DAYS,
    DRIFT_THRESHOLD_MIN,
    MIN_NIGHTS_FOR_DECISION,
)


# Enum types for better validation
class NightSource(str, Enum):
    CSV = "csv"
    SEED = "seed"
    MANUAL_LATE = "manual_late"
    MANUAL_ON_TIME = "manual_on_time"


class RiskLevel(str, Enum):
    INSUFFICIENT_DATA = "insufficient_data"
    HIGH = "high"
    LOW = "low"


class NudgeKind(str, Enum):
    IMMEDIATE = "immediate"
    BEDTIME = "bedtime"


# Sleep Data Models
class RawNight(BaseModel):
    """One logged sleep interval, keyed by calendar date in the store"""
    model_config = ConfigDict(frozen=True)

    date: str = Field(..., min_length=1)
    sleep_start: str = Field(..., min_length=1)
    sleep_end: str = Field(..., min_length=1)
    source: Optional[NightSource] = None

    @field_validator('date', 'sleep_start', 'sleep_end', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class DerivedNight(RawNight):
    """RawNight plus the features the regularity engine works on"""
    duration_min: int = Field(..., ge=0)
    midsleep_min_epoch: int


# Analysis Models
class RegularityStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    coverage: int = Field(..., ge=0)
    baseline_mid: Optional[int] = None
    recent_lateness: int = 0
    regularity_loss: int = Field(0, ge=0)
    drift: bool = False


class RegularityAssessment(BaseModel):
    stats: RegularityStats
    risk_level: RiskLevel
    risk_label: str
    explanation: str


class NudgeMessage(BaseModel):
    kind: NudgeKind
    should_fire: bool
    risk_level: RiskLevel
    title: str
    body: str


# Import Models
class CsvImportResult(BaseModel):
    nights: List[RawNight]
    total_rows: int = Field(..., ge=0)

    @property
    def skipped_rows(self):
        return self.total_rows - len(self.nights)


class ImportSummary(BaseModel):
    imported: int
    total_rows: int
    skipped_rows: int
    message: str


class CsvImportRequest(BaseModel):
    csv: str


# Configuration
class RegularityConfig(BaseModel):
    baseline_window_days: int = Field(BASELINE_WINDOW_DAYS, ge=1)
    drift_threshold_min: int = Field(DRIFT_THRESHOLD_MIN, ge=0)
    min_nights_for_decision: int = Field(MIN_NIGHTS_FOR_DECISION, ge=1)
    align_days: bool = False
