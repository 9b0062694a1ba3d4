# sleep_nudge/core/errors.py
"""
Error types raised while ingesting and deriving sleep data.

Baseline, drift and risk calculations raise nothing for well-formed input;
only the ingestion boundary and timestamp parsing can fail.
"""


class SleepDataError(ValueError):
    """Base class for sleep data problems surfaced to the caller"""


class MalformedHeader(SleepDataError):
    """CSV header is missing one or more required columns"""

    def __init__(self, missing_columns):
        self.missing_columns = sorted(missing_columns)
        super().__init__(
            f"CSV must have columns: date,sleep_start,sleep_end (any order). "
            f"Missing: {', '.join(self.missing_columns)}"
        )


class NoDataRows(SleepDataError):
    """CSV has a header at most, no data rows"""

    def __init__(self):
        super().__init__("CSV file has no data rows.")


class NoValidRows(SleepDataError):
    """Every CSV data row was skipped"""

    def __init__(self, total_rows):
        self.total_rows = total_rows
        super().__init__(f"No valid rows found in CSV ({total_rows} rows checked).")


class InvalidTimestamp(SleepDataError):
    """A sleep_start/sleep_end value could not be parsed as ISO-8601"""

    def __init__(self, value, field=None, line_number=None):
        self.value = value
        self.field = field
        self.line_number = line_number

        location = ""
        if line_number is not None:
            location = f"Line {line_number}: "
        field_text = f" in '{field}'" if field else ""
        super().__init__(f"{location}Invalid timestamp{field_text}: {value!r}")
