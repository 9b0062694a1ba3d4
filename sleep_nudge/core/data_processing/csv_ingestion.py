"""
CSV import and export of raw sleep nights.

Expected layout (columns in any order, header matched case-insensitively):

    date,sleep_start,sleep_end
    2024-01-01,2024-01-01T01:00:00.000Z,2024-01-01T08:30:00.000Z
"""

import logging
import re
from typing import Iterable, List

import pandas as pd

from sleep_nudge.core.data_processing.feature_engineering import parse_timestamp
from sleep_nudge.core.errors import InvalidTimestamp, MalformedHeader, NoDataRows, NoValidRows
from sleep_nudge.core.models.data_models import CsvImportResult, NightSource, RawNight
from sleep_nudge.utils.constants import CSV_COLUMNS, CSV_DELIMITER, REQUIRED_CSV_COLUMNS

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r'\r?\n')


def _non_blank_lines(text):
    """Trimmed non-blank lines paired with their 1-based line numbers"""
    lines = []
    for number, line in enumerate(_LINE_SPLIT.split(text or ''), start=1):
        line = line.strip()
        if line:
            lines.append((number, line))
    return lines


def parse_csv(text, validate_timestamps=True, source=NightSource.CSV) -> CsvImportResult:
    """
    Parse CSV text into raw nights.

    Rows with fewer fields than the header, or with an empty date/sleep_start/
    sleep_end value, are skipped. When validate_timestamps is set, a single
    unparseable timestamp rejects the whole import.

    Args:
        text: Raw CSV content
        validate_timestamps: Parse every accepted timestamp before returning
        source: Source tag recorded on each night

    Returns:
        CsvImportResult: Accepted nights plus the number of data rows seen

    Raises:
        NoDataRows: fewer than two non-blank lines
        MalformedHeader: a required column is absent
        NoValidRows: every data row was skipped
        InvalidTimestamp: a timestamp failed to parse (validate_timestamps only)
    """
    lines = _non_blank_lines(text)
    if len(lines) <= 1:
        raise NoDataRows()

    header = [h.strip().lower() for h in lines[0][1].split(CSV_DELIMITER)]
    missing = REQUIRED_CSV_COLUMNS - set(header)
    if missing:
        raise MalformedHeader(missing)

    idx_date = header.index('date')
    idx_start = header.index('sleep_start')
    idx_end = header.index('sleep_end')

    nights = []
    skipped = []
    data_lines = lines[1:]

    for number, row in data_lines:
        parts = row.split(CSV_DELIMITER)
        if len(parts) < len(header):
            skipped.append((number, 'too few fields'))
            continue

        date = parts[idx_date].strip()
        sleep_start = parts[idx_start].strip()
        sleep_end = parts[idx_end].strip()

        if not date or not sleep_start or not sleep_end:
            skipped.append((number, 'missing required value'))
            continue

        if validate_timestamps:
            for field, value in (('sleep_start', sleep_start), ('sleep_end', sleep_end)):
                try:
                    parse_timestamp(value, field)
                except InvalidTimestamp:
                    raise InvalidTimestamp(value, field=field, line_number=number)

        nights.append(RawNight(
            date=date,
            sleep_start=sleep_start,
            sleep_end=sleep_end,
            source=source
        ))

    if skipped:
        logger.warning(f"Skipped {len(skipped)} CSV row(s):")
        for number, reason in skipped:
            logger.warning(f"  - Line {number}: {reason}")

    if not nights:
        raise NoValidRows(len(data_lines))

    logger.info(f"Parsed {len(nights)} of {len(data_lines)} CSV rows")
    return CsvImportResult(nights=nights, total_rows=len(data_lines))


def parse_csv_to_nights(text) -> List[RawNight]:
    """Parse CSV text and return only the accepted nights"""
    return parse_csv(text).nights


def export_nights_csv(nights: Iterable[RawNight]) -> str:
    """Write nights in the import layout, header included"""
    rows = [
        {'date': n.date, 'sleep_start': n.sleep_start, 'sleep_end': n.sleep_end}
        for n in nights
    ]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    return df.to_csv(index=False, sep=CSV_DELIMITER, lineterminator='\n')
