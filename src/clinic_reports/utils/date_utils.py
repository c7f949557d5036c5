"""Date parsing and range helpers."""

import calendar
import re
from datetime import date, datetime

# Formats accepted from table exports, tried in order.
#
# The store returns ISO values ("2024-01-15" or "2024-01-15T10:30:00+00:00").
# Spreadsheet round-trips sometimes turn them into European DD/MM/YYYY,
# which is what the clinic staff use, so slashes are read day-first.
DATE_PATTERNS = [
    (r"^(\d{4})-(\d{1,2})-(\d{1,2})$", "%Y-%m-%d"),
    (r"^(\d{1,2})/(\d{1,2})/(\d{4})$", "%d/%m/%Y"),
    (r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$", "%d.%m.%Y"),
    (r"^(\d{8})$", "%Y%m%d"),
]

COMPILED_PATTERNS = [(re.compile(pattern), fmt) for pattern, fmt in DATE_PATTERNS]

# Leading calendar date of an ISO date-time string
_ISO_DATE_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})[T ]")


def parse_date(raw_date: object) -> date:
    """Parse a store value into a calendar date.

    Date-time values keep their own calendar date: no timezone conversion
    is applied, so "2024-01-01T23:30:00-05:00" is 2024-01-01.

    Args:
        raw_date: A date, datetime or string value.

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if isinstance(raw_date, datetime):
        return raw_date.date()
    if isinstance(raw_date, date):
        return raw_date
    if raw_date is None:
        raise ValueError("Empty date value")

    date_str = str(raw_date).strip()
    if not date_str:
        raise ValueError("Empty date string")

    prefix = _ISO_DATE_PREFIX.match(date_str)
    if prefix:
        date_str = prefix.group(1)

    for pattern, fmt in COMPILED_PATTERNS:
        if pattern.match(date_str):
            try:
                return datetime.strptime(date_str, fmt).date()
            except ValueError:
                continue

    raise ValueError(f"Cannot parse date: '{raw_date}'")


def is_date_in_range(
    d: date,
    start_date: date | None = None,
    end_date: date | None = None,
) -> bool:
    """Check if a date is within a range.

    Args:
        d: Date to check.
        start_date: Start of range (inclusive). None means no lower bound.
        end_date: End of range (inclusive). None means no upper bound.

    Returns:
        True if date is within range.
    """
    if start_date is not None and d < start_date:
        return False
    if end_date is not None and d > end_date:
        return False
    return True


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def year_bounds(year: int) -> tuple[date, date]:
    """Return January 1st and December 31st of a year."""
    return date(year, 1, 1), date(year, 12, 31)
