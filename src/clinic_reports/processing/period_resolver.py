"""Translate a report range selector into concrete query dates."""

from datetime import date, timedelta
from enum import Enum
from typing import Optional, Union

from clinic_reports.config import ReportingConfig
from clinic_reports.models.report import Period
from clinic_reports.utils.date_utils import month_bounds, year_bounds
from clinic_reports.utils.logging_config import get_logger

logger = get_logger(__name__)

# Year selector value meaning "every year of the comparison window"
ALL_YEARS = "all"

LAST_DAYS_WINDOW = 30

MIN_YEAR = date.min.year
MAX_YEAR = date.max.year


class RangeType(Enum):
    """Report range selector."""

    LAST_30_DAYS = "30days"
    MONTH = "month"
    YEAR = "year"
    CUSTOM = "custom"


def parse_year(year: Union[int, str, None], today: date) -> int:
    """Resolve the target year of a selector.

    Anything that is not a valid calendar year (None, "", "abc", 0,
    ALL_YEARS) falls back to the current year.
    """
    if isinstance(year, bool):
        return today.year
    if isinstance(year, int):
        parsed = year
    elif isinstance(year, str):
        try:
            parsed = int(year.strip())
        except ValueError:
            return today.year
    else:
        return today.year

    if MIN_YEAR <= parsed <= MAX_YEAR:
        return parsed
    return today.year


def resolve_period(
    range_type: Union[RangeType, str],
    year: Union[int, str, None] = None,
    today: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    config: Optional[ReportingConfig] = None,
) -> Period:
    """Resolve a range selector into an inclusive date period.

    - 30days: the last 30 days up to and including today.
    - month: the current month of the target year.
    - year: Jan 1 - Dec 31 of the target year, or the whole comparison
      window when year is ALL_YEARS.
    - custom: the explicit start/end bounds.

    Args:
        range_type: Selector, as a RangeType or its string value.
        year: Target year (int or string). Malformed values mean the current year.
        today: Reference date (defaults to date.today()).
        start: First day for custom ranges.
        end: Last day for custom ranges.
        config: Reporting configuration for the ALL_YEARS window.

    Returns:
        The resolved Period.

    Raises:
        ValueError: If range_type is unknown, or a custom range lacks a bound.
    """
    range_type = RangeType(range_type)
    today = today or date.today()
    config = config or ReportingConfig()

    if range_type is RangeType.LAST_30_DAYS:
        period_start, period_end = today - timedelta(days=LAST_DAYS_WINDOW), today
    elif range_type is RangeType.MONTH:
        target_year = parse_year(year, today)
        period_start, period_end = month_bounds(target_year, today.month)
    elif range_type is RangeType.YEAR:
        if year == ALL_YEARS:
            period_start = year_bounds(config.comparison_start_year)[0]
            period_end = year_bounds(config.comparison_end_year)[1]
        else:
            period_start, period_end = year_bounds(parse_year(year, today))
    else:
        if start is None or end is None:
            raise ValueError("Custom range requires both a start and an end date")
        period_start, period_end = (start, end) if start <= end else (end, start)

    period = Period(start=period_start, end=period_end, range_type=range_type.value)
    logger.debug(f"Resolved {range_type.value} (year={year!r}) to {period.display}")
    return period
