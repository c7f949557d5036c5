"""Report aggregation components."""

from clinic_reports.processing.breakdown_checker import check_breakdowns
from clinic_reports.processing.period_resolver import (
    ALL_YEARS,
    RangeType,
    resolve_period,
)
from clinic_reports.processing.report_generator import (
    ReportGenerator,
    aggregate_report,
    payment_method_totals,
    revenue_by_date,
    summarize,
    top_treatments,
)
from clinic_reports.processing.transaction_stats import compute_transaction_stats
from clinic_reports.processing.year_comparison import (
    YearComparisonService,
    build_year_snapshots,
    compute_growth_metrics,
    percent_change,
)

__all__ = [
    "check_breakdowns",
    "ALL_YEARS",
    "RangeType",
    "resolve_period",
    "ReportGenerator",
    "aggregate_report",
    "payment_method_totals",
    "revenue_by_date",
    "summarize",
    "top_treatments",
    "compute_transaction_stats",
    "YearComparisonService",
    "build_year_snapshots",
    "compute_growth_metrics",
    "percent_change",
]
