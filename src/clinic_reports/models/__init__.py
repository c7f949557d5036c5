"""Data models for clinic records and report views."""

from clinic_reports.models.records import (
    Expense,
    ExpenseCategory,
    Transaction,
    TransactionItem,
    Treatment,
    TreatmentType,
)
from clinic_reports.models.report import (
    GrowthMetric,
    PaymentMethodTotals,
    Period,
    ReportData,
    ReportSummary,
    RevenuePoint,
    TopTreatmentEntry,
    TransactionStats,
    Trend,
    YearComparison,
    YearSnapshot,
)

__all__ = [
    "Expense",
    "ExpenseCategory",
    "Transaction",
    "TransactionItem",
    "Treatment",
    "TreatmentType",
    "GrowthMetric",
    "PaymentMethodTotals",
    "Period",
    "ReportData",
    "ReportSummary",
    "RevenuePoint",
    "TopTreatmentEntry",
    "TransactionStats",
    "Trend",
    "YearComparison",
    "YearSnapshot",
]
