"""Report aggregation for the clinic reports screen."""

import logging
from datetime import date
from typing import Optional, Union

from clinic_reports.config import Config, ReportingConfig
from clinic_reports.datastore.base import ClinicDataStore
from clinic_reports.models.records import Expense, Transaction, TransactionItem
from clinic_reports.models.report import (
    PaymentMethodTotals,
    Period,
    ReportData,
    ReportSummary,
    RevenuePoint,
    TopTreatmentEntry,
)
from clinic_reports.processing.breakdown_checker import check_breakdowns
from clinic_reports.processing.period_resolver import RangeType, resolve_period
from clinic_reports.processing.transaction_stats import compute_transaction_stats
from clinic_reports.utils.decimal_utils import sum_amounts
from clinic_reports.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


def summarize(transactions: list[Transaction], expenses: list[Expense]) -> ReportSummary:
    """Compute income, expenses, profit and visit count.

    Args:
        transactions: Transactions in the period.
        expenses: Expenses in the period.

    Returns:
        ReportSummary (all zero for empty inputs).
    """
    total_income = sum_amounts(t.total_amount for t in transactions)
    total_expenses = sum_amounts(e.total_amount for e in expenses)
    return ReportSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=total_income - total_expenses,
        total_visits=len(transactions),
    )


def revenue_by_date(transactions: list[Transaction]) -> list[RevenuePoint]:
    """Group transaction revenue per calendar day.

    Days are keyed by the transaction's own calendar date, without any
    timezone shift.

    Args:
        transactions: Transactions in the period.

    Returns:
        One RevenuePoint per distinct day, ascending by date.
    """
    points: dict[str, RevenuePoint] = {}

    for txn in transactions:
        key = txn.date_key
        point = points.get(key)
        if point is None:
            point = points[key] = RevenuePoint(date=key)
        point.total += txn.total_amount
        point.medical += txn.medical_amount
        point.aesthetic += txn.aesthetic_amount
        point.cosmetic += txn.cosmetic_amount

    return sorted(points.values(), key=lambda p: p.date)


def payment_method_totals(transactions: list[Transaction]) -> PaymentMethodTotals:
    """Sum cash, card and transfer amounts independently."""
    return PaymentMethodTotals(
        cash=sum_amounts(t.cash_amount for t in transactions),
        card=sum_amounts(t.card_amount for t in transactions),
        transfer=sum_amounts(t.transfer_amount for t in transactions),
    )


def top_treatments(
    items: list[TransactionItem],
    limit: int = 5,
    unknown_label: str = "Desconocido",
) -> list[TopTreatmentEntry]:
    """Rank treatments by revenue.

    Items whose treatment could not be resolved are grouped under
    unknown_label. Equal revenues keep the order in which the treatment
    was first seen.

    Args:
        items: Transaction items in the period.
        limit: Maximum number of entries returned.
        unknown_label: Name for unresolved treatments.

    Returns:
        Up to ``limit`` entries, highest revenue first.
    """
    by_name: dict[str, TopTreatmentEntry] = {}

    for item in items:
        name = item.treatment_name or unknown_label
        entry = by_name.get(name)
        if entry is None:
            entry = by_name[name] = TopTreatmentEntry(name=name)
        entry.count += item.quantity
        entry.revenue += item.subtotal

    ranked = sorted(by_name.values(), key=lambda e: e.revenue, reverse=True)
    return ranked[:limit]


def aggregate_report(
    period: Period,
    transactions: list[Transaction],
    expenses: list[Expense],
    items: list[TransactionItem],
    config: Optional[ReportingConfig] = None,
) -> ReportData:
    """Reduce already-fetched records into the report view model.

    Records are trusted to be inside ``period``; no filtering happens here.

    Args:
        period: Period the records were fetched for.
        transactions: Transactions in the period.
        expenses: Expenses in the period.
        items: Transaction items in the period.
        config: Reporting configuration (defaults if None).

    Returns:
        ReportData for the period.
    """
    config = config or ReportingConfig()

    breakdown_warnings: list[str] = []
    if config.validate_breakdowns:
        breakdown_warnings = check_breakdowns(transactions, config.breakdown_tolerance)

    return ReportData(
        period=period,
        summary=summarize(transactions, expenses),
        revenue_points=revenue_by_date(transactions),
        payment_methods=payment_method_totals(transactions),
        stats=compute_transaction_stats(transactions),
        top_treatments=top_treatments(
            items,
            limit=config.top_treatments_limit,
            unknown_label=config.unknown_treatment_label,
        ),
        breakdown_warnings=breakdown_warnings,
    )


class ReportGenerator:
    """Fetches a period's records from a data store and aggregates them.

    Every call re-fetches and recomputes; caching is left to the caller.
    """

    def __init__(self, store: ClinicDataStore, config: Optional[Config] = None):
        """Initialize report generator.

        Args:
            store: Data store to read records from.
            config: Application configuration.
        """
        self.store = store
        self.config = config or Config()

    def generate(
        self,
        range_type: Union[RangeType, str] = RangeType.MONTH,
        year: Union[int, str, None] = None,
        today: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ReportData:
        """Build the report for a range selector.

        Args:
            range_type: Range selector.
            year: Target year, ALL_YEARS, or None for the current year.
            today: Reference date (defaults to date.today()).
            start: First day for custom ranges.
            end: Last day for custom ranges.

        Returns:
            ReportData for the resolved period.

        Raises:
            DataStoreError: If any of the three fetches fails. No partial
                report is produced.
        """
        period = resolve_period(
            range_type,
            year=year,
            today=today,
            start=start,
            end=end,
            config=self.config.reporting,
        )
        return self.generate_for_period(period)

    def generate_for_period(self, period: Period) -> ReportData:
        """Build the report for an already-resolved period.

        Raises:
            DataStoreError: If any fetch fails.
        """
        with LogContext(
            logger,
            "report generation",
            level=logging.INFO,
            store=self.store.name,
            period=period.display,
        ) as ctx:
            transactions = self.store.find_transactions_in_range(period.start, period.end)
            expenses = self.store.find_expenses_in_range(period.start, period.end)
            items = self.store.find_items_in_range(period.start, period.end)

            report = aggregate_report(
                period, transactions, expenses, items, self.config.reporting
            )
            ctx.add(transactions=len(transactions), expenses=len(expenses), items=len(items))

        return report
