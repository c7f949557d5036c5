"""Year-over-year comparison and growth metrics."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from clinic_reports.config import Config
from clinic_reports.datastore.base import ClinicDataStore
from clinic_reports.models.records import Expense, Transaction
from clinic_reports.models.report import GrowthMetric, Trend, YearComparison, YearSnapshot
from clinic_reports.utils.date_utils import year_bounds
from clinic_reports.utils.decimal_utils import ZERO, format_eur, round_half_up
from clinic_reports.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)

LABEL_INCOME = "Ingresos"
LABEL_NET_PROFIT = "Beneficio Neto"
LABEL_TRANSACTIONS = "Transacciones"


def percent_change(current: Decimal, previous: Decimal) -> Decimal:
    """Percentage change from previous to current.

    A zero previous value yields 0 rather than an infinite change.

    Examples:
        percent_change(150, 100) == 50
        percent_change(50, 100) == -50
        percent_change(0, 0) == 0
    """
    if previous == 0:
        return ZERO
    return (Decimal(current) - Decimal(previous)) / Decimal(previous) * 100


def build_year_snapshots(
    transactions: list[Transaction],
    expenses: list[Expense],
    years: list[int],
) -> list[YearSnapshot]:
    """Aggregate records into one snapshot per requested year.

    Records outside ``years`` are ignored; years without records get an
    all-zero snapshot.

    Args:
        transactions: Transactions covering the window.
        expenses: Expenses covering the window.
        years: Years to report.

    Returns:
        Snapshots in ascending year order.
    """
    snapshots = {year: YearSnapshot(year=year) for year in sorted(set(years))}

    for txn in transactions:
        snapshot = snapshots.get(txn.date.year)
        if snapshot is None:
            continue
        snapshot.ingresos += txn.total_amount
        snapshot.transacciones += 1

    for expense in expenses:
        snapshot = snapshots.get(expense.date.year)
        if snapshot is None:
            continue
        snapshot.gastos += expense.total_amount

    for snapshot in snapshots.values():
        snapshot.beneficio = snapshot.ingresos - snapshot.gastos

    return list(snapshots.values())


def _growth_metric(label: str, value: str, current: Decimal, previous: Decimal) -> GrowthMetric:
    change = percent_change(current, previous)
    return GrowthMetric(
        label=label,
        value=value,
        change=round_half_up(abs(change)),
        trend=Trend.UP if current >= previous else Trend.DOWN,
    )


def compute_growth_metrics(
    year_data: list[YearSnapshot],
    current_year: int,
    currency_symbol: str = "€",
) -> list[GrowthMetric]:
    """Compare the current year's snapshot against the previous year's.

    Either both years are present and three metrics are returned
    (income, net profit, transaction count), or nothing is returned.

    Args:
        year_data: Year snapshots.
        current_year: Year treated as "current".
        currency_symbol: Symbol used in the formatted money values.

    Returns:
        Three GrowthMetric entries, or an empty list.
    """
    by_year = {snapshot.year: snapshot for snapshot in year_data}
    current = by_year.get(current_year)
    previous = by_year.get(current_year - 1)

    if current is None or previous is None:
        logger.debug(
            f"No growth metrics: {current_year} or {current_year - 1} outside "
            f"the comparison window"
        )
        return []

    return [
        _growth_metric(
            LABEL_INCOME,
            format_eur(current.ingresos, symbol=currency_symbol),
            current.ingresos,
            previous.ingresos,
        ),
        _growth_metric(
            LABEL_NET_PROFIT,
            format_eur(current.beneficio, symbol=currency_symbol),
            current.beneficio,
            previous.beneficio,
        ),
        _growth_metric(
            LABEL_TRANSACTIONS,
            str(current.transacciones),
            Decimal(current.transacciones),
            Decimal(previous.transacciones),
        ),
    ]


class YearComparisonService:
    """Builds the year comparison chart data from a data store.

    The whole comparison window is fetched with one range query per table
    and grouped by year locally.
    """

    def __init__(self, store: ClinicDataStore, config: Optional[Config] = None):
        """Initialize year comparison service.

        Args:
            store: Data store to read records from.
            config: Application configuration (comparison window).
        """
        self.store = store
        self.config = config or Config()

    def compare(self, today: Optional[date] = None) -> YearComparison:
        """Build snapshots for every window year and the growth metrics.

        Args:
            today: Reference date deciding the current year (defaults to today).

        Returns:
            YearComparison with snapshots in ascending year order.

        Raises:
            DataStoreError: If either fetch fails.
        """
        today = today or date.today()
        years = self.config.reporting.comparison_years
        start = year_bounds(years[0])[0]
        end = year_bounds(years[-1])[1]

        with LogContext(
            logger,
            "year comparison",
            level=logging.INFO,
            store=self.store.name,
            years=f"{years[0]}-{years[-1]}",
        ) as ctx:
            transactions = self.store.find_transactions_in_range(start, end)
            expenses = self.store.find_expenses_in_range(start, end)

            year_data = build_year_snapshots(transactions, expenses, years)
            growth_metrics = compute_growth_metrics(
                year_data,
                today.year,
                currency_symbol=self.config.output.currency_symbol,
            )
            ctx.add(
                transactions=len(transactions),
                expenses=len(expenses),
                growth_metrics=len(growth_metrics),
            )

        return YearComparison(year_data=year_data, growth_metrics=growth_metrics)
