"""Report view models produced by the aggregator."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from clinic_reports.utils.decimal_utils import ZERO


@dataclass
class Period:
    """Inclusive date range a report covers.

    Attributes:
        start: First day included.
        end: Last day included.
        range_type: Selector value that produced this period ("30days", "month", ...).
    """

    start: date
    end: date
    range_type: str = "custom"

    @property
    def start_iso(self) -> str:
        """Lower query boundary (YYYY-MM-DD)."""
        return self.start.isoformat()

    @property
    def end_iso(self) -> str:
        """Upper query boundary (YYYY-MM-DD)."""
        return self.end.isoformat()

    @property
    def display(self) -> str:
        """Formatted date range string."""
        return f"{self.start_iso} to {self.end_iso}"


@dataclass
class ReportSummary:
    """Headline figures for a period."""

    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    net_profit: Decimal = ZERO
    total_visits: int = 0


@dataclass
class RevenuePoint:
    """Revenue collected on one calendar day, split by treatment line."""

    date: str
    total: Decimal = ZERO
    medical: Decimal = ZERO
    aesthetic: Decimal = ZERO
    cosmetic: Decimal = ZERO


@dataclass
class PaymentMethodTotals:
    """Income split by how patients paid."""

    cash: Decimal = ZERO
    card: Decimal = ZERO
    transfer: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        """Sum of the three methods (not checked against transaction totals)."""
        return self.cash + self.card + self.transfer


@dataclass
class TopTreatmentEntry:
    """Aggregated sales of one treatment.

    Attributes:
        name: Treatment name, or the fallback label for unresolved treatments.
        count: Units sold (sum of line quantities).
        revenue: Sum of line subtotals.
    """

    name: str
    count: int = 0
    revenue: Decimal = ZERO


@dataclass
class TransactionStats:
    """Column totals over the transactions of a period."""

    total_amount: Decimal = ZERO
    cash_amount: Decimal = ZERO
    card_amount: Decimal = ZERO
    transfer_amount: Decimal = ZERO
    medical_amount: Decimal = ZERO
    aesthetic_amount: Decimal = ZERO
    cosmetic_amount: Decimal = ZERO
    count: int = 0

    @property
    def average_ticket(self) -> Decimal:
        """Mean amount per transaction (0 when there are none)."""
        if self.count == 0:
            return ZERO
        return self.total_amount / self.count


@dataclass
class ReportData:
    """Everything the reports screen renders for one period."""

    period: Period
    summary: ReportSummary
    revenue_points: list[RevenuePoint] = field(default_factory=list)
    payment_methods: PaymentMethodTotals = field(default_factory=PaymentMethodTotals)
    stats: TransactionStats = field(default_factory=TransactionStats)
    top_treatments: list[TopTreatmentEntry] = field(default_factory=list)
    breakdown_warnings: list[str] = field(default_factory=list)


@dataclass
class YearSnapshot:
    """One year's aggregated figures.

    Field names follow the labels of the year comparison chart.

    Attributes:
        year: Calendar year.
        ingresos: Income.
        gastos: Expenses.
        beneficio: Net profit (ingresos - gastos).
        transacciones: Number of transactions.
    """

    year: int
    ingresos: Decimal = ZERO
    gastos: Decimal = ZERO
    beneficio: Decimal = ZERO
    transacciones: int = 0


class Trend(Enum):
    """Direction of a year-over-year change."""

    UP = "up"
    DOWN = "down"


@dataclass
class GrowthMetric:
    """Current year against the previous year for one figure.

    Attributes:
        label: Display label ("Ingresos", "Beneficio Neto", "Transacciones").
        value: Current-year value, already formatted for display.
        change: Absolute percentage change, rounded to an integer.
        trend: UP when the current value is >= the previous one.
    """

    label: str
    value: str
    change: int
    trend: Trend


@dataclass
class YearComparison:
    """Year snapshots in ascending order plus the derived growth metrics."""

    year_data: list[YearSnapshot] = field(default_factory=list)
    growth_metrics: list[GrowthMetric] = field(default_factory=list)

    @property
    def years(self) -> list[int]:
        """Years covered, ascending."""
        return [snapshot.year for snapshot in self.year_data]

    def snapshot_for(self, year: int) -> YearSnapshot | None:
        """Snapshot for a year, or None if it is outside the window."""
        for snapshot in self.year_data:
            if snapshot.year == year:
                return snapshot
        return None
