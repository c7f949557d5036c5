"""Tests for year comparison and growth metrics."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from clinic_reports.config import Config, ReportingConfig
from clinic_reports.datastore import DataStoreError, InMemoryDataStore
from clinic_reports.models.records import Expense, Transaction
from clinic_reports.models.report import Trend, YearSnapshot
from clinic_reports.processing.year_comparison import (
    LABEL_INCOME,
    LABEL_NET_PROFIT,
    LABEL_TRANSACTIONS,
    YearComparisonService,
    build_year_snapshots,
    compute_growth_metrics,
    percent_change,
)


def create_transaction(total: str, trans_date: date, txn_id: str = "t") -> Transaction:
    """Helper to create a Transaction for testing."""
    return Transaction(id=txn_id, date=trans_date, total_amount=Decimal(total))


def create_expense(total: str, exp_date: date, exp_id: str = "e") -> Expense:
    """Helper to create an Expense for testing."""
    return Expense(id=exp_id, date=exp_date, total_amount=Decimal(total))


def snapshot(year: int, ingresos: str, gastos: str, transacciones: int) -> YearSnapshot:
    """Helper to create a consistent YearSnapshot."""
    return YearSnapshot(
        year=year,
        ingresos=Decimal(ingresos),
        gastos=Decimal(gastos),
        beneficio=Decimal(ingresos) - Decimal(gastos),
        transacciones=transacciones,
    )


class TestPercentChange:
    """Tests for percent_change function."""

    @pytest.mark.parametrize(
        "current,previous,expected",
        [
            ("0", "0", "0"),
            ("150", "100", "50"),
            ("50", "100", "-50"),
            ("100", "0", "0"),
            ("0", "100", "-100"),
        ],
    )
    def test_percent_change(self, current: str, previous: str, expected: str) -> None:
        """Test percentage change including the zero-previous case."""
        assert percent_change(Decimal(current), Decimal(previous)) == Decimal(expected)


class TestBuildYearSnapshots:
    """Tests for build_year_snapshots function."""

    def test_groups_by_year(self) -> None:
        """Test that records are summed into their own year."""
        transactions = [
            create_transaction("100", date(2023, 1, 1)),
            create_transaction("50", date(2023, 12, 31)),
            create_transaction("70", date(2024, 6, 1)),
        ]
        expenses = [create_expense("30", date(2023, 5, 5))]

        snapshots = build_year_snapshots(transactions, expenses, [2023, 2024])

        assert snapshots[0] == snapshot(2023, "150", "30", 2)
        assert snapshots[1] == snapshot(2024, "70", "0", 1)

    def test_empty_years_are_zero(self) -> None:
        """Test that years without records are present with zeros."""
        snapshots = build_year_snapshots([], [], [2022, 2023])

        assert [s.year for s in snapshots] == [2022, 2023]
        assert all(s.ingresos == 0 and s.transacciones == 0 for s in snapshots)

    def test_ascending_order(self) -> None:
        """Test that snapshots are ordered by year regardless of input order."""
        snapshots = build_year_snapshots([], [], [2026, 2022, 2024])

        assert [s.year for s in snapshots] == [2022, 2024, 2026]

    def test_records_outside_years_ignored(self) -> None:
        """Test that records from other years do not leak in."""
        transactions = [create_transaction("999", date(2021, 12, 31))]

        snapshots = build_year_snapshots(transactions, [], [2022])

        assert snapshots[0].ingresos == Decimal("0")


class TestComputeGrowthMetrics:
    """Tests for compute_growth_metrics function."""

    def test_three_metrics(self) -> None:
        """Test income, profit and count metrics against the previous year."""
        year_data = [
            snapshot(2024, "10000", "4000", 100),
            snapshot(2025, "12345", "2345", 80),
        ]

        metrics = compute_growth_metrics(year_data, 2025)

        assert [m.label for m in metrics] == [LABEL_INCOME, LABEL_NET_PROFIT, LABEL_TRANSACTIONS]

        income, profit, count = metrics
        assert income.value == "12.345 €"
        assert income.change == 23
        assert income.trend is Trend.UP

        assert profit.value == "10.000 €"
        assert profit.change == 67
        assert profit.trend is Trend.UP

        assert count.value == "80"
        assert count.change == 20
        assert count.trend is Trend.DOWN

    def test_decrease_reports_absolute_change(self) -> None:
        """Test that a drop has a positive change and a down trend."""
        metrics = compute_growth_metrics(
            [snapshot(2024, "100", "0", 1), snapshot(2025, "50", "0", 1)], 2025
        )

        assert metrics[0].change == 50
        assert metrics[0].trend is Trend.DOWN

    def test_equal_values_trend_up(self) -> None:
        """Test that an unchanged value counts as up."""
        metrics = compute_growth_metrics(
            [snapshot(2024, "100", "0", 3), snapshot(2025, "100", "0", 3)], 2025
        )

        assert all(m.change == 0 and m.trend is Trend.UP for m in metrics)

    def test_zero_previous_is_zero_change(self) -> None:
        """Test that growth from nothing is reported as 0%."""
        metrics = compute_growth_metrics(
            [snapshot(2024, "0", "0", 0), snapshot(2025, "1234", "0", 5)], 2025
        )

        assert metrics[0].value == "1234 €"
        assert metrics[0].change == 0
        assert metrics[0].trend is Trend.UP

    def test_change_rounds_half_up(self) -> None:
        """Test that 12.5% rounds to 13."""
        metrics = compute_growth_metrics(
            [snapshot(2024, "800", "0", 1), snapshot(2025, "900", "0", 1)], 2025
        )

        assert metrics[0].change == 13

    @pytest.mark.parametrize("current_year", [2022, 2027])
    def test_missing_year_gives_no_metrics(self, current_year: int) -> None:
        """Test the all-or-nothing rule when a year is outside the window."""
        year_data = [snapshot(y, "100", "0", 1) for y in range(2022, 2027)]

        assert compute_growth_metrics(year_data, current_year) == []


class TestYearComparisonService:
    """Tests for YearComparisonService."""

    def test_compare(self) -> None:
        """Test snapshots for the window and metrics for the current year."""
        store = InMemoryDataStore(
            transactions=[
                create_transaction("1000", date(2024, 3, 1), "a"),
                create_transaction("1500", date(2025, 3, 1), "b"),
                create_transaction("5000", date(2021, 3, 1), "old"),
            ],
            expenses=[create_expense("200", date(2025, 4, 1))],
        )

        comparison = YearComparisonService(store).compare(today=date(2025, 10, 1))

        assert comparison.years == [2022, 2023, 2024, 2025, 2026]
        assert comparison.snapshot_for(2025) == snapshot(2025, "1500", "200", 1)
        assert comparison.snapshot_for(2021) is None
        assert comparison.growth_metrics[0].change == 50
        assert comparison.growth_metrics[1].value == "1300 €"

    def test_single_fetch_per_table(self) -> None:
        """Test that the whole window is fetched with one query per table."""
        store = MagicMock()
        store.name = "mock"
        store.find_transactions_in_range.return_value = []
        store.find_expenses_in_range.return_value = []

        YearComparisonService(store).compare(today=date(2025, 1, 1))

        store.find_transactions_in_range.assert_called_once_with(
            date(2022, 1, 1), date(2026, 12, 31)
        )
        store.find_expenses_in_range.assert_called_once_with(
            date(2022, 1, 1), date(2026, 12, 31)
        )

    def test_configured_window(self) -> None:
        """Test a configured comparison window."""
        config = Config(
            reporting=ReportingConfig(comparison_start_year=2023, comparison_end_year=2024)
        )

        comparison = YearComparisonService(InMemoryDataStore(), config).compare(
            today=date(2025, 1, 1)
        )

        assert comparison.years == [2023, 2024]
        assert comparison.growth_metrics == []

    def test_fetch_failure_propagates(self) -> None:
        """Test that a failing fetch aborts the comparison."""
        store = MagicMock()
        store.name = "mock"
        store.find_transactions_in_range.return_value = []
        store.find_expenses_in_range.side_effect = DataStoreError("timeout", "expenses")

        with pytest.raises(DataStoreError):
            YearComparisonService(store).compare(today=date(2025, 1, 1))
