"""Tests for transaction column totals and breakdown checks."""

from datetime import date
from decimal import Decimal

from clinic_reports.datastore import InMemoryDataStore
from clinic_reports.models.records import Transaction
from clinic_reports.models.report import Period
from clinic_reports.processing.breakdown_checker import check_breakdowns
from clinic_reports.processing.report_generator import ReportGenerator
from clinic_reports.processing.transaction_stats import compute_transaction_stats


def create_transaction(
    txn_id: str,
    total: str,
    cash: str = "0",
    card: str = "0",
    medical: str = "0",
    cosmetic: str = "0",
    trans_date: date = date(2024, 5, 1),
) -> Transaction:
    """Helper to create a Transaction for testing."""
    return Transaction(
        id=txn_id,
        date=trans_date,
        total_amount=Decimal(total),
        cash_amount=Decimal(cash),
        card_amount=Decimal(card),
        medical_amount=Decimal(medical),
        cosmetic_amount=Decimal(cosmetic),
    )


class TestComputeTransactionStats:
    """Tests for compute_transaction_stats function."""

    def test_totals(self) -> None:
        """Test every column is totalled."""
        stats = compute_transaction_stats([
            create_transaction("t1", "100", cash="100", medical="100"),
            create_transaction("t2", "60", card="60", cosmetic="60"),
        ])

        assert stats.count == 2
        assert stats.total_amount == Decimal("160")
        assert stats.cash_amount == Decimal("100")
        assert stats.card_amount == Decimal("60")
        assert stats.transfer_amount == Decimal("0")
        assert stats.medical_amount == Decimal("100")
        assert stats.cosmetic_amount == Decimal("60")
        assert stats.average_ticket == Decimal("80")

    def test_empty(self) -> None:
        """Test that no transactions give zero stats."""
        stats = compute_transaction_stats([])

        assert stats.count == 0
        assert stats.average_ticket == Decimal("0")

    def test_attached_to_report(self) -> None:
        """Test that a generated report carries the stats of its period only."""
        store = InMemoryDataStore(transactions=[
            create_transaction("t1", "10", medical="10", trans_date=date(2024, 5, 1)),
            create_transaction("t2", "30", cosmetic="30", trans_date=date(2024, 5, 31)),
            create_transaction("t3", "20", trans_date=date(2024, 6, 1)),
        ])
        may = Period(start=date(2024, 5, 1), end=date(2024, 5, 31))

        stats = ReportGenerator(store).generate_for_period(may).stats

        assert stats.count == 2
        assert stats.total_amount == Decimal("40")
        assert stats.average_ticket == Decimal("20")
        assert stats.cosmetic_amount == Decimal("30")


class TestCheckBreakdowns:
    """Tests for check_breakdowns function."""

    def test_consistent(self) -> None:
        """Test that matching splits produce no warnings."""
        transactions = [create_transaction("t1", "100", cash="40", card="60", medical="100")]

        assert check_breakdowns(transactions) == []

    def test_payment_and_category_mismatch(self) -> None:
        """Test that each split is reported separately."""
        transactions = [create_transaction("t9", "100", cash="90", medical="50")]

        warnings = check_breakdowns(transactions)

        assert len(warnings) == 2
        assert warnings[0].startswith("Transaction t9 (2024-05-01): payment methods sum to 90")
        assert "revenue categories sum to 50" in warnings[1]

    def test_tolerance(self) -> None:
        """Test that differences within the tolerance are ignored."""
        transactions = [create_transaction("t1", "100", cash="99.99", medical="100.01")]

        assert check_breakdowns(transactions) == []
        assert len(check_breakdowns(transactions, tolerance=Decimal("0"))) == 2
