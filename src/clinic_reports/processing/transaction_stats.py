"""Column totals over a period's transactions."""

from clinic_reports.models.records import Transaction
from clinic_reports.models.report import TransactionStats


def compute_transaction_stats(transactions: list[Transaction]) -> TransactionStats:
    """Total every amount column and count the transactions.

    Args:
        transactions: Transactions to total.

    Returns:
        TransactionStats (all zero for an empty list).
    """
    stats = TransactionStats()
    for txn in transactions:
        stats.total_amount += txn.total_amount
        stats.cash_amount += txn.cash_amount
        stats.card_amount += txn.card_amount
        stats.transfer_amount += txn.transfer_amount
        stats.medical_amount += txn.medical_amount
        stats.aesthetic_amount += txn.aesthetic_amount
        stats.cosmetic_amount += txn.cosmetic_amount
        stats.count += 1
    return stats
