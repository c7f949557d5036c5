"""Consistency check of transaction payment and revenue splits."""

from decimal import Decimal

from clinic_reports.models.records import Transaction
from clinic_reports.utils.logging_config import get_logger

logger = get_logger(__name__)


def check_breakdowns(
    transactions: list[Transaction],
    tolerance: Decimal = Decimal("0.01"),
) -> list[str]:
    """Find transactions whose splits do not add up to their total.

    Two splits are checked independently:
    - cash + card + transfer against total_amount
    - medical + aesthetic + cosmetic against total_amount

    Transactions are reported, never corrected or rejected.

    Args:
        transactions: Transactions to check.
        tolerance: Largest difference that still counts as matching.

    Returns:
        One warning string per mismatching split.
    """
    warnings: list[str] = []

    for txn in transactions:
        payment_diff = txn.payment_sum - txn.total_amount
        if abs(payment_diff) > tolerance:
            warnings.append(
                f"Transaction {txn.id} ({txn.date_key}): payment methods sum to "
                f"{txn.payment_sum} but total is {txn.total_amount}"
            )

        category_diff = txn.category_sum - txn.total_amount
        if abs(category_diff) > tolerance:
            warnings.append(
                f"Transaction {txn.id} ({txn.date_key}): revenue categories sum to "
                f"{txn.category_sum} but total is {txn.total_amount}"
            )

    if warnings:
        logger.warning(f"{len(warnings)} transaction breakdown mismatches found")
        for warning in warnings:
            logger.debug(warning)

    return warnings
