"""In-memory data store over already-loaded records."""

from datetime import date
from typing import Optional

from clinic_reports.datastore.base import ClinicDataStore
from clinic_reports.models.records import Expense, Transaction, TransactionItem
from clinic_reports.utils.date_utils import is_date_in_range


class InMemoryDataStore(ClinicDataStore):
    """Data store backed by plain lists.

    Items without a created_at date are never returned by range queries.
    """

    def __init__(
        self,
        transactions: Optional[list[Transaction]] = None,
        expenses: Optional[list[Expense]] = None,
        items: Optional[list[TransactionItem]] = None,
    ):
        self.transactions = list(transactions or [])
        self.expenses = list(expenses or [])
        self.items = list(items or [])

    def find_transactions_in_range(self, start: date, end: date) -> list[Transaction]:
        return [t for t in self.transactions if is_date_in_range(t.date, start, end)]

    def find_expenses_in_range(self, start: date, end: date) -> list[Expense]:
        return [e for e in self.expenses if is_date_in_range(e.date, start, end)]

    def find_items_in_range(self, start: date, end: date) -> list[TransactionItem]:
        return [
            i for i in self.items
            if i.created_at is not None and is_date_in_range(i.created_at, start, end)
        ]
