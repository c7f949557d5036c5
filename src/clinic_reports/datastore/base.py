"""Abstract data-store interface the report aggregator reads through."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from clinic_reports.models.records import Expense, Transaction, TransactionItem


class DataStoreError(Exception):
    """Raised when records cannot be fetched from the data store."""

    def __init__(self, message: str, table: Optional[str] = None):
        """Initialize DataStoreError.

        Args:
            message: Error message.
            table: Optional name of the table that failed.
        """
        self.table = table
        super().__init__(message)


class ClinicDataStore(ABC):
    """Range-query access to the clinic's tables.

    Subclasses must implement:
    - find_transactions_in_range(): transactions by ``date``
    - find_expenses_in_range(): expenses by ``date``
    - find_items_in_range(): transaction items by ``created_at`` date,
      with treatment_name resolved

    All bounds are inclusive. Implementations raise DataStoreError on any
    fetch failure and never return a partial result.
    """

    @property
    def name(self) -> str:
        """Return store name for logging."""
        return self.__class__.__name__

    @abstractmethod
    def find_transactions_in_range(self, start: date, end: date) -> list[Transaction]:
        """Return transactions whose date falls within [start, end].

        Raises:
            DataStoreError: If the transactions cannot be fetched.
        """
        pass

    @abstractmethod
    def find_expenses_in_range(self, start: date, end: date) -> list[Expense]:
        """Return expenses whose date falls within [start, end].

        Raises:
            DataStoreError: If the expenses cannot be fetched.
        """
        pass

    @abstractmethod
    def find_items_in_range(self, start: date, end: date) -> list[TransactionItem]:
        """Return transaction items created within [start, end].

        Raises:
            DataStoreError: If the items cannot be fetched.
        """
        pass
