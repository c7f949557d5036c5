"""Data store over CSV exports of the clinic's tables."""

import csv
from datetime import date
from pathlib import Path
from typing import Callable, TypeVar

from clinic_reports.datastore.base import ClinicDataStore, DataStoreError
from clinic_reports.models.records import Expense, Transaction, TransactionItem, Treatment
from clinic_reports.utils.date_utils import is_date_in_range
from clinic_reports.utils.logging_config import get_logger

logger = get_logger(__name__)

# Maximum table file size to prevent memory exhaustion (50 MB)
MAX_TABLE_FILE_SIZE = 50 * 1024 * 1024

TRANSACTIONS_FILE = "transactions.csv"
EXPENSES_FILE = "expenses.csv"
ITEMS_FILE = "transaction_items.csv"
TREATMENTS_FILE = "treatments.csv"

# Tables that may legitimately be absent from an export
OPTIONAL_TABLES = {ITEMS_FILE, TREATMENTS_FILE}

RecordT = TypeVar("RecordT")


class CSVDataStore(ClinicDataStore):
    """Reads table exports from a directory.

    Expected files, one row per record with a header row:
    - transactions.csv
    - expenses.csv
    - transaction_items.csv (optional)
    - treatments.csv (optional, used to resolve item treatment names)

    Comma, semicolon and tab delimiters are detected per file. Every query
    re-reads the files; nothing is cached between calls.
    """

    def __init__(self, data_dir: Path):
        """Initialize CSV data store.

        Args:
            data_dir: Directory containing the table exports.
        """
        self.data_dir = Path(data_dir)

    def find_transactions_in_range(self, start: date, end: date) -> list[Transaction]:
        transactions = self._load_table(TRANSACTIONS_FILE, Transaction.from_dict)
        return [t for t in transactions if is_date_in_range(t.date, start, end)]

    def find_expenses_in_range(self, start: date, end: date) -> list[Expense]:
        expenses = self._load_table(EXPENSES_FILE, Expense.from_dict)
        return [e for e in expenses if is_date_in_range(e.date, start, end)]

    def find_items_in_range(self, start: date, end: date) -> list[TransactionItem]:
        items = self._load_table(ITEMS_FILE, TransactionItem.from_dict)
        treatment_names = {
            t.id: t.name for t in self._load_table(TREATMENTS_FILE, Treatment.from_dict)
        }

        in_range = []
        for item in items:
            if item.created_at is None or not is_date_in_range(item.created_at, start, end):
                continue
            if item.treatment_name is None and item.treatment_id is not None:
                item.treatment_name = treatment_names.get(item.treatment_id)
            in_range.append(item)
        return in_range

    def validate(self) -> list[str]:
        """Check that the required table files are present.

        Returns:
            List of problems found (empty when the directory is usable).
        """
        problems = []
        if not self.data_dir.is_dir():
            return [f"Data directory not found: {self.data_dir}"]
        for filename in (TRANSACTIONS_FILE, EXPENSES_FILE):
            if not (self.data_dir / filename).exists():
                problems.append(f"Missing table export: {filename}")
        return problems

    def _load_table(
        self,
        filename: str,
        factory: Callable[[dict[str, object]], RecordT],
    ) -> list[RecordT]:
        """Read every row of a table export into records.

        Args:
            filename: Table file name inside data_dir.
            factory: Row-to-record constructor.

        Returns:
            Parsed records.

        Raises:
            DataStoreError: If the file is missing (required tables only),
                too large, unreadable or contains a malformed row.
        """
        table = filename.removesuffix(".csv")
        file_path = self.data_dir / filename

        if not file_path.exists():
            if filename in OPTIONAL_TABLES:
                logger.debug(f"Optional table {filename} not found in {self.data_dir}")
                return []
            raise DataStoreError(f"Table export not found: {file_path}", table)

        file_size = file_path.stat().st_size
        if file_size > MAX_TABLE_FILE_SIZE:
            raise DataStoreError(
                f"File too large ({file_size / 1024 / 1024:.1f} MB). "
                f"Maximum allowed is {MAX_TABLE_FILE_SIZE / 1024 / 1024:.0f} MB",
                table,
            )

        records = []
        try:
            with open(file_path, encoding="utf-8-sig", newline="") as f:
                sample = f.read(4096)
                f.seek(0)
                reader = csv.DictReader(f, delimiter=self._detect_delimiter(sample))

                for row_num, row in enumerate(reader, start=2):
                    if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
                        continue
                    cleaned = {
                        (key or "").strip().lower(): (value.strip() if isinstance(value, str) else value)
                        for key, value in row.items()
                    }
                    try:
                        records.append(factory(cleaned))
                    except (KeyError, ValueError, TypeError) as e:
                        raise DataStoreError(
                            f"{filename} line {row_num}: malformed row ({e})", table
                        ) from e
        except DataStoreError:
            raise
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise DataStoreError(f"Failed to read {file_path}: {e}", table) from e

        logger.debug(f"Loaded {len(records)} rows from {filename}")
        return records

    @staticmethod
    def _detect_delimiter(sample: str) -> str:
        """Pick the delimiter that splits the header row into the most columns.

        Spreadsheet exports in Spanish locales use ';' because ',' is the
        decimal separator. Defaults to ','.
        """
        header = sample.splitlines()[0] if sample else ""
        counts = {d: header.count(d) for d in (",", ";", "\t")}
        best = max(counts, key=lambda d: counts[d])
        return best if counts[best] > 0 else ","
