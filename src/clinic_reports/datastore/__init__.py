"""Data-store collaborators the reports read through."""

from clinic_reports.datastore.base import ClinicDataStore, DataStoreError
from clinic_reports.datastore.csv_store import CSVDataStore
from clinic_reports.datastore.memory_store import InMemoryDataStore

__all__ = [
    "ClinicDataStore",
    "DataStoreError",
    "CSVDataStore",
    "InMemoryDataStore",
]
