"""Output generation for Excel and CSV exports."""

from clinic_reports.output.csv_exporter import CSVExporter
from clinic_reports.output.excel_writer import ExcelWriter

__all__ = ["ExcelWriter", "CSVExporter"]
