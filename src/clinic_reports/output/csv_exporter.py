"""CSV exporter for report data."""

import csv
from decimal import Decimal
from pathlib import Path
from typing import Optional

from clinic_reports.config import Config
from clinic_reports.models.report import ReportData, YearComparison
from clinic_reports.utils.decimal_utils import format_currency
from clinic_reports.utils.logging_config import get_logger
from clinic_reports.utils.sanitize import sanitize_cell

logger = get_logger(__name__)


class CSVExporter:
    """Exports report data to CSV files, one per report section.

    Files written to the output directory:
    - report_summary.csv
    - revenue_by_date.csv
    - payment_methods.csv
    - top_treatments.csv
    - year_comparison.csv (only when a comparison is given)
    """

    def __init__(self, config: Config):
        """Initialize CSV exporter.

        Args:
            config: Application configuration.
        """
        self.config = config
        self.output_config = config.output

    def export(
        self,
        output_dir: Path,
        report: ReportData,
        comparison: Optional[YearComparison] = None,
    ) -> list[Path]:
        """Export all report sections to CSV files.

        Args:
            output_dir: Directory to write into (created if missing).
            report: Aggregated report.
            comparison: Optional year comparison.

        Returns:
            List of paths to created CSV files.
        """
        output_dir.mkdir(parents=True, exist_ok=True)

        created_files = [
            self._export_summary(output_dir, report),
            self._export_revenue_by_date(output_dir, report),
            self._export_payment_methods(output_dir, report),
            self._export_top_treatments(output_dir, report),
        ]
        if comparison is not None:
            created_files.append(self._export_year_comparison(output_dir, comparison))

        logger.info(f"Exported {len(created_files)} CSV files to {output_dir}")
        return created_files

    def _money(self, amount: Decimal) -> str:
        return format_currency(amount, self.output_config.decimal_places)

    def _export_summary(self, output_dir: Path, report: ReportData) -> Path:
        """Export headline figures."""
        output_path = output_dir / "report_summary.csv"
        summary = report.summary

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["REPORT SUMMARY", ""])
            writer.writerow(["Period", report.period.display])
            writer.writerow(["Range", report.period.range_type])
            writer.writerow([])
            writer.writerow(["Total Income", self._money(summary.total_income)])
            writer.writerow(["Total Expenses", self._money(summary.total_expenses)])
            writer.writerow(["Net Profit", self._money(summary.net_profit)])
            writer.writerow(["Total Visits", summary.total_visits])

            stats = report.stats
            writer.writerow([])
            writer.writerow(["STATS", ""])
            writer.writerow(["Average Ticket", self._money(stats.average_ticket)])
            writer.writerow(["Medical Revenue", self._money(stats.medical_amount)])
            writer.writerow(["Aesthetic Revenue", self._money(stats.aesthetic_amount)])
            writer.writerow(["Cosmetic Revenue", self._money(stats.cosmetic_amount)])

            if report.breakdown_warnings:
                writer.writerow([])
                writer.writerow(["BREAKDOWN WARNINGS", ""])
                for warning in report.breakdown_warnings:
                    writer.writerow([sanitize_cell(warning), ""])

        return output_path

    def _export_revenue_by_date(self, output_dir: Path, report: ReportData) -> Path:
        """Export the per-day revenue series."""
        output_path = output_dir / "revenue_by_date.csv"

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Date", "Total", "Medical", "Aesthetic", "Cosmetic"])
            for point in report.revenue_points:
                writer.writerow([
                    point.date,
                    self._money(point.total),
                    self._money(point.medical),
                    self._money(point.aesthetic),
                    self._money(point.cosmetic),
                ])

        return output_path

    def _export_payment_methods(self, output_dir: Path, report: ReportData) -> Path:
        """Export payment-method totals."""
        output_path = output_dir / "payment_methods.csv"
        methods = report.payment_methods

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Method", "Amount"])
            writer.writerow(["Cash", self._money(methods.cash)])
            writer.writerow(["Card", self._money(methods.card)])
            writer.writerow(["Transfer", self._money(methods.transfer)])

        return output_path

    def _export_top_treatments(self, output_dir: Path, report: ReportData) -> Path:
        """Export the top-treatments ranking."""
        output_path = output_dir / "top_treatments.csv"

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Rank", "Treatment", "Count", "Revenue"])
            for rank, entry in enumerate(report.top_treatments, 1):
                writer.writerow([
                    rank,
                    sanitize_cell(entry.name),
                    entry.count,
                    self._money(entry.revenue),
                ])

        return output_path

    def _export_year_comparison(self, output_dir: Path, comparison: YearComparison) -> Path:
        """Export year snapshots followed by the growth metrics."""
        output_path = output_dir / "year_comparison.csv"

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Year", "Ingresos", "Gastos", "Beneficio", "Transacciones"])
            for snapshot in comparison.year_data:
                writer.writerow([
                    snapshot.year,
                    self._money(snapshot.ingresos),
                    self._money(snapshot.gastos),
                    self._money(snapshot.beneficio),
                    snapshot.transacciones,
                ])

            if comparison.growth_metrics:
                writer.writerow([])
                writer.writerow(["Metric", "Value", "Change %", "Trend"])
                for metric in comparison.growth_metrics:
                    writer.writerow([metric.label, metric.value, metric.change, metric.trend.value])

        return output_path
