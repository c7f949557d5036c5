"""Excel workbook writer for report data."""

from decimal import Decimal
from pathlib import Path
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from clinic_reports.config import Config
from clinic_reports.models.report import ReportData, Trend, YearComparison
from clinic_reports.utils.logging_config import get_logger
from clinic_reports.utils.sanitize import sanitize_cell

logger = get_logger(__name__)


class ExcelWriter:
    """Writes report data to a multi-sheet Excel workbook.

    Generates sheets:
    - Summary
    - Revenue by Date
    - Payment Methods
    - Top Treatments
    - Year Comparison (only when a comparison is given)
    """

    SHEET_SUMMARY = "Summary"
    SHEET_REVENUE = "Revenue by Date"
    SHEET_PAYMENTS = "Payment Methods"
    SHEET_TOP_TREATMENTS = "Top Treatments"
    SHEET_YEAR_COMPARISON = "Year Comparison"

    def __init__(self, config: Config):
        """Initialize Excel writer.

        Args:
            config: Application configuration.
        """
        self.config = config
        self.output_config = config.output

        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(
            start_color="4472C4", end_color="4472C4", fill_type="solid"
        )
        self.money_positive = Font(color="006600")  # Dark green
        self.money_negative = Font(color="CC0000")  # Dark red
        self.centered = Alignment(horizontal="center")
        self.thin_border = Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin"),
        )

    def write(
        self,
        output_path: Path,
        report: ReportData,
        comparison: Optional[YearComparison] = None,
    ) -> None:
        """Write all report sections to an Excel workbook.

        Args:
            output_path: Path for output file.
            report: Aggregated report.
            comparison: Optional year comparison.
        """
        logger.info(f"Writing Excel workbook to {output_path}")

        wb = Workbook()
        if wb.active:
            wb.remove(wb.active)

        self._create_summary(wb, report)
        self._create_revenue_sheet(wb, report)
        self._create_payment_methods(wb, report)
        self._create_top_treatments(wb, report)
        if comparison is not None:
            self._create_year_comparison(wb, comparison)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        logger.info(f"Excel workbook saved: {output_path}")

    def _write_headers(self, ws: Worksheet, headers: list[str], row: int = 1) -> None:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.centered
            cell.border = self.thin_border

    def _write_money(self, ws: Worksheet, row: int, column: int, amount: Decimal) -> None:
        cell = ws.cell(row=row, column=column, value=float(amount))
        cell.number_format = self._money_format()
        cell.font = self.money_negative if amount < 0 else self.money_positive

    def _set_widths(self, ws: Worksheet, widths: list[int]) -> None:
        for i, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(i)].width = width

    def _create_summary(self, wb: Workbook, report: ReportData) -> None:
        """Create the Summary sheet with headline figures."""
        ws = wb.create_sheet(self.SHEET_SUMMARY)
        summary = report.summary

        ws.cell(row=1, column=1, value="REPORT SUMMARY").font = Font(bold=True, size=14)
        ws.cell(row=2, column=1, value="Period")
        ws.cell(row=2, column=2, value=report.period.display)
        ws.cell(row=3, column=1, value="Range")
        ws.cell(row=3, column=2, value=report.period.range_type)

        ws.cell(row=5, column=1, value="Total Income")
        self._write_money(ws, 5, 2, summary.total_income)
        ws.cell(row=6, column=1, value="Total Expenses")
        self._write_money(ws, 6, 2, summary.total_expenses)
        ws.cell(row=7, column=1, value="Net Profit").font = Font(bold=True)
        self._write_money(ws, 7, 2, summary.net_profit)
        ws.cell(row=8, column=1, value="Total Visits")
        ws.cell(row=8, column=2, value=summary.total_visits)

        stats = report.stats
        ws.cell(row=10, column=1, value="STATS").font = Font(bold=True)
        for row, (label, amount) in enumerate(
            [
                ("Average Ticket", stats.average_ticket),
                ("Medical Revenue", stats.medical_amount),
                ("Aesthetic Revenue", stats.aesthetic_amount),
                ("Cosmetic Revenue", stats.cosmetic_amount),
            ],
            11,
        ):
            ws.cell(row=row, column=1, value=label)
            self._write_money(ws, row, 2, amount)

        row = 16
        if report.breakdown_warnings:
            ws.cell(row=row, column=1, value="BREAKDOWN WARNINGS").font = Font(bold=True)
            for warning in report.breakdown_warnings:
                row += 1
                ws.cell(row=row, column=1, value=sanitize_cell(warning))

        self._set_widths(ws, [22, 28])

    def _create_revenue_sheet(self, wb: Workbook, report: ReportData) -> None:
        """Create the per-day revenue sheet."""
        ws = wb.create_sheet(self.SHEET_REVENUE)
        self._write_headers(ws, ["Date", "Total", "Medical", "Aesthetic", "Cosmetic"])

        for row, point in enumerate(report.revenue_points, 2):
            ws.cell(row=row, column=1, value=point.date)
            self._write_money(ws, row, 2, point.total)
            self._write_money(ws, row, 3, point.medical)
            self._write_money(ws, row, 4, point.aesthetic)
            self._write_money(ws, row, 5, point.cosmetic)

        self._set_widths(ws, [12, 14, 14, 14, 14])
        ws.freeze_panes = "A2"

    def _create_payment_methods(self, wb: Workbook, report: ReportData) -> None:
        """Create the payment-method totals sheet."""
        ws = wb.create_sheet(self.SHEET_PAYMENTS)
        self._write_headers(ws, ["Method", "Amount"])

        methods = report.payment_methods
        for row, (label, amount) in enumerate(
            [("Cash", methods.cash), ("Card", methods.card), ("Transfer", methods.transfer)],
            2,
        ):
            ws.cell(row=row, column=1, value=label)
            self._write_money(ws, row, 2, amount)

        self._set_widths(ws, [14, 14])

    def _create_top_treatments(self, wb: Workbook, report: ReportData) -> None:
        """Create the top-treatments ranking sheet."""
        ws = wb.create_sheet(self.SHEET_TOP_TREATMENTS)
        self._write_headers(ws, ["Rank", "Treatment", "Count", "Revenue"])

        for row, entry in enumerate(report.top_treatments, 2):
            ws.cell(row=row, column=1, value=row - 1)
            ws.cell(row=row, column=2, value=sanitize_cell(entry.name))
            ws.cell(row=row, column=3, value=entry.count)
            self._write_money(ws, row, 4, entry.revenue)

        self._set_widths(ws, [6, 32, 8, 14])

    def _create_year_comparison(self, wb: Workbook, comparison: YearComparison) -> None:
        """Create the year comparison sheet with growth metrics below the years."""
        ws = wb.create_sheet(self.SHEET_YEAR_COMPARISON)
        self._write_headers(ws, ["Year", "Ingresos", "Gastos", "Beneficio", "Transacciones"])

        row = 2
        for snapshot in comparison.year_data:
            ws.cell(row=row, column=1, value=snapshot.year)
            self._write_money(ws, row, 2, snapshot.ingresos)
            self._write_money(ws, row, 3, snapshot.gastos)
            self._write_money(ws, row, 4, snapshot.beneficio)
            ws.cell(row=row, column=5, value=snapshot.transacciones)
            row += 1

        if comparison.growth_metrics:
            row += 1
            self._write_headers(ws, ["Metric", "Value", "Change %", "Trend"], row=row)
            for metric in comparison.growth_metrics:
                row += 1
                ws.cell(row=row, column=1, value=metric.label)
                ws.cell(row=row, column=2, value=metric.value)
                ws.cell(row=row, column=3, value=metric.change)
                trend_cell = ws.cell(row=row, column=4, value=metric.trend.value)
                trend_cell.font = self.money_positive if metric.trend is Trend.UP else self.money_negative

        self._set_widths(ws, [16, 16, 16, 16, 14])

    def _money_format(self) -> str:
        """Get number format for money values.

        Returns:
            Excel number format string.
        """
        symbol = self.output_config.currency_symbol
        return f'#,##0.00 "{symbol}";[Red]-#,##0.00 "{symbol}"'
