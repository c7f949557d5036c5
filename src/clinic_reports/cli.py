"""Command-line interface for clinic reports."""

import argparse
import os
import sys
from datetime import date, datetime
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from clinic_reports import __version__
from clinic_reports.config import Config, ConfigError, load_config
from clinic_reports.datastore import CSVDataStore, DataStoreError
from clinic_reports.models.report import ReportData, Trend, YearComparison
from clinic_reports.processing.period_resolver import RangeType
from clinic_reports.processing.report_generator import ReportGenerator
from clinic_reports.processing.year_comparison import YearComparisonService
from clinic_reports.utils.decimal_utils import format_eur
from clinic_reports.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
logger = get_logger(__name__)

DATA_DIR_ENV = "CLINIC_REPORTS_DATA_DIR"


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="clinic-reports",
        description="Financial reports for an aesthetics clinic from its table exports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --data-dir ./export
  %(prog)s -d ./export --range year --year 2025 --compare-years
  %(prog)s -d ./export --range custom --start-date 2025-03-01 --end-date 2025-03-15
  %(prog)s -d ./export --range 30days -o reports/last30.xlsx
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-d", "--data-dir",
        type=Path,
        default=None,
        help=f"Directory with the table exports (default: ${DATA_DIR_ENV} or data.data_dir setting)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the report to FILE: .csv writes CSV files next to it, .xlsx a workbook",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings.yaml (default: config/settings.yaml)",
    )

    parser.add_argument(
        "--config-dir",
        type=Path,
        default=Path("config"),
        help="Base config directory (default: ./config)",
    )

    # Period selection
    parser.add_argument(
        "-r", "--range",
        dest="range_type",
        choices=[r.value for r in RangeType],
        default=RangeType.MONTH.value,
        help="Report range (default: month)",
    )

    parser.add_argument(
        "-y", "--year",
        default=None,
        help="Target year for month/year ranges, or 'all' for the whole comparison window",
    )

    parser.add_argument(
        "--start-date",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="Start date for custom range (YYYY-MM-DD)",
    )

    parser.add_argument(
        "--end-date",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="End date for custom range (YYYY-MM-DD)",
    )

    parser.add_argument(
        "--compare-years",
        action="store_true",
        help="Also build the year comparison and growth metrics",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate configuration and data directory only",
    )

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def resolve_data_dir(args: argparse.Namespace, config: Config) -> Path | None:
    """Pick the data directory: CLI flag, then environment, then settings."""
    if args.data_dir is not None:
        return args.data_dir
    env_dir = os.environ.get(DATA_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return config.data.data_dir


def validate_setup(args: argparse.Namespace) -> int:
    """Validate configuration and the data directory.

    Args:
        args: Parsed command-line arguments.

    Returns:
        0 if valid, 1 if errors found.
    """
    console.print("[bold]Validating configuration...[/bold]\n")

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Failed to load configuration: {e}[/red]")
        return 1

    reporting = config.reporting
    console.print("[green]✓[/green] Configuration loaded")
    console.print(
        f"  - Comparison window: {reporting.comparison_start_year}-{reporting.comparison_end_year}"
    )
    console.print(f"  - Top treatments: {reporting.top_treatments_limit}")
    console.print(f"  - Breakdown validation: {'on' if reporting.validate_breakdowns else 'off'}")

    data_dir = resolve_data_dir(args, config)
    if data_dir is None:
        console.print("\n[red]Errors:[/red]")
        console.print(f"  - No data directory (use --data-dir or set {DATA_DIR_ENV})")
        return 1

    problems = CSVDataStore(data_dir).validate()
    if problems:
        console.print("\n[red]Errors:[/red]")
        for problem in problems:
            console.print(f"  - {problem}")
        return 1

    console.print(f"[green]✓[/green] Data directory: {data_dir}")
    console.print("\n[green]Setup is valid.[/green]")
    return 0


def display_report(report: ReportData, config: Config) -> None:
    """Print the report as rich tables.

    Args:
        report: Aggregated report.
        config: Application configuration (currency symbol).
    """
    symbol = config.output.currency_symbol
    decimals = config.output.decimal_places

    def money(amount) -> str:
        return format_eur(amount, decimal_places=decimals, symbol=symbol)

    summary = report.summary
    console.print(f"\n[bold]Report {report.period.display}[/bold] ({report.period.range_type})")
    console.print(f"  Income:     {money(summary.total_income)}")
    console.print(f"  Expenses:   {money(summary.total_expenses)}")
    profit_style = "green" if summary.net_profit >= 0 else "red"
    console.print(f"  Net profit: [{profit_style}]{money(summary.net_profit)}[/{profit_style}]")
    console.print(f"  Visits:     {summary.total_visits}")
    stats = report.stats
    console.print(f"  Avg ticket: {money(stats.average_ticket)}")

    lines = Table(title="Revenue by treatment line")
    lines.add_column("Line")
    lines.add_column("Amount", justify="right")
    lines.add_row("Medical", money(stats.medical_amount))
    lines.add_row("Aesthetic", money(stats.aesthetic_amount))
    lines.add_row("Cosmetic", money(stats.cosmetic_amount))
    console.print(lines)

    methods = report.payment_methods
    payments = Table(title="Payment methods")
    payments.add_column("Method")
    payments.add_column("Amount", justify="right")
    payments.add_row("Cash", money(methods.cash))
    payments.add_row("Card", money(methods.card))
    payments.add_row("Transfer", money(methods.transfer))
    console.print(payments)

    if report.top_treatments:
        treatments = Table(title="Top treatments")
        treatments.add_column("#", justify="right")
        treatments.add_column("Treatment")
        treatments.add_column("Count", justify="right")
        treatments.add_column("Revenue", justify="right")
        for rank, entry in enumerate(report.top_treatments, 1):
            treatments.add_row(str(rank), entry.name, str(entry.count), money(entry.revenue))
        console.print(treatments)

    console.print(f"  Days with revenue: {len(report.revenue_points)}")

    if report.breakdown_warnings:
        console.print(f"\n[yellow]Breakdown warnings ({len(report.breakdown_warnings)}):[/yellow]")
        for warning in report.breakdown_warnings[:10]:
            console.print(f"  - {warning}")
        if len(report.breakdown_warnings) > 10:
            console.print(f"  ... and {len(report.breakdown_warnings) - 10} more")


def display_comparison(comparison: YearComparison, config: Config) -> None:
    """Print the year comparison and growth metrics.

    Args:
        comparison: Year comparison data.
        config: Application configuration (currency symbol).
    """
    symbol = config.output.currency_symbol

    years = Table(title="Year comparison")
    years.add_column("Year")
    years.add_column("Ingresos", justify="right")
    years.add_column("Gastos", justify="right")
    years.add_column("Beneficio", justify="right")
    years.add_column("Transacciones", justify="right")
    for snapshot in comparison.year_data:
        years.add_row(
            str(snapshot.year),
            format_eur(snapshot.ingresos, symbol=symbol),
            format_eur(snapshot.gastos, symbol=symbol),
            format_eur(snapshot.beneficio, symbol=symbol),
            str(snapshot.transacciones),
        )
    console.print(years)

    if not comparison.growth_metrics:
        console.print("[dim]No growth metrics: current or previous year outside the window[/dim]")
        return

    for metric in comparison.growth_metrics:
        arrow = "[green]▲[/green]" if metric.trend is Trend.UP else "[red]▼[/red]"
        console.print(f"  {metric.label}: {metric.value} {arrow} {metric.change}%")


def write_output(
    output: Path,
    report: ReportData,
    comparison: YearComparison | None,
    config: Config,
) -> None:
    """Write the report to CSV files or an Excel workbook based on the extension."""
    from clinic_reports.output import CSVExporter, ExcelWriter

    if output.suffix.lower() == ".xlsx":
        ExcelWriter(config).write(output, report, comparison)
        console.print(f"\n[green]Excel file written to {output}[/green]")
    else:
        CSVExporter(config).export(output.parent, report, comparison)
        console.print(f"\n[green]CSV files written to {output.parent}[/green]")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    log_level = get_log_level(args.verbose)
    setup_logging(level=log_level, console_output=args.verbose > 0)

    if args.validate_only:
        return validate_setup(args)

    if args.range_type == RangeType.CUSTOM.value and (args.start_date is None or args.end_date is None):
        console.print("[red]Error: --range custom requires --start-date and --end-date[/red]")
        parser.print_usage()
        return 1

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("Run with --validate-only to check configuration files.")
        return 1

    # Settings may point the log somewhere else; -v still wins for the level
    setup_logging(
        level=log_level if args.verbose else config.logging.level,
        log_file=config.logging.file,
        console_output=args.verbose > 0,
    )

    data_dir = resolve_data_dir(args, config)
    if data_dir is None:
        console.print(f"[red]Error: --data-dir is required (or set {DATA_DIR_ENV})[/red]")
        parser.print_usage()
        return 1

    if not data_dir.is_dir():
        console.print(f"[red]Error: Data directory not found: {data_dir}[/red]")
        return 1

    store = CSVDataStore(data_dir)
    today = datetime.now().date()

    console.print(f"[bold]Clinic Reports v{__version__}[/bold]\n")
    console.print(f"Data directory: {data_dir}")

    comparison: YearComparison | None = None
    try:
        with console.status("[bold green]Building report..."):
            report = ReportGenerator(store, config).generate(
                args.range_type,
                year=args.year,
                today=today,
                start=args.start_date,
                end=args.end_date,
            )
        if args.compare_years:
            with console.status("[bold green]Comparing years..."):
                comparison = YearComparisonService(store, config).compare(today=today)
    except DataStoreError as e:
        logger.error(f"Report aborted: {e}")
        table = f" ({e.table})" if e.table else ""
        console.print(f"[red]Error reading data{table}: {e}[/red]")
        return 1

    display_report(report, config)
    if comparison is not None:
        display_comparison(comparison, config)

    if args.output is not None:
        write_output(args.output, report, comparison, config)

    return 0


if __name__ == "__main__":
    sys.exit(main())
