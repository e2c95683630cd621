"""
main.py
--------
Command-line entry point for the Expense Dashboard.

Loads the expense CSV, applies optional filters, prints the month and year
summaries and can export the filtered expenses back to CSV.

Usage (from the project root):
    python main.py

    # With optional arguments:
    python main.py --input path/to/expenses.csv
    python main.py --month June --year 2024
    python main.py --start 01/06/2024 --end 30/06/2024 --category Food --mode CC
    python main.py --export outputs/filtered.csv
"""

import sys
import os
import argparse
import logging
from datetime import date, datetime

# Ensure project root is on path (for runs from any working directory)
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)

from pipeline import ExpensePipeline, DashboardSnapshot
from core.aggregator import MONTH_NAMES, month_index
from core.export import export_to_csv, format_currency
from core.filters import make_criteria
from core.loader import ExpenseLoadError
from core.models import DashboardState
from config.config_loader import get_dashboard_config, get_ingestion_config, get_logging_config


logger = logging.getLogger("main")


def setup_logging() -> None:
    cfg = get_logging_config()
    logging.basicConfig(
        level=getattr(logging, cfg["level"].upper(), logging.INFO),
        format=cfg["format"],
        datefmt=cfg["datefmt"],
    )


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

def _parse_cli_date(value: str) -> date:
    try:
        return datetime.strptime(value, get_ingestion_config()["date_format"]).date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}'. Expected DD/MM/YYYY.")


def _parse_cli_month(value: str) -> str:
    idx = month_index(value)
    if idx < 0:
        raise argparse.ArgumentTypeError(f"Invalid month '{value}'. Expected a month name such as June.")
    return MONTH_NAMES[idx]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Expense Dashboard: summarize expenses by category, mode, day, month and year."
    )
    parser.add_argument(
        "--input", type=str, default=None,
        help="Path to the expense CSV. Defaults to the dashboard data file in the project root."
    )
    parser.add_argument(
        "--month", type=_parse_cli_month, default=None,
        help="Month name to summarize, e.g. June. Defaults to the latest month in the data."
    )
    parser.add_argument(
        "--year", type=int, default=None,
        help="Year to summarize. Defaults to the latest year in the data."
    )
    parser.add_argument(
        "--start", type=_parse_cli_date, default=None,
        help="Start of the date range filter (DD/MM/YYYY). Needs --end."
    )
    parser.add_argument(
        "--end", type=_parse_cli_date, default=None,
        help="End of the date range filter (DD/MM/YYYY). Needs --start."
    )
    parser.add_argument(
        "--category", action="append", default=None,
        help="Only include this category. Repeat for several."
    )
    parser.add_argument(
        "--mode", action="append", default=None,
        help="Only include this payment mode. Repeat for several."
    )
    parser.add_argument(
        "--export", type=str, default=None,
        help="Write the filtered expenses to this CSV path."
    )
    return parser.parse_args(argv)


# =============================================================================
# MAIN
# =============================================================================

def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = parse_args(argv)

    input_path = args.input or os.path.join(PROJECT_ROOT, get_dashboard_config()["data_file"])

    pipeline = ExpensePipeline()
    try:
        expenses = pipeline.load(input_path)
    except ExpenseLoadError as exc:
        logger.error(str(exc))
        return 1

    state = DashboardState(
        expenses=tuple(expenses),
        filters=make_criteria(args.start, args.end, args.category, args.mode),
        month=args.month,
        year=args.year,
    )
    snapshot = pipeline.build(state)

    _print_summary(snapshot)

    if args.export:
        export_dir = os.path.dirname(os.path.abspath(args.export))
        os.makedirs(export_dir, exist_ok=True)
        with open(args.export, "w", encoding="utf-8", newline="") as f:
            f.write(export_to_csv(snapshot.filtered))
        logger.info(f"Exported {len(snapshot.filtered):,} expenses to: {args.export}")

    return 0


def _print_summary(snapshot: DashboardSnapshot):
    """Prints a clean summary table to the console."""
    if snapshot.period is None:
        print("\n  No expenses to display.\n")
        return

    month_data = snapshot.month_summary
    year_data = snapshot.year_summary
    stats = snapshot.stats

    print("\n" + "=" * 80)
    print(f"  {month_data.month.upper()} {month_data.year} OVERVIEW")
    print("=" * 80)

    print(f"\n  Total Spend:        {format_currency(stats.total)}")
    print(f"  Avg. Daily Spend:   {format_currency(stats.avg_daily_spend)}  ({stats.active_days} active days)")
    if stats.highest_day is not None:
        print(f"  Highest Spend Day:  {format_currency(stats.highest_day_total)}  ({stats.highest_day.strftime('%d %b')})")
    print(f"  Top Category:       {stats.top_category}  ({stats.top_category_percentage:.1f}% of total)")

    print("\n  Spend by Category:")
    print("  " + "-" * 60)
    for c in month_data.categories:
        print(f"    {c.category:30s}  {format_currency(c.total):>12s}  ({c.percentage:.1f}%)")

    print("\n  Spend by Payment Mode:")
    print("  " + "-" * 60)
    for m in month_data.modes:
        print(f"    {m.mode:30s}  {format_currency(m.total):>12s}  ({m.percentage:.1f}%)")

    if snapshot.comparison:
        print(f"\n  Change vs {snapshot.previous_month.month}:")
        print("  " + "-" * 60)
        for change in snapshot.comparison:
            sign = "+" if change.change >= 0 else ""
            print(f"    {change.category:30s}  {sign}{format_currency(change.change):>12s}  ({change.percent_change:.1f}%)")

    print(f"\n  {year_data.year} Year to Date: {format_currency(year_data.total)}")
    print("  " + "-" * 60)
    for m in year_data.monthly_totals:
        print(f"    {m.month:30s}  {format_currency(m.total):>12s}")
    print("=" * 80 + "\n")


if __name__ == "__main__":
    sys.exit(main())
