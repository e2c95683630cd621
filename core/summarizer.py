"""
summarizer.py
--------------
Period summaries built from aggregator rollups.

Both summaries select records by their own month/year fields, not by their
date. Month names compare case-insensitively; years compare exactly.

Year views (year_summary, monthly_modes) list months differently from the
category/mode rollups, which keep exact-string keys in first-seen order:
  - "June" and "june" merge into one month, reported under the first
    spelling seen.
  - Months are ordered by calendar position, not by first appearance.
  - Names that are not real months (e.g. "Q3") come after every calendar
    month, in first-seen order.
"""

from typing import Dict, List, Sequence, Tuple

from core.aggregator import by_category, by_day, by_mode, month_index
from core.models import ExpenseRecord, ModeTotal, MonthlyTotal, MonthSummary, YearSummary


def _same_month(record: ExpenseRecord, month: str) -> bool:
    return record.month.lower() == month.lower()


def _sum_amounts(records: Sequence[ExpenseRecord]) -> float:
    return float(sum(r.amount for r in records))


def _year_months(selected: Sequence[ExpenseRecord]) -> List[str]:
    """Distinct month names in calendar order, merged case-insensitively."""
    months: Dict[str, str] = {}
    for record in selected:
        months.setdefault(record.month.lower(), record.month)

    # sorted() is stable, so unknown names keep first-seen order
    return sorted(
        months.values(),
        key=lambda m: month_index(m) if month_index(m) >= 0 else len(months) + 12,
    )


def month_summary(records: Sequence[ExpenseRecord], month: str, year: int) -> MonthSummary:
    """
    Totals, category/mode rollups and the full daily grid for one month.

    An empty selection still yields a zero-filled day grid.
    """
    selected = [r for r in records if _same_month(r, month) and r.year == year]

    return MonthSummary(
        month=month,
        year=year,
        total=_sum_amounts(selected),
        categories=by_category(selected),
        modes=by_mode(selected),
        daily_totals=by_day(selected, month, year),
    )


def year_summary(records: Sequence[ExpenseRecord], year: int) -> YearSummary:
    """One MonthlyTotal per distinct month name present in the year's records."""
    selected = [r for r in records if r.year == year]

    monthly_totals: List[MonthlyTotal] = []
    for month in _year_months(selected):
        month_records = [r for r in selected if _same_month(r, month)]
        monthly_totals.append(MonthlyTotal(
            month=month,
            total=_sum_amounts(month_records),
            categories=by_category(month_records),
        ))

    return YearSummary(
        year=year,
        total=_sum_amounts(selected),
        monthly_totals=monthly_totals,
    )


def monthly_modes(records: Sequence[ExpenseRecord], year: int) -> List[Tuple[str, List[ModeTotal]]]:
    """
    Payment-mode rollup for each month of the year, as (month, modes) pairs.

    Months line up one-to-one with year_summary(records, year).monthly_totals.
    """
    selected = [r for r in records if r.year == year]
    return [
        (month, by_mode([r for r in selected if _same_month(r, month)]))
        for month in _year_months(selected)
    ]
