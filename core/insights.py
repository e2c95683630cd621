"""
insights.py
------------
Derived numbers for the dashboard's KPI cards, period picker and
month-to-month comparison. Everything here reads summaries produced by the
summarizer; nothing touches raw rows.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple

import numpy as np

from core.aggregator import month_index, period_of
from core.models import ExpenseRecord, MonthlyTotal, MonthSummary, YearSummary


@dataclass
class SummaryStats:
    """Headline numbers for one month."""
    total: float
    avg_daily_spend: float           # Per day with spend > 0
    active_days: int
    highest_day: Optional[date]      # None when nothing was spent
    highest_day_total: float
    top_category: str                # "None" when there are no categories
    top_category_percentage: float


@dataclass
class CategoryChange:
    """One category's movement between two months."""
    category: str
    current: float
    previous: float
    change: float
    percent_change: float


@dataclass
class FilterOptions:
    """Choices offered by the filter panel."""
    categories: List[str] = field(default_factory=list)
    modes: List[str] = field(default_factory=list)
    years: List[int] = field(default_factory=list)
    min_date: Optional[date] = None
    max_date: Optional[date] = None


def summary_stats(summary: MonthSummary) -> SummaryStats:
    totals = np.array([d.total for d in summary.daily_totals], dtype=float)
    active_days = int(np.count_nonzero(totals > 0))

    avg_daily = summary.total / active_days if active_days else 0.0

    highest_day: Optional[date] = None
    highest_total = 0.0
    if active_days:
        peak = int(np.argmax(totals))
        highest_day = summary.daily_totals[peak].date
        highest_total = float(totals[peak])

    top = summary.categories[0] if summary.categories else None

    return SummaryStats(
        total=summary.total,
        avg_daily_spend=avg_daily,
        active_days=active_days,
        highest_day=highest_day,
        highest_day_total=highest_total,
        top_category=top.category if top else "None",
        top_category_percentage=top.percentage if top else 0.0,
    )


def latest_period(records: Sequence[ExpenseRecord]) -> Optional[Tuple[str, int]]:
    """(month name, year) of the most recent record date, or None if empty."""
    if not records:
        return None
    return period_of(max(r.date for r in records))


def previous_month(year_data: YearSummary, month: str) -> Optional[MonthlyTotal]:
    """
    The closest month before `month` that has data in the same year.

    Returns None for January, for unknown month names, or when no earlier
    month is present.
    """
    current_idx = month_index(month)
    if current_idx < 0:
        return None

    earlier = [
        m for m in year_data.monthly_totals
        if 0 <= month_index(m.month) < current_idx
    ]
    if not earlier:
        return None
    return max(earlier, key=lambda m: month_index(m.month))


def compare_months(
    current: MonthSummary, previous: MonthlyTotal, top_n: int = 5
) -> List[CategoryChange]:
    """
    Per-category change between two months, biggest absolute moves first.

    percent_change is relative to the previous month; when the previous
    total is 0 it is 100 for any new spend and 0 otherwise.
    """
    current_totals = {c.category: c.total for c in current.categories}
    previous_totals = {c.category: c.total for c in previous.categories}

    # dict.fromkeys keeps first-seen order across both months
    categories = list(dict.fromkeys([*current_totals, *previous_totals]))

    changes = []
    for category in categories:
        now = current_totals.get(category, 0.0)
        before = previous_totals.get(category, 0.0)
        delta = now - before
        if before:
            pct = delta / before * 100
        else:
            pct = 100.0 if now > 0 else 0.0
        changes.append(CategoryChange(category, now, before, delta, pct))

    changes.sort(key=lambda c: abs(c.change), reverse=True)
    return changes[:top_n]


def filter_options(records: Sequence[ExpenseRecord]) -> FilterOptions:
    if not records:
        return FilterOptions()

    return FilterOptions(
        categories=sorted({r.category for r in records}),
        modes=sorted({r.payment_mode for r in records}),
        years=sorted({r.year for r in records}),
        min_date=min(r.date for r in records),
        max_date=max(r.date for r in records),
    )
