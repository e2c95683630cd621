"""
aggregator.py
--------------
Grouped totals over a list of ExpenseRecords.

    - by_category / by_mode: one rollup per distinct label, with its share of
      the subset total. Sorted by total descending; ties keep the order in
      which the label first appears in the input.
    - by_day: one entry per calendar day of a month, zero-filled.

Grouping keys are exact, case-sensitive strings. "Food" and "food" are two
different categories. Percentages are relative to the records passed in,
never to the full dataset.
"""

from datetime import date
from typing import Callable, List, Sequence, Tuple

import pandas as pd

from core.models import CategoryTotal, DailyTotal, ExpenseRecord, ModeTotal
from config.config_loader import get_ingestion_config


MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def month_index(month: str) -> int:
    """0-based index of a month name (case-insensitive), or -1 if unknown."""
    lowered = (month or "").strip().lower()
    for i, name in enumerate(MONTH_NAMES):
        if name.lower() == lowered:
            return i
    return -1


# -------------------------------------------------------------------------
# CATEGORY / MODE ROLLUPS
# -------------------------------------------------------------------------

def by_category(records: Sequence[ExpenseRecord]) -> List[CategoryTotal]:
    """Totals per category, largest first."""
    default = get_ingestion_config()["default_category"]
    return [
        CategoryTotal(category=key, total=total, percentage=pct)
        for key, total, pct in _group_totals(records, lambda r: r.category or default)
    ]


def by_mode(records: Sequence[ExpenseRecord]) -> List[ModeTotal]:
    """Totals per payment mode, largest first."""
    default = get_ingestion_config()["default_payment_mode"]
    return [
        ModeTotal(mode=key, total=total, percentage=pct)
        for key, total, pct in _group_totals(records, lambda r: r.payment_mode or default)
    ]


def _group_totals(
    records: Sequence[ExpenseRecord], key_fn: Callable[[ExpenseRecord], str]
) -> List[Tuple[str, float, float]]:
    """
    Sums amounts per key and attaches percentage shares.

    groupby(sort=False) keeps first-seen key order; the final sort is stable,
    so equal totals stay in that order.
    """
    if not records:
        return []

    frame = pd.DataFrame({
        "key": [key_fn(r) for r in records],
        "amount": [r.amount for r in records],
    })
    totals = frame.groupby("key", sort=False)["amount"].sum()
    grand_total = float(frame["amount"].sum())

    rows = [
        (str(key), float(total), (float(total) / grand_total) * 100 if grand_total > 0 else 0.0)
        for key, total in totals.items()
    ]
    return sorted(rows, key=lambda row: row[1], reverse=True)


# -------------------------------------------------------------------------
# DAILY GRID
# -------------------------------------------------------------------------

def by_day(records: Sequence[ExpenseRecord], month: str, year: int) -> List[DailyTotal]:
    """
    Daily totals for every calendar day of (month, year).

    Records are matched on their own date value. Their month/year text
    fields play no part here, so a record whose date falls outside the
    month is simply not counted.

    Raises:
        ValueError: If month is not a recognizable month name.
    """
    idx = month_index(month)
    if idx < 0:
        raise ValueError(f"Unknown month name: {month!r}. Expected one of {MONTH_NAMES}.")

    first_day = pd.Timestamp(year=int(year), month=idx + 1, day=1)
    days = pd.date_range(start=first_day, periods=first_day.days_in_month, freq="D")

    totals = {day.date(): 0.0 for day in days}
    for record in records:
        if record.date in totals:
            totals[record.date] += record.amount

    return [DailyTotal(date=day, total=total) for day, total in totals.items()]


def period_of(day: date) -> Tuple[str, int]:
    """Month name and year of a calendar date."""
    return MONTH_NAMES[day.month - 1], day.year
