"""
table.py
---------
Search, sort and pagination for the expense table.
"""

import math
from typing import List, Sequence, Tuple

from core.models import ExpenseRecord


SORTABLE_FIELDS = (
    "amount", "date", "payee", "category", "payment_mode",
    "time_of_day", "month", "year", "time", "notes",
)


def search_expenses(records: Sequence[ExpenseRecord], term: str) -> List[ExpenseRecord]:
    """Case-insensitive substring match on category, mode, payee and notes."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(records)

    return [
        r for r in records
        if needle in r.category.lower()
        or needle in r.payment_mode.lower()
        or needle in r.payee.lower()
        or needle in r.notes.lower()
    ]


def sort_expenses(
    records: Sequence[ExpenseRecord], field: str = "date", descending: bool = True
) -> List[ExpenseRecord]:
    """
    Sorts by a record field. Amount, date and year sort by value; text
    fields sort case-insensitively.

    Raises:
        ValueError: If field is not sortable.
    """
    if field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by '{field}'. Sortable fields: {list(SORTABLE_FIELDS)}")

    if field in ("amount", "date", "year"):
        key = lambda r: getattr(r, field)
    else:
        key = lambda r: str(getattr(r, field)).lower()

    return sorted(records, key=key, reverse=descending)


def paginate(
    records: Sequence[ExpenseRecord], page: int, per_page: int
) -> Tuple[List[ExpenseRecord], int]:
    """
    Returns (rows on the page, total page count). Pages are 1-based and the
    requested page is clamped into range. An empty list has 0 pages.
    """
    if per_page <= 0:
        raise ValueError(f"per_page must be positive, got {per_page}")

    total_pages = math.ceil(len(records) / per_page)
    if total_pages == 0:
        return [], 0

    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return list(records[start:start + per_page]), total_pages
