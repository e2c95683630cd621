"""
filters.py
-----------
Filter engine for the working set shown on the dashboard.

Every dimension of FilterCriteria is optional:
    - date_range only applies when both bounds are set (inclusive).
    - categories / modes are inclusion sets. An empty or missing set means
      "nothing selected, show everything", never "exclude everything".

Dimensions combine with AND.
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from core.models import ExpenseRecord, FilterCriteria


def make_criteria(
    start: Optional[date] = None,
    end: Optional[date] = None,
    categories: Optional[Iterable[str]] = None,
    modes: Optional[Iterable[str]] = None,
) -> FilterCriteria:
    """Builds a FilterCriteria from loose UI/CLI inputs."""
    return FilterCriteria(
        date_range=(start, end) if (start or end) else None,
        categories=frozenset(categories) if categories else None,
        modes=frozenset(modes) if modes else None,
    )


def apply_filters(
    records: Sequence[ExpenseRecord], criteria: FilterCriteria | None = None
) -> List[ExpenseRecord]:
    """
    Returns the records that pass every active filter dimension.

    Always returns a new list; the input is never modified.
    """
    filtered = list(records)
    if criteria is None:
        return filtered

    if criteria.date_range is not None:
        start, end = criteria.date_range
        if start is not None and end is not None:
            filtered = [r for r in filtered if start <= r.date <= end]

    if criteria.categories:
        filtered = [r for r in filtered if r.category in criteria.categories]

    if criteria.modes:
        filtered = [r for r in filtered if r.payment_mode in criteria.modes]

    return filtered
