"""
models.py
----------
Core domain models. These are the typed contracts between pipeline layers.

- ExpenseRecord: Output of the normalizer. One immutable expense transaction.
  Every other layer consumes lists of these.

- CategoryTotal / ModeTotal / DailyTotal: Rollups produced by the aggregator.

- MonthSummary / YearSummary: Period views produced by the summarizer and
  consumed by the dashboard and CLI.

- FilterCriteria / DashboardState: The explicit "current dataset + current
  filters + target period" state passed into the pipeline.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class ExpenseRecord:
    """
    A single normalized expense transaction.

    month/year are carried from the source row and are NOT derived from
    date. The two may disagree; period grouping always uses month/year.
    """

    amount: float                    # >= 0, unparseable amounts become 0
    payee: str                       # "Amount Paid To"
    category: str                    # "Label", defaults to "Uncategorized"
    time_of_day: str                 # "ToD", e.g. "Morning"
    date: date
    month: str                       # Month name as supplied, e.g. "June"
    year: int
    time: str
    payment_mode: str                # "Mode", defaults to "Unknown"
    notes: str = ""


@dataclass
class CategoryTotal:
    category: str
    total: float
    percentage: float                # Share of the subset total, 0–100


@dataclass
class ModeTotal:
    mode: str
    total: float
    percentage: float


@dataclass
class DailyTotal:
    date: date
    total: float


@dataclass
class MonthSummary:
    """Totals for one (month, year) period plus its full daily grid."""
    month: str
    year: int
    total: float
    categories: List[CategoryTotal] = field(default_factory=list)
    modes: List[ModeTotal] = field(default_factory=list)
    daily_totals: List[DailyTotal] = field(default_factory=list)


@dataclass
class MonthlyTotal:
    month: str
    total: float
    categories: List[CategoryTotal] = field(default_factory=list)


@dataclass
class YearSummary:
    """Per-month totals for every month name present in one year's data."""
    year: int
    total: float
    monthly_totals: List[MonthlyTotal] = field(default_factory=list)


@dataclass(frozen=True)
class FilterCriteria:
    """
    Optional filter dimensions. None or an empty collection means
    "no constraint" on that dimension.
    """

    date_range: Optional[Tuple[Optional[date], Optional[date]]] = None
    categories: Optional[frozenset] = None
    modes: Optional[frozenset] = None


@dataclass(frozen=True)
class DashboardState:
    """
    Everything the dashboard needs to recompute its views.

    Replace it with dataclasses.replace() when the user changes a filter or
    the target period; derived views are rebuilt from scratch each time.
    """

    expenses: Tuple[ExpenseRecord, ...] = ()
    filters: FilterCriteria = field(default_factory=FilterCriteria)
    month: Optional[str] = None      # None = latest month in the filtered data
    year: Optional[int] = None
