"""
pipeline.py
------------
Main orchestration layer. Wires together:
    1. Loader + Normalizer  →  full list of ExpenseRecords
    2. Filter Engine        →  working subset for the current DashboardState
    3. Period Summarizer    →  month/year summaries, KPI stats, comparison

The dashboard and the CLI both call build() whenever the dataset, filters
or target period change. Nothing is recomputed implicitly.

Usage:
    from pipeline import ExpensePipeline

    pipeline = ExpensePipeline()
    expenses = pipeline.load("expense-data.csv")
    snapshot = pipeline.build(DashboardState(expenses=tuple(expenses)))
"""

import logging
from dataclasses import dataclass, field
from typing import IO, List, Optional, Tuple

from core.filters import apply_filters
from core.insights import (
    CategoryChange, SummaryStats, compare_months, latest_period,
    previous_month, summary_stats,
)
from core.loader import load_expense_data
from core.models import DashboardState, ExpenseRecord, MonthlyTotal, MonthSummary, YearSummary
from core.summarizer import month_summary, year_summary
from config.config_loader import get_dashboard_config

logger = logging.getLogger(__name__)


@dataclass
class DashboardSnapshot:
    """Every derived view for one DashboardState."""
    filtered: List[ExpenseRecord] = field(default_factory=list)
    period: Optional[Tuple[str, int]] = None     # (month, year) being shown
    month_summary: Optional[MonthSummary] = None
    year_summary: Optional[YearSummary] = None
    stats: Optional[SummaryStats] = None
    previous_month: Optional[MonthlyTotal] = None
    comparison: List[CategoryChange] = field(default_factory=list)


class ExpensePipeline:
    """
    End-to-end expense dashboard pipeline.

    Stateless between calls: the caller owns the DashboardState and passes
    it in each time.
    """

    def __init__(self, comparison_top_n: int | None = None):
        """
        Args:
            comparison_top_n: Override how many categories the month-to-month
                comparison keeps. Defaults to config.
        """
        self.config = get_dashboard_config()
        self.comparison_top_n = (
            self.config["comparison_top_n"] if comparison_top_n is None else comparison_top_n
        )

    # -------------------------------------------------------------------------
    # PUBLIC INTERFACE
    # -------------------------------------------------------------------------

    def load(self, source: str | IO) -> List[ExpenseRecord]:
        """Load and normalize an expense CSV. Raises ExpenseLoadError on failure."""
        logger.info(f"Loading expenses from: {getattr(source, 'name', source)}")
        expenses = load_expense_data(source)
        logger.info(f"Loaded {len(expenses):,} expenses.")
        return expenses

    def build(self, state: DashboardState) -> DashboardSnapshot:
        """
        Recompute every derived view for the given state.

        If the state names no month/year, the latest period in the filtered
        data is used. An empty filtered set yields a snapshot with no period.
        """
        filtered = apply_filters(state.expenses, state.filters)
        logger.info(f"Filters applied. {len(filtered):,} of {len(state.expenses):,} expenses kept.")

        period = self._resolve_period(state, filtered)
        if period is None:
            logger.info("No expenses in the working set; nothing to summarize.")
            return DashboardSnapshot(filtered=filtered)

        month, year = period
        month_data = month_summary(filtered, month, year)
        year_data = year_summary(filtered, year)
        logger.info(
            f"Summaries built for {month} {year}. "
            f"Month total: {month_data.total:,.2f}. Year total: {year_data.total:,.2f}."
        )

        prev = previous_month(year_data, month)
        comparison = compare_months(month_data, prev, self.comparison_top_n) if prev else []

        return DashboardSnapshot(
            filtered=filtered,
            period=period,
            month_summary=month_data,
            year_summary=year_data,
            stats=summary_stats(month_data),
            previous_month=prev,
            comparison=comparison,
        )

    # -------------------------------------------------------------------------
    # INTERNAL
    # -------------------------------------------------------------------------

    def _resolve_period(
        self, state: DashboardState, filtered: List[ExpenseRecord]
    ) -> Optional[Tuple[str, int]]:
        if state.month and state.year:
            return (state.month, state.year)

        latest = latest_period(filtered)
        if latest is None:
            return None

        # Fill in whichever half of the period the state left open
        month = state.month or latest[0]
        year = state.year or latest[1]
        return (month, year)
