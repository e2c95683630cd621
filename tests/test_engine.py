"""
test_engine.py
---------------
Test suite for the expense dashboard pipeline.

Run from the project root:
    python -m pytest tests/ -v

Tests are organized by layer:
    - Config
    - Record Normalizer
    - Aggregator
    - Period Summarizer
    - Filter Engine
    - Loader & Export
    - Insights & Expense Table
    - Full Pipeline & CLI (integration)
"""

import sys
import os
import io
import dataclasses
import pytest
import pandas as pd
from datetime import date

# Ensure the project root is on the path
PROJECT_ROOT = os.path.join(os.path.dirname(__file__), "..")
sys.path.insert(0, PROJECT_ROOT)

from config import config_loader
from config.config_loader import load_config, get_ingestion_config, reset_config
from core.models import CategoryTotal, DashboardState, ExpenseRecord, FilterCriteria, ModeTotal
from core.normalizer import normalize, parse_amount, parse_date, parse_year
from core.aggregator import by_category, by_day, by_mode, month_index
from core.summarizer import month_summary, monthly_modes, year_summary
from core.filters import apply_filters, make_criteria
from core.loader import ExpenseLoadError, load_expense_data
from core.export import export_to_csv, format_currency
from core.insights import compare_months, filter_options, latest_period, previous_month, summary_stats
from core.table import paginate, search_expenses, sort_expenses
from pipeline import ExpensePipeline
import main as cli


SAMPLE_CSV = os.path.join(PROJECT_ROOT, "expense-data.csv")


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config_cache():
    """Clears config cache before each test for isolation."""
    reset_config()
    yield
    reset_config()


def _row(
    amount: str = "₹100",
    date_str: str = "01/06/2024",
    month: str = "June",
    year: str = "2024",
    label: str = "Food",
    mode: str = "CC",
    payee: str = "Swiggy",
    notes: str = "",
) -> dict:
    """Helper: a raw CSV row as the loader would hand it over."""
    return {
        "Amount": amount,
        "Amount Paid To": payee,
        "Label": label,
        "ToD": "Night",
        "Date": date_str,
        "Month": month,
        "Year": year,
        "Time": "20:00",
        "Mode": mode,
        "Notes": notes,
    }


def _record(
    amount: float = 100.0,
    day: date = date(2024, 6, 1),
    month: str = "June",
    year: int = 2024,
    category: str = "Food",
    mode: str = "CC",
    payee: str = "Swiggy",
    notes: str = "",
) -> ExpenseRecord:
    """Helper: an ExpenseRecord built directly for aggregation tests."""
    return ExpenseRecord(
        amount=amount,
        payee=payee,
        category=category,
        time_of_day="Night",
        date=day,
        month=month,
        year=year,
        time="20:00",
        payment_mode=mode,
        notes=notes,
    )


def _june_scenario() -> list:
    rows = [
        _row(amount="₹1,200", date_str="15/06/2024", label="Food", mode="CC"),
        _row(amount="₹800", date_str="20/06/2024", label="Commute", mode="Debit"),
    ]
    return normalize(rows)


# =============================================================================
# CONFIG TESTS
# =============================================================================

class TestConfig:
    def test_config_loads_successfully(self):
        config = load_config()
        assert "ingestion" in config
        assert "export" in config
        assert "dashboard" in config
        assert "logging" in config

    def test_ingestion_defaults(self):
        cfg = get_ingestion_config()
        assert cfg["default_category"] == "Uncategorized"
        assert cfg["default_payment_mode"] == "Unknown"
        assert cfg["date_format"] == "%d/%m/%Y"
        assert set(cfg["required_columns"]) == {"Amount", "Date"}

    def test_missing_block_raises(self):
        with pytest.raises(KeyError):
            config_loader._get_block("nonexistent_block")

    def test_missing_config_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))


# =============================================================================
# RECORD NORMALIZER TESTS
# =============================================================================

class TestParsers:
    def test_parse_amount_strips_symbol_and_separators(self):
        assert parse_amount("₹1,200") == 1200.0
        assert parse_amount("1,234.50") == 1234.5
        assert parse_amount("₹ 99") == 99.0
        assert parse_amount("Rs.250") == 250.0

    def test_parse_amount_reads_leading_number(self):
        assert parse_amount("12abc") == 12.0

    def test_parse_amount_bad_values_become_zero(self):
        assert parse_amount("") == 0.0
        assert parse_amount(None) == 0.0
        assert parse_amount("abc") == 0.0
        assert parse_amount("nan") == 0.0

    def test_parse_amount_negative_clamps_to_zero(self):
        assert parse_amount("-50") == 0.0

    def test_parse_date_day_first(self):
        assert parse_date("15/06/2024") == date(2024, 6, 15)
        assert parse_date("01/12/2023") == date(2023, 12, 1)

    def test_parse_date_bad_value_falls_back_to_today(self):
        fallback = date(2030, 1, 1)
        assert parse_date("not-a-date", today=fallback) == fallback
        assert parse_date("31/02/2024", today=fallback) == fallback
        assert parse_date("2024-06-15", today=fallback) == fallback
        assert parse_date("", today=fallback) == fallback

    def test_parse_year(self):
        fallback = date(2030, 1, 1)
        assert parse_year("2024") == 2024
        assert parse_year("2024.0") == 2024
        assert parse_year("abc", today=fallback) == 2030
        assert parse_year("0", today=fallback) == 2030
        assert parse_year(None, today=fallback) == 2030


class TestNormalizer:
    def test_normalizes_scenario_rows(self):
        records = _june_scenario()
        assert len(records) == 2
        first = records[0]
        assert first.amount == 1200.0
        assert first.category == "Food"
        assert first.payment_mode == "CC"
        assert first.date == date(2024, 6, 15)
        assert first.month == "June"
        assert first.year == 2024
        assert first.payee == "Swiggy"

    def test_blank_amount_row_dropped_even_with_valid_date(self):
        records = normalize([_row(amount="", date_str="15/06/2024"), _row()])
        assert len(records) == 1
        assert records[0].amount == 100.0

    def test_blank_date_row_dropped(self):
        records = normalize([_row(date_str=""), _row(amount="   ")])
        assert records == []

    def test_unparseable_date_defaults_to_today(self):
        """Corrupt dates become today's date rather than raising. This pins
        the current lenient behavior; it makes such rows look like today's."""
        before = date.today()
        records = normalize([_row(amount="₹500", date_str="not-a-date")])
        after = date.today()

        assert len(records) == 1
        assert records[0].amount == 500.0
        assert records[0].date in (before, after)

    def test_bad_amount_kept_as_zero(self):
        records = normalize([_row(amount="free")])
        assert len(records) == 1
        assert records[0].amount == 0.0

    def test_defaults_for_missing_fields(self):
        records = normalize([{"Amount": "₹50", "Date": "02/06/2024"}], today=date(2030, 5, 5))
        assert len(records) == 1
        r = records[0]
        assert r.category == "Uncategorized"
        assert r.payment_mode == "Unknown"
        assert r.payee == ""
        assert r.month == ""
        assert r.notes == ""
        assert r.year == 2030

    def test_month_is_not_derived_from_date(self):
        records = normalize([_row(date_str="15/06/2024", month="July")])
        assert records[0].month == "July"
        assert records[0].date.month == 6

    def test_accepts_dataframe_input(self):
        df = pd.DataFrame([_row(), _row(amount="₹250", label="Rent")])
        records = normalize(df)
        assert [r.category for r in records] == ["Food", "Rent"]

    def test_empty_input(self):
        assert normalize([]) == []

    def test_records_are_immutable(self):
        record = _june_scenario()[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.amount = 5.0


# =============================================================================
# AGGREGATOR TESTS
# =============================================================================

class TestAggregator:
    def _records(self):
        return [
            _record(300.0, category="Food", mode="CC"),
            _record(150.5, category="Rent", mode="UPI"),
            _record(49.5, category="Food", mode="Debit"),
            _record(500.0, category="Travel", mode="CC"),
        ]

    def test_group_sums_match_record_sum(self):
        records = self._records()
        expected = sum(r.amount for r in records)
        assert sum(c.total for c in by_category(records)) == pytest.approx(expected)
        assert sum(m.total for m in by_mode(records)) == pytest.approx(expected)

    def test_percentages_sum_to_100(self):
        records = self._records()
        assert sum(c.percentage for c in by_category(records)) == pytest.approx(100.0)
        assert sum(m.percentage for m in by_mode(records)) == pytest.approx(100.0)

    def test_empty_input_gives_empty_groups(self):
        assert by_category([]) == []
        assert by_mode([]) == []

    def test_zero_amounts_give_zero_percentages(self):
        result = by_category([_record(0.0), _record(0.0, category="Rent")])
        assert all(c.percentage == 0 for c in result)

    def test_sorted_descending(self):
        result = by_category(self._records())
        assert [c.category for c in result] == ["Travel", "Food", "Rent"]
        assert result[0] == CategoryTotal("Travel", 500.0, pytest.approx(50.0))

    def test_ties_keep_first_seen_order(self):
        records = [
            _record(100.0, category="A"),
            _record(100.0, category="B"),
            _record(200.0, category="C"),
        ]
        assert [c.category for c in by_category(records)] == ["C", "A", "B"]

    def test_grouping_is_case_sensitive(self):
        result = by_category([_record(10.0, category="Food"), _record(10.0, category="food")])
        assert {c.category for c in result} == {"Food", "food"}

    def test_mode_totals(self):
        result = by_mode(self._records())
        assert result[0] == ModeTotal("CC", 800.0, pytest.approx(80.0))

    @pytest.mark.parametrize("month,year,days", [
        ("June", 2024, 30),
        ("February", 2024, 29),
        ("February", 2023, 28),
        ("december", 2024, 31),
    ])
    def test_by_day_covers_every_calendar_day(self, month, year, days):
        result = by_day([], month, year)
        assert len(result) == days
        assert all(d.total == 0 for d in result)
        assert result[0].date.day == 1
        assert result[-1].date.day == days

    def test_by_day_matches_on_date_not_month_field(self):
        records = [
            _record(70.0, day=date(2024, 6, 10), month="July"),
            _record(30.0, day=date(2024, 6, 10)),
            _record(99.0, day=date(2024, 7, 1), month="June"),
        ]
        result = by_day(records, "June", 2024)
        assert result[9].date == date(2024, 6, 10)
        assert result[9].total == 100.0
        assert sum(d.total for d in result) == 100.0

    def test_by_day_unknown_month_raises(self):
        with pytest.raises(ValueError, match="Unknown month"):
            by_day([], "Smarch", 2024)

    def test_month_index(self):
        assert month_index("January") == 0
        assert month_index("june") == 5
        assert month_index("Junee") == -1


# =============================================================================
# PERIOD SUMMARIZER TESTS
# =============================================================================

class TestSummarizer:
    def test_june_scenario(self):
        summary = month_summary(_june_scenario(), "June", 2024)

        assert summary.total == 2000.0
        assert [(c.category, c.total) for c in summary.categories] == [("Food", 1200.0), ("Commute", 800.0)]
        assert summary.categories[0].percentage == pytest.approx(60.0)
        assert summary.categories[1].percentage == pytest.approx(40.0)

        assert len(summary.daily_totals) == 30
        by_date = {d.date.day: d.total for d in summary.daily_totals}
        assert by_date[15] == 1200.0
        assert by_date[20] == 800.0
        assert sum(v for k, v in by_date.items() if k not in (15, 20)) == 0

    def test_month_match_is_case_insensitive(self):
        assert month_summary(_june_scenario(), "june", 2024).total == 2000.0

    def test_year_must_match(self):
        summary = month_summary(_june_scenario(), "June", 2023)
        assert summary.total == 0
        assert summary.categories == []
        assert summary.modes == []
        assert len(summary.daily_totals) == 30

    def test_groups_by_month_field_when_date_disagrees(self):
        records = [_record(100.0, day=date(2024, 7, 2), month="June")]
        summary = month_summary(records, "June", 2024)
        assert summary.total == 100.0
        assert summary.categories[0].total == 100.0
        # The daily grid is keyed on the record's actual date, which is in July
        assert sum(d.total for d in summary.daily_totals) == 0

    def test_year_summary_months_and_totals(self):
        records = [
            _record(100.0, month="July", day=date(2024, 7, 1)),
            _record(200.0, month="May", day=date(2024, 5, 1)),
            _record(50.0, month="may", day=date(2024, 5, 2), category="Rent"),
            _record(999.0, month="May", year=2023, day=date(2023, 5, 1)),
        ]
        summary = year_summary(records, 2024)

        assert summary.year == 2024
        assert summary.total == 350.0
        assert [m.month for m in summary.monthly_totals] == ["May", "July"]
        may = summary.monthly_totals[0]
        assert may.total == 250.0
        assert [c.category for c in may.categories] == ["Food", "Rent"]

    def test_year_summary_unknown_month_names_sort_last(self):
        records = [
            _record(10.0, month="Q3"),
            _record(10.0, month="March"),
        ]
        summary = year_summary(records, 2024)
        assert [m.month for m in summary.monthly_totals] == ["March", "Q3"]

    def test_year_summary_merges_case_and_orders_by_calendar(self):
        records = [
            _record(10.0, month="june", day=date(2024, 6, 1)),
            _record(20.0, month="March", day=date(2024, 3, 1)),
            _record(30.0, month="JUNE", day=date(2024, 6, 2)),
        ]
        summary = year_summary(records, 2024)
        # First spelling wins; calendar order beats first-seen order
        assert [m.month for m in summary.monthly_totals] == ["March", "june"]
        assert summary.monthly_totals[1].total == 40.0

    def test_monthly_modes_follows_year_summary_months(self):
        records = [
            _record(100.0, month="July", day=date(2024, 7, 1), mode="UPI"),
            _record(200.0, month="May", day=date(2024, 5, 1), mode="CC"),
            _record(50.0, month="may", day=date(2024, 5, 2), mode="UPI"),
            _record(999.0, month="May", year=2023, day=date(2023, 5, 1), mode="Cash"),
        ]
        modes = monthly_modes(records, 2024)

        assert [month for month, _ in modes] == [
            m.month for m in year_summary(records, 2024).monthly_totals
        ]
        may = modes[0][1]
        assert [(m.mode, m.total) for m in may] == [("CC", 200.0), ("UPI", 50.0)]
        assert [(m.mode, m.total) for m in modes[1][1]] == [("UPI", 100.0)]

    def test_monthly_modes_empty(self):
        assert monthly_modes([], 2024) == []

    def test_year_summary_empty(self):
        summary = year_summary([], 2024)
        assert summary.total == 0
        assert summary.monthly_totals == []


# =============================================================================
# FILTER ENGINE TESTS
# =============================================================================

class TestFilters:
    def _records(self):
        return [
            _record(100.0, day=date(2024, 6, 1), category="Food", mode="CC"),
            _record(200.0, day=date(2024, 6, 10), category="Rent", mode="UPI"),
            _record(300.0, day=date(2024, 6, 20), category="Food", mode="UPI"),
        ]

    def test_no_filters_is_noop(self):
        records = self._records()
        assert apply_filters(records, FilterCriteria()) == records
        assert apply_filters(records) == records

    def test_returns_new_list(self):
        records = self._records()
        assert apply_filters(records) is not records

    def test_empty_inclusion_sets_do_not_exclude(self):
        records = self._records()
        criteria = FilterCriteria(categories=frozenset(), modes=frozenset())
        assert apply_filters(records, criteria) == records

    def test_category_inclusion(self):
        result = apply_filters(self._records(), FilterCriteria(categories=frozenset({"Food"})))
        assert [r.amount for r in result] == [100.0, 300.0]

    def test_date_range_inclusive(self):
        criteria = FilterCriteria(date_range=(date(2024, 6, 1), date(2024, 6, 10)))
        result = apply_filters(self._records(), criteria)
        assert [r.amount for r in result] == [100.0, 200.0]

    def test_half_open_date_range_ignored(self):
        criteria = FilterCriteria(date_range=(date(2024, 6, 15), None))
        assert len(apply_filters(self._records(), criteria)) == 3

    def test_dimensions_combine_with_and(self):
        criteria = make_criteria(
            start=date(2024, 6, 5), end=date(2024, 6, 30),
            categories=["Food"], modes=["UPI"],
        )
        result = apply_filters(self._records(), criteria)
        assert [r.amount for r in result] == [300.0]

    def test_make_criteria_empty_inputs(self):
        criteria = make_criteria(categories=[], modes=None)
        assert criteria == FilterCriteria()


# =============================================================================
# LOADER & EXPORT TESTS
# =============================================================================

class TestExport:
    def test_format_currency(self):
        assert format_currency(1200) == "₹1,200"
        assert format_currency(1234567) == "₹12,34,567"
        assert format_currency(0) == "₹0"
        assert format_currency(1234.4) == "₹1,234"
        assert format_currency(0.5) == "₹1"
        assert format_currency(-200) == "-₹200"

    def test_format_currency_uses_lakh_grouping(self):
        assert format_currency(99999) == "₹99,999"
        assert format_currency(123456.7) == "₹1,23,457"
        assert format_currency(100000) == "₹1,00,000"
        assert format_currency(123456789) == "₹12,34,56,789"
        assert format_currency(-150000) == "-₹1,50,000"

    def test_lakh_amounts_read_back(self):
        records = normalize([_row(amount="250000")])
        df = pd.read_csv(io.StringIO(export_to_csv(records)), dtype=str, keep_default_na=False)
        assert df.loc[0, "Amount"] == "₹2,50,000"
        assert normalize(df)[0].amount == 250000.0

    def test_export_round_trip_preserves_dates(self):
        records = normalize([
            _row(amount="₹1,200", date_str="15/06/2024"),
            _row(amount="₹80", date_str="01/12/2023", month="December", year="2023"),
        ])
        csv_text = export_to_csv(records)

        reparsed = normalize(pd.read_csv(io.StringIO(csv_text), dtype=str, keep_default_na=False))
        assert [r.date for r in reparsed] == [r.date for r in records]

    def test_export_formats_amount_and_date(self):
        records = normalize([_row(amount="1234.6", date_str="05/06/2024")])
        df = pd.read_csv(io.StringIO(export_to_csv(records)), dtype=str)
        assert df.loc[0, "Amount"] == "₹1,235"
        assert df.loc[0, "Date"] == "05/06/2024"
        assert list(df.columns) == get_ingestion_config()["columns"]

    def test_export_empty(self):
        text = export_to_csv([])
        assert text.strip().startswith("Amount,")


class TestLoader:
    def test_loads_sample_data(self):
        records = load_expense_data(SAMPLE_CSV)
        # 27 data rows, one with a blank amount
        assert len(records) == 26
        assert all(r.amount >= 0 for r in records)

    def test_sample_defaults_applied(self):
        records = load_expense_data(SAMPLE_CSV)
        decathlon = next(r for r in records if r.payee == "Decathlon")
        assert decathlon.category == "Uncategorized"
        assert decathlon.payment_mode == "Unknown"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ExpenseLoadError, match="not found"):
            load_expense_data(str(tmp_path / "nope.csv"))

    def test_missing_required_columns_raises(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("Label,Mode\nFood,CC\n", encoding="utf-8")
        with pytest.raises(ExpenseLoadError, match="Missing required columns"):
            load_expense_data(str(path))

    def test_empty_file_raises(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ExpenseLoadError):
            load_expense_data(str(path))

    def test_column_order_irrelevant(self, tmp_path):
        path = tmp_path / "reordered.csv"
        path.write_text("Date,Label,Amount\n15/06/2024,Food,\"₹1,200\"\n", encoding="utf-8")
        records = load_expense_data(str(path))
        assert len(records) == 1
        assert records[0].amount == 1200.0
        assert records[0].category == "Food"


# =============================================================================
# INSIGHTS & EXPENSE TABLE TESTS
# =============================================================================

class TestInsights:
    def test_summary_stats_scenario(self):
        stats = summary_stats(month_summary(_june_scenario(), "June", 2024))
        assert stats.total == 2000.0
        assert stats.active_days == 2
        assert stats.avg_daily_spend == 1000.0
        assert stats.highest_day == date(2024, 6, 15)
        assert stats.highest_day_total == 1200.0
        assert stats.top_category == "Food"
        assert stats.top_category_percentage == pytest.approx(60.0)

    def test_summary_stats_empty_month(self):
        stats = summary_stats(month_summary([], "June", 2024))
        assert stats.total == 0
        assert stats.avg_daily_spend == 0
        assert stats.highest_day is None
        assert stats.top_category == "None"

    def test_latest_period(self):
        records = [_record(day=date(2024, 5, 3)), _record(day=date(2024, 7, 9))]
        assert latest_period(records) == ("July", 2024)
        assert latest_period([]) is None

    def test_previous_month(self):
        records = [
            _record(month="May", day=date(2024, 5, 1)),
            _record(month="July", day=date(2024, 7, 1)),
        ]
        year_data = year_summary(records, 2024)
        assert previous_month(year_data, "July").month == "May"
        assert previous_month(year_data, "May") is None
        assert previous_month(year_data, "Nonsense") is None

    def test_compare_months(self):
        current = month_summary(_june_scenario(), "June", 2024)
        may = year_summary([
            _record(1000.0, month="May", category="Food"),
            _record(500.0, month="May", category="Rent"),
        ], 2024).monthly_totals[0]

        changes = compare_months(current, may, top_n=5)
        assert [c.category for c in changes] == ["Commute", "Rent", "Food"]

        commute, rent, food = changes
        assert commute.change == 800.0 and commute.percent_change == 100.0
        assert rent.change == -500.0 and rent.percent_change == pytest.approx(-100.0)
        assert food.change == 200.0 and food.percent_change == pytest.approx(20.0)

        assert len(compare_months(current, may, top_n=2)) == 2

    def test_filter_options(self):
        records = [
            _record(category="Rent", mode="UPI", day=date(2024, 6, 5)),
            _record(category="Food", mode="CC", year=2023, day=date(2023, 1, 1)),
        ]
        options = filter_options(records)
        assert options.categories == ["Food", "Rent"]
        assert options.modes == ["CC", "UPI"]
        assert options.years == [2023, 2024]
        assert options.min_date == date(2023, 1, 1)
        assert options.max_date == date(2024, 6, 5)
        assert filter_options([]).categories == []


class TestExpenseTable:
    def _records(self):
        return [
            _record(50.0, day=date(2024, 6, 3), payee="Swiggy", category="food"),
            _record(500.0, day=date(2024, 6, 1), payee="Landlord", category="Rent", notes="June rent"),
            _record(5.0, day=date(2024, 6, 2), payee="Uber", category="Commute", mode="UPI"),
        ]

    def test_search(self):
        records = self._records()
        assert [r.payee for r in search_expenses(records, "swig")] == ["Swiggy"]
        assert [r.payee for r in search_expenses(records, "JUNE")] == ["Landlord"]
        assert [r.payee for r in search_expenses(records, "upi")] == ["Uber"]
        assert len(search_expenses(records, "  ")) == 3

    def test_sort(self):
        records = self._records()
        assert [r.amount for r in sort_expenses(records, "amount")] == [500.0, 50.0, 5.0]
        assert [r.date.day for r in sort_expenses(records, "date", descending=False)] == [1, 2, 3]
        assert [r.category for r in sort_expenses(records, "category", descending=False)] == ["Commute", "food", "Rent"]

    def test_sort_unknown_field_raises(self):
        with pytest.raises(ValueError):
            sort_expenses(self._records(), "colour")

    def test_paginate(self):
        records = [_record(float(i)) for i in range(25)]
        page, pages = paginate(records, 3, 10)
        assert pages == 3
        assert len(page) == 5
        assert paginate(records, 99, 10)[0] == page
        assert paginate(records, 0, 10)[0] == records[:10]
        assert paginate([], 1, 10) == ([], 0)

    def test_paginate_bad_page_size(self):
        with pytest.raises(ValueError):
            paginate([], 1, 0)


# =============================================================================
# FULL PIPELINE INTEGRATION TESTS
# =============================================================================

class TestPipeline:
    def test_defaults_to_latest_period(self):
        pipeline = ExpensePipeline()
        snapshot = pipeline.build(DashboardState(expenses=tuple(_june_scenario())))

        assert snapshot.period == ("June", 2024)
        assert snapshot.month_summary.total == 2000.0
        assert snapshot.year_summary.total == 2000.0
        assert snapshot.stats.top_category == "Food"
        assert snapshot.previous_month is None
        assert snapshot.comparison == []

    def test_explicit_period(self):
        snapshot = ExpensePipeline().build(
            DashboardState(expenses=tuple(_june_scenario()), month="May", year=2024)
        )
        assert snapshot.period == ("May", 2024)
        assert snapshot.month_summary.total == 0
        assert len(snapshot.month_summary.daily_totals) == 31

    def test_filters_feed_summaries(self):
        state = DashboardState(
            expenses=tuple(_june_scenario()),
            filters=make_criteria(categories=["Food"]),
        )
        snapshot = ExpensePipeline().build(state)
        assert len(snapshot.filtered) == 1
        assert snapshot.month_summary.total == 1200.0
        assert snapshot.month_summary.categories[0].percentage == pytest.approx(100.0)

    def test_state_replacement_recomputes(self):
        state = DashboardState(expenses=tuple(_june_scenario()))
        narrowed = dataclasses.replace(state, filters=make_criteria(modes=["Debit"]))

        pipeline = ExpensePipeline()
        assert pipeline.build(state).month_summary.total == 2000.0
        assert pipeline.build(narrowed).month_summary.total == 800.0

    def test_empty_working_set(self):
        state = DashboardState(
            expenses=tuple(_june_scenario()),
            filters=make_criteria(categories=["Nothing"]),
        )
        snapshot = ExpensePipeline().build(state)
        assert snapshot.filtered == []
        assert snapshot.period is None
        assert snapshot.month_summary is None

    def test_sample_data_end_to_end(self):
        pipeline = ExpensePipeline(comparison_top_n=3)
        expenses = pipeline.load(SAMPLE_CSV)
        snapshot = pipeline.build(DashboardState(expenses=tuple(expenses), month="July", year=2024))

        assert snapshot.month_summary.total == pytest.approx(
            sum(r.amount for r in expenses if r.month == "July" and r.year == 2024)
        )
        assert [m.month for m in snapshot.year_summary.monthly_totals] == ["May", "June", "July"]
        assert snapshot.previous_month.month == "June"
        assert len(snapshot.comparison) == 3

    def test_zero_comparison_top_n_is_respected(self):
        expenses = _june_scenario() + [_record(500.0, month="May", day=date(2024, 5, 3))]
        snapshot = ExpensePipeline(comparison_top_n=0).build(DashboardState(expenses=tuple(expenses)))
        assert snapshot.previous_month.month == "May"
        assert snapshot.comparison == []

    def test_comparison_top_n_defaults_to_config(self):
        assert ExpensePipeline().comparison_top_n == 5


class TestCli:
    def test_cli_runs_and_exports(self, tmp_path, capsys):
        out = tmp_path / "out" / "filtered.csv"
        code = cli.main(["--input", SAMPLE_CSV, "--month", "June", "--year", "2024",
                         "--category", "Food", "--export", str(out)])
        assert code == 0
        assert out.exists()
        exported = pd.read_csv(out, dtype=str)
        assert set(exported["Label"]) == {"Food"}
        assert "JUNE 2024 OVERVIEW" in capsys.readouterr().out

    def test_cli_missing_input_returns_error(self, tmp_path):
        assert cli.main(["--input", str(tmp_path / "missing.csv")]) == 1

    def test_cli_rejects_bad_date(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["--start", "2024-06-01"])

    def test_cli_month_names(self):
        assert cli.parse_args(["--month", "june"]).month == "June"
        with pytest.raises(SystemExit):
            cli.parse_args(["--month", "Smarch"])


# =============================================================================
# ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
