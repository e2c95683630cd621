"""
app.py
-------
Streamlit application entry point for the Expense Dashboard.

Run from the project root:
    streamlit run ui/app.py

Architecture:
    - The expense list is loaded once and cached via st.cache_data.
    - The sidebar collects filters and the target period into a
      DashboardState; the pipeline rebuilds every view from that state on
      each rerun.
    - Each page is a separate module.
"""

import sys
import os
import streamlit as st

# Ensure project root is on path regardless of where streamlit is invoked
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from pipeline import ExpensePipeline
from core.aggregator import MONTH_NAMES, period_of
from core.filters import make_criteria
from core.insights import filter_options
from core.loader import ExpenseLoadError
from core.models import DashboardState
from config.config_loader import get_dashboard_config
from ui.overview_view import render_overview_view
from ui.transactions_view import render_transactions_view


# =============================================================================
# PAGE CONFIG
# =============================================================================

st.set_page_config(
    page_title="Expense Dashboard",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)


# =============================================================================
# CUSTOM CSS
# =============================================================================

st.markdown("""
<style>
    .stApp {
        font-family: 'Segoe UI', system-ui, sans-serif;
        background-color: #f4f6f9;
    }

    .main-header {
        background: linear-gradient(135deg, #064e3b 0%, #047857 100%);
        color: white;
        padding: 20px 30px;
        border-radius: 12px;
        margin-bottom: 20px;
    }
    .main-header h1 {
        margin: 0;
        font-size: 24px;
        font-weight: 600;
        letter-spacing: -0.3px;
    }
    .main-header p {
        margin: 4px 0 0 0;
        opacity: 0.7;
        font-size: 13px;
    }

    .kpi-card {
        background: white;
        border-radius: 10px;
        padding: 18px 20px;
        box-shadow: 0 2px 8px rgba(0,0,0,0.06);
        border-left: 4px solid #10b981;
        text-align: left;
    }
    .kpi-card.green  { border-left-color: #27ae60; }
    .kpi-card.orange { border-left-color: #e67e22; }
    .kpi-card.purple { border-left-color: #8e44ad; }
    .kpi-value {
        font-size: 26px;
        font-weight: 700;
        color: #064e3b;
        line-height: 1.2;
    }
    .kpi-label {
        font-size: 12px;
        color: #7f8c8d;
        text-transform: uppercase;
        letter-spacing: 0.5px;
        margin-top: 4px;
    }

    .section-title {
        font-size: 14px;
        font-weight: 600;
        color: #1a2332;
        text-transform: uppercase;
        letter-spacing: 0.8px;
        padding-bottom: 8px;
        border-bottom: 2px solid #edf1f4;
        margin-bottom: 12px;
    }
</style>
""", unsafe_allow_html=True)


# =============================================================================
# DATA LOADING & CACHING
# =============================================================================

@st.cache_data(show_spinner="Loading your expense data...")
def load_expenses(input_path: str) -> tuple:
    """Loads and caches the normalized expense list."""
    return tuple(ExpensePipeline().load(input_path))


def initialize_data():
    """
    Ensures the expense list is in session state. A load failure is shown
    to the user and stops the run.
    """
    if "expenses" not in st.session_state:
        input_path = os.path.join(PROJECT_ROOT, get_dashboard_config()["data_file"])
        try:
            st.session_state["expenses"] = load_expenses(input_path)
        except ExpenseLoadError as exc:
            st.error(f"❌ Failed to load expense data: {exc}")
            st.stop()


# =============================================================================
# SIDEBAR
# =============================================================================

def render_sidebar() -> DashboardState:
    """Renders navigation and filters, and returns the resulting state."""
    expenses = st.session_state["expenses"]
    options = filter_options(expenses)

    st.sidebar.markdown("### 💸 Expense Dashboard")

    pages = {"📊  Overview": "overview", "🧾  Transactions": "transactions"}
    for label, key in pages.items():
        if st.sidebar.button(label, key=f"nav_{key}", use_container_width=True):
            st.session_state["current_page"] = key
            st.rerun()

    st.sidebar.markdown("---")
    st.sidebar.markdown("**Filters**")

    start = end = None
    if options.min_date is not None:
        picked = st.sidebar.date_input(
            "Date range",
            value=(),
            min_value=options.min_date,
            max_value=options.max_date,
            key="filter_date_range",
        )
        # Only a completed (start, end) selection constrains the data
        if isinstance(picked, (list, tuple)) and len(picked) == 2:
            start, end = picked

    categories = st.sidebar.multiselect(
        "Categories", options=options.categories, default=[], placeholder="All categories",
    )
    modes = st.sidebar.multiselect(
        "Payment modes", options=options.modes, default=[], placeholder="All modes",
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown("**Period**")

    latest = period_of(options.max_date) if options.max_date else None
    month_choices = ["Latest"] + MONTH_NAMES
    month = st.sidebar.selectbox("Month", options=month_choices, index=0)
    year_choices = ["Latest"] + options.years
    year = st.sidebar.selectbox("Year", options=year_choices, index=0)

    if st.sidebar.button("🔄 Refresh data", use_container_width=True):
        load_expenses.clear()
        st.session_state.pop("expenses", None)
        st.rerun()

    if latest:
        st.sidebar.caption(f"{len(expenses):,} expenses · latest {latest[0]} {latest[1]}")

    return DashboardState(
        expenses=expenses,
        filters=make_criteria(start, end, categories, modes),
        month=None if month == "Latest" else month,
        year=None if year == "Latest" else int(year),
    )


# =============================================================================
# MAIN APP
# =============================================================================

def main():
    initialize_data()

    state = render_sidebar()
    snapshot = ExpensePipeline().build(state)

    page = st.session_state.get("current_page", "overview")
    if page == "overview":
        render_overview_view(snapshot)
    elif page == "transactions":
        render_transactions_view(snapshot.filtered)


if __name__ == "__main__":
    main()
