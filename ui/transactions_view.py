"""
transactions_view.py
---------------------
Transactions page: searchable, sortable, paginated expense table with a
CSV download of the current selection.
"""

from typing import List

import streamlit as st

from core.export import export_to_csv, records_to_frame
from core.models import ExpenseRecord
from core.table import SORTABLE_FIELDS, paginate, search_expenses, sort_expenses
from config.config_loader import get_dashboard_config


def render_transactions_view(expenses: List[ExpenseRecord]):
    """Renders the full Transactions page."""

    st.markdown("""
        <div class="main-header">
            <h1>🧾 Expense Details</h1>
            <p>Every expense in the current selection</p>
        </div>
    """, unsafe_allow_html=True)

    col_search, col_sort, col_dir = st.columns([2, 1.5, 1], gap="small")

    with col_search:
        search_text = st.text_input(
            "Search",
            placeholder="Category, mode, payee or notes",
            key="transactions_search",
        )
    with col_sort:
        sort_field = st.selectbox(
            "Sort by",
            options=list(SORTABLE_FIELDS),
            index=SORTABLE_FIELDS.index("date"),
            key="transactions_sort_field",
        )
    with col_dir:
        descending = st.radio(
            "Order", options=["Desc", "Asc"], horizontal=True, key="transactions_sort_dir",
        ) == "Desc"

    matched = sort_expenses(search_expenses(expenses, search_text), sort_field, descending)

    per_page = get_dashboard_config()["page_size"]
    _, total_pages = paginate(matched, 1, per_page)
    page = 1
    if total_pages > 1:
        page = int(st.number_input("Page", min_value=1, max_value=total_pages, value=1, step=1,
                                   key="transactions_page"))
    page_rows, total_pages = paginate(matched, page, per_page)

    st.markdown(
        f'<div style="font-size:12px; color:#7f8c8d; margin-bottom:8px;">'
        f'Showing <b>{len(page_rows):,}</b> of <b>{len(matched):,}</b> matching expenses '
        f'(page {page if total_pages else 0} of {total_pages})</div>',
        unsafe_allow_html=True,
    )

    st.dataframe(
        records_to_frame(page_rows),
        use_container_width=True,
        hide_index=True,
    )

    st.download_button(
        "Download CSV",
        data=export_to_csv(matched),
        file_name="expenses.csv",
        mime="text/csv",
        disabled=not matched,
    )
