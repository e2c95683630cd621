"""
overview_view.py
-----------------
Overview page.

Layout:
    Header
    KPI row (4 cards)
    Charts row: Spend by category | Spend by payment mode
    Daily spend breakdown
    Year trends: Year-to-date | Month-to-month comparison
    Category mix by month
    Payment mode mix by month
"""

import streamlit as st

from core.export import format_currency
from core.summarizer import monthly_modes
from pipeline import DashboardSnapshot
from ui.charts import (
    category_bar_chart, category_mix_by_month_chart, daily_spend_chart,
    mode_mix_by_month_chart, month_comparison_chart, mode_donut_chart,
    year_to_date_chart,
)


_CHART_CONFIG = {"displayModeBar": False}


def render_overview_view(snapshot: DashboardSnapshot):
    """Renders the full Overview page."""
    if snapshot.period is None:
        st.warning("No expenses match the current filters.")
        return

    month, year = snapshot.period

    st.markdown(f"""
        <div class="main-header">
            <h1>📊 {month} {year} Overview</h1>
            <p>{len(snapshot.filtered):,} expenses in the current selection</p>
        </div>
    """, unsafe_allow_html=True)

    _render_kpis(snapshot)

    col_cat, col_mode = st.columns([1, 1], gap="medium")
    with col_cat:
        st.markdown('<div class="section-title">Spend by Category</div>', unsafe_allow_html=True)
        if snapshot.month_summary.categories:
            st.plotly_chart(category_bar_chart(snapshot.month_summary.categories),
                            use_container_width=True, config=_CHART_CONFIG)
        else:
            st.info(f"No spend recorded for {month} {year}.")
    with col_mode:
        st.markdown('<div class="section-title">Spend by Payment Mode</div>', unsafe_allow_html=True)
        if snapshot.month_summary.modes:
            st.plotly_chart(mode_donut_chart(snapshot.month_summary.modes),
                            use_container_width=True, config=_CHART_CONFIG)
        else:
            st.info(f"No spend recorded for {month} {year}.")

    st.markdown('<div class="section-title" style="margin-top:28px;">Daily Spend Breakdown</div>', unsafe_allow_html=True)
    st.plotly_chart(daily_spend_chart(snapshot.month_summary.daily_totals),
                    use_container_width=True, config=_CHART_CONFIG)

    _render_year_trends(snapshot)


# =============================================================================
# KPIs
# =============================================================================

def _render_kpis(snapshot: DashboardSnapshot):
    stats = snapshot.stats
    month, year = snapshot.period

    highest_sub = stats.highest_day.strftime("%d %b") if stats.highest_day else "No spend yet"

    kpis = [
        ("Total Spend", format_currency(stats.total), f"{month} {year}", ""),
        ("Avg. Daily Spend", format_currency(stats.avg_daily_spend), "Per active day", "green"),
        ("Highest Spend Day", format_currency(stats.highest_day_total), highest_sub, "orange"),
        ("Top Category", stats.top_category, f"{stats.top_category_percentage:.1f}% of total", "purple"),
    ]

    cols = st.columns(4, gap="small")
    for col, (label, value, sub, color_class) in zip(cols, kpis):
        with col:
            st.markdown(f"""
                <div class="kpi-card {color_class}">
                    <div class="kpi-value">{value}</div>
                    <div class="kpi-label">{label}</div>
                    <div style="font-size:11px; color:#95a5a6; margin-top:4px;">{sub}</div>
                </div>
            """, unsafe_allow_html=True)


# =============================================================================
# YEAR TRENDS
# =============================================================================

def _render_year_trends(snapshot: DashboardSnapshot):
    year_data = snapshot.year_summary
    month, _ = snapshot.period

    st.markdown(f'<div class="section-title" style="margin-top:28px;">{year_data.year} Trends</div>', unsafe_allow_html=True)

    col_ytd, col_cmp = st.columns([1, 1], gap="medium")
    with col_ytd:
        st.caption(f"Year to date: {format_currency(year_data.total)}")
        st.plotly_chart(year_to_date_chart(year_data.monthly_totals),
                        use_container_width=True, config=_CHART_CONFIG)
    with col_cmp:
        if snapshot.previous_month is None:
            st.info("No previous month data available for comparison.")
        else:
            st.caption(f"{month} vs {snapshot.previous_month.month}, biggest movers")
            st.plotly_chart(
                month_comparison_chart(snapshot.comparison, month, snapshot.previous_month.month),
                use_container_width=True, config=_CHART_CONFIG,
            )

    st.markdown('<div class="section-title" style="margin-top:28px;">Category Mix by Month</div>', unsafe_allow_html=True)
    st.plotly_chart(category_mix_by_month_chart(year_data.monthly_totals),
                    use_container_width=True, config=_CHART_CONFIG)

    st.markdown('<div class="section-title" style="margin-top:28px;">Payment Mode Mix by Month</div>', unsafe_allow_html=True)
    st.plotly_chart(mode_mix_by_month_chart(monthly_modes(snapshot.filtered, year_data.year)),
                    use_container_width=True, config=_CHART_CONFIG)
