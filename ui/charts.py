"""
charts.py
----------
Plotly figure builders for the dashboard.

Each function takes summary objects and returns a go.Figure. None of them
touch Streamlit, so the views just hand the figures to st.plotly_chart.
"""

from typing import List, Tuple

import plotly.graph_objects as go

from core.export import format_currency
from core.insights import CategoryChange
from core.models import CategoryTotal, DailyTotal, ModeTotal, MonthlyTotal
from config.config_loader import get_dashboard_config


def _palette() -> List[str]:
    return get_dashboard_config()["chart_colors"]


def _base_layout(fig: go.Figure, height: int = 300, **kwargs) -> go.Figure:
    fig.update_layout(
        height=height,
        margin=dict(l=40, r=20, t=10, b=40),
        plot_bgcolor="white",
        paper_bgcolor="#f8fafc",
        **kwargs,
    )
    return fig


# =============================================================================
# MONTH VIEWS
# =============================================================================

def category_bar_chart(categories: List[CategoryTotal]) -> go.Figure:
    """Horizontal bars, largest category on top."""
    colors = _palette()
    names = [c.category for c in categories]
    totals = [c.total for c in categories]

    fig = go.Figure(go.Bar(
        x=totals,
        y=names,
        orientation="h",
        marker_color=[colors[i % len(colors)] for i in range(len(names))],
        text=[f"{format_currency(c.total)} ({c.percentage:.1f}%)" for c in categories],
        textposition="outside",
        textfont=dict(size=11, color="#2c3e50"),
    ))

    return _base_layout(
        fig,
        height=max(240, 40 * len(names) + 60),
        xaxis=dict(showgrid=True, gridcolor="#edf1f4", title_text=""),
        yaxis=dict(showgrid=False, title_text="", autorange="reversed"),
        showlegend=False,
    )


def mode_donut_chart(modes: List[ModeTotal]) -> go.Figure:
    fig = go.Figure(go.Pie(
        labels=[m.mode for m in modes],
        values=[m.total for m in modes],
        hole=0.45,
        marker_colors=_palette(),
        textinfo="label+percent",
        textfont=dict(size=11),
        hoverinfo="label+value+percent",
    ))
    fig.update_layout(
        height=300,
        margin=dict(l=10, r=10, t=10, b=10),
        paper_bgcolor="#f8fafc",
        showlegend=False,
    )
    return fig


def daily_spend_chart(daily_totals: List[DailyTotal]) -> go.Figure:
    """One bar per calendar day, zero days included."""
    fig = go.Figure(go.Bar(
        x=[d.date.day for d in daily_totals],
        y=[d.total for d in daily_totals],
        marker_color=_palette()[0],
        customdata=[d.date.strftime("%d %b %Y") for d in daily_totals],
        hovertemplate="%{customdata}<br>%{y:,.0f}<extra></extra>",
    ))
    return _base_layout(
        fig,
        xaxis=dict(showgrid=False, title_text="Day", dtick=1, tickfont=dict(size=10)),
        yaxis=dict(showgrid=True, gridcolor="#edf1f4", title_text=""),
        showlegend=False,
    )


# =============================================================================
# YEAR VIEWS
# =============================================================================

def year_to_date_chart(monthly_totals: List[MonthlyTotal]) -> go.Figure:
    color = _palette()[0]
    fig = go.Figure(go.Scatter(
        x=[m.month for m in monthly_totals],
        y=[m.total for m in monthly_totals],
        mode="lines+markers",
        line=dict(color=color, width=2.5),
        fill="tozeroy",
        marker=dict(size=6),
    ))
    return _base_layout(
        fig,
        xaxis=dict(showgrid=False, title_text=""),
        yaxis=dict(showgrid=True, gridcolor="#edf1f4", title_text=""),
        showlegend=False,
        hovermode="x unified",
    )


def month_comparison_chart(
    changes: List[CategoryChange], current_label: str, previous_label: str
) -> go.Figure:
    """Grouped bars: current vs previous month per category."""
    colors = _palette()
    names = [c.category for c in changes]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=names, y=[c.current for c in changes], name=current_label, marker_color=colors[0],
    ))
    fig.add_trace(go.Bar(
        x=names, y=[c.previous for c in changes], name=previous_label, marker_color=colors[1],
    ))
    return _base_layout(
        fig,
        barmode="group",
        xaxis=dict(showgrid=False, title_text=""),
        yaxis=dict(showgrid=True, gridcolor="#edf1f4", title_text=""),
        legend=dict(orientation="h", yanchor="bottom", y=-0.3, xanchor="center", x=0.5),
    )


def category_mix_by_month_chart(monthly_totals: List[MonthlyTotal]) -> go.Figure:
    """Stacked bars of each month's category totals."""
    colors = _palette()
    months = [m.month for m in monthly_totals]
    categories = list(dict.fromkeys(c.category for m in monthly_totals for c in m.categories))

    fig = go.Figure()
    for i, category in enumerate(categories):
        values = []
        for m in monthly_totals:
            match = next((c.total for c in m.categories if c.category == category), 0.0)
            values.append(match)
        fig.add_trace(go.Bar(
            x=months, y=values, name=category, marker_color=colors[i % len(colors)],
        ))

    return _base_layout(
        fig,
        barmode="stack",
        xaxis=dict(showgrid=False, title_text=""),
        yaxis=dict(showgrid=True, gridcolor="#edf1f4", title_text=""),
        legend=dict(orientation="h", yanchor="bottom", y=-0.3, xanchor="center", x=0.5),
    )


def mode_mix_by_month_chart(monthly_modes: List[Tuple[str, List[ModeTotal]]]) -> go.Figure:
    """Stacked bars of each month's payment-mode totals."""
    colors = _palette()
    months = [month for month, _ in monthly_modes]
    modes = list(dict.fromkeys(m.mode for _, totals in monthly_modes for m in totals))

    fig = go.Figure()
    for i, mode in enumerate(modes):
        values = []
        for _, totals in monthly_modes:
            match = next((m.total for m in totals if m.mode == mode), 0.0)
            values.append(match)
        fig.add_trace(go.Bar(
            x=months, y=values, name=mode, marker_color=colors[i % len(colors)],
        ))

    return _base_layout(
        fig,
        barmode="stack",
        xaxis=dict(showgrid=False, title_text=""),
        yaxis=dict(showgrid=True, gridcolor="#edf1f4", title_text=""),
        legend=dict(orientation="h", yanchor="bottom", y=-0.3, xanchor="center", x=0.5),
    )
