"""Plotly visualisation helpers for the reporting views.

Each function accepts the output of :mod:`bucketing` or :mod:`categories`
and returns a ``plotly.graph_objects.Figure`` that a front end can render
as-is. Empty inputs produce an empty figure titled "No data to display".
"""

from __future__ import annotations

from typing import Optional, Sequence

import plotly.express as px
import plotly.graph_objects as go

from .errors import ValidationError
from .frames import breakdown_to_frame, buckets_to_frame
from .models import Bucket, CategoryTotal

INCOME_COLOR = '#22c55e'
EXPENSE_COLOR = '#ef4444'
METRICS = ('all', 'income', 'expenses')
CHART_KINDS = ('line', 'bar')


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_income_expense_chart(
    buckets: Sequence[Bucket],
    kind: str = 'line',
    metric: str = 'all',
    title: Optional[str] = None,
) -> go.Figure:
    """Income and/or expenses per bucket.

    Parameters
    ----------
    buckets : sequence of Bucket
        Output of :func:`finance_tracker.bucketing.bucketize`.
    kind : {'line', 'bar'}
        Line chart (trend view) or grouped bars (monthly comparison).
    metric : {'all', 'income', 'expenses'}
        Which series to draw.
    title : str, optional
        Chart title.
    """
    if kind not in CHART_KINDS:
        raise ValidationError(f"Unknown chart kind {kind!r}")
    if metric not in METRICS:
        raise ValidationError(f"Unknown metric {metric!r}")
    if not buckets:
        return _empty_figure()

    df = buckets_to_frame(buckets)
    fig = go.Figure()
    series = []
    if metric != 'expenses':
        series.append(('Income', INCOME_COLOR))
    if metric != 'income':
        series.append(('Expenses', EXPENSE_COLOR))
    for column, color in series:
        if kind == 'line':
            fig.add_trace(go.Scatter(
                x=df['Label'], y=df[column], name=column, mode='lines',
                line=dict(color=color), fill='tozeroy',
            ))
        else:
            fig.add_trace(go.Bar(x=df['Label'], y=df[column], name=column, marker_color=color))
    fig.update_layout(
        title=title or "Income vs Expenses",
        xaxis_title="Period",
        yaxis_title="Amount",
        yaxis_tickprefix='$',
        barmode='group',
    )
    return fig


def create_category_bar_chart(
    breakdown: Sequence[CategoryTotal], limit: Optional[int] = None, title: Optional[str] = None
) -> go.Figure:
    """Bar chart of category totals, optionally limited to the top ``limit``."""
    if not breakdown:
        return _empty_figure()
    df = breakdown_to_frame(breakdown[:limit] if limit else breakdown)
    fig = px.bar(df, x="Category", y="Total")
    fig.update_layout(
        title=title or "Spending by category",
        xaxis_title="Category",
        yaxis_title="Total",
    )
    return fig


def create_category_pie_chart(
    breakdown: Sequence[CategoryTotal], hole: float = 0.0, title: Optional[str] = None
) -> go.Figure:
    """Pie chart of category totals; a non-zero ``hole`` draws a doughnut."""
    if not breakdown:
        return _empty_figure()
    df = breakdown_to_frame(breakdown)
    fig = px.pie(df, names="Category", values="Total", hole=hole)
    fig.update_layout(title=title or "Category breakdown")
    return fig
