"""
Visualization components for the Kiranawala Admin Panel.
"""

from typing import List

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from ..core.config import ORDER_STATUS_COLORS, ORDER_STATUS_LABELS
from ..data.models import CategoryBreakdown, TopProduct, TrendDataPoint


def _empty_figure(message: str = "No data available") -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(text=message, x=0.5, y=0.5, showarrow=False)
    fig.update_layout(height=300, xaxis_visible=False, yaxis_visible=False)
    return fig


def trends_frame(points: List[TrendDataPoint]) -> pd.DataFrame:
    """Trend points -> DataFrame with date, value and label columns."""
    return pd.DataFrame(
        [{"date": p.date, "value": p.value, "label": p.label or p.date} for p in points],
        columns=["date", "value", "label"],
    )


def plot_revenue_and_orders(
    revenue: List[TrendDataPoint],
    orders: List[TrendDataPoint],
) -> go.Figure:
    """
    Create the daily revenue / order count visualization.

    Args:
        revenue: Daily revenue points
        orders: Daily order count points

    Returns:
        Plotly figure with revenue and order trends
    """
    if not revenue and not orders:
        return _empty_figure()

    revenue_df = trends_frame(revenue)
    orders_df = trends_frame(orders)

    fig = make_subplots(
        rows=2, cols=1,
        shared_xaxes=True,
        subplot_titles=('Revenue by Day', 'Orders by Day'),
        vertical_spacing=0.1
    )

    fig.add_trace(
        go.Scatter(
            x=revenue_df['label'],
            y=revenue_df['value'],
            name='Revenue',
            mode='lines+markers',
            line=dict(color='#22C55E'),
            hovertemplate='<b>%{x}</b><br>Revenue: ₹%{y:,.2f}<extra></extra>'
        ),
        row=1, col=1
    )

    fig.add_trace(
        go.Bar(
            x=orders_df['label'],
            y=orders_df['value'],
            name='Orders',
            marker_color='#3B82F6',
            hovertemplate='<b>%{x}</b><br>Orders: %{y}<extra></extra>'
        ),
        row=2, col=1
    )

    fig.update_layout(height=500, showlegend=False, hovermode='x unified')
    return fig


def plot_trend(points: List[TrendDataPoint], title: str, color: str = '#3B82F6') -> go.Figure:
    """Single line trend chart."""
    if not points:
        return _empty_figure()

    df = trends_frame(points)
    fig = px.line(df, x='label', y='value', title=title, markers=True)
    fig.update_traces(line_color=color)
    fig.update_layout(height=350, xaxis_title=None, yaxis_title=None)
    return fig


def plot_top_products(products: List[TopProduct]) -> go.Figure:
    """
    Create top products visualization.

    Args:
        products: Products ordered by revenue, highest first

    Returns:
        Plotly horizontal bar chart of revenue with units sold in the hover
    """
    if not products:
        return _empty_figure()

    df = pd.DataFrame([p.to_dict() for p in products])
    # Highest revenue at the top of a horizontal bar chart
    df = df.iloc[::-1]

    fig = go.Figure(
        go.Bar(
            x=df['total_revenue'],
            y=df['name'],
            orientation='h',
            marker_color='steelblue',
            customdata=df[['category', 'total_sales']],
            hovertemplate=(
                '<b>%{y}</b><br>%{customdata[0]}<br>'
                'Revenue: ₹%{x:,.2f}<br>Units: %{customdata[1]}<extra></extra>'
            )
        )
    )
    fig.update_layout(
        title='Top Products by Revenue',
        height=max(300, 40 * len(df) + 100),
        xaxis_title='Revenue (₹)',
    )
    return fig


def plot_category_breakdown(categories: List[CategoryBreakdown]) -> go.Figure:
    """
    Create product category breakdown chart.

    Args:
        categories: Category totals with revenue share

    Returns:
        Plotly pie chart figure
    """
    if not categories:
        return _empty_figure()

    df = pd.DataFrame([c.to_dict() for c in categories])
    fig = px.pie(
        df,
        values='total_revenue',
        names='category',
        title='Revenue by Category',
        hole=0.4
    )
    fig.update_traces(textposition='inside', textinfo='percent+label')
    return fig


def plot_status_distribution(status_counts: dict) -> go.Figure:
    """Donut of order counts per status, colored like the status badges."""
    counts = {s: n for s, n in status_counts.items() if n}
    if not counts:
        return _empty_figure()

    statuses = list(counts.keys())
    fig = go.Figure(
        go.Pie(
            labels=[ORDER_STATUS_LABELS.get(s, s) for s in statuses],
            values=[counts[s] for s in statuses],
            marker=dict(colors=[ORDER_STATUS_COLORS.get(s, '#9CA3AF') for s in statuses]),
            hole=0.5,
        )
    )
    fig.update_layout(title='Orders by Status', height=350)
    return fig
