"""
Analytics page: KPIs, trends, top products and category mix for a date range.
"""

from datetime import datetime

import pandas as pd
import streamlit as st

from ...core.dates import (
    date_range_from_dates,
    format_date_range,
    last_30_days,
    last_7_days,
    this_month,
    this_week,
)
from ...core.utils import format_currency
from ..charts import plot_category_breakdown, plot_revenue_and_orders, plot_top_products
from ..hooks import QueryHooks

PRESETS = {
    "Last 7 days": last_7_days,
    "Last 30 days": last_30_days,
    "This week": this_week,
    "This month": this_month,
}
CUSTOM = "Custom"


def select_date_range():
    """Preset or custom range picker; returns a ``DateRange``."""
    choice = st.radio("Period", list(PRESETS) + [CUSTOM], horizontal=True, key="analytics_period")

    if choice != CUSTOM:
        return PRESETS[choice]()

    default = last_7_days()
    picked = st.date_input(
        "Select dates",
        value=(default.start.date(), default.end.date()),
        max_value=datetime.now().date(),
        key="analytics_dates",
    )
    if isinstance(picked, (list, tuple)) and len(picked) == 2:
        return date_range_from_dates(picked[0], picked[1])
    return default


def render_analytics(hooks: QueryHooks):
    """Render store analytics for the selected range."""
    st.header("Analytics")

    date_range = select_date_range()
    st.caption(format_date_range(date_range))

    data = hooks.analytics_data(date_range)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric(
            "Revenue",
            format_currency(data.total_revenue),
            delta=f"{data.growth_percentage:.1f}%",
        )
    with col2:
        st.metric("Orders", f"{data.total_orders:,}")
    with col3:
        st.metric("Customers", f"{data.total_customers:,}")
    with col4:
        st.metric("Avg Order Value", format_currency(data.average_order_value))

    st.caption(f"Top category: **{data.top_category}**")
    st.markdown("---")

    fig = plot_revenue_and_orders(
        hooks.revenue_trends(date_range),
        hooks.order_trends(date_range),
    )
    st.plotly_chart(fig, use_container_width=True)

    col1, col2 = st.columns(2)

    top_products = hooks.top_products(date_range, 5)
    with col1:
        st.subheader("Top Products")
        st.plotly_chart(plot_top_products(top_products), use_container_width=True)

    categories = hooks.category_breakdown(date_range)
    with col2:
        st.subheader("Category Mix")
        st.plotly_chart(plot_category_breakdown(categories), use_container_width=True)

    if categories:
        st.dataframe(
            pd.DataFrame([
                {
                    "Category": c.category,
                    "Units Sold": c.total_sales,
                    "Revenue": format_currency(c.total_revenue),
                    "Orders": c.order_count,
                    "Share": f"{c.percentage:.1f}%",
                }
                for c in categories
            ]),
            use_container_width=True,
            hide_index=True,
        )
