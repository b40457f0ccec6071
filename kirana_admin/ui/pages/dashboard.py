"""
Dashboard overview page.
"""

import pandas as pd
import streamlit as st
from streamlit_autorefresh import st_autorefresh

from ...core.config import AppConfig
from ...core.utils import format_currency
from ...data.orders import order_to_row
from ..components import render_kpi_cards, status_label
from ..hooks import DASHBOARD_REFETCH_SECONDS, QueryHooks


def render_dashboard(hooks: QueryHooks, config: AppConfig):
    """Render main dashboard overview."""
    interval = config.dashboard_refresh_seconds or DASHBOARD_REFETCH_SECONDS
    st_autorefresh(interval=interval * 1000, key="dashboard_refresh")

    st.header("Dashboard")

    stats = hooks.dashboard_stats()
    render_kpi_cards(stats)

    st.markdown("---")
    st.subheader("Recent Orders")

    recent = hooks.recent_orders(5)
    if not recent:
        st.info("No orders yet. New orders will appear here automatically.")
        return

    df = pd.DataFrame([order_to_row(o) for o in recent])
    df["Status"] = df["Status"].map(status_label)
    df["Total"] = df["Total"].map(format_currency)
    df = df.drop(columns=["Items"])
    st.dataframe(df, use_container_width=True, hide_index=True)
