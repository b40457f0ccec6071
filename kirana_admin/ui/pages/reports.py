"""
Reports page: daily / weekly / monthly summary with CSV and PDF download.
"""

import pandas as pd
import streamlit as st

from ...core.utils import format_currency
from ...data.export import report_filename, report_to_csv, report_to_pdf
from ...data.models import ReportPeriod
from ...data.profile import store_display_name
from ..charts import plot_trend
from ..components import show_query_error
from ..hooks import QueryHooks


def render_reports(hooks: QueryHooks):
    """Render the report preview and downloads."""
    st.header("Reports")

    period = st.radio(
        "Report period",
        [p.value for p in ReportPeriod],
        format_func=str.capitalize,
        horizontal=True,
        index=1,
    )

    result = hooks.report_data(period)
    if result.is_error:
        show_query_error(result.error, "report")
        return

    report = result.data
    summary = report.summary
    st.caption(f"{report.start_date} to {report.end_date}")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Orders", f"{summary.total_orders:,}")
    with col2:
        st.metric("Revenue", format_currency(summary.total_revenue))
    with col3:
        st.metric("Customers", f"{summary.total_customers:,}")
    with col4:
        st.metric("Avg Order Value", format_currency(summary.average_order_value))

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(
            plot_trend(report.revenue_trends, "Revenue", color="#22C55E"),
            use_container_width=True,
        )
    with col2:
        st.plotly_chart(plot_trend(report.order_trends, "Orders"), use_container_width=True)

    st.subheader("Top Products")
    if report.top_products:
        st.dataframe(
            pd.DataFrame([p.to_dict() for p in report.top_products]).drop(columns=["id"]),
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.caption("No sales in this period")

    st.subheader("Category Breakdown")
    if report.category_breakdown:
        st.dataframe(
            pd.DataFrame([c.to_dict() for c in report.category_breakdown]),
            use_container_width=True,
            hide_index=True,
        )

    store_name = store_display_name(hooks.current_admin().data)

    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            "📥 Download CSV",
            report_to_csv(report),
            report_filename(store_name, period, "csv"),
            "text/csv",
        )
    with col2:
        st.download_button(
            "📄 Download PDF",
            report_to_pdf(report, store_name),
            report_filename(store_name, period, "pdf"),
            "application/pdf",
        )
