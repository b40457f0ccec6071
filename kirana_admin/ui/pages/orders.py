"""
Orders page: filtering, detail view, status updates and history.
"""

from collections import Counter
from datetime import datetime

import pandas as pd
import streamlit as st

from ...core.config import ORDER_STATUSES
from ...core.utils import display_phone_number, format_currency
from ...data.export import to_csv
from ...data.orders import OrderFilters, item_product_name, order_to_row
from ..charts import plot_status_distribution
from ..components import (
    render_status_badge,
    render_status_timeline,
    show_query_error,
    status_label,
)
from ..hooks import QueryHooks

ALL_STATUSES = "All"

# Date picker starts empty; bounds apply once both ends are picked
NO_DATE_RANGE = ()


def build_filters(status: str, search: str, dates) -> OrderFilters:
    """Form values -> ``OrderFilters``. Date bounds cover whole days."""
    date_from = date_to = None
    if isinstance(dates, (list, tuple)) and len(dates) == 2:
        date_from = dates[0].strftime("%Y-%m-%d")
        date_to = dates[1].strftime("%Y-%m-%dT23:59:59")

    return OrderFilters(
        status=None if status == ALL_STATUSES else status,
        search_query=search.strip() or None,
        date_from=date_from,
        date_to=date_to,
    )


def render_orders(hooks: QueryHooks):
    """Render the orders list and the selected order's detail."""
    st.header("Orders")

    col1, col2, col3 = st.columns([1, 2, 2])
    with col1:
        status = st.selectbox(
            "Status",
            [ALL_STATUSES] + ORDER_STATUSES,
            format_func=lambda s: s if s == ALL_STATUSES else status_label(s),
        )
    with col2:
        search = st.text_input("Search order number", key="orders_search")
    with col3:
        dates = st.date_input(
            "Date range",
            value=NO_DATE_RANGE,
            key="orders_dates",
        )

    result = hooks.orders(build_filters(status, search, dates))
    if result.is_error:
        show_query_error(result.error, "orders")
        return

    orders = result.data or []
    if not orders:
        st.info("No orders match these filters.")
        return

    table = [order_to_row(o) for o in orders]
    df = pd.DataFrame(table)
    df["Status"] = df["Status"].map(status_label)
    df["Total"] = df["Total"].map(format_currency)
    st.dataframe(df, use_container_width=True, hide_index=True)

    st.download_button(
        "📥 Download CSV",
        to_csv(table),
        f"orders_{datetime.now():%Y-%m-%d}.csv",
        "text/csv",
    )

    with st.expander("Status breakdown"):
        st.plotly_chart(
            plot_status_distribution(Counter(o.status for o in orders)),
            use_container_width=True,
        )

    st.markdown("---")

    by_label = {f"#{o.order_number or o.short_id}": o.id for o in orders}
    selected = st.selectbox("Order details", ["-"] + list(by_label))
    if selected != "-":
        render_order_detail(hooks, by_label[selected])


def render_order_detail(hooks: QueryHooks, order_id: str):
    order = hooks.order(order_id)
    if order is None:
        st.warning("Order not found")
        return

    col1, col2 = st.columns([2, 1])

    with col1:
        st.subheader(f"Order #{order.order_number or order.short_id}")
        render_status_badge(order.status)

        if order.customer:
            st.markdown(
                f"**{order.customer.full_name}**  \n"
                f"{display_phone_number(order.customer.phone_number)}"
            )
        st.caption(order.delivery_address)

        items = pd.DataFrame([
            {
                "Product": item_product_name(item.product),
                "Qty": item.quantity,
                "Price": format_currency(item.price),
                "Total": format_currency(item.line_total),
            }
            for item in order.order_items
        ])
        if not items.empty:
            st.dataframe(items, use_container_width=True, hide_index=True)
        st.markdown(f"**Total: {format_currency(order.total_amount)}**")

    with col2:
        st.markdown("**Update status**")
        current = ORDER_STATUSES.index(order.status) if order.status in ORDER_STATUSES else 0
        new_status = st.selectbox(
            "New status",
            ORDER_STATUSES,
            index=current,
            format_func=status_label,
            key=f"status_{order.id}",
        )
        if st.button("Update", key=f"update_{order.id}", disabled=new_status == order.status):
            try:
                hooks.update_order_status(order.id, new_status)
            except Exception as e:
                st.error(f"Status update failed: {e}")
            else:
                st.rerun()

        st.markdown("**Status history**")
        render_status_timeline(hooks.order_status_history(order.id))
