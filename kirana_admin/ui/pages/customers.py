"""
Customers page: list, search and per-customer order history.
"""

import pandas as pd
import streamlit as st

from ...core.dates import format_timestamp
from ...core.utils import display_phone_number, format_currency, parse_timestamp
from ...data.export import to_csv
from ..components import status_label
from ..hooks import MIN_SEARCH_LENGTH, QueryHooks


def customers_table(customers) -> list:
    return [
        {
            "Name": c.full_name,
            "Phone": display_phone_number(c.phone_number),
            "Orders": c.total_orders,
            "Total Spent": round(c.total_spent, 2),
            "Last Order": format_timestamp(parse_timestamp(c.last_order_date)),
        }
        for c in customers
    ]


def render_customers(hooks: QueryHooks):
    """Render customers who have ordered from the store."""
    st.header("Customers")

    query = st.text_input("Search by name or phone", key="customers_search").strip()

    if query and len(query) < MIN_SEARCH_LENGTH:
        st.caption(f"Type at least {MIN_SEARCH_LENGTH} characters to search")

    searched = hooks.search_customers(query)
    customers = searched if searched is not None else hooks.customers()

    if not customers:
        st.info("No customers found.")
        return

    table = customers_table(customers)
    st.dataframe(pd.DataFrame(table), use_container_width=True, hide_index=True)
    st.download_button("📥 Download CSV", to_csv(table), "customers.csv", "text/csv")

    st.markdown("---")
    by_label = {f"{c.full_name} ({display_phone_number(c.phone_number)})": c.id for c in customers}
    selected = st.selectbox("Customer details", ["-"] + list(by_label))
    if selected != "-":
        render_customer_detail(hooks, by_label[selected])


def render_customer_detail(hooks: QueryHooks, customer_id: str):
    details = hooks.customer_details(customer_id)
    if details is None:
        st.warning("Customer not found")
        return

    customer = details.customer
    stats = details.order_stats

    st.subheader(customer.full_name or "Customer")
    st.caption(" · ".join(filter(None, [
        display_phone_number(customer.phone_number),
        customer.email,
    ])))

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Orders", stats.total_orders)
    with col2:
        st.metric("Total Spent", format_currency(stats.total_spent))
    with col3:
        st.metric("Avg Order Value", format_currency(stats.average_order_value))

    if not details.orders:
        st.info("No orders from this customer yet.")
        return

    st.dataframe(
        pd.DataFrame([
            {
                "Order #": o.order_number or o.short_id,
                "Status": status_label(o.status),
                "Items": len(o.order_items),
                "Total": format_currency(o.total_amount),
                "Date": format_timestamp(parse_timestamp(o.created_at)),
            }
            for o in details.orders
        ]),
        use_container_width=True,
        hide_index=True,
    )
