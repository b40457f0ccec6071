"""
Settings page: store information, opening hours and staff.
"""

import logging
from datetime import time

import pandas as pd
import streamlit as st

from ...core.config import STAFF_ROLES, STORE_IMAGES_BUCKET
from ...core.utils import display_phone_number, format_phone_number, is_valid_indian_phone
from ...data.models import StoreHours
from ...data.settings import day_name
from ...data.storage import upload_image
from ..hooks import QueryHooks

logger = logging.getLogger(__name__)


def parse_time(value, default: time) -> time:
    """``"09:00"`` or ``"09:00:00"`` -> ``time``; falls back to ``default``."""
    if not value:
        return default
    parts = str(value).split(":")
    try:
        return time(int(parts[0]), int(parts[1]) if len(parts) > 1 else 0)
    except (ValueError, IndexError):
        return default


def render_settings(hooks: QueryHooks):
    """Render store settings."""
    st.header("Settings")

    store_tab, hours_tab, staff_tab = st.tabs(["🏪 Store", "🕘 Store Hours", "👥 Staff"])

    store = hooks.store_settings()

    with store_tab:
        if store is None:
            st.warning("Store settings are not available.")
        else:
            render_store_form(hooks, store)

    with hours_tab:
        if store is None:
            st.warning("Store settings are not available.")
        else:
            render_store_hours(hooks, store.id)

    with staff_tab:
        render_staff(hooks)


def render_store_form(hooks: QueryHooks, store):
    if store.image_url:
        st.image(store.image_url, width=200)

    with st.form("store_settings"):
        name = st.text_input("Store name", value=store.name)
        address = st.text_area("Address", value=store.address)
        contact = st.text_input("Contact number", value=store.contact or "")

        col1, col2 = st.columns(2)
        with col1:
            is_open = st.toggle("Store is open", value=store.is_open)
        with col2:
            delivery_enabled = st.toggle("Delivery enabled", value=bool(store.delivery_enabled))

        col1, col2, col3 = st.columns(3)
        with col1:
            min_order = st.number_input(
                "Minimum order (₹)", min_value=0.0, value=float(store.min_order_amount or 0)
            )
        with col2:
            delivery_fee = st.number_input(
                "Delivery fee (₹)", min_value=0.0, value=float(store.delivery_fee or 0)
            )
        with col3:
            tax_rate = st.number_input(
                "Tax rate (%)", min_value=0.0, max_value=100.0, value=float(store.tax_rate or 0)
            )

        image = st.file_uploader("Store image", type=["jpg", "jpeg", "png", "webp"])
        submitted = st.form_submit_button("Save settings")

    if not submitted:
        return

    updates = {
        "name": name.strip(),
        "address": address.strip(),
        "contact": contact.strip(),
        "is_open": is_open,
        "delivery_enabled": delivery_enabled,
        "min_order_amount": min_order,
        "delivery_fee": delivery_fee,
        "tax_rate": tax_rate,
    }

    try:
        if image is not None:
            uploaded = upload_image(
                hooks.client,
                image.getvalue(),
                image.name,
                image.type,
                STORE_IMAGES_BUCKET,
                folder=store.id,
            )
            updates["image_url"] = uploaded.url
        hooks.update_store_settings(updates)
    except Exception as e:
        logger.error("Saving store settings failed: %s", e)
        st.error(f"Could not save settings: {e}")
    else:
        st.rerun()


def render_store_hours(hooks: QueryHooks, store_id: str):
    hours = hooks.store_hours(store_id) or []

    with st.form("store_hours"):
        edited = []
        for entry in hours:
            col1, col2, col3, col4 = st.columns([2, 2, 2, 1])
            with col1:
                st.markdown(f"**{day_name(entry.day_of_week)}**")
            with col2:
                opens = st.time_input(
                    "Opens",
                    value=parse_time(entry.open_time, time(9, 0)),
                    key=f"open_{entry.day_of_week}",
                    label_visibility="collapsed",
                )
            with col3:
                closes = st.time_input(
                    "Closes",
                    value=parse_time(entry.close_time, time(21, 0)),
                    key=f"close_{entry.day_of_week}",
                    label_visibility="collapsed",
                )
            with col4:
                closed = st.checkbox("Closed", value=entry.is_closed, key=f"closed_{entry.day_of_week}")

            edited.append(StoreHours(
                day_of_week=entry.day_of_week,
                open_time=opens.strftime("%H:%M"),
                close_time=closes.strftime("%H:%M"),
                is_closed=closed,
            ))

        submitted = st.form_submit_button("Save hours")

    if submitted:
        try:
            hooks.update_store_hours(store_id, edited)
        except Exception as e:
            st.error(f"Could not save store hours: {e}")


def render_staff(hooks: QueryHooks):
    staff = hooks.staff_members() or []

    if staff:
        st.dataframe(
            pd.DataFrame([
                {
                    "Name": s.full_name,
                    "Phone": display_phone_number(s.phone_number or ""),
                    "Role": s.role.capitalize(),
                    "Active": "✅" if s.is_active else "❌",
                }
                for s in staff
            ]),
            use_container_width=True,
            hide_index=True,
        )

        active = {f"{s.full_name} ({s.role})": s.id for s in staff if s.is_active and s.role != "owner"}
        if active:
            col1, col2 = st.columns([3, 1])
            with col1:
                selected = st.selectbox("Deactivate staff member", list(active))
            with col2:
                if st.button("Deactivate"):
                    try:
                        hooks.deactivate_staff_member(active[selected])
                    except Exception as e:
                        st.error(f"Could not deactivate: {e}")
                    else:
                        st.rerun()
    else:
        st.info("No staff members yet.")

    st.markdown("---")
    st.subheader("Add staff member")

    with st.form("add_staff", clear_on_submit=True):
        full_name = st.text_input("Full name")
        phone = st.text_input("Phone number")
        role = st.selectbox("Role", STAFF_ROLES, format_func=str.capitalize)
        submitted = st.form_submit_button("Add")

    if not submitted:
        return

    if not full_name.strip() or not is_valid_indian_phone(phone):
        st.error("Enter a name and a valid 10 digit mobile number")
        return

    try:
        hooks.add_staff_member(format_phone_number(phone), full_name.strip(), role)
    except Exception as e:
        st.error(f"Could not add staff member: {e}")
    else:
        st.rerun()
