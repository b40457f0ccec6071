"""
Reusable Streamlit components: status badges, the order timeline, KPI cards
and the notification bell.
"""

from datetime import datetime
from typing import List, Optional

import streamlit as st

from ..core.config import ORDER_STATUS_COLORS, ORDER_STATUS_LABELS
from ..core.dates import format_timestamp, time_ago
from ..core.utils import format_currency, humanize_status, parse_timestamp
from ..data.models import DashboardStats, Notification, StatusHistoryEntry


def status_label(status: Optional[str]) -> str:
    return ORDER_STATUS_LABELS.get(status or "", humanize_status(status).title())


def status_badge_html(status: Optional[str]) -> str:
    color = ORDER_STATUS_COLORS.get(status or "", "#9CA3AF")
    return (
        f'<span style="background-color:{color}22;color:{color};'
        f'border:1px solid {color};border-radius:9999px;'
        f'padding:2px 10px;font-size:0.8rem;font-weight:600;">'
        f'{status_label(status)}</span>'
    )


def render_status_badge(status: Optional[str]) -> None:
    st.markdown(status_badge_html(status), unsafe_allow_html=True)


def timeline_lines(
    history: List[StatusHistoryEntry],
    now: Optional[datetime] = None,
) -> List[dict]:
    """
    Text for each status change, newest first as returned by the backend.

    Each line has ``title``, ``from_status`` (or None), ``when``, ``by`` and
    ``notes``.
    """
    lines = []
    for entry in history:
        changed_at = parse_timestamp(entry.created_at)
        lines.append({
            "title": humanize_status(entry.to_status),
            "from_status": humanize_status(entry.from_status) if entry.from_status else None,
            "when": time_ago(changed_at, now) if changed_at else "",
            "by": f"by {entry.changed_by_name}" if entry.changed_by_name else "",
            "notes": entry.notes or "",
            "color": ORDER_STATUS_COLORS.get(entry.to_status, "#9CA3AF"),
        })
    return lines


def render_status_timeline(history: List[StatusHistoryEntry]) -> None:
    if not history:
        st.caption("No status history available")
        return

    for line in timeline_lines(history):
        st.markdown(
            f'<span style="color:{line["color"]};">●</span> '
            f'**{line["title"].capitalize()}**',
            unsafe_allow_html=True,
        )
        details = []
        if line["from_status"]:
            details.append(f"from {line['from_status']}")
        if line["when"]:
            details.append(line["when"])
        if line["by"]:
            details.append(line["by"])
        if details:
            st.caption(" · ".join(details))
        if line["notes"]:
            st.markdown(f"> {line['notes']}")


def render_kpi_cards(stats: DashboardStats) -> None:
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric("Total Orders", f"{stats.total_orders:,}")
    with col2:
        st.metric("Pending Orders", f"{stats.pending_orders:,}")
    with col3:
        st.metric("Total Revenue", format_currency(stats.total_revenue))
    with col4:
        st.metric("Customers", f"{stats.total_customers:,}")

    if stats.low_stock_products:
        st.warning(f"⚠️ {stats.low_stock_products} product(s) are running low on stock")


def bell_label(unread: int) -> str:
    if unread <= 0:
        return "🔔"
    return f"🔔 {'9+' if unread > 9 else unread}"


def render_notification_bell(hooks, user_id: Optional[str]) -> None:
    """Bell with unread badge; the popover lists notifications with actions."""
    unread = hooks.unread_count(user_id)

    with st.popover(bell_label(unread), use_container_width=True):
        items: List[Notification] = hooks.notifications(user_id)
        if not items:
            st.caption("No notifications")
            return

        if unread and st.button("Mark all as read", key="notif_mark_all"):
            hooks.mark_all_notifications_read(user_id)
            st.rerun()

        for item in items:
            created = format_timestamp(parse_timestamp(item.created_at))
            marker = "" if item.is_read else "🔵 "
            st.markdown(f"{marker}**{item.title}**")
            st.caption(f"{item.message}  \n{created}")

            col1, col2 = st.columns(2)
            with col1:
                if not item.is_read and st.button("Read", key=f"notif_read_{item.id}"):
                    hooks.mark_notification_read(user_id, item.id)
                    st.rerun()
            with col2:
                if st.button("Delete", key=f"notif_del_{item.id}"):
                    hooks.delete_notification(user_id, item.id)
                    st.rerun()
            st.markdown("---")


def show_query_error(error: Exception, what: str) -> None:
    st.error(f"Failed to load {what}: {error}")
