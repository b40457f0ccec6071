"""
Kiranawala Admin Panel
Store owner dashboard for a kirana delivery business.
Features: Supabase auth and data, realtime order alerts, analytics and reports.
"""

import logging

import streamlit as st
from streamlit_autorefresh import st_autorefresh

from kirana_admin.core import APP_NAME, AppConfig, BackendError, configure_logging
from kirana_admin.core.cache import clear_all_caches, get_query_cache
from kirana_admin.data.auth import DASHBOARD_PAGES, LOGIN, REGISTER, ROOT, access_token, resolve_route
from kirana_admin.data.client import get_store_id
from kirana_admin.data.profile import store_display_name
from kirana_admin.data.realtime import RealtimeOrderFeed
from kirana_admin.ui.auth import FEED_KEY, check_login, current_user, get_client, is_registered, logout
from kirana_admin.ui.components import render_notification_bell
from kirana_admin.ui.hooks import UNREAD_REFETCH_SECONDS, QueryHooks
from kirana_admin.ui.pages import (
    render_analytics,
    render_customers,
    render_dashboard,
    render_orders,
    render_products,
    render_profile,
    render_register,
    render_reports,
    render_settings,
)

# =============================================================================
# CONFIGURATION
# =============================================================================

st.set_page_config(
    page_title=APP_NAME,
    page_icon="🛒",
    layout="wide",
    initial_sidebar_state="expanded"
)

logger = logging.getLogger(__name__)

NAV_OPTIONS = {
    "📊 Dashboard": "dashboard",
    "🧾 Orders": "orders",
    "📦 Products": "products",
    "👥 Customers": "customers",
    "📈 Analytics": "analytics",
    "📄 Reports": "reports",
    "⚙️ Settings": "settings",
    "👤 Profile": "profile",
}

TOAST_ICONS = {"success": "✅", "error": "❌", "info": "🔔"}


def toast(level: str, message: str) -> None:
    st.toast(message, icon=TOAST_ICONS.get(level, "ℹ️"))


def ensure_order_feed(config: AppConfig, client):
    """Start the realtime order subscription once per session."""
    feed = st.session_state.get(FEED_KEY)
    if feed is not None and feed.is_running():
        return feed

    store_id = get_store_id(client)
    if not store_id:
        return None

    logger.info("Starting realtime order feed for store %s", store_id)
    feed = RealtimeOrderFeed(
        config.supabase_url,
        config.supabase_key,
        store_id,
        access_token=access_token(client),
    )
    feed.start()
    st.session_state[FEED_KEY] = feed
    return feed


def main():
    """Main application entry point."""

    config = AppConfig.load()
    configure_logging(config.log_level)

    try:
        client = get_client(config)
    except BackendError as e:
        st.error(str(e))
        st.stop()

    user = current_user()
    signed_in = user is not None
    registered = signed_in and is_registered(user)

    requested = st.session_state.get("page", ROOT)
    route = resolve_route(requested, signed_in, registered)

    if route == LOGIN:
        check_login()
        st.stop()

    if route == REGISTER:
        if render_register(client, user):
            st.session_state["page"] = "dashboard"
            st.rerun()
        st.stop()

    hooks = QueryHooks(
        client,
        get_query_cache(),
        notify=toast,
        low_stock_threshold=config.low_stock_threshold,
    )

    # Realtime order alerts land here on the next rerun
    feed = ensure_order_feed(config, client)
    if feed is not None:
        hooks.handle_order_events(feed.drain())

    # Sidebar
    with st.sidebar:
        st_autorefresh(
            interval=(config.notification_refresh_seconds or UNREAD_REFETCH_SECONDS) * 1000,
            key="notification_refresh",
        )

        admin = hooks.current_admin().data
        st.markdown(f"### 🛒 {store_display_name(admin)}")
        if admin:
            st.markdown(f"**Logged in as:** {admin.full_name or 'Admin'}")

        render_notification_bell(hooks, user.id)
        st.markdown("---")

        labels = list(NAV_OPTIONS)
        current = route if route in DASHBOARD_PAGES else "dashboard"
        page_label = st.radio(
            "Navigation",
            labels,
            index=list(NAV_OPTIONS.values()).index(current),
        )
        st.session_state["page"] = NAV_OPTIONS[page_label]

        st.markdown("---")

        if st.button("🔄 Refresh data"):
            clear_all_caches()
            st.rerun()

        if st.button("🚪 Logout"):
            logout()

    page = st.session_state["page"]

    # Page routing
    if page == "dashboard":
        render_dashboard(hooks, config)

    elif page == "orders":
        render_orders(hooks)

    elif page == "products":
        render_products(hooks)

    elif page == "customers":
        render_customers(hooks)

    elif page == "analytics":
        render_analytics(hooks)

    elif page == "reports":
        render_reports(hooks)

    elif page == "settings":
        render_settings(hooks)

    elif page == "profile":
        render_profile(hooks)


if __name__ == "__main__":
    main()
