"""
Cached reads and mutations used by the pages.

Each read maps one backend query to a cache key and a stale time; each
mutation calls the backend, invalidates the key families it affects and
reports the outcome through ``notify`` (a toast in the app).
"""

import logging
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional

from supabase import Client

from ..core.cache import QueryCache, compute_data_hash
from ..core.dates import DateRange
from ..data import (
    analytics,
    customers,
    dashboard,
    notifications,
    orders,
    products,
    profile,
    settings,
)
from ..data.models import StoreHours
from ..data.orders import OrderFilters
from ..data.products import ProductFilters

logger = logging.getLogger(__name__)

# Stale times in seconds; 0 refetches on every rerun
DASHBOARD_STALE = 0
ORDERS_STALE = 0
ORDER_DETAIL_STALE = 0
PRODUCTS_STALE = 0
CATEGORIES_STALE = 5 * 60
ANALYTICS_STALE = 60
REPORT_STALE = 30
CUSTOMERS_STALE = 60
CUSTOMER_DETAILS_STALE = 30
CUSTOMER_SEARCH_STALE = 30
STORE_SETTINGS_STALE = 5 * 60
STAFF_STALE = 60
PROFILE_STALE = 5 * 60
NOTIFICATIONS_STALE = 0

# Intervals driving st_autorefresh on the pages that poll
DASHBOARD_REFETCH_SECONDS = 30
UNREAD_REFETCH_SECONDS = 30

MIN_SEARCH_LENGTH = 2

Notifier = Callable[[str, str], None]


def _log_notify(level: str, message: str) -> None:
    logger.info("[%s] %s", level, message)


def filters_key(filters) -> str:
    """Stable cache-key component for a filters dataclass."""
    return compute_data_hash(asdict(filters))


class QueryHooks:
    """
    Data-fetching layer bound to one Supabase client and one cache.

    Args:
        client: Supabase client of the signed-in session
        cache: Query cache for the session
        notify: ``notify(level, message)`` with level ``success``/``error``/``info``
        low_stock_threshold: Stock level below which a product is flagged
    """

    def __init__(
        self,
        client: Client,
        cache: QueryCache,
        notify: Optional[Notifier] = None,
        low_stock_threshold: int = products.LOW_STOCK_THRESHOLD,
    ):
        self.client = client
        self.cache = cache
        self.notify = notify if notify is not None else _log_notify
        self.low_stock_threshold = low_stock_threshold

    def _mutate(
        self,
        fn: Callable[[], Any],
        invalidate: List[tuple],
        success: Optional[str],
        failure: str,
    ) -> Any:
        """Run a write; on success invalidate and notify, on failure notify and re-raise."""
        try:
            result = fn()
        except Exception as e:
            self.notify("error", str(e) or failure)
            raise

        for prefix in invalidate:
            self.cache.invalidate(*prefix)
        if success:
            self.notify("success", success)
        return result

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    def dashboard_stats(self):
        return self.cache.fetch(
            ("dashboard", "stats"),
            lambda: dashboard.get_dashboard_stats(self.client),
            stale_seconds=DASHBOARD_STALE,
        )

    def recent_orders(self, limit: int = 5):
        return self.cache.fetch(
            ("dashboard", "recent-orders", limit),
            lambda: dashboard.get_recent_orders(self.client, limit),
            stale_seconds=DASHBOARD_STALE,
        )

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    def orders(self, filters: Optional[OrderFilters] = None):
        filters = filters or OrderFilters()
        return self.cache.query(
            ("orders", "list", filters_key(filters)),
            lambda: orders.get_orders(self.client, filters),
            stale_seconds=ORDERS_STALE,
        )

    def order(self, order_id: Optional[str]):
        return self.cache.fetch(
            ("orders", "detail", order_id),
            lambda: orders.get_order_by_id(self.client, order_id),
            stale_seconds=ORDER_DETAIL_STALE,
            enabled=bool(order_id),
        )

    def order_status_history(self, order_id: Optional[str]):
        return self.cache.fetch(
            ("orders", "detail", order_id, "history"),
            lambda: orders.get_order_status_history(self.client, order_id),
            stale_seconds=ORDER_DETAIL_STALE,
            enabled=bool(order_id),
        ) or []

    def update_order_status(self, order_id: str, status: str):
        return self._mutate(
            lambda: orders.update_order_status(self.client, order_id, status),
            invalidate=[("orders",), ("dashboard",)],
            success="Order status updated successfully",
            failure="Failed to update order status",
        )

    def handle_order_events(self, events) -> None:
        """Apply realtime order events: toast and refetch orders and dashboard."""
        if not events:
            return
        for event in events:
            self.notify("success" if event.is_new_order else "info", event.toast_message())
        self.cache.invalidate("orders")
        self.cache.invalidate("dashboard")

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def products(self, filters: Optional[ProductFilters] = None):
        filters = filters or ProductFilters()
        return self.cache.query(
            ("products", "list", filters_key(filters)),
            lambda: products.get_products(self.client, filters, self.low_stock_threshold),
            stale_seconds=PRODUCTS_STALE,
        )

    def product(self, product_id: Optional[str]):
        return self.cache.fetch(
            ("products", "detail", product_id),
            lambda: products.get_product_by_id(self.client, product_id),
            stale_seconds=PRODUCTS_STALE,
            enabled=bool(product_id),
        )

    def categories(self):
        return self.cache.fetch(
            ("categories",),
            lambda: products.get_categories(self.client),
            stale_seconds=CATEGORIES_STALE,
        )

    def create_product(self, values: Dict[str, Any]):
        return self._mutate(
            lambda: products.create_product(self.client, values),
            invalidate=[("products",), ("dashboard",)],
            success="Product created successfully",
            failure="Failed to create product",
        )

    def update_product(self, product_id: str, updates: Dict[str, Any]):
        return self._mutate(
            lambda: products.update_product(self.client, product_id, updates),
            invalidate=[("products",), ("dashboard",)],
            success="Product updated successfully",
            failure="Failed to update product",
        )

    def delete_product(self, product_id: str):
        return self._mutate(
            lambda: products.delete_product(self.client, product_id),
            invalidate=[("products",), ("dashboard",)],
            success="Product deleted successfully",
            failure="Failed to delete product",
        )

    # -------------------------------------------------------------------------
    # Customers
    # -------------------------------------------------------------------------

    def customers(self):
        return self.cache.fetch(
            ("customers", "list"),
            lambda: customers.get_customers(self.client),
            stale_seconds=CUSTOMERS_STALE,
        )

    def customer_details(self, customer_id: Optional[str]):
        return self.cache.fetch(
            ("customer", customer_id),
            lambda: customers.get_customer_details(self.client, customer_id),
            stale_seconds=CUSTOMER_DETAILS_STALE,
            enabled=bool(customer_id),
        )

    def search_customers(self, query: str):
        """Disabled (returns None) until the query has two characters."""
        return self.cache.fetch(
            ("customers", "search", query),
            lambda: customers.search_customers(self.client, query),
            stale_seconds=CUSTOMER_SEARCH_STALE,
            enabled=len(query or "") >= MIN_SEARCH_LENGTH,
        )

    # -------------------------------------------------------------------------
    # Analytics & reports
    # -------------------------------------------------------------------------

    def analytics_data(self, date_range: DateRange):
        return self.cache.fetch(
            ("analytics",) + date_range.cache_key(),
            lambda: analytics.get_analytics_data(self.client, date_range),
            stale_seconds=ANALYTICS_STALE,
        )

    def order_trends(self, date_range: DateRange):
        return self.cache.fetch(
            ("orderTrends",) + date_range.cache_key(),
            lambda: analytics.get_order_trends(self.client, date_range),
            stale_seconds=ANALYTICS_STALE,
        )

    def revenue_trends(self, date_range: DateRange):
        return self.cache.fetch(
            ("revenueTrends",) + date_range.cache_key(),
            lambda: analytics.get_revenue_trends(self.client, date_range),
            stale_seconds=ANALYTICS_STALE,
        )

    def top_products(self, date_range: DateRange, limit: int = 5):
        return self.cache.fetch(
            ("topProducts",) + date_range.cache_key() + (limit,),
            lambda: analytics.get_top_products(self.client, date_range, limit),
            stale_seconds=ANALYTICS_STALE,
        )

    def category_breakdown(self, date_range: DateRange):
        return self.cache.fetch(
            ("categoryBreakdown",) + date_range.cache_key(),
            lambda: analytics.get_category_breakdown(self.client, date_range),
            stale_seconds=ANALYTICS_STALE,
        )

    def report_data(self, period: str):
        return self.cache.query(
            ("reportData", period),
            lambda: analytics.get_report_data(self.client, period),
            stale_seconds=REPORT_STALE,
        )

    # -------------------------------------------------------------------------
    # Settings & staff
    # -------------------------------------------------------------------------

    def store_settings(self):
        return self.cache.fetch(
            ("storeSettings",),
            lambda: settings.get_store_settings(self.client),
            stale_seconds=STORE_SETTINGS_STALE,
        )

    def update_store_settings(self, updates: Dict[str, Any]):
        return self._mutate(
            lambda: settings.update_store_settings(self.client, updates),
            invalidate=[("storeSettings",), ("profile",)],
            success="Store settings updated successfully",
            failure="Failed to update store settings",
        )

    def store_hours(self, store_id: str):
        return self.cache.fetch(
            ("storeHours", store_id),
            lambda: settings.get_store_hours(self.client, store_id),
            stale_seconds=STORE_SETTINGS_STALE,
        )

    def update_store_hours(self, store_id: str, hours: List[StoreHours]):
        return self._mutate(
            lambda: settings.update_store_hours(self.client, store_id, hours),
            invalidate=[("storeHours", store_id)],
            success="Store hours updated successfully",
            failure="Failed to update store hours",
        )

    def staff_members(self):
        return self.cache.fetch(
            ("staffMembers",),
            lambda: settings.get_staff_members(self.client),
            stale_seconds=STAFF_STALE,
        )

    def add_staff_member(self, phone_number: str, full_name: str, role: str):
        return self._mutate(
            lambda: settings.add_staff_member(self.client, phone_number, full_name, role),
            invalidate=[("staffMembers",)],
            success="Staff member added successfully",
            failure="Failed to add staff member",
        )

    def update_staff_member(self, staff_id: str, updates: Dict[str, Any]):
        return self._mutate(
            lambda: settings.update_staff_member(self.client, staff_id, updates),
            invalidate=[("staffMembers",)],
            success="Staff member updated successfully",
            failure="Failed to update staff member",
        )

    def deactivate_staff_member(self, staff_id: str):
        return self._mutate(
            lambda: settings.deactivate_staff_member(self.client, staff_id),
            invalidate=[("staffMembers",)],
            success="Staff member deactivated",
            failure="Failed to deactivate staff member",
        )

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    def current_admin(self):
        return self.cache.query(
            ("profile", "current"),
            lambda: profile.get_current_admin(self.client),
            stale_seconds=PROFILE_STALE,
        )

    def update_profile(self, updates: Dict[str, Any]):
        return self._mutate(
            lambda: profile.update_admin_profile(self.client, updates),
            invalidate=[("profile",)],
            success="Profile updated successfully",
            failure="Failed to update profile",
        )

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def notifications(self, user_id: Optional[str]):
        return self.cache.fetch(
            ("notifications", user_id),
            lambda: notifications.get_notifications(self.client, user_id),
            stale_seconds=NOTIFICATIONS_STALE,
            enabled=bool(user_id),
        ) or []

    def unread_count(self, user_id: Optional[str]) -> int:
        return self.cache.fetch(
            ("notifications-unread", user_id),
            lambda: notifications.get_unread_count(self.client, user_id),
            stale_seconds=NOTIFICATIONS_STALE,
            enabled=bool(user_id),
        ) or 0

    def _invalidate_notifications(self, user_id: str) -> List[tuple]:
        return [("notifications", user_id), ("notifications-unread", user_id)]

    def mark_notification_read(self, user_id: str, notification_id: str):
        return self._mutate(
            lambda: notifications.mark_as_read(self.client, notification_id),
            invalidate=self._invalidate_notifications(user_id),
            success=None,
            failure="Failed to mark notification as read",
        )

    def mark_all_notifications_read(self, user_id: str):
        return self._mutate(
            lambda: notifications.mark_all_as_read(self.client, user_id),
            invalidate=self._invalidate_notifications(user_id),
            success="All notifications marked as read",
            failure="Failed to mark notifications as read",
        )

    def delete_notification(self, user_id: str, notification_id: str):
        return self._mutate(
            lambda: notifications.delete_notification(self.client, notification_id),
            invalidate=self._invalidate_notifications(user_id),
            success="Notification deleted",
            failure="Failed to delete notification",
        )
