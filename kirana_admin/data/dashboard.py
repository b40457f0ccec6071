"""
Dashboard overview queries.
"""

import logging

from supabase import Client

from .client import first_row, get_store_id, require_user
from .models import DashboardStats
from .orders import get_recent_orders

logger = logging.getLogger(__name__)


def get_dashboard_stats(client: Client) -> DashboardStats:
    """
    Headline counters from the ``dashboard_stats`` view.

    Returns all-zero stats when the admin has no store or the view fails.
    """
    try:
        require_user(client)
        store_id = get_store_id(client)
        if not store_id:
            return DashboardStats()

        stats = first_row(
            client.table("dashboard_stats")
            .select("*")
            .eq("store_id", store_id)
        ) or {}

        return DashboardStats(
            total_orders=int(stats.get("total_orders") or 0),
            pending_orders=int(stats.get("pending_orders") or 0),
            completed_orders=int(stats.get("completed_orders") or 0),
            total_revenue=float(stats.get("total_revenue") or 0),
            total_customers=int(stats.get("total_customers") or 0),
            low_stock_products=int(stats.get("low_stock_products") or 0),
        )
    except Exception as e:
        logger.error("Error fetching dashboard stats: %s", e)
        return DashboardStats()


__all__ = ['get_dashboard_stats', 'get_recent_orders']
