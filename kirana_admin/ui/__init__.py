"""
UI components for the Kiranawala Admin Panel.
Provides the query hooks, charts and Streamlit components.
"""

from .charts import (
    plot_revenue_and_orders,
    plot_trend,
    plot_top_products,
    plot_category_breakdown,
    plot_status_distribution,
)
from .auth import check_login, get_client, is_registered, logout
from .hooks import QueryHooks

__all__ = [
    # Charts
    'plot_revenue_and_orders',
    'plot_trend',
    'plot_top_products',
    'plot_category_breakdown',
    'plot_status_distribution',
    # Auth
    'check_login',
    'get_client',
    'is_registered',
    'logout',
    # Data fetching
    'QueryHooks',
]
