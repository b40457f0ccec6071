"""
Page renderers, one per sidebar entry plus registration.
"""

from .analytics import render_analytics
from .customers import render_customers
from .dashboard import render_dashboard
from .orders import render_orders
from .products import render_products
from .profile import render_profile
from .register import render_register
from .reports import render_reports
from .settings import render_settings

__all__ = [
    'render_analytics',
    'render_customers',
    'render_dashboard',
    'render_orders',
    'render_products',
    'render_profile',
    'render_register',
    'render_reports',
    'render_settings',
]
