"""
Kiranawala Admin Panel - Consolidated Import Package

Single import point for the admin panel's backend queries, configuration
and Streamlit UI.

Usage:
    from kirana_admin import (
        # Configuration
        AppConfig,
        configure_logging,

        # Data access
        get_supabase_client,
        OrderFilters,
        ProductFilters,

        # Caching
        QueryCache,
        clear_all_caches,

        # UI
        QueryHooks,
        check_login,
    )
"""

# =============================================================================
# Core Configuration & Utilities
# =============================================================================
from .core.config import (
    APP_NAME,
    ORDER_STATUSES,
    ORDER_STATUS_LABELS,
    AppConfig,
    configure_logging,
)
from .core.cache import (
    compute_data_hash,
    QueryCache,
    QueryState,
    clear_all_caches,
    get_query_cache,
)
from .core.errors import (
    KiranaAdminError,
    NotAuthenticatedError,
    StoreNotFoundError,
    BackendError,
    ImageValidationError,
    RegistrationError,
)
from .core.utils import (
    format_currency,
    format_phone_number,
    make_json_serializable,
)

# =============================================================================
# Data Access
# =============================================================================
from .data.client import (
    get_supabase_client,
    get_current_user,
    get_store_id,
)
from .data.auth import resolve_route
from .data.orders import OrderFilters
from .data.products import ProductFilters
from .data.realtime import RealtimeOrderFeed
from .data.export import report_to_csv, report_to_pdf, to_csv

# =============================================================================
# UI Components
# =============================================================================
from .ui.hooks import QueryHooks
from .ui.auth import check_login, logout

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "1.0.0"
__author__ = "Kiranawala Team"

__all__ = [
    # Version info
    '__version__',
    '__author__',

    # Configuration
    'APP_NAME',
    'ORDER_STATUSES',
    'ORDER_STATUS_LABELS',
    'AppConfig',
    'configure_logging',

    # Cache utilities
    'compute_data_hash',
    'QueryCache',
    'QueryState',
    'clear_all_caches',
    'get_query_cache',

    # Errors
    'KiranaAdminError',
    'NotAuthenticatedError',
    'StoreNotFoundError',
    'BackendError',
    'ImageValidationError',
    'RegistrationError',

    # Utilities
    'format_currency',
    'format_phone_number',
    'make_json_serializable',

    # Data access
    'get_supabase_client',
    'get_current_user',
    'get_store_id',
    'resolve_route',
    'OrderFilters',
    'ProductFilters',
    'RealtimeOrderFeed',
    'report_to_csv',
    'report_to_pdf',
    'to_csv',

    # UI
    'QueryHooks',
    'check_login',
    'logout',
]
