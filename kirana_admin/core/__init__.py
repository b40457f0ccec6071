"""
Core utilities for the Kiranawala Admin Panel.
Provides configuration, the query cache, errors and shared helpers.
"""

from .config import (
    APP_NAME,
    ORDER_STATUSES,
    ORDER_STATUS_LABELS,
    ORDER_STATUS_COLORS,
    PRODUCT_IMAGES_BUCKET,
    STORE_IMAGES_BUCKET,
    AppConfig,
    configure_logging,
)
from .cache import (
    compute_data_hash,
    QueryCache,
    QueryState,
    CacheStats,
    get_query_cache,
    clear_all_caches,
)
from .errors import (
    KiranaAdminError,
    NotAuthenticatedError,
    StoreNotFoundError,
    BackendError,
    ImageValidationError,
    RegistrationError,
)
from .dates import (
    DateRange,
    last_7_days,
    last_30_days,
    this_week,
    this_month,
    format_date_range,
    days_between,
)
from .utils import (
    make_json_serializable,
    format_currency,
    format_phone_number,
    display_phone_number,
    is_valid_indian_phone,
)

__all__ = [
    # Config
    'APP_NAME',
    'ORDER_STATUSES',
    'ORDER_STATUS_LABELS',
    'ORDER_STATUS_COLORS',
    'PRODUCT_IMAGES_BUCKET',
    'STORE_IMAGES_BUCKET',
    'AppConfig',
    'configure_logging',
    # Cache
    'compute_data_hash',
    'QueryCache',
    'QueryState',
    'CacheStats',
    'get_query_cache',
    'clear_all_caches',
    # Errors
    'KiranaAdminError',
    'NotAuthenticatedError',
    'StoreNotFoundError',
    'BackendError',
    'ImageValidationError',
    'RegistrationError',
    # Dates
    'DateRange',
    'last_7_days',
    'last_30_days',
    'this_week',
    'this_month',
    'format_date_range',
    'days_between',
    # Utils
    'make_json_serializable',
    'format_currency',
    'format_phone_number',
    'display_phone_number',
    'is_valid_indian_phone',
]
