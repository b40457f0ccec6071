"""
Data access for the Kiranawala Admin Panel.
Each module maps one area of the Supabase schema to plain functions that
take a client and return typed records.
"""

from .client import (
    get_supabase_client,
    get_current_user,
    get_store_id,
    require_store_id,
)
from .models import (
    OrderStatus,
    ReportPeriod,
    Order,
    OrderItem,
    Product,
    Category,
    Customer,
    CustomerDetails,
    StoreAdmin,
    StoreSettings,
    StoreHours,
    Notification,
    DashboardStats,
    AnalyticsData,
    TrendDataPoint,
    TopProduct,
    CategoryBreakdown,
    ReportData,
    RegistrationResponse,
)
from .orders import OrderFilters
from .products import ProductFilters
from .realtime import RealtimeOrderFeed, OrderEvent
from .storage import ImageUploadResult

__all__ = [
    'get_supabase_client',
    'get_current_user',
    'get_store_id',
    'require_store_id',
    'OrderStatus',
    'ReportPeriod',
    'Order',
    'OrderItem',
    'Product',
    'Category',
    'Customer',
    'CustomerDetails',
    'StoreAdmin',
    'StoreSettings',
    'StoreHours',
    'Notification',
    'DashboardStats',
    'AnalyticsData',
    'TrendDataPoint',
    'TopProduct',
    'CategoryBreakdown',
    'ReportData',
    'RegistrationResponse',
    'OrderFilters',
    'ProductFilters',
    'RealtimeOrderFeed',
    'OrderEvent',
    'ImageUploadResult',
]
