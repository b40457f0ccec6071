"""
Typed records for the rows the admin panel reads from Supabase.

Rows arrive as plain dicts from PostgREST. ``from_row`` picks the known
columns and ignores the rest, so views and tables with extra columns still
load.
"""

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.dates import DateRange


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ReportPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def _pick(cls, row: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in row.items() if k in names}


def _number(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


class Record:
    """Mixin giving dataclass rows a ``to_dict``."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Store(Record):
    id: str
    name: str = ""
    address: str = ""
    contact: Optional[str] = None
    phone_number: Optional[str] = None
    owner_id: Optional[str] = None
    is_active: bool = True
    is_open: bool = True
    image_url: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> Optional['Store']:
        if not row:
            return None
        return cls(**_pick(cls, row))


@dataclass
class StoreSettings(Store):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    business_hours: Optional[Dict[str, Dict[str, Any]]] = None
    delivery_enabled: Optional[bool] = None
    min_order_amount: Optional[float] = None
    delivery_fee: Optional[float] = None
    tax_rate: Optional[float] = None


@dataclass
class StoreAdmin(Record):
    id: str
    user_id: Optional[str] = None
    full_name: str = ""
    store_id: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    role: str = "staff"
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    store: Optional[Store] = None

    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> Optional['StoreAdmin']:
        if not row:
            return None
        data = _pick(cls, row)
        data["store"] = Store.from_row(row.get("store"))
        return cls(**data)


# Staff rows are store_admins rows
StaffMember = StoreAdmin


@dataclass
class Customer(Record):
    id: str
    full_name: str = ""
    phone_number: str = ""
    email: Optional[str] = None
    created_at: Optional[str] = None
    total_orders: int = 0
    total_spent: float = 0.0
    last_order_date: Optional[str] = None

    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> Optional['Customer']:
        if not row:
            return None
        return cls(**_pick(cls, row))


@dataclass
class Product(Record):
    id: str
    name: str = ""
    category: str = ""
    price: float = 0.0
    stock_quantity: int = 0
    is_available: bool = True
    store_id: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> Optional['Product']:
        if not row:
            return None
        data = _pick(cls, row)
        data["price"] = _number(data.get("price"))
        data["stock_quantity"] = int(data.get("stock_quantity") or 0)
        return cls(**data)

    def is_low_stock(self, threshold: int = 10) -> bool:
        return self.stock_quantity < threshold


@dataclass
class Category(Record):
    id: str
    name: str
    description: str = ""
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Category':
        return cls(**_pick(cls, row))


@dataclass
class OrderItem(Record):
    id: str
    order_id: Optional[str] = None
    product_id: Optional[str] = None
    quantity: int = 0
    price: float = 0.0
    product: Optional[Product] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'OrderItem':
        data = _pick(cls, row)
        data["quantity"] = int(data.get("quantity") or 0)
        data["price"] = _number(data.get("price"))
        product = row.get("product")
        data["product"] = product if isinstance(product, Product) else Product.from_row(product)
        return cls(**data)

    @property
    def line_total(self) -> float:
        return self.quantity * self.price


@dataclass
class Order(Record):
    id: str
    order_number: str = ""
    customer_id: Optional[str] = None
    store_id: Optional[str] = None
    status: str = OrderStatus.PENDING.value
    total_amount: float = 0.0
    delivery_address: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    customer: Optional[Customer] = None
    order_items: List[OrderItem] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Order':
        data = _pick(cls, row)
        data["total_amount"] = _number(data.get("total_amount"))
        customer = row.get("customer")
        data["customer"] = customer if isinstance(customer, Customer) else Customer.from_row(customer)
        data["order_items"] = [
            item if isinstance(item, OrderItem) else OrderItem.from_row(item)
            for item in (row.get("order_items") or [])
        ]
        return cls(**data)

    @property
    def short_id(self) -> str:
        return self.id[:8]


@dataclass
class StatusHistoryEntry(Record):
    id: str
    order_id: Optional[str] = None
    from_status: Optional[str] = None
    to_status: str = ""
    notes: Optional[str] = None
    created_at: Optional[str] = None
    changed_by_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'StatusHistoryEntry':
        data = _pick(cls, row)
        changed_by = row.get("changed_by")
        if isinstance(changed_by, dict):
            data["changed_by_name"] = changed_by.get("full_name")
        return cls(**data)


@dataclass
class StoreHours(Record):
    day_of_week: int
    open_time: Optional[str] = "09:00"
    close_time: Optional[str] = "21:00"
    is_closed: bool = False
    id: Optional[str] = None
    store_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'StoreHours':
        return cls(**_pick(cls, row))

    def to_input(self) -> Dict[str, Any]:
        """Columns written back on save (no id / store_id)."""
        return {
            "day_of_week": self.day_of_week,
            "open_time": self.open_time,
            "close_time": self.close_time,
            "is_closed": self.is_closed,
        }


@dataclass
class Notification(Record):
    id: str
    user_id: Optional[str] = None
    title: str = ""
    message: str = ""
    type: str = "system"
    is_read: bool = False
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Notification':
        return cls(**_pick(cls, row))


@dataclass
class DashboardStats(Record):
    total_orders: int = 0
    pending_orders: int = 0
    completed_orders: int = 0
    total_revenue: float = 0.0
    total_customers: int = 0
    low_stock_products: int = 0


@dataclass
class OrderStats(Record):
    total_orders: int = 0
    total_spent: float = 0.0
    average_order_value: float = 0.0
    last_order_date: Optional[str] = None


@dataclass
class CustomerDetails(Record):
    customer: Customer
    orders: List[Order] = field(default_factory=list)
    order_stats: OrderStats = field(default_factory=OrderStats)


@dataclass
class AnalyticsData(Record):
    total_orders: int = 0
    total_revenue: float = 0.0
    total_customers: int = 0
    average_order_value: float = 0.0
    growth_percentage: float = 0.0
    top_category: str = "N/A"


@dataclass
class TrendDataPoint(Record):
    date: str
    value: float
    label: Optional[str] = None


@dataclass
class TopProduct(Record):
    id: str
    name: str
    category: str
    total_sales: int = 0
    total_revenue: float = 0.0
    order_count: int = 0


@dataclass
class CategoryBreakdown(Record):
    category: str
    total_sales: int = 0
    total_revenue: float = 0.0
    order_count: int = 0
    percentage: float = 0.0


@dataclass
class ReportSummary(Record):
    total_orders: int = 0
    total_revenue: float = 0.0
    total_customers: int = 0
    average_order_value: float = 0.0


@dataclass
class ReportData(Record):
    period: str
    start_date: str
    end_date: str
    summary: ReportSummary
    top_products: List[TopProduct] = field(default_factory=list)
    category_breakdown: List[CategoryBreakdown] = field(default_factory=list)
    order_trends: List[TrendDataPoint] = field(default_factory=list)
    revenue_trends: List[TrendDataPoint] = field(default_factory=list)


@dataclass
class RegistrationResponse(Record):
    success: bool
    store_id: Optional[str] = None
    admin_id: Optional[str] = None
    error: Optional[str] = None


__all__ = [
    'OrderStatus',
    'ReportPeriod',
    'DateRange',
    'Store',
    'StoreSettings',
    'StoreAdmin',
    'StaffMember',
    'Customer',
    'Product',
    'Category',
    'OrderItem',
    'Order',
    'StatusHistoryEntry',
    'StoreHours',
    'Notification',
    'DashboardStats',
    'OrderStats',
    'CustomerDetails',
    'AnalyticsData',
    'TrendDataPoint',
    'TopProduct',
    'CategoryBreakdown',
    'ReportSummary',
    'ReportData',
    'RegistrationResponse',
]
