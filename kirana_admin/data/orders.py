"""
Order queries: listing, detail, status updates and status history.

Relations (customer, items, products) are fetched in separate requests and
joined here instead of through PostgREST embedding.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from supabase import Client

from .client import first_row, get_store_id, require_user, rows
from .models import Customer, Order, OrderStatus, Product, StatusHistoryEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderFilters:
    status: Optional[str] = None
    search_query: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None


def _index_by_id(records: List[dict]) -> Dict[str, dict]:
    return {r["id"]: r for r in records if r.get("id")}


def _unique(values) -> List[str]:
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def attach_relations(
    orders: List[dict],
    customers: List[dict],
    order_items: List[dict],
    products: List[dict],
) -> List[Order]:
    """
    Join customers, items and products onto order rows.

    Missing relations become None; items keep the order they arrived in.
    """
    customers_map = _index_by_id(customers)
    products_map = _index_by_id(products)

    items_by_order: Dict[str, List[dict]] = {}
    for item in order_items:
        product_id = item.get("product_id")
        joined = dict(item, product=products_map.get(product_id) if product_id else None)
        items_by_order.setdefault(item.get("order_id"), []).append(joined)

    result = []
    for order in orders:
        customer_id = order.get("customer_id")
        joined = dict(
            order,
            customer=customers_map.get(customer_id) if customer_id else None,
            order_items=items_by_order.get(order["id"], []),
        )
        result.append(Order.from_row(joined))
    return result


def get_orders(client: Client, filters: Optional[OrderFilters] = None) -> List[Order]:
    """List the store's orders, newest first, with customers and items."""
    filters = filters or OrderFilters()
    try:
        require_user(client)
        store_id = get_store_id(client)
        if not store_id:
            return []

        query = (
            client.table("orders")
            .select("*")
            .eq("store_id", store_id)
            .order("created_at", desc=True)
        )

        if filters.status:
            query = query.eq("status", filters.status)
        if filters.search_query:
            query = query.ilike("order_number", f"%{filters.search_query}%")
        if filters.date_from:
            query = query.gte("created_at", filters.date_from)
        if filters.date_to:
            query = query.lte("created_at", filters.date_to)

        orders = rows(query)
        if not orders:
            return []

        customer_ids = _unique(o.get("customer_id") for o in orders)
        customers = rows(
            client.table("customers")
            .select("id, full_name, phone_number, email")
            .in_("id", customer_ids)
        ) if customer_ids else []

        order_items = rows(
            client.table("order_items")
            .select("id, order_id, quantity, price, product_id")
            .in_("order_id", [o["id"] for o in orders])
        )

        product_ids = _unique(oi.get("product_id") for oi in order_items)
        products = rows(
            client.table("products")
            .select("id, name, image_url")
            .in_("id", product_ids)
        ) if product_ids else []

        return attach_relations(orders, customers, order_items, products)
    except Exception as e:
        logger.error("Error fetching orders: %s", e)
        raise


def get_order_by_id(client: Client, order_id: str) -> Optional[Order]:
    """A single order with its customer, items and products."""
    try:
        require_user(client)

        order = first_row(client.table("orders").select("*").eq("id", order_id))
        if not order:
            return None

        customer_id = order.get("customer_id")
        customer = first_row(
            client.table("customers").select("*").eq("id", customer_id)
        ) if customer_id else None

        order_items = rows(client.table("order_items").select("*").eq("order_id", order_id))

        product_ids = _unique(oi.get("product_id") for oi in order_items)
        products = rows(
            client.table("products").select("*").in_("id", product_ids)
        ) if product_ids else []

        return attach_relations([order], [customer] if customer else [], order_items, products)[0]
    except Exception as e:
        logger.error("Error fetching order %s: %s", order_id, e)
        raise


def update_order_status(client: Client, order_id: str, status: str) -> Order:
    """Set a new status; ``updated_at`` is stamped with the current time."""
    status = OrderStatus(status).value
    try:
        row = first_row(
            client.table("orders")
            .update({"status": status, "updated_at": datetime.now().isoformat()})
            .eq("id", order_id)
        )
        if not row:
            raise LookupError(f"Order {order_id} not found")
        logger.info("Order %s moved to %s", order_id, status)
        return Order.from_row(row)
    except Exception as e:
        logger.error("Error updating order status: %s", e)
        raise


def get_order_status_history(client: Client, order_id: str) -> List[StatusHistoryEntry]:
    """Status changes for an order, newest first. Errors give an empty list."""
    try:
        history = rows(
            client.table("order_status_history")
            .select("*")
            .eq("order_id", order_id)
            .order("created_at", desc=True)
        )

        admin_ids = _unique(h.get("changed_by") for h in history if isinstance(h.get("changed_by"), str))
        admins = _index_by_id(rows(
            client.table("store_admins").select("id, full_name").in_("id", admin_ids)
        )) if admin_ids else {}

        entries = []
        for h in history:
            changed_by = h.get("changed_by")
            if isinstance(changed_by, str):
                h = dict(h, changed_by=admins.get(changed_by))
            entries.append(StatusHistoryEntry.from_row(h))
        return entries
    except Exception as e:
        logger.error("Error fetching order status history: %s", e)
        return []


def get_recent_orders(client: Client, limit: int = 5) -> List[Order]:
    """Newest orders for the dashboard, with customer name and phone."""
    try:
        require_user(client)
        store_id = get_store_id(client)
        if not store_id:
            return []

        orders = rows(
            client.table("orders")
            .select("*")
            .eq("store_id", store_id)
            .order("created_at", desc=True)
            .limit(limit)
        )

        customer_ids = _unique(o.get("customer_id") for o in orders)
        customers = rows(
            client.table("customers")
            .select("id, full_name, phone_number")
            .in_("id", customer_ids)
        ) if customer_ids else []

        return attach_relations(orders, customers, [], [])
    except Exception as e:
        logger.error("Error fetching recent orders: %s", e)
        return []


def order_to_row(order: Order) -> dict:
    """Flatten an order for tables and CSV export."""
    customer: Optional[Customer] = order.customer
    return {
        "Order #": order.order_number or order.short_id,
        "Customer": customer.full_name if customer else "",
        "Phone": customer.phone_number if customer else "",
        "Status": order.status,
        "Items": len(order.order_items),
        "Total": order.total_amount,
        "Created": order.created_at,
    }


def item_product_name(product: Optional[Product]) -> str:
    return product.name if product else "Unknown product"
