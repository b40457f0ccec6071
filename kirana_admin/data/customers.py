"""
Customer queries. A store's customers are the people who ordered from it,
so every list here is derived from the store's orders.
"""

import logging
from typing import Dict, List, Optional

import pandas as pd
from supabase import Client

from .client import first_row, get_store_id, rows
from .models import Customer, CustomerDetails, Order, OrderStats
from .orders import attach_relations

logger = logging.getLogger(__name__)


def aggregate_customers(orders: List[dict], customers: List[dict]) -> List[Customer]:
    """
    Roll orders up per customer.

    Args:
        orders: Order rows with ``customer_id``, ``total_amount``, ``created_at``
        customers: Customer rows referenced by the orders

    Returns:
        Customers with total_orders, total_spent and last_order_date, most
        recent order first. Orders whose customer row is missing are skipped.
    """
    customers_map: Dict[str, dict] = {c["id"]: c for c in customers if c.get("id")}
    if not orders or not customers_map:
        return []

    df = pd.DataFrame(orders, columns=["customer_id", "total_amount", "created_at"])
    df = df[df["customer_id"].isin(customers_map.keys())]
    if df.empty:
        return []

    df["total_amount"] = pd.to_numeric(df["total_amount"], errors="coerce").fillna(0.0)
    df["_ts"] = pd.to_datetime(
        df["created_at"], errors="coerce", utc=True, format="mixed"
    ).fillna(pd.Timestamp(0, tz="UTC"))

    summary = df.groupby("customer_id", sort=False).agg(
        total_orders=("total_amount", "size"),
        total_spent=("total_amount", "sum"),
        last_ts=("_ts", "max"),
    )
    last_dates = df.loc[df.groupby("customer_id", sort=False)["_ts"].idxmax(), ["customer_id", "created_at"]]
    last_date_map = dict(zip(last_dates["customer_id"], last_dates["created_at"]))

    summary = summary.sort_values("last_ts", ascending=False, kind="stable")

    result = []
    for customer_id, row in summary.iterrows():
        base = customers_map[customer_id]
        result.append(Customer(
            id=base["id"],
            full_name=base.get("full_name", ""),
            phone_number=base.get("phone_number", ""),
            email=base.get("email"),
            created_at=base.get("created_at"),
            total_orders=int(row["total_orders"]),
            total_spent=float(row["total_spent"]),
            last_order_date=last_date_map.get(customer_id),
        ))
    return result


def _store_orders(client: Client, store_id: str) -> List[dict]:
    return rows(
        client.table("orders")
        .select("customer_id, total_amount, created_at")
        .eq("store_id", store_id)
        .order("created_at", desc=True)
    )


def get_customers(client: Client) -> List[Customer]:
    """Everyone who has ordered from the store. Errors give an empty list."""
    try:
        store_id = get_store_id(client)
        if not store_id:
            return []

        orders = _store_orders(client, store_id)
        customer_ids = list({o["customer_id"] for o in orders if o.get("customer_id")})
        if not customer_ids:
            return []

        customers = rows(
            client.table("customers")
            .select("id, full_name, phone_number, email, created_at")
            .in_("id", customer_ids)
        )
        return aggregate_customers(orders, customers)
    except Exception as e:
        logger.error("Error fetching customers: %s", e)
        return []


def search_customers(client: Client, query: str) -> List[Customer]:
    """Store customers whose name or phone contains ``query``."""
    try:
        store_id = get_store_id(client)
        if not store_id:
            return []

        pattern = f"%{query}%"
        customers = rows(
            client.table("customers")
            .select("id, full_name, phone_number, email, created_at")
            .or_(f"full_name.ilike.{pattern},phone_number.ilike.{pattern}")
        )
        if not customers:
            return []

        orders = rows(
            client.table("orders")
            .select("customer_id, total_amount, created_at")
            .eq("store_id", store_id)
            .in_("customer_id", [c["id"] for c in customers])
        )
        return aggregate_customers(orders, customers)
    except Exception as e:
        logger.error("Error searching customers: %s", e)
        return []


def compute_order_stats(orders: List[Order]) -> OrderStats:
    """Stats over orders already sorted newest first."""
    total_orders = len(orders)
    total_spent = float(sum(o.total_amount for o in orders))
    return OrderStats(
        total_orders=total_orders,
        total_spent=total_spent,
        average_order_value=total_spent / total_orders if total_orders else 0.0,
        last_order_date=orders[0].created_at if orders else None,
    )


def get_customer_details(client: Client, customer_id: str) -> Optional[CustomerDetails]:
    """Customer profile with their orders at this store. Errors give None."""
    try:
        store_id = get_store_id(client)
        if not store_id:
            return None

        customer = first_row(client.table("customers").select("*").eq("id", customer_id))
        if not customer:
            return None

        order_rows = rows(
            client.table("orders")
            .select("*")
            .eq("customer_id", customer_id)
            .eq("store_id", store_id)
            .order("created_at", desc=True)
        )

        order_items = rows(
            client.table("order_items")
            .select("id, order_id, quantity, price, product_id")
            .in_("order_id", [o["id"] for o in order_rows])
        ) if order_rows else []

        product_ids = list({oi["product_id"] for oi in order_items if oi.get("product_id")})
        products = rows(
            client.table("products")
            .select("id, name, image_url")
            .in_("id", product_ids)
        ) if product_ids else []

        orders = attach_relations(order_rows, [customer], order_items, products)
        return CustomerDetails(
            customer=Customer.from_row(customer),
            orders=orders,
            order_stats=compute_order_stats(orders),
        )
    except Exception as e:
        logger.error("Error fetching customer details: %s", e)
        return None
