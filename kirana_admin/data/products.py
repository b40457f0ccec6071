"""
Product catalogue queries and mutations.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from supabase import Client

from .client import first_row, get_store_id, require_user, rows
from .models import Category, Product

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 10

# Columns a product form may write
PRODUCT_COLUMNS = (
    "name",
    "description",
    "price",
    "image_url",
    "category",
    "store_id",
    "stock_quantity",
    "is_available",
)


@dataclass(frozen=True)
class ProductFilters:
    category: Optional[str] = None
    search_query: Optional[str] = None
    is_available: Optional[bool] = None
    low_stock: bool = False


def _clean(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if k in PRODUCT_COLUMNS}


def get_products(
    client: Client,
    filters: Optional[ProductFilters] = None,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
) -> List[Product]:
    """The store's products, newest first."""
    filters = filters or ProductFilters()
    try:
        require_user(client)
        store_id = get_store_id(client)
        if not store_id:
            return []

        query = (
            client.table("products")
            .select("*")
            .eq("store_id", store_id)
            .order("created_at", desc=True)
        )

        if filters.category:
            query = query.eq("category", filters.category)
        if filters.search_query:
            query = query.ilike("name", f"%{filters.search_query}%")
        if filters.is_available is not None:
            query = query.eq("is_available", filters.is_available)
        if filters.low_stock:
            query = query.lt("stock_quantity", low_stock_threshold)

        return [Product.from_row(r) for r in rows(query)]
    except Exception as e:
        logger.error("Error fetching products: %s", e)
        raise


def get_product_by_id(client: Client, product_id: str) -> Optional[Product]:
    try:
        return Product.from_row(
            first_row(client.table("products").select("*").eq("id", product_id))
        )
    except Exception as e:
        logger.error("Error fetching product %s: %s", product_id, e)
        raise


def create_product(client: Client, product: Dict[str, Any]) -> Product:
    """Insert a product; ``store_id`` defaults to the admin's store."""
    values = _clean(product)
    try:
        if not values.get("store_id"):
            values["store_id"] = get_store_id(client)

        row = first_row(client.table("products").insert(values))
        logger.info("Created product %s", values.get("name"))
        return Product.from_row(row)
    except Exception as e:
        logger.error("Error creating product: %s", e)
        raise


def update_product(client: Client, product_id: str, updates: Dict[str, Any]) -> Product:
    values = _clean(updates)
    values["updated_at"] = datetime.now().isoformat()
    try:
        row = first_row(
            client.table("products").update(values).eq("id", product_id)
        )
        return Product.from_row(row)
    except Exception as e:
        logger.error("Error updating product: %s", e)
        raise


def delete_product(client: Client, product_id: str) -> None:
    try:
        rows(client.table("products").delete().eq("id", product_id))
        logger.info("Deleted product %s", product_id)
    except Exception as e:
        logger.error("Error deleting product: %s", e)
        raise


def get_categories(client: Client) -> List[Category]:
    """All categories by name. Errors give an empty list."""
    try:
        return [
            Category.from_row(r)
            for r in rows(client.table("categories").select("*").order("name"))
        ]
    except Exception as e:
        logger.error("Error fetching categories: %s", e)
        return []
