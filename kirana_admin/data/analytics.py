"""
Analytics engine for the store's sales figures.

Rows come back from Supabase already filtered to the store and the date
window; everything below is a single pass of grouping and summing with
pandas. The ``build_*`` / ``summarize_*`` functions are pure and work on
DataFrames, the ``get_*`` functions fetch and then delegate to them.
"""

import logging
from datetime import datetime, time, timedelta
from typing import List, Optional, Tuple

import pandas as pd
from supabase import Client

from ..core.dates import DateRange, format_day_label, format_iso_date, start_of_day
from ..core.utils import parse_timestamp
from .client import get_store_id, rows
from .models import (
    AnalyticsData,
    CategoryBreakdown,
    ReportData,
    ReportPeriod,
    ReportSummary,
    TopProduct,
    TrendDataPoint,
)

logger = logging.getLogger(__name__)

ORDER_COLUMNS = ["id", "customer_id", "total_amount", "created_at"]
ITEM_COLUMNS = ["order_id", "product_id", "quantity", "price", "name", "category", "revenue"]

UNKNOWN = "Unknown"


# =============================================================================
# Frame construction
# =============================================================================

def build_orders_frame(orders: List[dict]) -> pd.DataFrame:
    """Order rows -> DataFrame with a local ``date`` column (YYYY-MM-DD)."""
    df = pd.DataFrame(orders, columns=ORDER_COLUMNS)
    if df.empty:
        df["date"] = pd.Series(dtype=str)
        return df

    df["total_amount"] = pd.to_numeric(df["total_amount"], errors="coerce").fillna(0.0)
    timestamps = df["created_at"].map(parse_timestamp)
    df["date"] = timestamps.map(lambda ts: format_iso_date(ts) if ts else None)
    return df


def build_items_frame(order_items: List[dict], products: List[dict]) -> pd.DataFrame:
    """
    Order-item rows joined to product name and category.

    Items with no ``product_id`` are dropped, as an inner join to products
    would. Items whose product row was not loaded keep ``Unknown`` for name
    and category.
    """
    df = pd.DataFrame(order_items, columns=["order_id", "product_id", "quantity", "price"])
    df = df[df["product_id"].notna()].copy()
    if df.empty:
        return pd.DataFrame(columns=ITEM_COLUMNS)

    product_info = {
        p["id"]: (p.get("name") or UNKNOWN, p.get("category") or UNKNOWN)
        for p in products if p.get("id")
    }

    df["quantity"] = pd.to_numeric(df["quantity"], errors="coerce").fillna(0).astype(int)
    df["price"] = pd.to_numeric(df["price"], errors="coerce").fillna(0.0)
    df["name"] = df["product_id"].map(lambda pid: product_info.get(pid, (UNKNOWN, UNKNOWN))[0])
    df["category"] = df["product_id"].map(lambda pid: product_info.get(pid, (UNKNOWN, UNKNOWN))[1])
    df["revenue"] = df["quantity"] * df["price"]
    return df


# =============================================================================
# Aggregations
# =============================================================================

def growth_percentage(current: float, previous: float) -> float:
    """Percent change versus the previous window; 0 when there was nothing before."""
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def top_category(items: pd.DataFrame) -> str:
    """Category with the most units sold; the first one seen wins ties."""
    if items.empty:
        return "N/A"
    by_category = items.groupby("category", sort=False)["quantity"].sum()
    if by_category.max() <= 0:
        return "N/A"
    return str(by_category.idxmax())


def summarize_orders(
    orders: pd.DataFrame,
    items: pd.DataFrame,
    previous_revenue: float = 0.0,
) -> AnalyticsData:
    total_orders = len(orders)
    total_revenue = float(orders["total_amount"].sum()) if total_orders else 0.0
    unique_customers = orders["customer_id"].nunique(dropna=False) if total_orders else 0

    return AnalyticsData(
        total_orders=total_orders,
        total_revenue=total_revenue,
        total_customers=int(unique_customers),
        average_order_value=total_revenue / total_orders if total_orders else 0.0,
        growth_percentage=growth_percentage(total_revenue, previous_revenue),
        top_category=top_category(items),
    )


def build_daily_series(
    orders: pd.DataFrame,
    date_range: DateRange,
    metric: str = "count",
) -> List[TrendDataPoint]:
    """
    One point per calendar day in the range, zero-filled.

    Args:
        orders: Frame from ``build_orders_frame``
        date_range: Days to emit, inclusive of both ends
        metric: ``count`` for orders per day, ``revenue`` for summed totals
    """
    if orders.empty:
        per_day = {}
    elif metric == "revenue":
        per_day = orders.groupby("date")["total_amount"].sum().to_dict()
    else:
        per_day = orders.groupby("date").size().to_dict()

    points = []
    for day in date_range.days():
        key = format_iso_date(day)
        value = per_day.get(key, 0)
        points.append(TrendDataPoint(
            date=key,
            value=float(value) if metric == "revenue" else int(value),
            label=format_day_label(day),
        ))
    return points


def build_top_products(items: pd.DataFrame, limit: int = 5) -> List[TopProduct]:
    """Products ranked by revenue; ``order_count`` counts order-item rows."""
    if items.empty:
        return []

    grouped = items.groupby("product_id", sort=False).agg(
        name=("name", "first"),
        category=("category", "first"),
        total_sales=("quantity", "sum"),
        total_revenue=("revenue", "sum"),
        order_count=("quantity", "size"),
    )
    grouped = grouped.sort_values("total_revenue", ascending=False, kind="stable").head(limit)

    return [
        TopProduct(
            id=str(product_id),
            name=row["name"],
            category=row["category"],
            total_sales=int(row["total_sales"]),
            total_revenue=float(row["total_revenue"]),
            order_count=int(row["order_count"]),
        )
        for product_id, row in grouped.iterrows()
    ]


def build_category_breakdown(items: pd.DataFrame) -> List[CategoryBreakdown]:
    """Revenue by category with each category's share of the total."""
    if items.empty:
        return []

    grouped = items.groupby("category", sort=False).agg(
        total_sales=("quantity", "sum"),
        total_revenue=("revenue", "sum"),
        order_count=("quantity", "size"),
    )
    total_revenue = float(grouped["total_revenue"].sum())
    grouped["percentage"] = (
        grouped["total_revenue"] / total_revenue * 100 if total_revenue > 0 else 0.0
    )
    grouped = grouped.sort_values("total_revenue", ascending=False, kind="stable")

    return [
        CategoryBreakdown(
            category=str(category),
            total_sales=int(row["total_sales"]),
            total_revenue=float(row["total_revenue"]),
            order_count=int(row["order_count"]),
            percentage=float(row["percentage"]),
        )
        for category, row in grouped.iterrows()
    ]


def report_range(period: str, now: Optional[datetime] = None) -> DateRange:
    """
    Window covered by a report.

    daily: today 00:00:00-23:59:59; weekly: the most recent Sunday 00:00 to
    now; monthly: the 1st of the month 00:00 to now.
    """
    now = now or datetime.now()
    period = ReportPeriod(period)

    if period == ReportPeriod.DAILY:
        return DateRange(start_of_day(now), datetime.combine(now.date(), time(23, 59, 59)))

    if period == ReportPeriod.WEEKLY:
        days_since_sunday = (now.weekday() + 1) % 7
        return DateRange(start_of_day(now - timedelta(days=days_since_sunday)), now)

    return DateRange(datetime(now.year, now.month, 1), now)


# =============================================================================
# Backend access
# =============================================================================

def _range_bounds(date_range: DateRange) -> Tuple[str, str]:
    """Filter bounds as sent to PostgREST: whole days, inclusive."""
    return (
        date_range.start.strftime("%Y-%m-%d"),
        date_range.end.strftime("%Y-%m-%dT23:59:59"),
    )


def fetch_orders(client: Client, store_id: str, date_range: DateRange) -> List[dict]:
    start, end = _range_bounds(date_range)
    return rows(
        client.table("orders")
        .select("id, total_amount, customer_id, created_at")
        .eq("store_id", store_id)
        .gte("created_at", start)
        .lte("created_at", end)
        .order("created_at")
    )


def fetch_items(client: Client, orders: List[dict]) -> Tuple[List[dict], List[dict]]:
    """Order items for the given orders plus the products they reference."""
    order_ids = [o["id"] for o in orders if o.get("id")]
    if not order_ids:
        return [], []

    order_items = rows(
        client.table("order_items")
        .select("order_id, product_id, quantity, price")
        .in_("order_id", order_ids)
    )
    product_ids = list({oi["product_id"] for oi in order_items if oi.get("product_id")})
    products = rows(
        client.table("products")
        .select("id, name, category")
        .in_("id", product_ids)
    ) if product_ids else []
    return order_items, products


def load_frames(
    client: Client,
    store_id: str,
    date_range: DateRange,
    with_items: bool = True,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    orders = fetch_orders(client, store_id, date_range)
    order_items, products = fetch_items(client, orders) if with_items else ([], [])
    return build_orders_frame(orders), build_items_frame(order_items, products)


def get_analytics_data(client: Client, date_range: DateRange) -> AnalyticsData:
    """KPI block for the analytics page. Errors give zeroed data."""
    try:
        store_id = get_store_id(client)
        if not store_id:
            raise LookupError("Store not found")

        orders, items = load_frames(client, store_id, date_range)
        previous, _ = load_frames(client, store_id, date_range.previous(), with_items=False)
        previous_revenue = float(previous["total_amount"].sum()) if not previous.empty else 0.0

        return summarize_orders(orders, items, previous_revenue)
    except Exception as e:
        logger.error("Error fetching analytics data: %s", e)
        return AnalyticsData()


def get_order_trends(client: Client, date_range: DateRange) -> List[TrendDataPoint]:
    return _get_series(client, date_range, "count")


def get_revenue_trends(client: Client, date_range: DateRange) -> List[TrendDataPoint]:
    return _get_series(client, date_range, "revenue")


def _get_series(client: Client, date_range: DateRange, metric: str) -> List[TrendDataPoint]:
    try:
        store_id = get_store_id(client)
        if not store_id:
            return []
        orders, _ = load_frames(client, store_id, date_range, with_items=False)
        return build_daily_series(orders, date_range, metric)
    except Exception as e:
        logger.error("Error fetching %s trends: %s", metric, e)
        return []


def get_top_products(client: Client, date_range: DateRange, limit: int = 5) -> List[TopProduct]:
    try:
        store_id = get_store_id(client)
        if not store_id:
            return []
        _, items = load_frames(client, store_id, date_range)
        return build_top_products(items, limit)
    except Exception as e:
        logger.error("Error fetching top products: %s", e)
        return []


def get_category_breakdown(client: Client, date_range: DateRange) -> List[CategoryBreakdown]:
    try:
        store_id = get_store_id(client)
        if not store_id:
            return []
        _, items = load_frames(client, store_id, date_range)
        return build_category_breakdown(items)
    except Exception as e:
        logger.error("Error fetching category breakdown: %s", e)
        return []


def build_report(
    period: str,
    date_range: DateRange,
    orders: pd.DataFrame,
    items: pd.DataFrame,
) -> ReportData:
    analytics = summarize_orders(orders, items)
    return ReportData(
        period=ReportPeriod(period).value,
        start_date=format_iso_date(date_range.start),
        end_date=format_iso_date(date_range.end),
        summary=ReportSummary(
            total_orders=analytics.total_orders,
            total_revenue=analytics.total_revenue,
            total_customers=analytics.total_customers,
            average_order_value=analytics.average_order_value,
        ),
        top_products=build_top_products(items, 10),
        category_breakdown=build_category_breakdown(items),
        order_trends=build_daily_series(orders, date_range, "count"),
        revenue_trends=build_daily_series(orders, date_range, "revenue"),
    )


def get_report_data(client: Client, period: str, now: Optional[datetime] = None) -> ReportData:
    """Daily / weekly / monthly report. Raises on backend failure."""
    date_range = report_range(period, now)
    try:
        store_id = get_store_id(client)
        if not store_id:
            empty = build_orders_frame([])
            return build_report(period, date_range, empty, build_items_frame([], []))

        orders, items = load_frames(client, store_id, date_range)
        return build_report(period, date_range, orders, items)
    except Exception as e:
        logger.error("Error generating report data: %s", e)
        raise
