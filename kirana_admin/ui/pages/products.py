"""
Products page: inventory list, filters and the add/edit form.
"""

import logging
from typing import Optional

import pandas as pd
import streamlit as st

from ...core.config import PRODUCT_IMAGES_BUCKET
from ...core.utils import format_currency
from ...data.models import Product
from ...data.products import ProductFilters
from ...data.storage import upload_image
from ..components import show_query_error
from ..hooks import QueryHooks

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"
AVAILABILITY_OPTIONS = {"All": None, "Available": True, "Unavailable": False}


def products_frame(products, low_stock_threshold: int) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "Name": p.name,
            "Category": p.category,
            "Price": format_currency(p.price),
            "Stock": p.stock_quantity,
            "Available": "✅" if p.is_available else "❌",
            "Low Stock": "⚠️" if p.is_low_stock(low_stock_threshold) else "",
        }
        for p in products
    ])


def render_products(hooks: QueryHooks):
    """Render inventory management."""
    st.header("Products")

    categories = hooks.categories() or []
    category_names = [c.name for c in categories]

    list_tab, form_tab = st.tabs(["📦 Inventory", "➕ Add Product"])

    with list_tab:
        col1, col2, col3, col4 = st.columns([2, 2, 1, 1])
        with col1:
            search = st.text_input("Search products", key="products_search")
        with col2:
            category = st.selectbox("Category", [ALL_CATEGORIES] + category_names)
        with col3:
            availability = st.selectbox("Availability", list(AVAILABILITY_OPTIONS))
        with col4:
            low_stock = st.checkbox("Low stock only")

        filters = ProductFilters(
            category=None if category == ALL_CATEGORIES else category,
            search_query=search.strip() or None,
            is_available=AVAILABILITY_OPTIONS[availability],
            low_stock=low_stock,
        )
        result = hooks.products(filters)

        if result.is_error:
            show_query_error(result.error, "products")
        elif not result.data:
            st.info("No products found.")
        else:
            products = result.data
            st.dataframe(
                products_frame(products, hooks.low_stock_threshold),
                use_container_width=True,
                hide_index=True,
            )

            st.markdown("---")
            by_name = {f"{p.name} ({p.category})": p.id for p in products}
            selected = st.selectbox("Edit product", ["-"] + list(by_name))
            if selected != "-":
                product = hooks.product(by_name[selected])
                if product:
                    render_product_form(hooks, category_names, product)
                    if st.button("🗑️ Delete product", key=f"delete_{product.id}"):
                        try:
                            hooks.delete_product(product.id)
                        except Exception as e:
                            st.error(f"Delete failed: {e}")
                        else:
                            st.rerun()

    with form_tab:
        render_product_form(hooks, category_names)


def render_product_form(hooks: QueryHooks, category_names, product: Optional[Product] = None):
    """Add form when ``product`` is None, edit form otherwise."""
    key = product.id if product else "new"

    with st.form(f"product_form_{key}", clear_on_submit=product is None):
        name = st.text_input("Name", value=product.name if product else "")
        description = st.text_area(
            "Description",
            value=(product.description or "") if product else "",
        )

        col1, col2, col3 = st.columns(3)
        with col1:
            price = st.number_input(
                "Price (₹)",
                min_value=0.0,
                step=1.0,
                value=float(product.price) if product else 0.0,
            )
        with col2:
            stock = st.number_input(
                "Stock",
                min_value=0,
                step=1,
                value=int(product.stock_quantity) if product else 0,
            )
        with col3:
            options = category_names or ([product.category] if product else [])
            index = options.index(product.category) if product and product.category in options else 0
            category = st.selectbox("Category", options, index=index) if options else st.text_input("Category")

        is_available = st.checkbox("Available", value=product.is_available if product else True)
        image = st.file_uploader("Image", type=["jpg", "jpeg", "png", "webp"])
        if product and product.image_url:
            st.image(product.image_url, width=120)

        submitted = st.form_submit_button("Save" if product else "Add product")

    if not submitted:
        return

    if not name.strip():
        st.error("Product name is required")
        return

    values = {
        "name": name.strip(),
        "description": description.strip() or None,
        "price": price,
        "stock_quantity": int(stock),
        "category": category,
        "is_available": is_available,
    }

    try:
        if image is not None:
            uploaded = upload_image(
                hooks.client,
                image.getvalue(),
                image.name,
                image.type,
                PRODUCT_IMAGES_BUCKET,
            )
            values["image_url"] = uploaded.url

        if product:
            hooks.update_product(product.id, values)
        else:
            hooks.create_product(values)
    except Exception as e:
        logger.error("Saving product failed: %s", e)
        st.error(f"Could not save product: {e}")
    else:
        st.rerun()
