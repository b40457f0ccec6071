"""
Application configuration and constants.
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os


APP_NAME = "Kiranawala Admin Panel"
APP_DESCRIPTION = "Manage your store orders and inventory"

# Order lifecycle, in the order a delivery normally moves through it
ORDER_STATUSES = [
    "pending",
    "confirmed",
    "preparing",
    "out_for_delivery",
    "delivered",
    "cancelled",
]

ORDER_STATUS_LABELS = {
    "pending": "Pending",
    "confirmed": "Confirmed",
    "preparing": "Preparing",
    "out_for_delivery": "Out for Delivery",
    "delivered": "Delivered",
    "cancelled": "Cancelled",
}

ORDER_STATUS_COLORS = {
    "pending": "#EAB308",
    "confirmed": "#3B82F6",
    "preparing": "#A855F7",
    "out_for_delivery": "#6366F1",
    "delivered": "#22C55E",
    "cancelled": "#EF4444",
}

# Supabase storage buckets
PRODUCT_IMAGES_BUCKET = "product-images"
STORE_IMAGES_BUCKET = "store-images"
IMAGE_BUCKETS = (PRODUCT_IMAGES_BUCKET, STORE_IMAGES_BUCKET)

MAX_IMAGE_SIZE_BYTES = 5 * 1024 * 1024  # 5MB
ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp"]

STAFF_ROLES = ["manager", "staff"]


@dataclass
class AppConfig:
    """Application configuration settings."""

    # Supabase Settings
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # Business Settings
    low_stock_threshold: int = 10
    currency_symbol: str = "₹"

    # Refresh Settings
    dashboard_refresh_seconds: int = 30
    notification_refresh_seconds: int = 30

    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> 'AppConfig':
        """Load configuration from environment variables."""
        return cls(
            supabase_url=os.environ.get("SUPABASE_URL"),
            supabase_key=(
                os.environ.get("SUPABASE_KEY") or
                os.environ.get("SUPABASE_ANON_KEY")
            ),
            log_level=os.environ.get("KIRANA_LOG_LEVEL", "INFO"),
        )

    @classmethod
    def from_streamlit_secrets(cls) -> 'AppConfig':
        """Load configuration from Streamlit secrets."""
        try:
            import streamlit as st

            supabase_secrets = st.secrets.get("supabase", {})
            return cls(
                supabase_url=(
                    supabase_secrets.get("url") or
                    st.secrets.get("SUPABASE_URL")
                ),
                supabase_key=(
                    supabase_secrets.get("key") or
                    st.secrets.get("SUPABASE_KEY")
                ),
            )
        except Exception:
            return cls()

    @classmethod
    def load(cls) -> 'AppConfig':
        """Load configuration from environment first, then Streamlit secrets as fallback."""
        config = cls.from_environment()

        if config.is_configured():
            return config

        # Fill in missing values from Streamlit secrets
        st_config = cls.from_streamlit_secrets()

        if not config.supabase_url:
            config.supabase_url = st_config.supabase_url
        if not config.supabase_key:
            config.supabase_key = st_config.supabase_key

        return config

    def is_configured(self) -> bool:
        """Check if the Supabase connection settings are present."""
        return bool(self.supabase_url and self.supabase_key)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the Streamlit process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
