"""
The signed-in admin's own profile.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from supabase import Client

from .client import first_row, require_user, rows
from .models import Store, StoreAdmin

logger = logging.getLogger(__name__)

# Columns an admin may change on their own record
EDITABLE_PROFILE_COLUMNS = ("full_name", "phone_number", "email")


def _with_store(client: Client, admin: Optional[dict]) -> Optional[StoreAdmin]:
    if not admin:
        return None
    store_id = admin.get("store_id")
    store = first_row(client.table("stores").select("*").eq("id", store_id)) if store_id else None
    return StoreAdmin.from_row(dict(admin, store=store))


def get_current_admin(client: Client) -> StoreAdmin:
    """The admin record (with store) of the signed-in user."""
    try:
        user = require_user(client)
        admin = first_row(
            client.table("store_admins").select("*").eq("user_id", user.id)
        )
        if not admin:
            raise LookupError("Admin profile not found")
        return _with_store(client, admin)
    except Exception as e:
        logger.error("Error fetching current admin: %s", e)
        raise


def get_admin_by_phone(client: Client, phone_number: str) -> Optional[StoreAdmin]:
    try:
        admin = first_row(
            client.table("store_admins").select("*").eq("phone_number", phone_number)
        )
        return _with_store(client, admin)
    except Exception as e:
        logger.error("Error fetching admin by phone: %s", e)
        raise


def update_admin_profile(client: Client, updates: Dict[str, Any]) -> StoreAdmin:
    values = {k: v for k, v in updates.items() if k in EDITABLE_PROFILE_COLUMNS}
    values["updated_at"] = datetime.now().isoformat()
    try:
        user = require_user(client)
        updated = rows(
            client.table("store_admins").update(values).eq("user_id", user.id)
        )
        return StoreAdmin.from_row(updated[0] if updated else None)
    except Exception as e:
        logger.error("Error updating admin profile: %s", e)
        raise


def store_display_name(admin: Optional[StoreAdmin], default: str = "Store") -> str:
    store: Optional[Store] = admin.store if admin else None
    return store.name if store and store.name else default
