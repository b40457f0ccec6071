"""
Store settings, staff management and opening hours.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from supabase import Client

from ..core.config import STAFF_ROLES
from ..core.errors import StoreNotFoundError
from .client import first_row, get_store_id, rows
from .models import StaffMember, StoreHours, StoreSettings

logger = logging.getLogger(__name__)

DAYS_OF_WEEK = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

DEFAULT_OPEN_TIME = "09:00"
DEFAULT_CLOSE_TIME = "21:00"


# =============================================================================
# Store settings
# =============================================================================

def get_store_settings(client: Client) -> Optional[StoreSettings]:
    try:
        store_id = get_store_id(client)
        if not store_id:
            return None
        return StoreSettings.from_row(
            first_row(client.table("stores").select("*").eq("id", store_id))
        )
    except Exception as e:
        logger.error("Error fetching store settings: %s", e)
        return None


def update_store_settings(client: Client, updates: Dict[str, Any]) -> Optional[StoreSettings]:
    try:
        store_id = get_store_id(client)
        if not store_id:
            raise StoreNotFoundError()

        row = first_row(client.table("stores").update(updates).eq("id", store_id))
        logger.info("Updated store %s settings: %s", store_id, sorted(updates))
        return StoreSettings.from_row(row)
    except Exception as e:
        logger.error("Error updating store settings: %s", e)
        raise


# =============================================================================
# Staff
# =============================================================================

def get_staff_members(client: Client) -> List[StaffMember]:
    try:
        store_id = get_store_id(client)
        if not store_id:
            return []
        return [
            StaffMember.from_row(r)
            for r in rows(
                client.table("store_admins")
                .select("*")
                .eq("store_id", store_id)
                .order("created_at", desc=True)
            )
        ]
    except Exception as e:
        logger.error("Error fetching staff members: %s", e)
        return []


def add_staff_member(
    client: Client,
    phone_number: str,
    full_name: str,
    role: str,
) -> Optional[StaffMember]:
    """
    Attach a manager or staff member to the store.

    Only the ``store_admins`` row is created; the person signs in later with
    their phone number.
    """
    if role not in STAFF_ROLES:
        raise ValueError(f"Role must be one of {STAFF_ROLES}")

    try:
        store_id = get_store_id(client)
        if not store_id:
            raise StoreNotFoundError()

        row = first_row(
            client.table("store_admins").insert({
                "phone_number": phone_number,
                "full_name": full_name,
                "role": role,
                "store_id": store_id,
                "user_id": None,
                "is_active": True,
            })
        )
        return StaffMember.from_row(row)
    except Exception as e:
        logger.error("Error adding staff member: %s", e)
        raise


def update_staff_member(
    client: Client,
    staff_id: str,
    updates: Dict[str, Any],
) -> Optional[StaffMember]:
    try:
        row = first_row(
            client.table("store_admins")
            .update({**updates, "updated_at": datetime.now().isoformat()})
            .eq("id", staff_id)
        )
        return StaffMember.from_row(row)
    except Exception as e:
        logger.error("Error updating staff member: %s", e)
        raise


def deactivate_staff_member(client: Client, staff_id: str) -> None:
    try:
        rows(
            client.table("store_admins")
            .update({"is_active": False, "updated_at": datetime.now().isoformat()})
            .eq("id", staff_id)
        )
        logger.info("Deactivated staff member %s", staff_id)
    except Exception as e:
        logger.error("Error deactivating staff member: %s", e)
        raise


# =============================================================================
# Store hours
# =============================================================================

def default_store_hours() -> List[StoreHours]:
    return [
        StoreHours(
            day_of_week=day,
            open_time=DEFAULT_OPEN_TIME,
            close_time=DEFAULT_CLOSE_TIME,
            is_closed=False,
        )
        for day in range(7)
    ]


def get_store_hours(client: Client, store_id: str) -> List[StoreHours]:
    """Opening hours, Sunday first. Seeds 09:00-21:00 for every day when empty."""
    existing = rows(
        client.table("store_hours")
        .select("*")
        .eq("store_id", store_id)
        .order("day_of_week")
    )
    if existing:
        return [StoreHours.from_row(r) for r in existing]

    created = rows(
        client.table("store_hours").insert([
            {**h.to_input(), "store_id": store_id} for h in default_store_hours()
        ])
    )
    logger.info("Seeded default store hours for %s", store_id)
    return [StoreHours.from_row(r) for r in created]


def update_store_hours(client: Client, store_id: str, hours: List[StoreHours]) -> None:
    """Replace all hours rows for the store."""
    rows(client.table("store_hours").delete().eq("store_id", store_id))
    rows(
        client.table("store_hours").insert([
            {**h.to_input(), "store_id": store_id} for h in hours
        ])
    )


def day_name(day_of_week: int) -> str:
    if 0 <= day_of_week < len(DAYS_OF_WEEK):
        return DAYS_OF_WEEK[day_of_week]
    return "Unknown"
