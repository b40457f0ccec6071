"""
First-time store registration.

A new owner signs in with an OTP, then ``complete_registration`` creates
their store and their ``store_admins`` row. If the admin row cannot be
created the store is deleted again so no orphan is left behind.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from supabase import Client

from ..core.errors import NotAuthenticatedError, RegistrationError
from .client import first_row, get_current_user, rows
from .models import RegistrationResponse

logger = logging.getLogger(__name__)


@dataclass
class StoreSetupData:
    name: str
    address: str
    contact: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_open: bool = True


@dataclass
class AdminSetupData:
    user_id: str
    full_name: str
    store_id: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    role: str = "owner"
    is_active: bool = True


def check_phone_number_exists(client: Client, phone_number: str) -> bool:
    """True when an admin with this phone number is already registered."""
    existing = first_row(
        client.table("store_admins")
        .select("id")
        .eq("phone_number", phone_number)
        .limit(1)
    )
    return existing is not None


def check_registration_complete(client: Client, user_id: str) -> bool:
    """True when the user already has a ``store_admins`` row."""
    try:
        existing = first_row(
            client.table("store_admins")
            .select("id")
            .eq("user_id", user_id)
            .limit(1)
        )
        return existing is not None
    except Exception as e:
        logger.error("Error checking registration status: %s", e)
        return False


def create_store(client: Client, store: StoreSetupData) -> str:
    """Insert the store and return its id."""
    if not get_current_user(client):
        raise NotAuthenticatedError("You must be logged in to create a store")

    try:
        row = first_row(
            client.table("stores").insert({
                "name": store.name,
                "address": store.address,
                "contact": store.contact,
                # Set properly once the owner pins their location
                "latitude": store.latitude or 0,
                "longitude": store.longitude or 0,
                "is_open": store.is_open,
            })
        )
    except Exception as e:
        logger.error("Error creating store: %s", e)
        raise RegistrationError(
            str(e) or "Failed to create store. Please ensure you have permission."
        ) from e

    if not row:
        raise RegistrationError("Failed to create store - no data returned")
    return row["id"]


def create_store_admin(client: Client, admin: AdminSetupData) -> str:
    """Insert the owner's admin row and return its id."""
    user = get_current_user(client)
    if not user:
        raise NotAuthenticatedError("You must be logged in to create an admin record")
    if admin.user_id != user.id:
        raise RegistrationError("You can only create an admin record for yourself")

    values = {
        "user_id": admin.user_id,
        "full_name": admin.full_name,
        "store_id": admin.store_id,
        "role": admin.role,
        "is_active": admin.is_active,
    }
    if admin.phone_number:
        values["phone_number"] = admin.phone_number
    if admin.email:
        values["email"] = admin.email

    try:
        row = first_row(client.table("store_admins").insert(values))
    except Exception as e:
        logger.error("Error creating store admin: %s", e)
        raise RegistrationError(
            str(e) or "Failed to create admin record. Please ensure you have permission."
        ) from e

    if not row:
        raise RegistrationError("Failed to create admin record - no data returned")
    return row["id"]


def complete_registration(
    client: Client,
    user_id: str,
    phone_number: Optional[str],
    full_name: str,
    store_name: str,
    store_address: str,
    store_phone: str,
    email: Optional[str] = None,
) -> RegistrationResponse:
    """
    Create the store and its owner. Never raises; failures are reported in
    the returned ``RegistrationResponse``.
    """
    try:
        user = get_current_user(client)
        if not user:
            raise NotAuthenticatedError("You must be logged in to complete registration")
        if user.id != user_id:
            raise RegistrationError("Authentication mismatch. Please try logging in again.")

        if phone_number and check_phone_number_exists(client, phone_number):
            return RegistrationResponse(
                success=False,
                error="This phone number is already registered. Please login instead.",
            )

        try:
            store_id = create_store(client, StoreSetupData(
                name=store_name,
                address=store_address,
                contact=store_phone,
            ))
        except Exception as e:
            return RegistrationResponse(
                success=False,
                error=f"Store creation failed: {e}. Please check your permissions and try again.",
            )

        try:
            admin_id = create_store_admin(client, AdminSetupData(
                user_id=user_id,
                phone_number=phone_number,
                email=email,
                full_name=full_name,
                store_id=store_id,
            ))
        except Exception as e:
            logger.error("Admin creation failed, removing store %s: %s", store_id, e)
            try:
                rows(client.table("stores").delete().eq("id", store_id))
            except Exception as cleanup_error:
                logger.error("Failed to cleanup orphaned store: %s", cleanup_error)

            return RegistrationResponse(
                success=False,
                error=f"Admin profile creation failed: {e}. Please check your permissions and try again.",
            )

        logger.info("Registered store %s for user %s", store_id, user_id)
        return RegistrationResponse(success=True, store_id=store_id, admin_id=admin_id)

    except Exception as e:
        logger.error("Error completing registration: %s", e)
        return RegistrationResponse(
            success=False,
            error=str(e) or "Registration failed. Please try again.",
        )
