"""
Sign-in, sign-out and the page guard.
"""

import logging
from typing import Optional

from supabase import Client

from ..core.utils import format_phone_number

logger = logging.getLogger(__name__)

# Pages
LOGIN = "login"
REGISTER = "register"
DASHBOARD = "dashboard"
ROOT = "/"

DASHBOARD_PAGES = (
    "dashboard",
    "orders",
    "products",
    "customers",
    "analytics",
    "reports",
    "settings",
    "profile",
)


def sign_in_with_password(client: Client, email: str, password: str):
    """Email/password sign-in; returns the signed-in user."""
    response = client.auth.sign_in_with_password({"email": email, "password": password})
    logger.info("Password sign-in for %s", email)
    return response.user


def send_otp(client: Client, phone: str) -> str:
    """Send an SMS one-time code. Returns the normalised phone number."""
    formatted = format_phone_number(phone)
    client.auth.sign_in_with_otp({"phone": formatted})
    logger.info("OTP sent to %s", formatted)
    return formatted


def verify_otp(client: Client, phone: str, token: str):
    """Verify an SMS code; returns the signed-in user."""
    response = client.auth.verify_otp({"phone": phone, "token": token, "type": "sms"})
    return response.user


def sign_out(client: Client) -> None:
    try:
        client.auth.sign_out()
    except Exception as e:
        logger.warning("Sign-out failed: %s", e)


def access_token(client: Client) -> Optional[str]:
    try:
        session = client.auth.get_session()
    except Exception:
        return None
    return session.access_token if session else None


def resolve_route(page: str, signed_in: bool, registered: bool) -> str:
    """
    Decide which page to show for a requested page and auth state.

    - signed out on a dashboard page -> login
    - signed in without a store -> register
    - registered on login/register -> dashboard
    - root -> login / dashboard / register depending on state
    - otherwise the requested page
    """
    if page == ROOT:
        if not signed_in:
            return LOGIN
        return DASHBOARD if registered else REGISTER

    if page in DASHBOARD_PAGES:
        if not signed_in:
            return LOGIN
        if not registered:
            return REGISTER

    if signed_in and registered and page in (LOGIN, REGISTER):
        return DASHBOARD

    return page
