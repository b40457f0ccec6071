"""
Supabase client construction and the signed-in admin's session context.
"""

import logging
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from ..core.config import AppConfig
from ..core.errors import BackendError, NotAuthenticatedError, StoreNotFoundError

logger = logging.getLogger(__name__)


def get_supabase_client(config: Optional[AppConfig] = None) -> Client:
    """
    Create a Supabase client.

    Each Streamlit session keeps its own client (see ``ui.auth``) because
    the client holds the signed-in user's auth session.
    """
    config = config or AppConfig.load()
    if not config.is_configured():
        raise BackendError(
            "Supabase is not configured. Set SUPABASE_URL and SUPABASE_KEY "
            "or add a [supabase] section to .streamlit/secrets.toml"
        )
    return create_client(config.supabase_url, config.supabase_key)


def execute(query) -> Any:
    """
    Execute a PostgREST request builder and return the response.

    ``APIError`` is converted to ``BackendError`` so callers only deal with
    this package's exceptions.
    """
    try:
        return query.execute()
    except APIError as e:
        raise BackendError.from_api_error(e) from e


def rows(query) -> list:
    """Execute and return ``data`` as a list (never None)."""
    response = execute(query)
    if response is None:
        return []
    return response.data or []


def first_row(query) -> Optional[dict]:
    """Execute and return the first row, or None."""
    data = rows(query)
    if isinstance(data, dict):
        return data
    return data[0] if data else None


def get_current_user(client: Client):
    """Return the signed-in Supabase user, or None."""
    try:
        response = client.auth.get_user()
    except Exception as e:
        logger.warning("Could not read current user: %s", e)
        return None
    return getattr(response, "user", None) if response else None


def get_store_id(client: Client) -> Optional[str]:
    """The ``store_id`` of the signed-in admin, or None."""
    user = get_current_user(client)
    if not user:
        return None

    admin = first_row(
        client.table("store_admins")
        .select("store_id")
        .eq("user_id", user.id)
        .limit(1)
    )
    return admin.get("store_id") if admin else None


def require_user(client: Client):
    user = get_current_user(client)
    if not user:
        raise NotAuthenticatedError()
    return user


def require_store_id(client: Client) -> str:
    """Like ``get_store_id`` but raises when there is no user or store."""
    require_user(client)
    store_id = get_store_id(client)
    if not store_id:
        raise StoreNotFoundError()
    return store_id
