"""
In-app notifications for the signed-in user.
"""

from typing import List

from supabase import Client

from .client import execute, rows
from .models import Notification

NOTIFICATION_LIMIT = 50


def get_notifications(client: Client, user_id: str) -> List[Notification]:
    return [
        Notification.from_row(r)
        for r in rows(
            client.table("notifications")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(NOTIFICATION_LIMIT)
        )
    ]


def get_unread_count(client: Client, user_id: str) -> int:
    response = execute(
        client.table("notifications")
        .select("*", count="exact", head=True)
        .eq("user_id", user_id)
        .eq("is_read", False)
    )
    return getattr(response, "count", None) or 0


def mark_as_read(client: Client, notification_id: str) -> None:
    execute(
        client.table("notifications")
        .update({"is_read": True})
        .eq("id", notification_id)
    )


def mark_all_as_read(client: Client, user_id: str) -> None:
    execute(
        client.table("notifications")
        .update({"is_read": True})
        .eq("user_id", user_id)
        .eq("is_read", False)
    )


def delete_notification(client: Client, notification_id: str) -> None:
    execute(client.table("notifications").delete().eq("id", notification_id))
