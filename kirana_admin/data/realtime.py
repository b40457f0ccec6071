"""
Realtime order notifications.

Supabase realtime is asyncio based while Streamlit reruns a script
synchronously, so the subscription runs on a daemon thread with its own
event loop. Change events are queued there and the page drains the queue on
each rerun.
"""

import asyncio
import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from supabase import acreate_client

from ..core.utils import format_currency

logger = logging.getLogger(__name__)

CHANNEL_NAME = "orders-changes"
WATCHED_EVENTS = ("INSERT", "UPDATE")


@dataclass
class OrderEvent:
    event_type: str
    record: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_new_order(self) -> bool:
        return self.event_type == "INSERT"

    def order_label(self) -> str:
        order_number = self.record.get("order_number")
        if order_number:
            return f"#{order_number}"
        return f"#{str(self.record.get('id', ''))[:8]}"

    def toast_message(self) -> str:
        if self.is_new_order:
            amount = format_currency(self.record.get("total_amount"))
            return f"New order received! Order {self.order_label()} - {amount}"
        return f"Order updated: {self.order_label()}"


def parse_change_payload(payload: Any) -> Optional[OrderEvent]:
    """
    Normalise a postgres_changes callback payload.

    Accepts both the nested ``{"data": {"type", "record"}}`` shape and the
    flat ``{"eventType", "new"}`` shape.
    """
    if not isinstance(payload, dict):
        return None

    data = payload.get("data") if isinstance(payload.get("data"), dict) else payload
    event_type = data.get("type") or data.get("eventType")
    record = data.get("record") or data.get("new") or {}

    if hasattr(event_type, "value"):
        event_type = event_type.value
    if not event_type:
        return None
    return OrderEvent(event_type=str(event_type).upper(), record=dict(record))


class RealtimeOrderFeed:
    """
    Background subscription to INSERT/UPDATE events on the store's orders.
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        store_id: str,
        access_token: Optional[str] = None,
    ):
        self.supabase_url = supabase_url
        self.supabase_key = supabase_key
        self.store_id = store_id
        self.access_token = access_token
        self._events: "queue.Queue[OrderEvent]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop: Optional[asyncio.Event] = None
        self.connection_error: Optional[str] = None

    @property
    def filter(self) -> str:
        return f"store_id=eq.{self.store_id}"

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running():
            return
        self._thread = threading.Thread(
            target=self._run,
            name=f"realtime-orders-{self.store_id[:8]}",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        if self._loop and self._stop:
            self._loop.call_soon_threadsafe(self._stop.set)

    def handle_payload(self, payload: Any) -> None:
        event = parse_change_payload(payload)
        if event is None or event.event_type not in WATCHED_EVENTS:
            return
        logger.info("Order change detected: %s %s", event.event_type, event.order_label())
        self._events.put(event)

    def drain(self) -> List[OrderEvent]:
        """Return and clear every event received since the last drain."""
        events = []
        while True:
            try:
                events.append(self._events.get_nowait())
            except queue.Empty:
                return events

    def _run(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_until_complete(self._subscribe())
        except Exception as e:
            self.connection_error = str(e)
            logger.error("Realtime order feed stopped: %s", e)
        finally:
            self._loop.close()

    async def _subscribe(self) -> None:
        self._stop = asyncio.Event()
        client = await acreate_client(self.supabase_url, self.supabase_key)
        if self.access_token:
            await client.realtime.set_auth(self.access_token)

        channel = client.channel(CHANNEL_NAME)
        for event in WATCHED_EVENTS:
            channel.on_postgres_changes(
                event,
                schema="public",
                table="orders",
                filter=self.filter,
                callback=self.handle_payload,
            )
        await channel.subscribe()
        logger.info("Subscribed to order changes for store %s", self.store_id)

        try:
            await self._stop.wait()
        finally:
            await client.remove_channel(channel)
