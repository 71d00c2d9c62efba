"""Consumer side of trade update broadcasts.

A view that caches trade data (dashboard widgets, trade lists, calendars)
creates one listener. Both channels are equivalent "invalidate and
refetch" triggers; the listener collapses the several signals one broadcast
produces into a single refresh using the event's update id.
"""

import json
from collections import deque
from collections.abc import Callable
from typing import Any, Optional

from ..data.models import TradeUpdateEvent
from ..logging.config import get_sync_logger
from .event_bus import EventBus
from .storage import KeyValueStorage, StorageEvent

logger = get_sync_logger(__name__)

RefreshCallback = Callable[[Optional[TradeUpdateEvent]], None]


class TradeUpdateListener:
    """Subscribes to both broadcast channels and calls `on_refresh` once per update."""

    def __init__(
        self,
        on_refresh: RefreshCallback,
        bus: Optional[EventBus] = None,
        storage: Optional[KeyValueStorage] = None,
        channel: str = "tradeDataUpdated",
        storage_key: str = "tradeDataLastUpdated",
        simple_storage_key: str = "tradeDataLastUpdatedSimple",
        history_size: int = 256
    ):
        self.on_refresh = on_refresh
        self.storage_key = storage_key
        self.simple_storage_key = simple_storage_key
        self._seen_update_ids: deque[str] = deque(maxlen=history_size)
        self._seen_timestamps: deque[str] = deque(maxlen=history_size)
        self._unsubscribers: list[Callable[[], None]] = []
        self.refresh_count = 0

        if bus is not None:
            self._unsubscribers.append(bus.subscribe(channel, self._handle_bus_event))
        if storage is not None:
            self._unsubscribers.append(storage.subscribe(self._handle_storage_event))

    def _handle_bus_event(self, detail: dict[str, Any]) -> None:
        try:
            event = TradeUpdateEvent.from_payload(detail)
        except (KeyError, TypeError) as e:
            logger.warning("Malformed trade update event ignored", error=str(e))
            return
        self._accept(event)

    def _handle_storage_event(self, change: StorageEvent) -> None:
        if change.new_value is None:
            return

        if change.key == self.storage_key:
            try:
                event = TradeUpdateEvent.from_payload(json.loads(change.new_value))
            except (ValueError, KeyError, TypeError) as e:
                logger.warning("Malformed stored trade update ignored", key=change.key, error=str(e))
                return
            self._accept(event)

        elif change.key == self.simple_storage_key:
            # Timestamp-only signal; skip if the full payload already covered it
            if change.new_value in self._seen_timestamps:
                return
            self._seen_timestamps.append(change.new_value)
            self._refresh(None)

    def _accept(self, event: TradeUpdateEvent) -> None:
        if event.update_id in self._seen_update_ids:
            logger.debug("Duplicate trade update ignored", update_id=event.update_id)
            return

        self._seen_update_ids.append(event.update_id)
        self._seen_timestamps.append(event.timestamp)
        self._refresh(event)

    def _refresh(self, event: Optional[TradeUpdateEvent]) -> None:
        self.refresh_count += 1
        logger.debug(
            "Refreshing trade data",
            update_id=event.update_id if event else None,
            trade_id=event.trade_id if event else None
        )
        self.on_refresh(event)

    def close(self) -> None:
        """Unsubscribe from all channels."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
