"""Cross-view broadcast of trade update events."""

from .base import BaseBroadcastChannel, DeliveryResult, DeliveryStatus
from .event_bus import EventBus
from .in_process import InProcessEventChannel
from .listener import TradeUpdateListener
from .notifier import CrossViewNotifier, create_notifier
from .storage import FileStorage, InMemoryStorage, KeyValueStorage, StorageEvent
from .storage_delivery import StorageEventChannel

__all__ = [
    "BaseBroadcastChannel",
    "DeliveryResult",
    "DeliveryStatus",
    "EventBus",
    "InProcessEventChannel",
    "TradeUpdateListener",
    "CrossViewNotifier",
    "create_notifier",
    "FileStorage",
    "InMemoryStorage",
    "KeyValueStorage",
    "StorageEvent",
    "StorageEventChannel",
]
