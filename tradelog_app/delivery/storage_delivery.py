"""Cross-view trade update delivery through shared storage."""

import json

from ..config.broadcast import StorageChannelConfig
from ..data.models import TradeUpdateEvent
from .base import BaseBroadcastChannel, ChannelDeliveryError
from .storage import FileStorage, KeyValueStorage


class StorageEventChannel(BaseBroadcastChannel):
    """
    Writes the event to shared storage for views in other tabs or processes.

    Two keys are written: the full JSON payload, and a bare ISO timestamp
    for consumers that only need to know that something changed.
    """

    def __init__(self, name: str, config: StorageChannelConfig, storage: KeyValueStorage):
        super().__init__(name, config)
        self.config: StorageChannelConfig = config
        self.storage = storage

    def deliver(self, event: TradeUpdateEvent) -> None:
        try:
            self.storage.set_item(self.config.storage_key, json.dumps(event.to_payload()))
            self.storage.set_item(self.config.simple_storage_key, event.timestamp)
        except Exception as e:
            raise ChannelDeliveryError(f"Storage write failed: {e}") from e

        self.logger.debug(
            "Trade update written to storage",
            storage_key=self.config.storage_key,
            update_id=event.update_id
        )

    def health_check(self) -> bool:
        if isinstance(self.storage, FileStorage):
            return self.storage.health_check()
        return True
