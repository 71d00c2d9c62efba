"""Two-channel trade update broadcaster."""

import uuid
from datetime import datetime
from typing import Optional

from ..config.broadcast import (
    BroadcastConfig,
    BroadcastMethod,
    get_default_broadcast_config,
)
from ..data.models import TradeUpdateEvent
from ..errors import SynchronizationError
from ..logging.config import get_sync_logger
from ..utils.time import epoch_millis, format_iso_timestamp, utc_now
from .base import BaseBroadcastChannel, DeliveryResult, DeliveryStatus
from .event_bus import EventBus
from .in_process import InProcessEventChannel
from .listener import RefreshCallback, TradeUpdateListener
from .storage import FileStorage, InMemoryStorage, KeyValueStorage
from .storage_delivery import StorageEventChannel

logger = get_sync_logger(__name__)


def make_update_id(trade_id: str, ts: datetime) -> str:
    """Unique id for one broadcast of one trade."""
    return f"trade_{trade_id}_{epoch_millis(ts)}_{uuid.uuid4().hex[:8]}"


class CrossViewNotifier:
    """
    Broadcasts trade update events on every configured channel.

    Channels are independent: one failing does not stop the others, and no
    ordering between them is promised. Listeners treat either signal as
    "invalidate and refetch".
    """

    def __init__(
        self,
        channels: list[BaseBroadcastChannel],
        source: str = "TradeForm",
        action: str = "trade_created"
    ):
        self.channels = list(channels)
        self.source = source
        self.action = action

    def build_event(self, trade_id: str, now: Optional[datetime] = None) -> TradeUpdateEvent:
        """Construct the event for a freshly created trade."""
        now = now or utc_now()
        return TradeUpdateEvent(
            trade_id=str(trade_id),
            timestamp=format_iso_timestamp(now),
            update_id=make_update_id(str(trade_id), now),
            source=self.source,
            action=self.action,
        )

    def broadcast(self, event: TradeUpdateEvent) -> list[DeliveryResult]:
        """Deliver on all healthy channels; failures are reported, never raised."""
        results = []
        for channel in self.channels:
            if not channel.health_check():
                results.append(DeliveryResult(
                    channel=channel.name,
                    status=DeliveryStatus.SKIPPED,
                    message="Channel unhealthy",
                ))
                continue
            results.append(channel.safe_deliver(event))

        failed = [r for r in results if r.status is not DeliveryStatus.SUCCESS]
        if failed:
            error = SynchronizationError(
                "Trade update not delivered on all channels",
                channel=",".join(r.channel for r in failed),
                update_id=event.update_id,
            )
            logger.warning(
                str(error),
                failed_channels=error.channel,
                update_id=event.update_id,
                degraded_functionality=error.degraded_functionality,
            )
        else:
            logger.info(
                "Trade update broadcast",
                trade_id=event.trade_id,
                update_id=event.update_id,
                channels=[c.name for c in self.channels],
            )

        return results

    def notify_trade_created(self, trade_id: str) -> tuple[TradeUpdateEvent, list[DeliveryResult]]:
        """Build and broadcast exactly one event for a created trade."""
        event = self.build_event(trade_id)
        return event, self.broadcast(event)

    def create_listener(self, on_refresh: RefreshCallback) -> TradeUpdateListener:
        """Listener subscribed to the same bus and storage this notifier writes to."""
        kwargs = {}
        for channel in self.channels:
            if isinstance(channel, InProcessEventChannel):
                kwargs.update(bus=channel.bus, channel=channel.config.channel)
            elif isinstance(channel, StorageEventChannel):
                kwargs.update(
                    storage=channel.storage,
                    storage_key=channel.config.storage_key,
                    simple_storage_key=channel.config.simple_storage_key,
                )
        return TradeUpdateListener(on_refresh, **kwargs)


def create_notifier(
    config: Optional[BroadcastConfig] = None,
    bus: Optional[EventBus] = None,
    storage: Optional[KeyValueStorage] = None,
    action: str = "trade_created"
) -> CrossViewNotifier:
    """
    Build a notifier from broadcast configuration.

    Args:
        config: Broadcast configuration, defaults to both channels
        bus: Event bus for the in-process channel
        storage: Storage for the storage channel; built from config if omitted

    Returns:
        Configured CrossViewNotifier
    """
    config = config or get_default_broadcast_config()
    channels: list[BaseBroadcastChannel] = []

    if config.enabled:
        for destination in config.destinations:
            if not destination.enabled:
                continue

            if destination.method == BroadcastMethod.IN_PROCESS:
                channels.append(InProcessEventChannel(
                    destination.name, destination.config, bus or EventBus()
                ))
            elif destination.method == BroadcastMethod.LOCAL_STORAGE:
                channel_storage = storage
                if channel_storage is None:
                    if destination.config.backend == "file":
                        channel_storage = FileStorage(destination.config.path)
                    else:
                        channel_storage = InMemoryStorage()
                channels.append(StorageEventChannel(
                    destination.name, destination.config, channel_storage
                ))

    return CrossViewNotifier(channels, source=config.source, action=action)
