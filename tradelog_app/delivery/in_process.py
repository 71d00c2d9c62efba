"""Same-view trade update dispatch."""

from ..config.broadcast import InProcessChannelConfig
from ..data.models import TradeUpdateEvent
from .base import BaseBroadcastChannel
from .event_bus import EventBus


class InProcessEventChannel(BaseBroadcastChannel):
    """Dispatches the full event payload on a well-known bus channel."""

    def __init__(self, name: str, config: InProcessChannelConfig, bus: EventBus):
        super().__init__(name, config)
        self.config: InProcessChannelConfig = config
        self.bus = bus

    def deliver(self, event: TradeUpdateEvent) -> None:
        listeners = self.bus.dispatch(self.config.channel, event.to_payload())
        self.logger.debug(
            "Trade update dispatched",
            channel=self.config.channel,
            update_id=event.update_id,
            listeners=listeners
        )

    def health_check(self) -> bool:
        return True
