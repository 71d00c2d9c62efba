"""Base classes for trade update broadcast channels."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog

from ..data.models import TradeUpdateEvent


class DeliveryStatus(Enum):
    """Broadcast delivery status."""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class DeliveryResult:
    """Result of delivering one event on one channel."""
    channel: str
    status: DeliveryStatus
    message: Optional[str] = None
    delivery_time_ms: Optional[int] = None
    error: Optional[Exception] = None


class ChannelDeliveryError(Exception):
    """Raised by a channel that cannot deliver an event."""
    pass


class BaseBroadcastChannel(ABC):
    """Base class for trade update broadcast channels."""

    def __init__(self, name: str, config: Any):
        self.name = name
        self.config = config
        self.logger = structlog.get_logger(f"sync.channel.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    def deliver(self, event: TradeUpdateEvent) -> None:
        """
        Deliver an event to this channel's subscribers.

        Args:
            event: Trade update event to broadcast

        Raises:
            ChannelDeliveryError: If the channel is unavailable
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the channel can currently deliver."""
        pass

    def safe_deliver(self, event: TradeUpdateEvent) -> DeliveryResult:
        """Deliver and report the outcome instead of raising."""
        start_time = time.time()
        try:
            self.deliver(event)
        except Exception as e:
            self._error_count += 1
            self.logger.warning(
                "Trade update delivery failed",
                channel=self.name,
                update_id=event.update_id,
                error=str(e)
            )
            return DeliveryResult(
                channel=self.name,
                status=DeliveryStatus.FAILED,
                message=str(e),
                error=e
            )

        self._delivery_count += 1
        return DeliveryResult(
            channel=self.name,
            status=DeliveryStatus.SUCCESS,
            delivery_time_ms=int((time.time() - start_time) * 1000)
        )

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
        }

    def reset_stats(self):
        """Reset delivery statistics."""
        self._delivery_count = 0
        self._error_count = 0
