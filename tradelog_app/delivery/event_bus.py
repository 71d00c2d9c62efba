"""In-process event bus for same-view listeners.

Handlers are called synchronously in subscription order. A failing handler
is logged and does not stop delivery to the remaining handlers.
"""

from collections import defaultdict
from collections.abc import Callable
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)

Handler = Callable[[dict[str, Any]], None]


class EventBus:
    """Named-channel publish/subscribe within one process."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._history: list[tuple[str, dict[str, Any]]] = []
        self._error_counts: dict[str, int] = defaultdict(int)

    def subscribe(self, channel: str, handler: Handler) -> Callable[[], None]:
        """Subscribe a handler; returns a function that unsubscribes it."""
        self._handlers[channel].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers.get(channel, []):
                self._handlers[channel].remove(handler)

        return unsubscribe

    def dispatch(self, channel: str, detail: dict[str, Any]) -> int:
        """Dispatch to every handler on the channel; returns handlers called."""
        self._history.append((channel, detail))

        called = 0
        for handler in list(self._handlers.get(channel, [])):
            called += 1
            try:
                handler(dict(detail))
            except Exception:
                self._error_counts[channel] += 1
                logger.exception("Event handler failed", channel=channel)
        return called

    def handler_count(self, channel: str) -> int:
        return len(self._handlers.get(channel, []))

    def get_error_counts(self) -> dict[str, int]:
        """Return per-channel handler error counts."""
        return dict(self._error_counts)

    def get_history(self, channel: Optional[str] = None) -> list[tuple[str, dict[str, Any]]]:
        """Dispatched events, optionally filtered by channel. For testing."""
        if channel is None:
            return list(self._history)
        return [(c, d) for c, d in self._history if c == channel]
