"""
Errors that allow continued operation with reduced functionality.

Neither is surfaced to the user: an invalid optional reference is dropped,
and a failed broadcast leaves other views stale until their next refresh.
"""

from typing import Optional


class GracefulDegradationError(Exception):
    """Base for errors that degrade behaviour instead of failing it."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True
        self.recoverable = True


class OptionalReferenceError(GracefulDegradationError):
    """Malformed identifier for an optional reference such as a strategy."""

    def __init__(self, message: str, field: Optional[str] = None,
                 raw_value: Optional[str] = None, **kwargs):
        kwargs.setdefault("fallback_strategy", "treat_as_absent")
        super().__init__(message, **kwargs)
        self.field = field
        self.raw_value = raw_value


class SynchronizationError(GracefulDegradationError):
    """A broadcast channel could not deliver a trade update event."""

    def __init__(self, message: str, channel: Optional[str] = None,
                 update_id: Optional[str] = None, **kwargs):
        kwargs.setdefault("degraded_functionality", "cross_view_refresh")
        super().__init__(message, **kwargs)
        self.channel = channel
        self.update_id = update_id
