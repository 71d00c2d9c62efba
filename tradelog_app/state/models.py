"""
Submission state machine data models.

This module defines the pipeline states, the allowed transitions between
them and the immutable outcome returned for every submission attempt.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..data.models import TradeUpdateEvent


class SubmissionState(str, Enum):
    """Trade submission pipeline states."""
    IDLE = "idle"
    VALIDATING = "validating"
    SANITIZING = "sanitizing"
    PERSISTING = "persisting"
    NOTIFYING = "notifying"


class SubmissionStatus(str, Enum):
    """How a submission attempt ended."""
    SUCCESS = "success"
    VALIDATION_FAILED = "validation_failed"
    AUTH_FAILED = "auth_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    REJECTED_BUSY = "rejected_busy"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS: dict[SubmissionState, frozenset[SubmissionState]] = {
    SubmissionState.IDLE: frozenset({SubmissionState.VALIDATING}),
    SubmissionState.VALIDATING: frozenset({SubmissionState.SANITIZING, SubmissionState.IDLE}),
    SubmissionState.SANITIZING: frozenset({SubmissionState.PERSISTING, SubmissionState.IDLE}),
    SubmissionState.PERSISTING: frozenset({SubmissionState.NOTIFYING, SubmissionState.IDLE}),
    SubmissionState.NOTIFYING: frozenset({SubmissionState.IDLE}),
}


def is_allowed_transition(from_state: SubmissionState, to_state: SubmissionState) -> bool:
    return to_state in ALLOWED_TRANSITIONS.get(from_state, frozenset())


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of one submission attempt, surfaced to the form."""

    status: SubmissionStatus
    errors: list[str] = field(default_factory=list)

    # Set on success
    trade_id: Optional[str] = None
    event: Optional[TradeUpdateEvent] = None
    payload: Optional[dict[str, Any]] = None

    # Channels that failed to carry the event; never fails the submission
    sync_failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is SubmissionStatus.SUCCESS

    @property
    def alert_message(self) -> Optional[str]:
        """Text shown to the user, if any."""
        if not self.errors:
            return None
        if self.status is SubmissionStatus.VALIDATION_FAILED:
            return "Validation errors:\n" + "\n".join(self.errors)
        return self.errors[0]
