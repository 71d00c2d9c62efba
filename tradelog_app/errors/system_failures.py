"""
System failure classifications that abort the current submission.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for failures that end the current submission."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class IdentityError(SystemFailureError):
    """Missing or malformed identifier for the authenticated user."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field


class PersistenceError(SystemFailureError):
    """Remote trade write failed; the message is surfaced verbatim."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class StateTransitionError(SystemFailureError):
    """Submission pipeline asked to move along an undefined transition."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition
