"""
Error classification for the trade-entry core.

Structured exception hierarchy separating input errors (fixed by the user),
identity errors (fatal to a submission), optional-reference errors and
synchronization errors (degrade gracefully) and persistence failures.
"""

from .input_errors import (
    InputError,
    NumericFieldError,
    RequiredFieldError,
)
from .system_failures import (
    SystemFailureError,
    IdentityError,
    PersistenceError,
    StateTransitionError,
)
from .recovery import (
    GracefulDegradationError,
    OptionalReferenceError,
    SynchronizationError,
)

__all__ = [
    # Input Errors
    "InputError",
    "NumericFieldError",
    "RequiredFieldError",
    # System Failures
    "SystemFailureError",
    "IdentityError",
    "PersistenceError",
    "StateTransitionError",
    # Degradation Categories
    "GracefulDegradationError",
    "OptionalReferenceError",
    "SynchronizationError",
]
