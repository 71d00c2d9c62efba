"""
Input error classifications for trade-entry form fields.

These errors are recovered locally: they are collected into a list shown to
the user and never reach the persistence layer.
"""

from typing import Optional, Dict, Any


class InputError(Exception):
    """Base class for user input problems the user can correct."""

    def __init__(self, message: str, field: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.field = field
        self.context = context or {}
        self.recoverable = True


class NumericFieldError(InputError):
    """A numeric field holds text that is not a finite number."""

    def __init__(self, message: str, raw_value: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_value = raw_value


class RequiredFieldError(InputError):
    """A field the caller marked as required is empty."""
