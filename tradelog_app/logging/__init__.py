"""
Logging configuration and utilities for the trade journal core.
"""
from .config import (
    configure_logging,
    configure_logging_from_params,
    get_logger,
    submission_context,
)

__all__ = [
    "configure_logging",
    "configure_logging_from_params",
    "get_logger",
    "submission_context",
]
