"""Derived trade metrics recomputed on every form change"""

from .duration import calculate_trade_duration, format_duration
from .pnl import estimate_pnl

__all__ = [
    "calculate_trade_duration",
    "format_duration",
    "estimate_pnl",
]
