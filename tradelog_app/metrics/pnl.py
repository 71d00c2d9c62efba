"""Advisory P&L estimate from prices and quantity"""

from typing import Optional

from ..data.models import Side
from ..data.validators import parse_number_or_none


def estimate_pnl(
    entry_price: Optional[str],
    exit_price: Optional[str],
    quantity: Optional[str],
    side: str,
    manual_pnl: Optional[str] = None
) -> float:
    """
    Estimate P&L for in-form feedback.

    Buy: (exit - entry) * quantity; Sell: (entry - exit) * quantity.
    When any of the three inputs is missing, zero or unparseable the
    manually entered pnl is returned instead (0 if that is unparseable).
    The manual pnl stays the value of record; this never replaces it.

    Args:
        entry_price: Entry price text
        exit_price: Exit price text
        quantity: Quantity text
        side: "Buy" or "Sell"
        manual_pnl: User-entered pnl text

    Returns:
        Estimated P&L
    """
    entry = parse_number_or_none(entry_price)
    exit_ = parse_number_or_none(exit_price)
    qty = parse_number_or_none(quantity)

    if entry and exit_ and qty:
        if side == Side.BUY.value:
            return (exit_ - entry) * qty
        return (entry - exit_) * qty

    return parse_number_or_none(manual_pnl) or 0.0
