"""
Canonical data models for trade entry.

This module defines the draft owned by a form session, the read-only
strategy view, the validation result and the transient trade update event.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional


class Market(str, Enum):
    """Market a trade was placed in."""
    STOCK = "stock"
    CRYPTO = "crypto"
    FOREX = "forex"
    FUTURES = "futures"


class Side(str, Enum):
    """Trade direction."""
    BUY = "Buy"
    SELL = "Sell"


NUMERIC_FIELDS = ("quantity", "entry_price", "exit_price", "pnl")


@dataclass
class TradeDraft:
    """In-progress, unsaved state of the trade-entry form."""
    market: str = Market.STOCK.value
    symbol: str = ""
    strategy_id: str = ""              # "" means no strategy
    side: str = Side.BUY.value
    quantity: str = ""
    entry_price: str = ""
    exit_price: str = ""
    pnl: str = ""
    entry_time: str = ""               # HH:MM, independent of date
    exit_time: str = ""
    emotional_state: list[str] = field(default_factory=list)
    notes: str = ""
    date: str = field(default_factory=lambda: date.today().isoformat())

    def numeric_fields(self) -> dict[str, str]:
        """The four user-entered numeric strings, in validation order."""
        return {name: getattr(self, name) for name in NUMERIC_FIELDS}


@dataclass(frozen=True)
class Strategy:
    """User-defined strategy as loaded from the strategy store."""
    id: str
    name: str
    is_active: bool = True
    rules: tuple[str, ...] = ()

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Strategy":
        """Build from a store row; tolerates missing or null rules."""
        return cls(
            id=str(record["id"]).lower(),
            name=record.get("name") or "",
            is_active=bool(record.get("is_active", True)),
            rules=tuple(record.get("rules") or ()),
        )


@dataclass(frozen=True)
class SelectedStrategy:
    """Strategy chosen in the form, exposed for read-only rule display."""
    id: str
    name: str
    rules: tuple[str, ...]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of numeric field validation for one submission attempt."""
    is_valid: bool
    errors: list[str]
    data: dict[str, Optional[float]]


@dataclass(frozen=True)
class TradeUpdateEvent:
    """Transient trade-created notification sent to other views."""
    trade_id: str
    timestamp: str                     # ISO-8601
    update_id: str
    source: str
    action: str = "trade_created"

    def to_payload(self) -> dict[str, str]:
        """Wire shape shared with listeners in other views."""
        return {
            "tradeId": self.trade_id,
            "timestamp": self.timestamp,
            "action": self.action,
            "updateId": self.update_id,
            "source": self.source,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TradeUpdateEvent":
        return cls(
            trade_id=str(payload["tradeId"]),
            timestamp=payload["timestamp"],
            update_id=payload["updateId"],
            source=payload.get("source", ""),
            action=payload.get("action", "trade_created"),
        )


@dataclass(frozen=True)
class TradePayload:
    """Fully validated and sanitized trade sent to persistence."""
    user_id: str
    market: str
    symbol: str
    strategy_id: Optional[str]
    trade_date: str
    side: str
    quantity: Optional[float]
    entry_price: Optional[float]
    exit_price: Optional[float]
    pnl: Optional[float]
    entry_time: Optional[str]
    exit_time: Optional[str]
    emotional_state: Optional[list[str]]
    notes: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "market": self.market,
            "symbol": self.symbol,
            "strategy_id": self.strategy_id,
            "trade_date": self.trade_date,
            "side": self.side,
            "quantity": self.quantity,
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "pnl": self.pnl,
            "entry_time": self.entry_time,
            "exit_time": self.exit_time,
            "emotional_state": list(self.emotional_state) if self.emotional_state else None,
            "notes": self.notes,
        }
