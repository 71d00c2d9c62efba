"""Contracts for the collaborators the trade-entry core consumes."""

from dataclasses import dataclass
from typing import Any, Optional, Protocol


@dataclass(frozen=True)
class CreateResult:
    """Outcome of a trade create call: an id or an error message."""
    trade_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.trade_id is not None


class UserProvider(Protocol):
    """Authenticated-user provider."""

    async def get_current_user_id(self) -> Optional[str]:
        """Current user id, or None when unauthenticated."""
        ...


class StrategyStore(Protocol):
    """Read-only source of a user's strategies."""

    async def list_active_strategies(self, user_id: str, limit: int = 100) -> list[dict[str, Any]]:
        """Up to `limit` active strategies as {id, name, is_active, rules}."""
        ...


class TradePersistence(Protocol):
    """Remote trade store."""

    async def create_trade(self, payload: dict[str, Any]) -> CreateResult:
        """Insert one trade; never leaves a partial record."""
        ...
