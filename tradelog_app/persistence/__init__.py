"""External collaborator contracts and SQLite reference adapters."""

from .base import CreateResult, StrategyStore, TradePersistence, UserProvider
from .trade_store import SQLiteTradeStore, StaticUserProvider

__all__ = [
    "CreateResult",
    "StrategyStore",
    "TradePersistence",
    "UserProvider",
    "SQLiteTradeStore",
    "StaticUserProvider",
]
