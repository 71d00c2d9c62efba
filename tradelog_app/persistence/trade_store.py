"""SQLite reference adapter for trade and strategy persistence."""

import asyncio
import json
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import structlog

from .base import CreateResult


TRADE_COLUMNS = (
    "user_id", "market", "symbol", "strategy_id", "trade_date", "side",
    "quantity", "entry_price", "exit_price", "pnl", "entry_time",
    "exit_time", "emotional_state", "notes",
)


class StaticUserProvider:
    """User provider returning a fixed identity (None means signed out)."""

    def __init__(self, user_id: Optional[str]):
        self.user_id = user_id

    async def get_current_user_id(self) -> Optional[str]:
        return self.user_id


class SQLiteTradeStore:
    """SQLite-based trade and strategy store."""

    def __init__(self, db_path: str = "trades.db"):
        self.db_path = Path(db_path)
        self.logger = structlog.get_logger(__name__, db_path=str(self.db_path))
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS strategies (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    rules TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    market TEXT NOT NULL
                        CHECK (market IN ('stock', 'crypto', 'forex', 'futures')),
                    symbol TEXT NOT NULL,
                    strategy_id TEXT REFERENCES strategies(id),
                    trade_date TEXT NOT NULL,
                    side TEXT NOT NULL CHECK (side IN ('Buy', 'Sell')),
                    quantity REAL,
                    entry_price REAL,
                    exit_price REAL,
                    pnl REAL,
                    entry_time TEXT,
                    exit_time TEXT,
                    emotional_state TEXT,
                    notes TEXT,
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_strategies_user_id ON strategies(user_id)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_trades_user_date ON trades(user_id, trade_date)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", error=str(e))
            raise
        finally:
            if conn:
                conn.close()

    def save_strategy(
        self,
        user_id: str,
        name: str,
        rules: Optional[list[str]] = None,
        is_active: bool = True,
        strategy_id: Optional[str] = None
    ) -> str:
        """Insert a strategy row; used to seed the store."""
        strategy_id = strategy_id or str(uuid.uuid4())
        with self._lock, self._get_connection() as conn:
            conn.execute("""
                INSERT INTO strategies (id, user_id, name, is_active, rules, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                strategy_id,
                user_id,
                name,
                int(is_active),
                json.dumps(list(rules or [])),
                datetime.now(timezone.utc).isoformat(),
            ))
            conn.commit()
        return strategy_id

    def _list_active_strategies(self, user_id: str, limit: int) -> list[dict[str, Any]]:
        with self._get_connection() as conn:
            rows = conn.execute("""
                SELECT id, name, is_active, rules FROM strategies
                WHERE user_id = ? AND is_active = 1
                ORDER BY created_at LIMIT ?
            """, (user_id, limit)).fetchall()

        return [
            {
                "id": row["id"],
                "name": row["name"],
                "is_active": bool(row["is_active"]),
                "rules": json.loads(row["rules"]),
            }
            for row in rows
        ]

    async def list_active_strategies(self, user_id: str, limit: int = 100) -> list[dict[str, Any]]:
        """Up to `limit` active strategies for the user, oldest first."""
        return await asyncio.to_thread(self._list_active_strategies, user_id, limit)

    def _insert_trade(self, payload: dict[str, Any]) -> CreateResult:
        trade_id = str(uuid.uuid4())
        emotions = payload.get("emotional_state")
        values = [payload.get(column) for column in TRADE_COLUMNS]
        values[TRADE_COLUMNS.index("emotional_state")] = json.dumps(emotions) if emotions else None

        with self._lock:
            try:
                with self._get_connection() as conn:
                    conn.execute(f"""
                        INSERT INTO trades (id, {", ".join(TRADE_COLUMNS)}, created_at)
                        VALUES (?, {", ".join("?" for _ in TRADE_COLUMNS)}, ?)
                    """, (trade_id, *values, datetime.now(timezone.utc).isoformat()))
                    conn.commit()

            except sqlite3.Error as e:
                self.logger.error(
                    "Failed to store trade",
                    user_id=payload.get("user_id"),
                    symbol=payload.get("symbol"),
                    error=str(e)
                )
                return CreateResult(error=str(e))

        self.logger.info(
            "Trade stored",
            trade_id=trade_id,
            user_id=payload.get("user_id"),
            symbol=payload.get("symbol")
        )
        return CreateResult(trade_id=trade_id)

    async def create_trade(self, payload: dict[str, Any]) -> CreateResult:
        """Insert one trade in a single transaction."""
        return await asyncio.to_thread(self._insert_trade, payload)

    def get_trade(self, trade_id: str) -> Optional[dict[str, Any]]:
        """Get a trade by ID."""
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM trades WHERE id = ?", (trade_id,)).fetchone()

        if row is None:
            return None

        trade = dict(row)
        if trade["emotional_state"]:
            trade["emotional_state"] = json.loads(trade["emotional_state"])
        return trade

    def count_trades(self, user_id: Optional[str] = None) -> int:
        """Number of stored trades, optionally for one user."""
        with self._get_connection() as conn:
            if user_id is None:
                row = conn.execute("SELECT COUNT(*) FROM trades").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) FROM trades WHERE user_id = ?", (user_id,)
                ).fetchone()
        return row[0]
