#!/usr/bin/env python3
"""
Basic Usage Example - Trade Journal Entry

This script walks through one trade-entry form session against a local
SQLite journal. It shows how to:
- Build a session from configuration
- Fill in the form and watch duration and P&L update
- Pick a strategy and emotional state
- Submit, and see another view refresh from shared storage

Run: python examples/basic_usage.py
"""

import asyncio
import tempfile
from pathlib import Path

from tradelog_app.delivery.event_bus import EventBus
from tradelog_app.delivery.listener import TradeUpdateListener
from tradelog_app.delivery.storage import FileStorage
from tradelog_app.engine import create_session
from tradelog_app.persistence.trade_store import SQLiteTradeStore, StaticUserProvider

USER_ID = "3f1c2b7a-9d4e-4a5b-8c6d-0e1f2a3b4c5d"


async def main():
    """Main demonstration function."""
    print("📒 Trade Journal - Basic Usage Demo")
    print("=" * 60)

    workdir = Path(tempfile.mkdtemp(prefix="tradelog-"))
    store = SQLiteTradeStore(str(workdir / "journal.db"))
    strategy_id = store.save_strategy(
        USER_ID,
        "Opening Range Breakout",
        rules=["Wait for the first 15m range", "Enter on close above range high"],
    )

    # A dashboard in another window watching the same shared storage
    shared_path = str(workdir / "views.json")
    dashboard_storage = FileStorage(shared_path)
    TradeUpdateListener(
        lambda event: print(f"   📊 Dashboard refresh for trade {event.trade_id if event else '?'}"),
        storage=dashboard_storage,
    )

    print("1. Opening the trade entry form...")
    session = create_session(
        StaticUserProvider(USER_ID),
        store,
        store,
        bus=EventBus(),
        storage=FileStorage(shared_path),
        navigator=lambda route: print(f"   ➡️  Navigating to {route}"),
        configure_logs=True,
    )
    await session.start()
    print(f"   Loaded {len(session.strategies.strategies)} strategies")
    session.listen(lambda event: print(f"   🔄 Trade list refresh for trade {event.trade_id if event else '?'}"))
    print()

    print("2. Filling in the form...")
    for name, value in [
        ("symbol", "AAPL"),
        ("side", "Buy"),
        ("quantity", "10"),
        ("entry_price", "187.20"),
        ("exit_price", "189.95"),
        ("entry_time", "09:42"),
        ("exit_time", "11:03"),
    ]:
        session.update_field(name, value)
    print(f"   Duration: {session.duration}")
    print(f"   Estimated P&L: {session.estimated_pnl:.2f}")

    selected = session.select_strategy(strategy_id)
    session.toggle_strategy_rules()
    print(f"   Strategy: {selected.name}")
    for rule in selected.rules:
        print(f"     • {rule}")

    session.set_emotional_state({"PATIENCE": True, "FOMO": False, "DISCIPLINE": True})
    print(f"   Emotions: {', '.join(session.draft.emotional_state)}")
    print()

    print("3. Submitting...")
    outcome = await session.submit()
    if not outcome.ok:
        print(f"   ❌ {outcome.alert_message}")
        return

    print(f"   ✅ Trade {outcome.trade_id} saved")
    dashboard_storage.poll()
    print()

    print("4. Submitting an invalid form...")
    session.update_field("symbol", "MSFT")
    session.update_field("quantity", "ten")
    outcome = await session.submit()
    print(f"   ❌ {outcome.alert_message}")
    print()

    session.close()
    print(f"📁 Journal holds {store.count_trades(USER_ID)} trade(s) in {workdir}")


if __name__ == "__main__":
    asyncio.run(main())
