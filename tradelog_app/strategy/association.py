"""
Strategy association for a form session.

Strategies are loaded once per session and cached; selection resolves an
id against that cached list without another fetch. Bad or stale ids
resolve to "no strategy" instead of failing.
"""

from typing import Optional

import structlog

from ..data.identifiers import sanitize_uuid
from ..data.models import SelectedStrategy, Strategy
from ..errors import OptionalReferenceError
from ..persistence.base import StrategyStore
from ..utils.cancellation import CancellationToken

logger = structlog.get_logger(__name__)


class StrategyAssociation:
    """Loads the user's active strategies and tracks the selected one."""

    def __init__(self, store: StrategyStore, limit: int = 100, active_only: bool = True):
        self.store = store
        self.limit = limit
        self.active_only = active_only
        self.strategies: list[Strategy] = []
        self.selected: Optional[SelectedStrategy] = None
        self.show_rules = False
        self.loaded = False

    async def load(self, user_id: str, token: Optional[CancellationToken] = None) -> list[Strategy]:
        """
        Fetch active strategies for the user, once per session.

        Args:
            user_id: Sanitized id of the authenticated user
            token: Session cancellation token

        Returns:
            The cached strategy list (empty on failure or cancellation)
        """
        if self.loaded:
            return self.strategies

        try:
            records = await self.store.list_active_strategies(user_id, limit=self.limit)
        except Exception as e:
            logger.error("Failed to load strategies", user_id=user_id, error=str(e))
            records = []

        if token is not None and token.cancelled:
            logger.debug("Strategy load resolved after session close, discarded", user_id=user_id)
            return []

        strategies = []
        for record in records[:self.limit]:
            try:
                strategy = Strategy.from_record(record)
            except (KeyError, TypeError) as e:
                logger.warning("Skipping malformed strategy record", error=str(e))
                continue
            if strategy.is_active or not self.active_only:
                strategies.append(strategy)

        self.strategies = strategies
        self.loaded = True
        logger.info("Strategies loaded", user_id=user_id, count=len(strategies))
        return self.strategies

    def select_strategy(self, strategy_id: Optional[str]) -> Optional[SelectedStrategy]:
        """
        Resolve a selected strategy id against the loaded list.

        Args:
            strategy_id: Raw id from the strategy picker; "" means none

        Returns:
            The selected strategy, or None for none/invalid/unknown ids
        """
        self.show_rules = False
        self.selected = None

        sanitized = sanitize_uuid(strategy_id)
        if sanitized.is_empty:
            return None

        if sanitized.is_invalid:
            error = OptionalReferenceError(
                "Invalid strategy ID selected",
                field="strategy_id",
                raw_value=strategy_id,
            )
            logger.warning(
                str(error),
                strategy_id=strategy_id,
                fallback=error.fallback_strategy
            )
            return None

        strategy = self.find(sanitized.value)
        if strategy is None:
            # Deleted since the list was loaded
            logger.info("Selected strategy not found", strategy_id=sanitized.value)
            return None

        self.selected = SelectedStrategy(id=strategy.id, name=strategy.name, rules=strategy.rules)
        return self.selected

    def resolve_reference(self, strategy_id: Optional[str]) -> str:
        """
        Strategy id to store with a trade.

        Ids missing from the loaded list (deleted, or picked before the
        load finished) become "" so the trade is saved without a strategy.
        Malformed ids pass through for the pipeline to drop.
        """
        sanitized = sanitize_uuid(strategy_id)
        if sanitized.is_empty:
            return ""
        if sanitized.is_invalid:
            return strategy_id or ""

        if self.find(sanitized.value) is None:
            error = OptionalReferenceError(
                "Unknown strategy ID dropped from trade",
                field="strategy_id",
                raw_value=strategy_id,
            )
            logger.warning(str(error), strategy_id=sanitized.value, fallback=error.fallback_strategy)
            return ""

        return sanitized.value

    def find(self, strategy_id: str) -> Optional[Strategy]:
        for strategy in self.strategies:
            if strategy.id == strategy_id:
                return strategy
        return None

    def toggle_rules(self) -> bool:
        """Flip rule visibility; stays collapsed when nothing is selected."""
        self.show_rules = not self.show_rules if self.selected else False
        return self.show_rules
