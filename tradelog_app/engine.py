"""
Trade entry session coordinator.

Owns the draft for one open trade-entry form, recomputes derived values
whenever a field changes, and wires strategy association, submission and
cross-view notification together:

Field change → Duration / P&L recompute
Submit → Validate → Sanitize → Persist → Broadcast → Success callback
"""

from collections.abc import Callable
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Optional

import structlog

from .config.broadcast import get_default_broadcast_config
from .config.defaults import DefaultConfig, get_default_config
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .data.emotions import EmotionInput, normalize_emotional_state
from .data.identifiers import sanitize_uuid
from .data.models import Market, SelectedStrategy, Side, TradeDraft
from .delivery.event_bus import EventBus
from .delivery.listener import RefreshCallback, TradeUpdateListener
from .delivery.notifier import CrossViewNotifier, create_notifier
from .delivery.storage import KeyValueStorage
from .logging.config import configure_logging_from_params
from .metrics.duration import calculate_trade_duration
from .metrics.pnl import estimate_pnl
from .persistence.base import StrategyStore, TradePersistence, UserProvider
from .state.machine import SubmissionPipeline
from .state.models import SubmissionOutcome, SubmissionStatus
from .strategy.association import StrategyAssociation
from .utils.cancellation import CancellationToken
from .utils.time import today_iso

logger = structlog.get_logger(__name__)

DRAFT_FIELDS = frozenset(f.name for f in fields(TradeDraft))
DURATION_INPUTS = frozenset({"entry_time", "exit_time"})
PNL_INPUTS = frozenset({"entry_price", "exit_price", "quantity", "side", "pnl"})


class TradeEntrySession:
    """
    One trade-entry form session.

    Created when the form opens and closed when the user navigates away.
    Closing cancels the session token so late responses are discarded.
    """

    def __init__(
        self,
        user_provider: UserProvider,
        strategy_store: StrategyStore,
        persistence: TradePersistence,
        notifier: CrossViewNotifier,
        config: Optional[DefaultConfig] = None,
        on_success: Optional[Callable[[], None]] = None,
        navigator: Optional[Callable[[str], None]] = None
    ) -> None:
        self.config = config or get_default_config()
        self.user_provider = user_provider
        self.notifier = notifier
        self.token = CancellationToken()

        self.strategies = StrategyAssociation(
            strategy_store,
            limit=self.config.strategy.load_limit,
            active_only=self.config.strategy.active_only,
        )
        self.pipeline = SubmissionPipeline(
            user_provider,
            persistence,
            notifier,
            on_success=on_success,
            navigator=navigator,
            dashboard_route=self.config.form.dashboard_route,
            default_market=self.config.form.default_market,
        )

        self.draft = self._new_draft()
        self.duration: Optional[str] = None
        self.estimated_pnl: float = 0.0
        self.validation_errors: list[str] = []
        self.last_outcome: Optional[SubmissionOutcome] = None

        self._recompute(DURATION_INPUTS | PNL_INPUTS)

    def _new_draft(self) -> TradeDraft:
        return TradeDraft(
            market=self.config.form.default_market,
            side=self.config.form.default_side,
            date=today_iso(),
        )

    @property
    def closed(self) -> bool:
        return self.token.cancelled

    @property
    def is_submitting(self) -> bool:
        return self.pipeline.is_submitting

    @property
    def selected_strategy(self) -> Optional[SelectedStrategy]:
        return self.strategies.selected

    async def start(self) -> None:
        """Load the user's strategies for this session."""
        try:
            user_id = await self.user_provider.get_current_user_id()
        except Exception as e:
            logger.error("User lookup raised, strategies not loaded", error=str(e))
            return
        if self.closed:
            return

        sanitized = sanitize_uuid(user_id)
        if sanitized.value is None:
            logger.warning("No valid user for strategy load", user_present=bool(user_id))
            return

        await self.strategies.load(sanitized.value, self.token)

    def update_field(self, name: str, value: Any) -> None:
        """Set one draft field and recompute the values derived from it."""
        if self.closed:
            return
        if name not in DRAFT_FIELDS:
            raise AttributeError(f"TradeDraft has no field {name!r}")

        if name == "emotional_state":
            self.set_emotional_state(value)
            return
        if name == "strategy_id":
            self.select_strategy(value)
            return
        if name == "market" and value not in {m.value for m in Market}:
            raise ValueError(f"Unknown market {value!r}")
        if name == "side" and value not in {s.value for s in Side}:
            raise ValueError(f"Unknown side {value!r}")

        self.draft = replace(self.draft, **{name: value})
        self._recompute(frozenset({name}))

    def set_emotional_state(self, emotions: EmotionInput) -> None:
        """Accept either picker shape; the draft keeps an ordered list."""
        if self.closed:
            return
        self.draft = replace(self.draft, emotional_state=normalize_emotional_state(emotions))

    def select_strategy(self, strategy_id: str) -> Optional[SelectedStrategy]:
        """Record the picked strategy id and resolve it for rule display."""
        if self.closed:
            return None
        self.draft = replace(self.draft, strategy_id=strategy_id or "")
        return self.strategies.select_strategy(strategy_id)

    def toggle_strategy_rules(self) -> bool:
        return self.strategies.toggle_rules()

    def listen(self, on_refresh: RefreshCallback) -> TradeUpdateListener:
        """Subscribe a view to the updates this session broadcasts; closed with the session."""
        listener = self.notifier.create_listener(on_refresh)
        self.token.on_cancel(listener.close)
        return listener

    def _recompute(self, changed: frozenset[str]) -> None:
        if changed & DURATION_INPUTS:
            self.duration = calculate_trade_duration(self.draft.entry_time, self.draft.exit_time)
        if changed & PNL_INPUTS:
            self.estimated_pnl = estimate_pnl(
                self.draft.entry_price,
                self.draft.exit_price,
                self.draft.quantity,
                self.draft.side,
                self.draft.pnl,
            )

    async def submit(self) -> SubmissionOutcome:
        """Submit the current draft; resets the form on success."""
        if self.closed:
            return SubmissionOutcome(status=SubmissionStatus.CANCELLED)

        if not self.is_submitting:
            self.validation_errors = []
        draft = replace(self.draft, strategy_id=self.strategies.resolve_reference(self.draft.strategy_id))
        outcome = await self.pipeline.submit(draft, self.token)

        if self.closed or outcome.status is SubmissionStatus.REJECTED_BUSY:
            return outcome

        self.last_outcome = outcome
        if outcome.status is SubmissionStatus.VALIDATION_FAILED:
            self.validation_errors = list(outcome.errors)
        elif outcome.ok:
            self.reset()

        return outcome

    def reset(self) -> None:
        """Discard the draft and start a fresh one."""
        self.draft = self._new_draft()
        self.strategies.select_strategy("")
        self.validation_errors = []
        self._recompute(DURATION_INPUTS | PNL_INPUTS)

    def close(self) -> None:
        """Tear the session down; in-flight awaits will not write back."""
        if not self.closed:
            self.token.cancel()
            logger.debug("Trade entry session closed")


def create_session(
    user_provider: UserProvider,
    strategy_store: StrategyStore,
    persistence: TradePersistence,
    bus: Optional[EventBus] = None,
    storage: Optional[KeyValueStorage] = None,
    config_dir: Optional[str] = None,
    overrides: Optional[dict[str, Any]] = None,
    on_success: Optional[Callable[[], None]] = None,
    navigator: Optional[Callable[[str], None]] = None,
    configure_logs: bool = False
) -> TradeEntrySession:
    """
    Build a session from layered configuration.

    Args:
        user_provider: Authenticated-user provider
        strategy_store: Source of the user's strategies
        persistence: Trade store
        bus: Event bus shared with same-view listeners
        storage: Shared storage watched by other views
        config_dir: Directory holding tradelog.yaml
        overrides: Highest-priority config overrides
        configure_logs: Configure structlog from the logging section

    Returns:
        A new, not yet started TradeEntrySession
    """
    loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
    merged = loader.merge_config(overrides)

    validation_errors = ConfigValidator.validate_config(merged)
    if validation_errors:
        messages = [f"{err.field}: {err.message} (got: {err.value})" for err in validation_errors]
        raise ValueError("Invalid configuration: " + "; ".join(messages))

    config = loader.load(overrides)

    if configure_logs:
        configure_logging_from_params(config.logging)

    notifier = create_notifier(
        get_default_broadcast_config(
            channel=config.sync.event_channel,
            storage_key=config.sync.storage_key,
            simple_storage_key=config.sync.simple_storage_key,
            source=config.sync.source,
        ),
        bus=bus,
        storage=storage,
        action=config.sync.action,
    )

    return TradeEntrySession(
        user_provider,
        strategy_store,
        persistence,
        notifier,
        config=config,
        on_success=on_success,
        navigator=navigator,
    )
