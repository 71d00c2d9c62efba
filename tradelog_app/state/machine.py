"""
Trade submission pipeline.

Runs one user-initiated submission through Validating, Sanitizing,
Persisting and Notifying. Only one submission may be in flight; a trigger
arriving while busy is rejected without touching any collaborator.
"""

import uuid
from collections.abc import Callable
from typing import Optional

from ..data.emotions import normalize_emotional_state, unknown_emotions
from ..data.identifiers import sanitize_uuid, validate_uuid
from ..data.models import Market, TradeDraft, TradePayload
from ..data.validators import validate_symbol, validate_trade_numeric_fields
from ..delivery.base import DeliveryStatus
from ..delivery.notifier import CrossViewNotifier
from ..errors import (
    IdentityError,
    OptionalReferenceError,
    PersistenceError,
    StateTransitionError,
)
from ..logging.config import get_submission_logger, log_state_transition, submission_context
from ..persistence.base import TradePersistence, UserProvider
from ..utils.cancellation import CancellationToken
from .models import (
    SubmissionOutcome,
    SubmissionState,
    SubmissionStatus,
    is_allowed_transition,
)

logger = get_submission_logger(__name__)

DEFAULT_DASHBOARD_ROUTE = "/dashboard"


class SubmissionPipeline:
    """Single-flight trade submission state machine."""

    def __init__(
        self,
        user_provider: UserProvider,
        persistence: TradePersistence,
        notifier: CrossViewNotifier,
        on_success: Optional[Callable[[], None]] = None,
        navigator: Optional[Callable[[str], None]] = None,
        dashboard_route: str = DEFAULT_DASHBOARD_ROUTE,
        default_market: str = Market.STOCK.value
    ):
        self.user_provider = user_provider
        self.persistence = persistence
        self.notifier = notifier
        self.on_success = on_success
        self.navigator = navigator
        self.dashboard_route = dashboard_route
        self.default_market = default_market

        self.state = SubmissionState.IDLE
        self._submission_id: Optional[str] = None

    @property
    def is_submitting(self) -> bool:
        """True while the submit control must stay disabled."""
        return self.state is not SubmissionState.IDLE

    def _transition(self, to_state: SubmissionState, trigger: str, context: Optional[dict] = None) -> None:
        if not is_allowed_transition(self.state, to_state):
            raise StateTransitionError(
                f"Cannot move from {self.state.value} to {to_state.value}",
                current_state=self.state.value,
                attempted_transition=to_state.value,
            )

        log_state_transition(
            logger,
            submission_id=self._submission_id or "",
            from_state=self.state.value,
            to_state=to_state.value,
            trigger=trigger,
            context=context,
        )
        self.state = to_state

    def _finish(self, outcome: SubmissionOutcome, trigger: str) -> SubmissionOutcome:
        if self.state is not SubmissionState.IDLE:
            self._transition(SubmissionState.IDLE, trigger, {"status": outcome.status.value})
        return outcome

    async def submit(
        self,
        draft: TradeDraft,
        token: Optional[CancellationToken] = None
    ) -> SubmissionOutcome:
        """
        Submit a trade draft.

        Args:
            draft: Current form state
            token: Session cancellation token, checked after every await

        Returns:
            SubmissionOutcome describing how the attempt ended
        """
        if self.is_submitting:
            logger.info("Submission ignored, another is in flight", state=self.state.value)
            return SubmissionOutcome(status=SubmissionStatus.REJECTED_BUSY)

        self._submission_id = uuid.uuid4().hex[:12]
        self._transition(SubmissionState.VALIDATING, "submit")

        try:
            with submission_context(self._submission_id):
                return await self._run(draft, token)
        finally:
            # Keep the pipeline usable even if a collaborator raised
            if self.state is not SubmissionState.IDLE:
                self.state = SubmissionState.IDLE

    async def _run(self, draft: TradeDraft, token: Optional[CancellationToken]) -> SubmissionOutcome:
        try:
            raw_user_id = await self.user_provider.get_current_user_id()
        except Exception as e:
            logger.error("User lookup raised", error=str(e))
            return self._finish(
                SubmissionOutcome(status=SubmissionStatus.AUTH_FAILED, errors=[f"Not authenticated: {e}"]),
                "auth_error",
            )

        if token is not None and token.cancelled:
            return self._finish(SubmissionOutcome(status=SubmissionStatus.CANCELLED), "session_closed")

        if not raw_user_id:
            return self._finish(
                SubmissionOutcome(status=SubmissionStatus.AUTH_FAILED, errors=["Not authenticated"]),
                "unauthenticated",
            )

        # Validating
        validation = validate_trade_numeric_fields(draft.numeric_fields())
        errors = validate_symbol(draft.symbol) + validation.errors
        if errors:
            return self._finish(
                SubmissionOutcome(status=SubmissionStatus.VALIDATION_FAILED, errors=errors),
                "validation_failed",
            )

        # Sanitizing
        self._transition(SubmissionState.SANITIZING, "validation_passed")
        try:
            user_id = validate_uuid(raw_user_id, "user_id")
        except IdentityError as e:
            logger.error("User identifier rejected", error=str(e))
            return self._finish(
                SubmissionOutcome(status=SubmissionStatus.AUTH_FAILED, errors=[str(e)]),
                "identity_error",
            )

        strategy = sanitize_uuid(draft.strategy_id)
        if strategy.is_invalid:
            error = OptionalReferenceError(
                "Invalid strategy ID dropped from trade",
                field="strategy_id",
                raw_value=draft.strategy_id,
            )
            logger.warning(str(error), strategy_id=draft.strategy_id, fallback=error.fallback_strategy)

        emotions = normalize_emotional_state(draft.emotional_state)
        unknown = unknown_emotions(emotions)
        if unknown:
            logger.debug("Emotion tags outside vocabulary", tags=unknown)

        payload = TradePayload(
            user_id=user_id,
            market=draft.market or self.default_market,
            symbol=draft.symbol.strip(),
            strategy_id=strategy.value,
            trade_date=draft.date,
            side=draft.side,
            quantity=validation.data["quantity"],
            entry_price=validation.data["entry_price"],
            exit_price=validation.data["exit_price"],
            pnl=validation.data["pnl"],
            entry_time=draft.entry_time or None,
            exit_time=draft.exit_time or None,
            emotional_state=emotions or None,
            notes=draft.notes or None,
        ).to_dict()

        # Persisting
        self._transition(SubmissionState.PERSISTING, "sanitized", {"symbol": payload["symbol"]})
        try:
            result = await self.persistence.create_trade(payload)
            if not result.ok:
                raise PersistenceError(result.error or "Trade was not created", operation="create_trade")
        except PersistenceError as e:
            logger.error("Trade persistence failed", error=str(e))
            return self._finish(
                SubmissionOutcome(status=SubmissionStatus.PERSISTENCE_FAILED, errors=[str(e)]),
                "persistence_failed",
            )
        except Exception as e:
            logger.error("Trade persistence raised", error=str(e))
            return self._finish(
                SubmissionOutcome(status=SubmissionStatus.PERSISTENCE_FAILED, errors=[str(e)]),
                "persistence_failed",
            )

        # Notifying
        self._transition(SubmissionState.NOTIFYING, "trade_created", {"trade_id": result.trade_id})
        event, deliveries = self.notifier.notify_trade_created(result.trade_id)
        sync_failures = [d.channel for d in deliveries if d.status is not DeliveryStatus.SUCCESS]

        outcome = SubmissionOutcome(
            status=SubmissionStatus.SUCCESS,
            trade_id=result.trade_id,
            event=event,
            payload=payload,
            sync_failures=sync_failures,
        )

        if token is not None and token.cancelled:
            # Trade is stored and broadcast; the closed form gets no callback
            return self._finish(outcome, "session_closed")

        self._finish(outcome, "notified")

        if self.on_success is not None:
            self.on_success()
        elif self.navigator is not None:
            self.navigator(self.dashboard_route)

        return outcome
