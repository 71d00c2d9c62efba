"""
Centralized logging configuration for the trade journal core.

Every module obtains its logger here. Loggers are lazy proxies, so
`configure_logging` takes effect even for module-level loggers created at
import time. While a submission runs its id is bound in context variables,
so records from channels and stores carry the same `submission_id` as the
pipeline's own transition records.
"""
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger, Processor

from ..config.defaults import LoggingParams


def _build_processors(
    include_caller: bool,
    format_json: bool,
    extra_processors: Optional[list[Processor]]
) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.MODULE,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    processors.extend(extra_processors or [])

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    return processors


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_caller: bool = False,
    extra_processors: Optional[list[Processor]] = None,
    cache_loggers: bool = True
) -> None:
    """
    Configure structlog on top of the stdlib logging tree.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: Render JSON lines instead of console output
        include_caller: Add module and line number to each record
        extra_processors: Processors run just before rendering
        cache_loggers: Freeze logger configuration on first use; pass False
            when logging may be reconfigured later (tests)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=_build_processors(include_caller, format_json, extra_processors),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=cache_loggers,
    )


def configure_logging_from_params(params: LoggingParams) -> None:
    """Configure logging from the `logging` section of the loaded config."""
    configure_logging(
        level=params.level,
        format_json=params.format_json,
        include_caller=params.include_caller,
    )


def get_logger(name: str, **initial_values: Any) -> FilteringBoundLogger:
    """Lazy logger for `name` with optional always-present fields."""
    return structlog.get_logger(name, **initial_values)


def get_submission_logger(name: str) -> FilteringBoundLogger:
    """Logger for the submission pipeline; records form the audit trail."""
    return get_logger(name, subsystem="submission", audit_trail=True)


def get_sync_logger(name: str) -> FilteringBoundLogger:
    """Logger for broadcast channels and update listeners."""
    return get_logger(name, subsystem="sync")


@contextmanager
def submission_context(submission_id: str) -> Iterator[None]:
    """Tag every record logged inside the block with `submission_id`."""
    with structlog.contextvars.bound_contextvars(submission_id=submission_id):
        yield


def log_state_transition(
    logger: FilteringBoundLogger,
    submission_id: str,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a submission state transition with standardized format.

    Args:
        logger: Structlog logger instance
        submission_id: Identifier of the submission attempt
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        submission_id=submission_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")
