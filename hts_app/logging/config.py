"""
Logging setup for trade submission and analysis.

Every event carries the service name and whatever submission context
(code, direction, request_id) is bound to the current context via
structlog.contextvars, so retry lines from the dispatcher can be tied
back to the submission that caused them.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, FilteringBoundLogger, WrappedLogger

SERVICE_NAME = "hts-app"


def add_service_name(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Logging level name, case-insensitive
        format_json: JSON lines for log shipping; console output otherwise
        include_timestamp: Prefix events with a UTC ISO timestamp
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s")

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_service_name,
        structlog.processors.format_exc_info,
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    if format_json:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_dispatch_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for webhook dispatch events.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for the dispatch subsystem
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="dispatch",
        audit_trail=True
    )


def log_dispatch_attempt(
    logger: FilteringBoundLogger,
    request_id: str,
    attempt: int,
    max_attempts: int,
    succeeded: bool,
    reason: str = "",
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a single webhook delivery attempt with standardized format.

    Args:
        logger: Structlog logger instance
        request_id: Request identifier shared by all attempts of one submission
        attempt: 1-based attempt number
        max_attempts: Configured attempt ceiling
        succeeded: Whether the attempt was acknowledged by the endpoint
        reason: Failure detail for unsuccessful attempts
        context: Additional context data
    """
    bound_logger = logger.bind(
        request_id=request_id,
        attempt=attempt,
        max_attempts=max_attempts,
        attempt_result="OK" if succeeded else "FAIL",
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if succeeded:
        bound_logger.info("Dispatch attempt succeeded")
    else:
        bound_logger.warning("Dispatch attempt failed", reason=reason)
