"""Structured logging configuration using structlog.

Call ``configure_logging()`` once in the application factory.  Modules then
log through structlog::

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("content_list.query", table=table, limit=limit)

Records emitted through the stdlib ``logging`` API (botocore, uvicorn,
SQLAlchemy) pass through the same processor chain, so every line on stdout
has the same shape.  The request middleware in ``api/main.py`` sets
``request_id_var``; the ID is merged into each record of that request.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, WrappedLogger

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
"""Per-request ID set by the HTTP middleware and read by ``_inject_request_id``."""


_SECRET_SUBSTRINGS: frozenset[str] = frozenset({
    "aws_access_key_id",
    "aws_secret_access_key",
    "aws_session_token",
    "password",
    "secret",
    "token",
    "authorization",
    "database_url",
})
"""Lower-cased substrings of event-dict keys whose values are redacted."""

_NOISY_LOGGERS: tuple[str, ...] = (
    "uvicorn.access",
    "botocore",
    "boto3",
    "urllib3",
    "httpx",
    "httpcore",
)


def _redact_secrets(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Replace values of secret-bearing keys with ``"[REDACTED]"``.

    Top-level keys and the keys of nested dicts one level deep are checked,
    case-insensitively, against :data:`_SECRET_SUBSTRINGS`.
    """
    redacted = "[REDACTED]"
    for key in list(event_dict.keys()):
        if any(secret in key.lower() for secret in _SECRET_SUBSTRINGS):
            event_dict[key] = redacted
            continue
        val = event_dict[key]
        if isinstance(val, dict):
            for nested_key in list(val.keys()):
                if any(secret in str(nested_key).lower() for secret in _SECRET_SUBSTRINGS):
                    val[nested_key] = redacted
    return event_dict


def _inject_request_id(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Add the current request ID to the event dict when one is set."""
    rid = request_id_var.get()
    if rid is not None and "request_id" not in event_dict:
        event_dict["request_id"] = rid
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog and the stdlib root logger.

    At ``DEBUG`` the output is structlog's coloured ``ConsoleRenderer``;
    at every other level it is newline-delimited JSON for CloudWatch and
    similar aggregators.  Each record carries ``timestamp``, ``level``,
    ``logger``, ``event`` and, inside a request, ``request_id``.

    Safe to call repeatedly: the root handlers are replaced each time.

    Args:
        log_level: ``"DEBUG"``, ``"INFO"``, ``"WARNING"``, ``"ERROR"`` or
            ``"CRITICAL"``.  Case-insensitive; unknown values mean INFO.
    """
    level_upper = log_level.upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)
    is_development = level_upper == "DEBUG"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _inject_request_id,
        _redact_secrets,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if is_development:
        final_renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(
            colors=True,
        )
    else:
        final_renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    if not is_development:
        for noisy_logger in _NOISY_LOGGERS:
            logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
