"""
Structured logging configuration using structlog.

Log lines use Datadog standard attribute names so payment traces can be
searched next to the provider's delivery dashboard:
    - trace_id: Request correlation ID (X-Request-ID or generated)
    - usr.id: Internal user identifier taken from intent metadata
    - organization.id: Organization whose entitlement is touched
    - stripe.event_id / stripe.event_type: Webhook being processed
    - http.method, http.url_details.path, http.status_code
    - duration: Request duration in nanoseconds

Usage:
    from apps.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("ledger_entry_appended", source_event_id="evt_123")
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

# Keys whose values must never reach log storage
REDACTED_KEYS = frozenset({"client_secret", "signature", "stripe_signature", "api_key"})


def _add_trace_id(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename request_id to trace_id for APM correlation."""
    if "request_id" in event_dict:
        event_dict["trace_id"] = str(event_dict.pop("request_id"))
    return event_dict


def _convert_duration_to_nanoseconds(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Datadog expects duration in nanoseconds."""
    if "duration_ms" in event_dict:
        event_dict["duration"] = int(event_dict.pop("duration_ms") * 1_000_000)
    return event_dict


def _redact_secrets(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask payment secrets (intent client secrets, signature headers)."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def configure_logging(json_format: bool = True, log_level: str = "INFO") -> None:
    """
    Configure structlog and route stdlib logging (Django, stripe) through it.

    Args:
        json_format: JSON lines for production, colored console output otherwise.
        log_level: Minimum log level to output.
    """
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_trace_id,
        _convert_duration_to_nanoseconds,
        _redact_secrets,
    ]

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_contextvars(**kwargs: Any) -> None:
    """
    Bind key-value pairs to every subsequent log line in this request.

    Use dict unpacking for dotted keys:
        bind_contextvars(**{"stripe.event_id": event_id})
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    """Clear bound context so it does not leak into the next request."""
    structlog.contextvars.clear_contextvars()
