"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from .config import LoggingConfig

REDACTED = "***"

# Event keys whose values must never reach a log sink.
SENSITIVE_KEYS = frozenset({"password", "pass", "master_secret", "secret", "token", "plaintext"})


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor that masks values stored under sensitive keys."""
    for key in event_dict.keys() & SENSITIVE_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def setup_logging(
    config: LoggingConfig | None = None,
    *,
    json: bool | None = None,
    level: str | None = None,
) -> None:
    """Configure structlog for a MailPilot process.

    Parameters
    ----------
    config:
        Logging settings; read from ``LOG_*`` env vars when omitted.
    json:
        Overrides ``config.json_output``.  JSON lines suit production,
        the console renderer suits a terminal.
    level:
        Overrides ``config.level`` (e.g. ``"DEBUG"``, ``"info"``).
    """
    config = config or LoggingConfig()
    use_json = config.json_output if json is None else json
    level_name = (level or config.level).upper()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level_name)
