"""
Structured logging for the smart_wallet package using structlog.

Library modules log through stdlib `logging.getLogger(__name__)`; this module
renders those records as JSON lines (or colored console output when asked or
at DEBUG level). Fields passed via `extra=` become keys in the event, and
long hex payloads such as call data and signatures are shortened.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional, TextIO

import structlog

from .config import settings


PACKAGE_LOGGER = "smart_wallet"
HEX_PREVIEW_CHARS = 18


def shorten_hex_payloads(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Keep a prefix of long 0x strings (call data, init code, signatures)."""
    for key, value in event_dict.items():
        if key == "event" or not isinstance(value, str):
            continue
        if value.startswith("0x") and len(value) > 2 + 64:
            event_dict[key] = f"{value[:HEX_PREVIEW_CHARS]}...({(len(value) - 2) // 2} bytes)"
    return event_dict


def setup_logging(
    log_level: Optional[str] = None,
    *,
    json_logs: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure structlog for the package logger tree and return that logger.

    Args:
        log_level: Override log level (default: from settings.log_level)
        json_logs: Force JSON (True) or console (False) output; by default
            JSON unless the level is DEBUG
        stream: Destination stream (default: stdout)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if json_logs is None:
        json_logs = level != logging.DEBUG

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
        shorten_hex_payloads,
    ]

    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
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
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False

    for name in ("httpcore", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)

    return package_logger
