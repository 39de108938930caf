"""
Centralized structlog configuration for the teletext viewer.

Logs are written as JSON lines to the log file; the terminal itself belongs to
the teletext page, so nothing is printed to stdout.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

import structlog

SERVICE_NAME = "liiga-teletext"

_log_handle: TextIO | None = None


def _resolve_level(debug: bool, level: str | None = None) -> int:
    if level:
        return logging._nameToLevel.get(level.strip().upper(), logging.INFO)
    return logging.DEBUG if debug else logging.INFO


def configure_logging(log_file: Path | None = None, *, debug: bool = False, level: str | None = None) -> None:
    """
    Configure structlog with JSON output.

    With ``log_file`` the output is appended to that file (parent directories
    are created); without it the output goes to stderr.
    """
    global _log_handle

    resolved_level = _resolve_level(debug, level)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        if _log_handle is not None:
            _log_handle.close()
        _log_handle = log_file.open("a", encoding="utf-8")
        logger_factory = structlog.WriteLoggerFactory(file=_log_handle)
    else:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolved_level),
        context_class=dict,
        logger_factory=logger_factory,
    )
    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)


# Resolved lazily on every call, so configure_logging() may run after import
logger = structlog.get_logger(SERVICE_NAME)
