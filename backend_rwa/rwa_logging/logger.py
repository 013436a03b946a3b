"""
Structured logging for the validation engine.

Every record carries event_type, level, timestamp and the module name;
records about one project also carry project_id (see bind_project), so a
whole validation run can be pulled out of the logs with a single filter.

Records go to stderr: tools that print a validation record on stdout
(tools/validate_project.py) stay machine-readable. Long string values
(URLs, service error bodies) are cut to MAX_VALUE_CHARS.

LOG_LEVEL (default INFO) and LOG_FORMAT (json | console, default json).
No backend_rwa imports here; every other module imports this one.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

MAX_VALUE_CHARS = 300


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601, UTC)."""
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _rename_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's 'event' becomes event_type (validation_done, override_applied, ...)."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _truncate_values(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    for key, value in event_dict.items():
        if key != "exception" and isinstance(value, str) and len(value) > MAX_VALUE_CHARS:
            event_dict[key] = value[:MAX_VALUE_CHARS] + "..."
    return event_dict


def configure_structlog(
    level: str | None = None,
    fmt: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog. Called once at import with the env settings."""
    level_value = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    fmt = (fmt or LOG_FORMAT).strip().lower()
    stream = stream or sys.stderr
    if fmt == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            _add_timestamp,
            _rename_event,
            _truncate_values,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("override_applied", check="auditCheck", reviewer_id="admin-7")
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_project(project_id: str, name: str = "backend_rwa", **context: Any) -> structlog.BoundLogger:
    """
    Logger for one project's run: project_id (and any extra context, such as
    the check being run) is attached to every record.

        log = bind_project(project.id, __name__, check="scam")
        log.info("scam_check_done", passed=True)
    """
    return get_logger(name).bind(project_id=project_id, **context)
