"""
Test that rwa_logging can be imported without circular import and logger works.
"""

from __future__ import annotations

import io
import json

import structlog


def test_logging_import():
    """Import get_logger from rwa_logging and use the logger."""
    from backend_rwa.rwa_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "exception")
    logger.info("test_message", key="value")


def test_bind_project_attaches_context():
    """bind_project puts project_id, the logger name and extra context on every record."""
    from backend_rwa.rwa_logging import bind_project

    log = bind_project("proj-1", "backend_rwa.analytics.scam_detector", check="scam")
    context = structlog.get_context(log)
    assert context["project_id"] == "proj-1"
    assert context["check"] == "scam"
    assert context["logger"] == "backend_rwa.analytics.scam_detector"


def test_rename_event_and_timestamp():
    """structlog's event key becomes event_type and a timestamp is always added."""
    from backend_rwa.rwa_logging.logger import _add_timestamp, _rename_event

    out = _add_timestamp(None, "info", _rename_event(None, "info", {"event": "project_validated"}))
    assert out["event_type"] == "project_validated"
    assert "event" not in out
    assert out["timestamp"]


def test_long_values_truncated():
    """Long strings (URLs, error bodies) are cut; short ones are left alone."""
    from backend_rwa.rwa_logging.logger import MAX_VALUE_CHARS, _truncate_values

    out = _truncate_values(None, "info", {"url": "https://x.test/" + "a" * 1000, "check": "audit"})
    assert len(out["url"]) == MAX_VALUE_CHARS + 3
    assert out["url"].endswith("...")
    assert out["check"] == "audit"


def test_configure_writes_json_to_stream():
    """configure_structlog renders JSON records to the given stream."""
    from backend_rwa.rwa_logging.logger import configure_structlog

    stream = io.StringIO()
    try:
        configure_structlog(level="INFO", fmt="json", stream=stream)
        structlog.get_logger("t").bind(project_id="proj-9").info("audit_check_done", passed=True)
        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["event_type"] == "audit_check_done"
        assert record["project_id"] == "proj-9"
        assert record["level"] == "info"
    finally:
        configure_structlog()
