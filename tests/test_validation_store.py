"""
Tests for the validation record store, project reader and admin activity log
against a temporary SQLite database.
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from backend_rwa.analytics.manual_override import apply_manual_override
from backend_rwa.analytics.models import CheckKind, RiskLevel, ValidationResult
from backend_rwa.analytics.risk_engine import build_validation
from backend_rwa.core.exceptions import ProjectNotFoundError, ValidationStoreError
from backend_rwa.database import AdminActivityLog, ProjectReader, ValidationStore
from backend_rwa.database.models import ProjectRow, ValidationResultRow


def _validation():
    return build_validation(
        ValidationResult(passed=True, details="No suspicious patterns or reports detected", inconclusive_sources=("phishing_lookup",)),
        ValidationResult(passed=True, details="No sanctions detected"),
        ValidationResult(passed=False, details="Could not verify the security firm; manual review recommended."),
        validated_at=datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc),
    )


def test_get_missing_returns_none(rwa_db):
    """An unknown project has no stored record."""
    assert ValidationStore(rwa_db).get("nope") is None


def test_upsert_then_get_round_trips(rwa_db):
    """Every field, including overrides and inconclusive sources, round-trips."""
    store = ValidationStore(rwa_db)
    validation = apply_manual_override(
        _validation(),
        CheckKind.AUDIT,
        True,
        "Confirmed with auditor",
        "admin-1",
        now=datetime(2025, 3, 2, 9, 30, tzinfo=timezone.utc),
    )
    store.upsert("proj-1", validation)
    loaded = store.get("proj-1")
    assert loaded == validation
    assert loaded.validated_at == validation.validated_at
    assert loaded.scam_check.inconclusive_sources == ("phishing_lookup",)
    assert loaded.audit_check.manual_notes == "Confirmed with auditor"
    assert loaded.risk_level is RiskLevel.LOW


def test_upsert_replaces_existing_row(rwa_db):
    """One row per project; the second upsert updates it in place."""
    store = ValidationStore(rwa_db)
    store.upsert("proj-1", _validation())
    reviewed = apply_manual_override(_validation(), CheckKind.AUDIT, True, "Looks fine", "admin-1")
    store.upsert("proj-1", reviewed)
    with rwa_db.session_scope() as session:
        assert session.query(ValidationResultRow).filter_by(project_id="proj-1").count() == 1
    assert store.get("proj-1").manually_reviewed is True


def test_store_errors_are_wrapped(rwa_db):
    """Database errors surface as ValidationStoreError."""
    store = ValidationStore(rwa_db)
    with patch.object(rwa_db, "session_scope", side_effect=OperationalError("SELECT", {}, Exception("db down"))):
        with pytest.raises(ValidationStoreError):
            store.get("proj-1")
        with pytest.raises(ValidationStoreError):
            store.upsert("proj-1", _validation())


def test_project_reader(rwa_db):
    """ProjectReader loads a stored project and raises for a missing one."""
    with rwa_db.session_scope() as session:
        session.add(
            ProjectRow(
                id="proj-9",
                name="Harbor Logistics Fund",
                description="Warehouse portfolio",
                website="harbor-logistics.example",
                roi=7.5,
                audit_url="https://certik.com/projects/harbor",
            )
        )
    project = ProjectReader(rwa_db).get("proj-9")
    assert project.name == "Harbor Logistics Fund"
    assert project.roi == 7.5
    assert project.audit_url == "https://certik.com/projects/harbor"
    with pytest.raises(ProjectNotFoundError):
        ProjectReader(rwa_db).get("missing")


def test_admin_activity_record_and_list(rwa_db):
    """Admin activity is recorded and listed per project."""
    log = AdminActivityLog(rwa_db)
    assert log.record("manual_validation", "proj-1", "admin-1", "approved") is True
    rows = log.list_recent("proj-1")
    assert len(rows) == 1
    assert rows[0]["status"] == "approved"


def test_admin_activity_failure_is_not_raised(rwa_db):
    """A failure to log admin activity returns False instead of raising."""
    log = AdminActivityLog(rwa_db)
    with patch.object(rwa_db, "session_scope", side_effect=OperationalError("INSERT", {}, Exception("db down"))):
        assert log.record("manual_validation", "proj-1", "admin-1", "approved") is False
