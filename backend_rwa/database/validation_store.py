"""
Validation record store: get / upsert the latest validation of a project.

One row per project. Upsert updates the existing row in place (last write
wins) or inserts a new one. Every field round-trips, including override
metadata and inconclusive sources. Database failures surface as
ValidationStoreError; a missing record is None, never a default.
"""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from backend_rwa.analytics.models import (
    CheckKind,
    ProjectValidation,
    RiskLevel,
    ValidationResult,
    format_timestamp,
    parse_timestamp,
)
from backend_rwa.core.exceptions import ValidationStoreError
from backend_rwa.database.connection import Database
from backend_rwa.database.models import ValidationResultRow
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)


def _dump_sources(sources: tuple[str, ...]) -> str | None:
    return json.dumps(list(sources)) if sources else None


def _load_sources(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return ()
    return tuple(str(s) for s in data) if isinstance(data, list) else ()


def _check_columns(kind: CheckKind, result: ValidationResult) -> dict[str, Any]:
    prefix = kind.attr
    return {
        f"{prefix}_passed": result.passed,
        f"{prefix}_details": result.details,
        f"{prefix}_override": result.manual_override,
        f"{prefix}_notes": result.manual_notes,
        f"{prefix}_inconclusive": _dump_sources(result.inconclusive_sources),
    }


def _row_values(validation: ProjectValidation) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for kind, result in validation.checks().items():
        values.update(_check_columns(kind, result))
    values.update(
        risk_level=validation.risk_level.value,
        overall_passed=validation.overall_passed,
        validated_at=format_timestamp(validation.validated_at),
        manually_reviewed=validation.manually_reviewed,
        reviewer_id=validation.reviewed_by,
        reviewed_at=format_timestamp(validation.reviewed_at),
    )
    return values


def _check_from_row(row: ValidationResultRow, kind: CheckKind) -> ValidationResult:
    prefix = kind.attr
    return ValidationResult(
        passed=bool(getattr(row, f"{prefix}_passed")),
        details=getattr(row, f"{prefix}_details") or "",
        manual_override=bool(getattr(row, f"{prefix}_override")),
        manual_notes=getattr(row, f"{prefix}_notes"),
        inconclusive_sources=_load_sources(getattr(row, f"{prefix}_inconclusive")),
    )


def _validation_from_row(row: ValidationResultRow) -> ProjectValidation:
    try:
        risk_level = RiskLevel(row.risk_level)
    except ValueError:
        risk_level = RiskLevel.HIGH
    return ProjectValidation(
        scam_check=_check_from_row(row, CheckKind.SCAM),
        sanctions_check=_check_from_row(row, CheckKind.SANCTIONS),
        audit_check=_check_from_row(row, CheckKind.AUDIT),
        risk_level=risk_level,
        overall_passed=bool(row.overall_passed),
        manually_reviewed=bool(row.manually_reviewed),
        reviewed_by=row.reviewer_id,
        reviewed_at=parse_timestamp(row.reviewed_at),
        validated_at=parse_timestamp(row.validated_at),
    )


class ValidationStore:
    def __init__(self, db: Database) -> None:
        self._db = db

    def get(self, project_id: str) -> ProjectValidation | None:
        """Return the stored validation for project_id, or None if never validated."""
        try:
            with self._db.session_scope() as session:
                row = (
                    session.query(ValidationResultRow)
                    .filter(ValidationResultRow.project_id == project_id)
                    .first()
                )
                return _validation_from_row(row) if row else None
        except SQLAlchemyError as e:
            logger.exception("validation_store_get_failed", project_id=project_id, error=str(e))
            raise ValidationStoreError(f"Failed to read validation for {project_id}: {e}") from e

    def upsert(self, project_id: str, validation: ProjectValidation) -> None:
        """Insert or replace the validation record of project_id."""
        values = _row_values(validation)
        try:
            with self._db.session_scope() as session:
                row = (
                    session.query(ValidationResultRow)
                    .filter(ValidationResultRow.project_id == project_id)
                    .first()
                )
                if row is None:
                    session.add(ValidationResultRow(project_id=project_id, **values))
                    created = True
                else:
                    for key, value in values.items():
                        setattr(row, key, value)
                    created = False
        except SQLAlchemyError as e:
            logger.exception("validation_store_upsert_failed", project_id=project_id, error=str(e))
            raise ValidationStoreError(f"Failed to save validation for {project_id}: {e}") from e
        logger.info(
            "validation_saved",
            project_id=project_id,
            created=created,
            overall_passed=validation.overall_passed,
            risk_level=validation.risk_level.value,
        )
