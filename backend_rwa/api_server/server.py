"""
FastAPI server for project validation.

Public read of a project's validation record, an endpoint to (re-)run the
checkers, and admin endpoints for manual overrides (one check, or a reviewed
snapshot of several) and the approval pre-check. Every change to a stored
record after a run goes through apply_manual_override. Config via env (see
config/settings.py).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from backend_rwa import __version__
from backend_rwa.analytics import (
    CheckKind,
    ProjectValidation,
    ValidationContext,
    ValidationResult,
    apply_manual_override,
    evaluate_approval,
    validate_project,
)
from backend_rwa.config import get_settings
from backend_rwa.core.exceptions import (
    ApprovalBlockedError,
    OverrideRejectedError,
    ProjectNotFoundError,
    RwaError,
    ValidationRecordNotFoundError,
)
from backend_rwa.database import (
    AdminActivityLog,
    Database,
    ProjectReader,
    ValidationStore,
    get_database,
)
from backend_rwa.database.admin_activity import (
    ACTION_MANUAL_VALIDATION,
    STATUS_APPROVED,
    STATUS_MANUAL_REVIEW,
)
from backend_rwa.rwa_logging import bind_project, get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Dependencies (overridden in tests via app.dependency_overrides)
# -----------------------------------------------------------------------------


def get_db() -> Database:
    """Dependency: process-wide Database (RWA_DB_URL / DATABASE_URL)."""
    return get_database()


@lru_cache(maxsize=1)
def _default_context() -> ValidationContext:
    return ValidationContext.from_settings(get_settings())


def get_validation_context() -> ValidationContext:
    """Dependency: reference clients and file storage built from settings."""
    return _default_context()


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------


class OverrideRequest(BaseModel):
    """POST /admin/validation-override body."""

    model_config = ConfigDict(populate_by_name=True)

    project_id: str = Field(..., alias="projectId", min_length=1, description="Project id")
    check: str = Field(..., description="scamCheck, sanctionsCheck or auditCheck")
    passed: bool = Field(..., description="New verdict for the check")
    notes: str | None = Field(None, max_length=4000, description="Reviewer notes")
    reviewer_id: str = Field(..., alias="reviewerId", min_length=1, description="Reviewer id")


class SaveValidationRequest(BaseModel):
    """POST /admin/validation body: reviewed checks in the camelCase JSON shape."""

    model_config = ConfigDict(populate_by_name=True)

    project_id: str = Field(..., alias="projectId", min_length=1)
    reviewer_id: str = Field(..., alias="reviewerId", min_length=1, description="Reviewer id")
    validation: dict[str, Any] = Field(..., description="scamCheck, sanctionsCheck, auditCheck with passed / manualNotes")


class ApprovalCheckResponse(BaseModel):
    allowed: bool = Field(..., description="True when the project may be approved")
    reason: str = Field(..., description="Why approval is (not) allowed")


def _envelope(validation: ProjectValidation | None, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True, "data": validation.to_dict() if validation else None}
    body.update(extra)
    return body


def _record_activity(db: Database, project_id: str, admin_id: str | None, validation: ProjectValidation) -> None:
    status = STATUS_APPROVED if validation.overall_passed else STATUS_MANUAL_REVIEW
    AdminActivityLog(db).record(ACTION_MANUAL_VALIDATION, project_id, admin_id, status)


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup; an unreachable database is logged, requests then fail with 500."""
    try:
        get_db()
    except Exception as e:
        logger.warning("api_database_init_skip", error=str(e))
    yield


app = FastAPI(
    title="Backend RWA Validation API",
    description="Scam, sanctions and audit validation of tokenized real-world-asset projects.",
    version=__version__,
    lifespan=lifespan,
)


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.get("/validation/{project_id}")
def get_validation(project_id: str, db: Database = Depends(get_db)) -> dict[str, Any]:
    """Return the stored validation record, or data=null when the project was never validated."""
    return _envelope(ValidationStore(db).get(project_id.strip()))


@app.post("/validation/{project_id}/run")
def run_validation(
    project_id: str,
    db: Database = Depends(get_db),
    context: ValidationContext = Depends(get_validation_context),
) -> dict[str, Any]:
    """
    Validate the stored project and replace its record.

    Earlier manual overrides are discarded (a fresh automated record is saved).
    """
    project_id = project_id.strip()
    project = ProjectReader(db).get(project_id)
    store = ValidationStore(db)
    previous = store.get(project_id)
    validation = validate_project(project, context)
    if previous is not None and previous.manually_reviewed:
        logger.warning(
            "validation_overrides_discarded",
            project_id=project_id,
            reviewed_by=previous.reviewed_by,
        )
    store.upsert(project_id, validation)
    return _envelope(validation)


@app.post("/admin/validation-override")
def override_validation(body: OverrideRequest, db: Database = Depends(get_db)) -> dict[str, Any]:
    """Override one check of the stored record and log the admin action."""
    project_id = body.project_id.strip()
    store = ValidationStore(db)
    current = store.get(project_id)
    if current is None:
        raise ValidationRecordNotFoundError(project_id)
    updated = apply_manual_override(current, body.check, body.passed, body.notes, body.reviewer_id)
    store.upsert(project_id, updated)
    _record_activity(db, project_id, updated.reviewed_by, updated)
    return _envelope(updated, message="Validation override saved successfully")


@app.post("/admin/validation")
def save_validation(body: SaveValidationRequest, db: Database = Depends(get_db)) -> dict[str, Any]:
    """
    Save a reviewed snapshot of the stored record.

    Each check whose verdict or notes differ from the stored record is applied
    as a manual override by reviewerId, with that check's manualNotes. Review
    stamps and aggregates are derived here; client-sent overallPassed,
    riskLevel, manuallyReviewed, reviewedBy and reviewedAt are ignored. One
    rejected change rejects the whole snapshot and nothing is saved.
    """
    project_id = body.project_id.strip()
    log = bind_project(project_id, __name__)
    store = ValidationStore(db)
    current = store.get(project_id)
    if current is None:
        raise ValidationRecordNotFoundError(project_id)

    reviewed_at = datetime.now(timezone.utc)
    updated = current
    changed: list[str] = []
    for kind in CheckKind:
        raw = body.validation.get(kind.value)
        if raw is None:
            continue
        if not isinstance(raw, dict) or not isinstance(raw.get("passed"), bool):
            raise OverrideRejectedError(f"{kind.value} must be an object with a boolean passed")
        submitted = ValidationResult.from_dict(raw)
        existing = current.check(kind)
        notes_changed = submitted.manual_notes is not None and submitted.manual_notes != existing.manual_notes
        if submitted.passed == existing.passed and not notes_changed:
            continue
        updated = apply_manual_override(
            updated,
            kind,
            submitted.passed,
            submitted.manual_notes,
            body.reviewer_id,
            now=reviewed_at,
        )
        changed.append(kind.value)

    if not changed:
        log.info("validation_snapshot_unchanged")
        return _envelope(current, message="No changes to save")
    store.upsert(project_id, updated)
    _record_activity(db, project_id, updated.reviewed_by, updated)
    log.info("validation_snapshot_saved", changed=changed, reviewer_id=updated.reviewed_by)
    return _envelope(updated, message="Validation saved successfully")


@app.get("/admin/projects/{project_id}/approval-check", response_model=ApprovalCheckResponse)
def approval_check(project_id: str, db: Database = Depends(get_db)) -> ApprovalCheckResponse:
    """Whether the project's validation allows approval, with the reason."""
    decision = evaluate_approval(ValidationStore(db).get(project_id.strip()))
    return ApprovalCheckResponse(allowed=decision.allowed, reason=decision.reason)


# -----------------------------------------------------------------------------
# Error mapping
# -----------------------------------------------------------------------------

_STATUS_BY_ERROR: tuple[tuple[type[RwaError], int], ...] = (
    (ProjectNotFoundError, 404),
    (ValidationRecordNotFoundError, 404),
    (OverrideRejectedError, 422),
    (ApprovalBlockedError, 409),
)


@app.exception_handler(RwaError)
def rwa_error_handler(request: Request, exc: RwaError) -> JSONResponse:
    """Map application errors to status codes; anything unmapped is a 500."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return JSONResponse(status_code=status_code, content={"success": False, "error": str(exc)})
    logger.error("api_request_failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal error"})


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
