"""
Validation orchestrator: run the three checkers concurrently and combine.

Each checker already contains its own failures; _run_checker_safe is the
last line so that a broken checker still yields a failed result instead of
aborting the whole validation. Latency is roughly that of the slowest check.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Callable

import structlog

from backend_rwa.analytics.audit_verifier import verify_audit_document
from backend_rwa.analytics.context import ValidationContext
from backend_rwa.analytics.models import CheckKind, Project, ProjectValidation, ValidationResult
from backend_rwa.analytics.risk_engine import build_validation
from backend_rwa.analytics.sanctions_detector import check_for_sanctions
from backend_rwa.analytics.scam_detector import check_for_scam_reports
from backend_rwa.rwa_logging import bind_project

Checker = Callable[[Project, ValidationContext], ValidationResult]

CHECKERS: dict[CheckKind, Checker] = {
    CheckKind.SCAM: check_for_scam_reports,
    CheckKind.SANCTIONS: check_for_sanctions,
    CheckKind.AUDIT: verify_audit_document,
}


def _run_checker_safe(
    kind: CheckKind,
    checker: Checker,
    project: Project,
    context: ValidationContext,
    log: structlog.BoundLogger,
) -> ValidationResult:
    """Run one checker. Never raises; an escaped exception becomes a failed result."""
    try:
        return checker(project, context)
    except Exception as e:
        log.warning(
            "checker_failed",
            check=kind.value,
            error=str(e),
            exc_info=True,
        )
        return ValidationResult(passed=False, details=f"Error running {kind.name.lower()} check, unable to verify")


def validate_project(
    project: Project,
    context: ValidationContext | None = None,
    checkers: dict[CheckKind, Checker] | None = None,
) -> ProjectValidation:
    """
    Run scam, sanctions and audit checks for project and return a fresh
    ProjectValidation (risk level and overall verdict computed, no review data).
    """
    context = context or ValidationContext.offline()
    checkers = checkers or CHECKERS
    log = bind_project(project.id, __name__)
    results: dict[CheckKind, ValidationResult] = {}
    with ThreadPoolExecutor(max_workers=len(CheckKind)) as executor:
        futures = {
            executor.submit(_run_checker_safe, kind, checkers[kind], project, context, log): kind
            for kind in CheckKind
        }
        for fut in as_completed(futures):
            results[futures[fut]] = fut.result()

    validation = build_validation(
        results[CheckKind.SCAM],
        results[CheckKind.SANCTIONS],
        results[CheckKind.AUDIT],
        validated_at=datetime.now(timezone.utc),
    )
    log.info(
        "project_validated",
        overall_passed=validation.overall_passed,
        risk_level=validation.risk_level.value,
        failed_checks=[k.value for k, r in results.items() if not r.passed],
    )
    return validation
