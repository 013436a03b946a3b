"""
Reviewer overrides of individual check verdicts.

An override replaces one check's passed flag, records the reviewer's notes,
and re-derives the aggregate verdict. The input record is never modified;
a rejected override changes nothing.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from backend_rwa.analytics.models import CheckKind, ProjectValidation
from backend_rwa.analytics.risk_engine import recompute_aggregate
from backend_rwa.core.exceptions import OverrideRejectedError
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)

MIN_OVERRIDE_NOTES_LENGTH = 3


def apply_manual_override(
    current: ProjectValidation,
    kind: CheckKind | str,
    new_passed: bool,
    notes: str | None,
    reviewer_id: str,
    *,
    now: datetime | None = None,
) -> ProjectValidation:
    """
    Return current with one check overridden by a reviewer.

    Changing a verdict requires notes of at least MIN_OVERRIDE_NOTES_LENGTH
    characters; reversing an earlier override also needs notes different from
    the ones it was made with. Re-affirming a verdict without notes keeps the
    earlier notes.
    Raises OverrideRejectedError (and changes nothing) when the request is invalid.
    """
    try:
        kind = CheckKind.parse(kind)
    except ValueError as e:
        raise OverrideRejectedError(str(e)) from e
    reviewer = (reviewer_id or "").strip()
    if not reviewer:
        raise OverrideRejectedError("A reviewer id is required to override a check")

    existing = current.check(kind)
    cleaned_notes = (notes or "").strip()
    changes_verdict = bool(new_passed) != existing.passed
    if changes_verdict and len(cleaned_notes) < MIN_OVERRIDE_NOTES_LENGTH:
        logger.info(
            "override_rejected",
            check=kind.value,
            reviewer_id=reviewer,
            reason="notes_too_short",
        )
        raise OverrideRejectedError(
            f"Notes of at least {MIN_OVERRIDE_NOTES_LENGTH} characters are required when changing a verdict"
        )
    if changes_verdict and existing.manual_override and cleaned_notes == (existing.manual_notes or ""):
        logger.info(
            "override_rejected",
            check=kind.value,
            reviewer_id=reviewer,
            reason="notes_not_new",
        )
        raise OverrideRejectedError("Reversing an earlier override requires new notes")

    overridden = replace(
        existing,
        passed=bool(new_passed),
        manual_override=True,
        manual_notes=cleaned_notes or existing.manual_notes,
    )
    reviewed_at = now or datetime.now(timezone.utc)
    updated = recompute_aggregate(current.with_check(kind, overridden))
    updated = replace(
        updated,
        manually_reviewed=True,
        reviewed_by=reviewer,
        reviewed_at=reviewed_at,
    )
    logger.info(
        "override_applied",
        check=kind.value,
        reviewer_id=reviewer,
        passed=overridden.passed,
        changed=changes_verdict,
        overall_passed=updated.overall_passed,
        risk_level=updated.risk_level.value,
    )
    return updated
