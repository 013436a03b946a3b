"""
Approval rule applied before a project can be listed.

A project may be approved only when its validation passed overall; if the
audit check failed, a reviewer must also have looked at it.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend_rwa.analytics.models import ProjectValidation
from backend_rwa.core.exceptions import ApprovalBlockedError


@dataclass(frozen=True)
class ApprovalDecision:
    allowed: bool
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {"allowed": self.allowed, "reason": self.reason}


def evaluate_approval(validation: ProjectValidation | None) -> ApprovalDecision:
    if validation is None:
        return ApprovalDecision(False, "Project has not been validated yet")
    if not validation.overall_passed:
        failed = [kind.name.lower() for kind, result in validation.checks().items() if kind.critical and not result.passed]
        return ApprovalDecision(False, f"Validation failed: {', '.join(failed) or 'critical'} check")
    if not validation.audit_check.passed and not validation.manually_reviewed:
        return ApprovalDecision(False, "Audit check failed and requires manual review before approval")
    return ApprovalDecision(True, "Validation passed")


def check_approval_allowed(validation: ProjectValidation | None) -> ApprovalDecision:
    """Raise ApprovalBlockedError with the reason when approval is not allowed."""
    decision = evaluate_approval(validation)
    if not decision.allowed:
        raise ApprovalBlockedError(decision.reason)
    return decision
