"""
Aggregate verdict and risk level from the three check results.

overall_passed depends only on the critical checks (scam, sanctions). Risk:
  high   - any critical check failed
  medium - both critical checks passed, audit failed
  low    - all three passed
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from backend_rwa.analytics.models import CheckKind, ProjectValidation, RiskLevel, ValidationResult


def compute_overall_passed(scam: ValidationResult, sanctions: ValidationResult) -> bool:
    return scam.passed and sanctions.passed


def compute_risk_level(scam: ValidationResult, sanctions: ValidationResult, audit: ValidationResult) -> RiskLevel:
    if not compute_overall_passed(scam, sanctions):
        return RiskLevel.HIGH
    if not audit.passed:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def build_validation(
    scam: ValidationResult,
    sanctions: ValidationResult,
    audit: ValidationResult,
    validated_at: datetime | None = None,
) -> ProjectValidation:
    """Fresh automated validation (no review metadata)."""
    return ProjectValidation(
        scam_check=scam,
        sanctions_check=sanctions,
        audit_check=audit,
        risk_level=compute_risk_level(scam, sanctions, audit),
        overall_passed=compute_overall_passed(scam, sanctions),
        validated_at=validated_at or datetime.now(timezone.utc),
    )


def recompute_aggregate(validation: ProjectValidation) -> ProjectValidation:
    """Return validation with overall_passed and risk_level derived from its checks."""
    checks = validation.checks()
    scam = checks[CheckKind.SCAM]
    sanctions = checks[CheckKind.SANCTIONS]
    audit = checks[CheckKind.AUDIT]
    return replace(
        validation,
        overall_passed=compute_overall_passed(scam, sanctions),
        risk_level=compute_risk_level(scam, sanctions, audit),
    )
