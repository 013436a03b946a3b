"""
Project validation: signal checkers, risk classification, overrides.
"""

from backend_rwa.analytics.approval_gate import ApprovalDecision, check_approval_allowed, evaluate_approval
from backend_rwa.analytics.audit_verifier import verify_audit_document
from backend_rwa.analytics.context import ValidationContext
from backend_rwa.analytics.manual_override import MIN_OVERRIDE_NOTES_LENGTH, apply_manual_override
from backend_rwa.analytics.models import CheckKind, Project, ProjectValidation, RiskLevel, ValidationResult
from backend_rwa.analytics.risk_engine import (
    build_validation,
    compute_overall_passed,
    compute_risk_level,
    recompute_aggregate,
)
from backend_rwa.analytics.sanctions_detector import check_for_sanctions
from backend_rwa.analytics.scam_detector import check_for_scam_reports
from backend_rwa.analytics.validation_pipeline import validate_project

__all__ = [
    "ApprovalDecision",
    "CheckKind",
    "MIN_OVERRIDE_NOTES_LENGTH",
    "Project",
    "ProjectValidation",
    "RiskLevel",
    "ValidationContext",
    "ValidationResult",
    "apply_manual_override",
    "build_validation",
    "check_approval_allowed",
    "check_for_sanctions",
    "check_for_scam_reports",
    "compute_overall_passed",
    "compute_risk_level",
    "evaluate_approval",
    "recompute_aggregate",
    "validate_project",
    "verify_audit_document",
]
