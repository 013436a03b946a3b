"""
Domain models for project validation.

Project is the read-only input; ValidationResult is one check's verdict;
ProjectValidation is the per-project aggregate that the override layer and
record store work on. All are frozen: changes produce new values.

JSON shape (to_dict / from_dict) uses the camelCase keys the admin UI and
public project page already consume (scamCheck, overallPassed, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class CheckKind(str, Enum):
    """The three checks run per project. Value is the JSON key."""

    SCAM = "scamCheck"
    SANCTIONS = "sanctionsCheck"
    AUDIT = "auditCheck"

    @property
    def attr(self) -> str:
        """Attribute name on ProjectValidation."""
        return _CHECK_ATTRS[self]

    @property
    def critical(self) -> bool:
        """Critical checks gate overall_passed; audit only affects risk level."""
        return self in (CheckKind.SCAM, CheckKind.SANCTIONS)

    @classmethod
    def parse(cls, raw: str | CheckKind) -> CheckKind:
        """Accept the JSON key (scamCheck), attribute name (scam_check) or short name (scam)."""
        if isinstance(raw, CheckKind):
            return raw
        key = (raw or "").strip()
        for kind in cls:
            if key in (kind.value, kind.attr, kind.name.lower()):
                return kind
        raise ValueError(f"Unknown check: {raw!r}")


_CHECK_ATTRS = {
    CheckKind.SCAM: "scam_check",
    CheckKind.SANCTIONS: "sanctions_check",
    CheckKind.AUDIT: "audit_check",
}


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _to_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 string (or pass through a datetime). Naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class Project:
    """Submitted project as read from the project store."""

    id: str
    name: str = ""
    description: str = ""
    website: str = ""
    roi: float = 0.0
    audit_document_path: str | None = None
    audit_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Project:
        """Build from a project row or API payload; camelCase keys are accepted as aliases."""
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            website=str(data.get("website") or ""),
            roi=_to_float(data.get("roi")),
            audit_document_path=_optional_str(data.get("audit_document_path") or data.get("auditDocumentPath")),
            audit_url=_optional_str(data.get("audit_url") or data.get("auditUrl")),
        )


@dataclass(frozen=True)
class ValidationResult:
    """Verdict of one check."""

    passed: bool
    details: str = ""
    manual_override: bool = False
    manual_notes: str | None = None
    inconclusive_sources: tuple[str, ...] = ()
    """Evidence sources that could not be consulted (service down, no credentials)."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "details": self.details,
            "manualOverride": self.manual_override,
            "manualNotes": self.manual_notes,
            "inconclusiveSources": list(self.inconclusive_sources),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ValidationResult:
        data = data or {}
        return cls(
            passed=bool(data.get("passed", False)),
            details=str(data.get("details") or ""),
            manual_override=bool(data.get("manualOverride", data.get("manual_override", False))),
            manual_notes=_optional_str(data.get("manualNotes", data.get("manual_notes"))),
            inconclusive_sources=tuple(
                str(s) for s in (data.get("inconclusiveSources") or data.get("inconclusive_sources") or ())
            ),
        )


@dataclass(frozen=True)
class ProjectValidation:
    """Latest validation snapshot for one project (automated verdicts plus overrides)."""

    scam_check: ValidationResult
    sanctions_check: ValidationResult
    audit_check: ValidationResult
    risk_level: RiskLevel
    overall_passed: bool
    manually_reviewed: bool = False
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    validated_at: datetime | None = field(default=None, compare=False)

    def check(self, kind: CheckKind) -> ValidationResult:
        return getattr(self, kind.attr)

    def with_check(self, kind: CheckKind, result: ValidationResult) -> ProjectValidation:
        """Return a copy with one check replaced. Aggregates are not recomputed here."""
        return replace(self, **{kind.attr: result})

    def checks(self) -> dict[CheckKind, ValidationResult]:
        return {kind: self.check(kind) for kind in CheckKind}

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {kind.value: self.check(kind).to_dict() for kind in CheckKind}
        out.update(
            {
                "riskLevel": self.risk_level.value,
                "overallPassed": self.overall_passed,
                "manuallyReviewed": self.manually_reviewed,
                "reviewedBy": self.reviewed_by,
                "reviewedAt": format_timestamp(self.reviewed_at),
                "validatedAt": format_timestamp(self.validated_at),
            }
        )
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectValidation:
        """
        Parse the camelCase JSON shape. Missing risk level defaults to high so a
        malformed payload never reads as low risk; callers recompute aggregates anyway.
        """
        raw_risk = str(data.get("riskLevel") or RiskLevel.HIGH.value).lower()
        try:
            risk_level = RiskLevel(raw_risk)
        except ValueError:
            risk_level = RiskLevel.HIGH
        return cls(
            scam_check=ValidationResult.from_dict(data.get(CheckKind.SCAM.value)),
            sanctions_check=ValidationResult.from_dict(data.get(CheckKind.SANCTIONS.value)),
            audit_check=ValidationResult.from_dict(data.get(CheckKind.AUDIT.value)),
            risk_level=risk_level,
            overall_passed=bool(data.get("overallPassed", False)),
            manually_reviewed=bool(data.get("manuallyReviewed", False)),
            reviewed_by=_optional_str(data.get("reviewedBy")),
            reviewed_at=parse_timestamp(data.get("reviewedAt")),
            validated_at=parse_timestamp(data.get("validatedAt")),
        )
