"""
SQLAlchemy models for projects, validation records and admin activity.

validation_results keeps the flat column layout the admin dashboard already
reads: four columns per check (passed, details, override, notes) plus the
aggregate verdict and review metadata, one row per project.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Boolean, Column, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ProjectRow(Base):
    """Submitted project. Read-only for the validation engine."""

    __tablename__ = "projects"

    id = Column(String(64), primary_key=True)
    name = Column(String(256), nullable=False, default="")
    description = Column(Text, nullable=True)
    website = Column(String(512), nullable=True)
    roi = Column(Float, nullable=True)
    audit_document_path = Column(String(512), nullable=True)
    audit_url = Column(String(1024), nullable=True)
    status = Column(String(32), nullable=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name or "",
            "description": self.description or "",
            "website": self.website or "",
            "roi": self.roi or 0.0,
            "auditDocumentPath": self.audit_document_path,
            "auditUrl": self.audit_url,
        }


class ValidationResultRow(Base):
    """Latest validation record of one project (unique per project_id)."""

    __tablename__ = "validation_results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(String(64), unique=True, nullable=False, index=True)

    scam_check_passed = Column(Boolean, nullable=False, default=False)
    scam_check_details = Column(Text, nullable=True)
    scam_check_override = Column(Boolean, nullable=False, default=False)
    scam_check_notes = Column(Text, nullable=True)
    scam_check_inconclusive = Column(Text, nullable=True)  # JSON array of source names

    sanctions_check_passed = Column(Boolean, nullable=False, default=False)
    sanctions_check_details = Column(Text, nullable=True)
    sanctions_check_override = Column(Boolean, nullable=False, default=False)
    sanctions_check_notes = Column(Text, nullable=True)
    sanctions_check_inconclusive = Column(Text, nullable=True)

    audit_check_passed = Column(Boolean, nullable=False, default=False)
    audit_check_details = Column(Text, nullable=True)
    audit_check_override = Column(Boolean, nullable=False, default=False)
    audit_check_notes = Column(Text, nullable=True)
    audit_check_inconclusive = Column(Text, nullable=True)

    risk_level = Column(String(16), nullable=False, default="high")
    overall_passed = Column(Boolean, nullable=False, default=False)
    validated_at = Column(String(40), nullable=True)  # ISO-8601 UTC
    manually_reviewed = Column(Boolean, nullable=False, default=False)
    reviewer_id = Column(String(128), nullable=True)
    reviewed_at = Column(String(40), nullable=True)


class AdminActivityRow(Base):
    """Append-only log of admin actions on projects."""

    __tablename__ = "admin_activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String(64), nullable=False, index=True)
    project_id = Column(String(64), nullable=True, index=True)
    admin_id = Column(String(128), nullable=True)
    status = Column(String(32), nullable=True)
    details = Column(Text, nullable=True)
    created_at = Column(String(40), nullable=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "action": self.action,
            "project_id": self.project_id,
            "admin_id": self.admin_id,
            "status": self.status,
            "details": self.details,
            "created_at": self.created_at,
        }
