"""
Application-level exceptions.

Checkers never raise these past their own boundary; they surface from the
override layer, the approval gate, storage, and the record store so the API
can map them to status codes.
"""

from __future__ import annotations


class RwaError(Exception):
    """Base class for Backend RWA errors."""


class OverrideRejectedError(RwaError, ValueError):
    """A manual override was refused (missing reviewer, notes too short). Nothing was changed."""


class ApprovalBlockedError(RwaError):
    """The validation record does not allow the project to be approved."""


class ProjectNotFoundError(RwaError, LookupError):
    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id


class ValidationRecordNotFoundError(RwaError, LookupError):
    def __init__(self, project_id: str) -> None:
        super().__init__(f"No validation record for project: {project_id}")
        self.project_id = project_id


class ValidationStoreError(RwaError):
    """Reading or writing a validation record failed."""


class StorageError(RwaError):
    """File storage request failed (not the same as a missing file)."""
