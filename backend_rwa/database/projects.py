"""
Read-only access to submitted projects.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from backend_rwa.analytics.models import Project
from backend_rwa.core.exceptions import ProjectNotFoundError, ValidationStoreError
from backend_rwa.database.connection import Database
from backend_rwa.database.models import ProjectRow
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)


class ProjectReader:
    def __init__(self, db: Database) -> None:
        self._db = db

    def get(self, project_id: str) -> Project:
        """Return the project. Raises ProjectNotFoundError if absent."""
        try:
            with self._db.session_scope() as session:
                row = session.get(ProjectRow, project_id)
                data = row.to_dict() if row else None
        except SQLAlchemyError as e:
            logger.exception("project_read_failed", project_id=project_id, error=str(e))
            raise ValidationStoreError(f"Failed to read project {project_id}: {e}") from e
        if data is None:
            raise ProjectNotFoundError(project_id)
        return Project.from_dict(data)
