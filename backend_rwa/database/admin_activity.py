"""
Admin activity log (who approved / sent to manual review, and when).

Recording is best-effort: a failed insert is logged and never fails the
admin request that triggered it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from backend_rwa.analytics.models import format_timestamp
from backend_rwa.database.connection import Database
from backend_rwa.database.models import AdminActivityRow
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)

ACTION_MANUAL_VALIDATION = "manual_validation"
STATUS_APPROVED = "approved"
STATUS_MANUAL_REVIEW = "manual_review"


class AdminActivityLog:
    def __init__(self, db: Database) -> None:
        self._db = db

    def record(
        self,
        action: str,
        project_id: str | None,
        admin_id: str | None,
        status: str | None = None,
        details: str | None = None,
    ) -> bool:
        """Append one activity row. Returns False (after logging) when the insert failed."""
        try:
            with self._db.session_scope() as session:
                session.add(
                    AdminActivityRow(
                        action=action,
                        project_id=project_id,
                        admin_id=admin_id,
                        status=status,
                        details=details,
                        created_at=format_timestamp(datetime.now(timezone.utc)),
                    )
                )
            return True
        except SQLAlchemyError as e:
            logger.warning(
                "admin_activity_record_failed",
                action=action,
                project_id=project_id,
                error=str(e),
            )
            return False

    def list_recent(self, project_id: str | None = None, *, limit: int = 50) -> list[dict[str, Any]]:
        with self._db.session_scope() as session:
            q = session.query(AdminActivityRow)
            if project_id:
                q = q.filter(AdminActivityRow.project_id == project_id)
            rows = q.order_by(AdminActivityRow.id.desc()).limit(limit).all()
            return [r.to_dict() for r in rows]
