"""
Persistence: projects (read-only), validation records, admin activity.
"""

from backend_rwa.database.admin_activity import AdminActivityLog
from backend_rwa.database.connection import Database, get_database, reset_database_for_test
from backend_rwa.database.projects import ProjectReader
from backend_rwa.database.validation_store import ValidationStore

__all__ = [
    "AdminActivityLog",
    "Database",
    "ProjectReader",
    "ValidationStore",
    "get_database",
    "reset_database_for_test",
]
