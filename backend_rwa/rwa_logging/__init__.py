"""
Structured logging for Backend RWA.

JSON logs with timestamp, project_id, event_type. Use get_logger() in every module.
"""

from backend_rwa.rwa_logging.logger import bind_project, get_logger

__all__ = ["bind_project", "get_logger"]
