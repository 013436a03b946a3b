"""
Engine and session management.

Uses RWA_DB_URL or DATABASE_URL when set; otherwise a local SQLite file.
One cached Database per process; tests point it at a temporary file and call
reset_database_for_test().
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from backend_rwa.config.env import get_database_url
from backend_rwa.database.models import Base
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)


def _redact(url: str) -> str:
    """Drop credentials and query string for logging."""
    return url.split("?")[0].split("@")[-1].split("//")[-1]


class Database:
    """Engine plus session factory for one database URL."""

    def __init__(self, url: str) -> None:
        self.url = url
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info("database_engine", url=_redact(url))

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager for a single session. Commits on success, rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """Create tables if they do not exist. Safe to call on every startup."""
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("database_init_db", url=_redact(self.url))
        except Exception as e:
            logger.exception("database_init_db_failed", error=str(e))
            raise

    def dispose(self) -> None:
        self.engine.dispose()


_database: Database | None = None


def get_database(url: str | None = None) -> Database:
    """Return the process-wide Database, creating tables on first use."""
    global _database
    if url is not None:
        db = Database(url)
        db.init_db()
        return db
    if _database is None:
        _database = Database(get_database_url())
        _database.init_db()
    return _database


def reset_database_for_test() -> None:
    """Drop the cached Database. For tests only; use with a new RWA_DB_URL."""
    global _database
    if _database is not None:
        _database.dispose()
    _database = None
