"""
Environment variable loading for Backend RWA.

- RWA_DB_URL / DATABASE_URL: SQLAlchemy URL (default: sqlite:///rwa_validation.db)
- PHISHTANK_APP_KEY, SAFE_BROWSING_API_KEY, SANCTIONS_API_KEY: reference service credentials
- SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY: hosted storage for uploaded audit documents
- AUDIT_STORAGE_DIR: local directory used instead of hosted storage
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_DB_URL = "sqlite:///rwa_validation.db"
DEFAULT_HTTP_TIMEOUT_SEC = 5.0

PHISHTANK_API_URL = "https://checkurl.phishtank.com/checkurl/"
SAFE_BROWSING_API_URL = "https://safebrowsing.googleapis.com/v4/threatMatches:find"
SANCTIONS_API_URL = "https://api.sanctions.io"


def load_rwa_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH, override=False)


def env_str(name: str, default: str = "") -> str:
    """Return a stripped env value, or default when unset or blank."""
    return (os.getenv(name) or "").strip() or default


def env_float(name: str, default: float) -> float:
    """Return a float env value; fall back to default on blank or unparsable input."""
    raw = env_str(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_int(name: str, default: int) -> int:
    raw = env_str(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_database_url() -> str:
    """RWA_DB_URL > DATABASE_URL > local SQLite file."""
    load_rwa_env()
    return env_str("RWA_DB_URL") or env_str("DATABASE_URL") or DEFAULT_DB_URL
