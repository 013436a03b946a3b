"""
Application settings.

Typed view over the environment (see config/env.py) for the validation
engine, reference-service clients, storage, and the API server.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from backend_rwa.config.env import (
    DEFAULT_HTTP_TIMEOUT_SEC,
    PHISHTANK_API_URL,
    SAFE_BROWSING_API_URL,
    SANCTIONS_API_URL,
    env_float,
    env_int,
    env_str,
    get_database_url,
    load_rwa_env,
)


@dataclass(frozen=True)
class Settings:
    database_url: str
    http_timeout_sec: float = DEFAULT_HTTP_TIMEOUT_SEC
    phishtank_app_key: str = ""
    phishtank_api_url: str = PHISHTANK_API_URL
    safe_browsing_api_key: str = ""
    safe_browsing_api_url: str = SAFE_BROWSING_API_URL
    sanctions_api_key: str = ""
    sanctions_api_url: str = SANCTIONS_API_URL
    sanctions_min_score: float = 0.85
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    audit_storage_dir: str = ""
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @property
    def use_hosted_storage(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings (cached).

    Tests that change the environment call get_settings.cache_clear().
    """
    load_rwa_env()
    return Settings(
        database_url=get_database_url(),
        http_timeout_sec=max(0.5, env_float("RWA_HTTP_TIMEOUT_SEC", DEFAULT_HTTP_TIMEOUT_SEC)),
        phishtank_app_key=env_str("PHISHTANK_APP_KEY"),
        phishtank_api_url=env_str("PHISHTANK_API_URL", PHISHTANK_API_URL),
        safe_browsing_api_key=env_str("SAFE_BROWSING_API_KEY"),
        safe_browsing_api_url=env_str("SAFE_BROWSING_API_URL", SAFE_BROWSING_API_URL),
        sanctions_api_key=env_str("SANCTIONS_API_KEY"),
        sanctions_api_url=env_str("SANCTIONS_API_URL", SANCTIONS_API_URL),
        sanctions_min_score=env_float("SANCTIONS_MIN_SCORE", 0.85),
        supabase_url=env_str("SUPABASE_URL") or env_str("NEXT_PUBLIC_SUPABASE_URL"),
        supabase_service_role_key=env_str("SUPABASE_SERVICE_ROLE_KEY"),
        audit_storage_dir=env_str("AUDIT_STORAGE_DIR"),
        api_host=env_str("API_HOST", "0.0.0.0"),
        api_port=env_int("API_PORT", 8000),
    )
