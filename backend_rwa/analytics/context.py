"""
Dependencies of the signal checkers, passed explicitly to every check.

Tests build a ValidationContext with fakes; production builds one from
settings. A missing client simply makes its evidence source inconclusive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from backend_rwa.analytics.reference_data import ReferenceData, load_reference_data
from backend_rwa.clients import PhishingClient, SafeBrowsingClient, SanctionsClient, UrlProbe
from backend_rwa.config.settings import Settings
from backend_rwa.rwa_logging import get_logger
from backend_rwa.storage import FileStorage, LocalFileStorage, SupabaseFileStorage

logger = get_logger(__name__)


@dataclass
class ValidationContext:
    phishing: Any = None
    """Object with lookup_domain(domain) -> PhishingLookup | None."""
    safe_browsing: Any = None
    """Object with find_threats(url) -> list[str] | None."""
    sanctions: Any = None
    """Object with search_name(name) / search_address(address) -> list[SanctionsHit] | None."""
    storage: FileStorage | None = None
    url_probe: Any = None
    """Object with is_reachable(url) -> bool | None."""
    reference: ReferenceData = field(default_factory=load_reference_data)

    @classmethod
    def offline(cls) -> ValidationContext:
        """No external services and no storage: only the local heuristics run."""
        return cls()

    @classmethod
    def from_settings(cls, settings: Settings) -> ValidationContext:
        timeout = settings.http_timeout_sec
        storage: FileStorage | None = None
        if settings.use_hosted_storage:
            storage = SupabaseFileStorage(
                settings.supabase_url,
                settings.supabase_service_role_key,
                timeout_sec=timeout,
            )
        elif settings.audit_storage_dir:
            storage = LocalFileStorage(settings.audit_storage_dir)
        context = cls(
            phishing=PhishingClient(
                settings.phishtank_app_key,
                api_url=settings.phishtank_api_url,
                timeout_sec=timeout,
            ),
            safe_browsing=SafeBrowsingClient(
                settings.safe_browsing_api_key,
                api_url=settings.safe_browsing_api_url,
                timeout_sec=timeout,
            ),
            sanctions=SanctionsClient(
                settings.sanctions_api_key,
                base_url=settings.sanctions_api_url,
                min_score=settings.sanctions_min_score,
                timeout_sec=timeout,
            ),
            storage=storage,
            url_probe=UrlProbe(timeout_sec=timeout),
        )
        logger.info(
            "validation_context_ready",
            phishing=context.phishing.configured,
            safe_browsing=context.safe_browsing.configured,
            sanctions=context.sanctions.configured,
            storage=type(storage).__name__ if storage else None,
        )
        return context
