"""
Known-phishing lookup (PhishTank checkurl API).

POST checkurl with the project's site URL; a hit that is in the database and
still valid means the domain is a reported phishing site.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from backend_rwa.clients.base import ReferenceServiceClient
from backend_rwa.config.env import DEFAULT_HTTP_TIMEOUT_SEC, PHISHTANK_API_URL
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PhishingLookup:
    listed: bool
    phish_id: str | None = None
    verified: bool = False


class PhishingClient(ReferenceServiceClient):
    service_name = "phishtank"

    def __init__(
        self,
        app_key: str,
        *,
        api_url: str = PHISHTANK_API_URL,
        timeout_sec: float = DEFAULT_HTTP_TIMEOUT_SEC,
        http_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(timeout_sec=timeout_sec, http_client=http_client)
        self._app_key = (app_key or "").strip()
        self._api_url = api_url

    @property
    def configured(self) -> bool:
        return bool(self._app_key)

    def lookup_domain(self, domain: str) -> PhishingLookup | None:
        """Return the lookup for https://<domain>/, or None when the service cannot answer."""
        if not self.configured or not domain:
            return None
        data = self._request_json(
            "POST",
            self._api_url,
            data={"url": f"https://{domain}/", "format": "json", "app_key": self._app_key},
            headers={"User-Agent": "phishtank/backend-rwa"},
        )
        if not isinstance(data, dict):
            return None
        results = data.get("results")
        if not isinstance(results, dict):
            return None
        in_database = bool(results.get("in_database"))
        # "valid" is false once PhishTank has confirmed the site is no longer phishing
        listed = in_database and results.get("valid", True) is not False
        phish_id = results.get("phish_id")
        lookup = PhishingLookup(
            listed=listed,
            phish_id=str(phish_id) if phish_id is not None else None,
            verified=bool(results.get("verified")),
        )
        if lookup.listed:
            logger.info("phishing_domain_listed", domain=domain, phish_id=lookup.phish_id)
        return lookup
