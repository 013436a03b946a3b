"""
Malicious-URL lookup (Google Safe Browsing v4 threatMatches:find).
"""

from __future__ import annotations

import httpx

from backend_rwa import __version__
from backend_rwa.clients.base import ReferenceServiceClient
from backend_rwa.config.env import DEFAULT_HTTP_TIMEOUT_SEC, SAFE_BROWSING_API_URL
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)

THREAT_TYPES = (
    "MALWARE",
    "SOCIAL_ENGINEERING",
    "UNWANTED_SOFTWARE",
    "POTENTIALLY_HARMFUL_APPLICATION",
)


class SafeBrowsingClient(ReferenceServiceClient):
    service_name = "safe_browsing"

    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = SAFE_BROWSING_API_URL,
        timeout_sec: float = DEFAULT_HTTP_TIMEOUT_SEC,
        http_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(timeout_sec=timeout_sec, http_client=http_client)
        self._api_key = (api_key or "").strip()
        self._api_url = api_url

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def find_threats(self, url: str) -> list[str] | None:
        """
        Return matched threat types for url ([] when clean), or None when the
        service cannot answer.
        """
        if not self.configured or not url:
            return None
        body = {
            "client": {"clientId": "backend-rwa", "clientVersion": __version__},
            "threatInfo": {
                "threatTypes": list(THREAT_TYPES),
                "platformTypes": ["ANY_PLATFORM"],
                "threatEntryTypes": ["URL"],
                "threatEntries": [{"url": url}],
            },
        }
        data = self._request_json("POST", self._api_url, params={"key": self._api_key}, json=body)
        if not isinstance(data, dict):
            return None
        matches = data.get("matches") or []
        threats = sorted({str(m.get("threatType")) for m in matches if isinstance(m, dict) and m.get("threatType")})
        if threats:
            logger.info("safe_browsing_threat_found", url=url[:120], threats=threats)
        return threats
