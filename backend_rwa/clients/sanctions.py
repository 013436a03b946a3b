"""
Sanctions-list screening (sanctions.io style search API).

Two lookups: fuzzy entity-name search and address search (used with the
project's domain). Hits below min_score are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from backend_rwa.clients.base import ReferenceServiceClient
from backend_rwa.config.env import DEFAULT_HTTP_TIMEOUT_SEC, SANCTIONS_API_URL
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)

API_VERSION_HEADER = "application/json; version=2.2"


@dataclass(frozen=True)
class SanctionsHit:
    name: str
    score: float
    source: str = ""


class SanctionsClient(ReferenceServiceClient):
    service_name = "sanctions"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = SANCTIONS_API_URL,
        min_score: float = 0.85,
        timeout_sec: float = DEFAULT_HTTP_TIMEOUT_SEC,
        http_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(timeout_sec=timeout_sec, http_client=http_client)
        self._api_key = (api_key or "").strip()
        self._base_url = base_url.rstrip("/")
        self._min_score = min_score

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}", "Accept": API_VERSION_HEADER}

    def _search(self, path: str, params: dict[str, Any]) -> list[SanctionsHit] | None:
        data = self._request_json(
            "GET",
            f"{self._base_url}{path}",
            params={**params, "min_score": self._min_score},
            headers=self._headers(),
        )
        if not isinstance(data, dict):
            return None
        hits: list[SanctionsHit] = []
        for row in data.get("results") or []:
            if not isinstance(row, dict):
                continue
            try:
                score = float(row.get("confidence_score", 1.0))
            except (TypeError, ValueError):
                score = 0.0
            if score < self._min_score:
                continue
            source = row.get("data_source")
            if isinstance(source, dict):
                source = source.get("short_name") or source.get("name")
            hits.append(SanctionsHit(name=str(row.get("name") or ""), score=score, source=str(source or "")))
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits

    def search_name(self, name: str) -> list[SanctionsHit] | None:
        """Fuzzy entity-name search. [] when no hit, None when the service cannot answer."""
        name = (name or "").strip()
        if not self.configured or not name:
            return None
        hits = self._search("/search/", {"name": name})
        if hits:
            logger.info("sanctions_name_hit", query=name[:64], match=hits[0].name, score=hits[0].score)
        return hits

    def search_address(self, address: str) -> list[SanctionsHit] | None:
        """Address search (domains, crypto addresses). [] when no hit, None when unavailable."""
        address = (address or "").strip()
        if not self.configured or not address:
            return None
        hits = self._search("/search/address/", {"address": address})
        if hits:
            logger.info("sanctions_address_hit", query=address[:64], match=hits[0].name)
        return hits
