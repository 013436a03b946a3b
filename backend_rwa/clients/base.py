"""
Shared plumbing for best-effort reference-service clients.

Every call is bounded by a timeout. Network errors, timeouts, non-2xx status
and undecodable bodies all collapse to None, which callers treat as
"service unavailable" (inconclusive), never as a pass or a fail.
"""

from __future__ import annotations

from typing import Any

import httpx

from backend_rwa.config.env import DEFAULT_HTTP_TIMEOUT_SEC
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)


class ReferenceServiceClient:
    """Base class: owns (or borrows) an httpx.Client and a per-request timeout."""

    service_name = "reference_service"

    def __init__(
        self,
        *,
        timeout_sec: float = DEFAULT_HTTP_TIMEOUT_SEC,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout_sec)
        self._http = http_client
        self._owns_http = http_client is None

    @property
    def configured(self) -> bool:
        """False when credentials are missing; the client then answers None without a request."""
        return True

    def _client(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(timeout=self._timeout, follow_redirects=True)
        return self._http

    def _request_json(self, method: str, url: str, **kwargs: Any) -> Any | None:
        """Send a request and return decoded JSON, or None on any transport/HTTP/decode failure."""
        try:
            r = self._client().request(method, url, timeout=self._timeout, **kwargs)
            r.raise_for_status()
            return r.json()
        except httpx.TimeoutException as e:
            logger.warning("reference_service_timeout", service=self.service_name, error=str(e))
        except httpx.HTTPStatusError as e:
            logger.warning(
                "reference_service_http_error",
                service=self.service_name,
                status_code=e.response.status_code,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("reference_service_unreachable", service=self.service_name, error=str(e))
        except ValueError as e:
            logger.warning("reference_service_bad_json", service=self.service_name, error=str(e))
        return None

    def close(self) -> None:
        if self._owns_http and self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self):
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class UrlProbe(ReferenceServiceClient):
    """Reachability probe for external audit pages (HEAD, falling back to GET)."""

    service_name = "url_probe"

    def is_reachable(self, url: str) -> bool | None:
        """
        True on a non-error status, False on 4xx/5xx, None when the request
        itself failed (network error, or a host httpx cannot encode, such as
        an invalid IDNA label).
        """
        try:
            r = self._client().head(url, timeout=self._timeout)
            if r.status_code in (405, 501):
                r = self._client().get(url, timeout=self._timeout)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
            logger.debug("url_probe_failed", url=url[:120], error=str(e))
            return None
        return r.status_code < 400
