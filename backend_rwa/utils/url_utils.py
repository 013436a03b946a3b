"""URL and domain helpers shared by the signal checkers."""

from __future__ import annotations

from urllib.parse import urlsplit

from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)


def normalize_url(raw: str | None) -> str:
    """Return raw stripped, with https:// prepended when no scheme is given. Empty for blank input."""
    text = (raw or "").strip()
    if not text:
        return ""
    if "://" not in text:
        text = "https://" + text.lstrip("/")
    return text


def extract_domain(raw: str | None) -> str:
    """
    Return the lowercased hostname of a website URL, or "" when it cannot be parsed.

    Bare domains ("example.com") are accepted. Never raises.
    """
    url = normalize_url(raw)
    if not url:
        return ""
    try:
        host = urlsplit(url).hostname or ""
    except ValueError as e:
        logger.warning("url_parse_failed", url=url[:120], error=str(e))
        return ""
    host = host.strip().rstrip(".").lower()
    if host.startswith("www."):
        host = host[4:]
    if "." not in host:
        return ""
    return host


def top_level_domain(domain: str) -> str:
    """Last label of a domain ("project.ru" -> "ru")."""
    return domain.rsplit(".", 1)[-1] if domain else ""
