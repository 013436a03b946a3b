"""
Best-effort clients for external reference services.

Each lookup returns a verdict or None. None means the service could not be
consulted (no credentials, timeout, network or HTTP error) and is treated by
the checkers as inconclusive.
"""

from backend_rwa.clients.base import ReferenceServiceClient, UrlProbe
from backend_rwa.clients.phishing import PhishingClient, PhishingLookup
from backend_rwa.clients.safe_browsing import SafeBrowsingClient
from backend_rwa.clients.sanctions import SanctionsClient, SanctionsHit

__all__ = [
    "ReferenceServiceClient",
    "UrlProbe",
    "PhishingClient",
    "PhishingLookup",
    "SafeBrowsingClient",
    "SanctionsClient",
    "SanctionsHit",
]
