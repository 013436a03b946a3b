"""
Reference lists used by the signal checkers.

Built-in defaults cover scam marketing phrases, sanctioned-country TLDs,
high-risk domain patterns, sanctioned entities / prohibited topics, and the
recognized audit-firm allowlist. Each list can be extended (never replaced)
from a JSON array file named by an env var, so compliance can add entries
without a deploy:

  SCAM_KEYWORDS_PATH, SANCTIONED_TERMS_PATH, AUDIT_FIRMS_PATH
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)

SCAM_KEYWORDS: tuple[str, ...] = (
    "guaranteed returns",
    "guaranteed profit",
    "risk-free",
    "risk free",
    "zero risk",
    "100% secure",
    "get rich quick",
    "double your investment",
    "double your money",
    "secret investment",
    "hidden strategy",
    "exclusive opportunity",
    "limited time offer",
    "act now",
    "instant profit",
    "passive income guaranteed",
)

# Country-code TLD -> country name used in details
SANCTIONED_TLDS: dict[str, str] = {
    "ir": "Iran",
    "kp": "North Korea",
    "cu": "Cuba",
    "sy": "Syria",
    "ru": "Russia (partial sanctions)",
    "by": "Belarus",
    "ve": "Venezuela",
    "mm": "Myanmar",
}

# Applied to the lowercased domain; label goes into details
HIGH_RISK_DOMAIN_PATTERNS: tuple[tuple[str, str], ...] = (
    (r"(?:^|[.\-])iran|tehran", "Iran"),
    (r"north-?korea|pyongyang|(?:^|[.\-])dprk", "North Korea"),
    (r"(?:^|[.\-])cuba|havana", "Cuba"),
    (r"(?:^|[.\-])syria|damascus", "Syria"),
    (r"crimea|sevastopol|donetsk|luhansk", "occupied regions of Ukraine"),
)

SANCTIONED_TERMS: tuple[str, ...] = (
    "tornado cash",
    "garantex",
    "suex",
    "chatex",
    "hydra market",
    "lazarus group",
    "blender.io",
    "sinbad.io",
    "sanctions evasion",
    "evade sanctions",
    "bypass sanctions",
    "north korea",
    "crimea",
    "donetsk",
    "luhansk",
)

RECOGNIZED_AUDIT_FIRMS: tuple[str, ...] = (
    "certik",
    "peckshield",
    "hacken",
    "quantstamp",
    "slowmist",
    "chainsecurity",
    "trailofbits",
    "openzeppelin",
    "consensys",
    "mixbytes",
    "solidified",
    "smartdec",
    "halborn",
    "immunefi",
)

# Audit-firm sites whose domain does not contain the firm token above
AUDIT_FIRM_DOMAINS: dict[str, str] = {
    "zellic.io": "zellic",
    "spearbit.com": "spearbit",
    "sigmaprime.io": "sigmaprime",
    "runtimeverification.com": "runtimeverification",
    "cyfrin.io": "cyfrin",
    "osec.io": "ottersec",
    "certora.com": "certora",
    "diligence.consensys.io": "consensys",
}

SHARING_PLATFORM_DOMAINS: tuple[str, ...] = (
    "github.com",
    "raw.githubusercontent.com",
    "gitlab.com",
    "bitbucket.org",
    "docs.google.com",
    "drive.google.com",
    "dropbox.com",
    "onedrive.live.com",
    "ipfs.io",
    "cloudflare-ipfs.com",
    "gateway.pinata.cloud",
    "notion.site",
    "scribd.com",
    "mega.nz",
    "wetransfer.com",
    "medium.com",
)


def _load_extension(env_name: str) -> list[str]:
    """Load extra entries from a JSON array file. Returns [] when unset or unreadable."""
    path_str = (os.getenv(env_name) or "").strip()
    if not path_str:
        return []
    path = Path(path_str)
    if not path.is_file():
        logger.debug("reference_extension_missing", env=env_name, path=path_str)
        return []
    try:
        with open(path, encoding="utf-8") as f:
            data: Any = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("reference_extension_load_failed", env=env_name, path=path_str, error=str(e))
        return []
    if not isinstance(data, list):
        return []
    return [str(item).strip().lower() for item in data if str(item or "").strip()]


def _merge(defaults: tuple[str, ...], extra: list[str]) -> tuple[str, ...]:
    seen = dict.fromkeys(s.lower() for s in defaults)
    for item in extra:
        seen.setdefault(item)
    return tuple(seen)


@dataclass(frozen=True)
class ReferenceData:
    """Immutable snapshot of the reference lists for one validation context."""

    scam_keywords: tuple[str, ...] = SCAM_KEYWORDS
    sanctioned_tlds: dict[str, str] = field(default_factory=lambda: dict(SANCTIONED_TLDS))
    high_risk_domain_patterns: tuple[tuple[str, str], ...] = HIGH_RISK_DOMAIN_PATTERNS
    sanctioned_terms: tuple[str, ...] = SANCTIONED_TERMS
    audit_firms: tuple[str, ...] = RECOGNIZED_AUDIT_FIRMS
    audit_firm_domains: dict[str, str] = field(default_factory=lambda: dict(AUDIT_FIRM_DOMAINS))
    sharing_platforms: tuple[str, ...] = SHARING_PLATFORM_DOMAINS

    def scam_keyword_pattern(self) -> re.Pattern[str] | None:
        """Case-insensitive whole-word alternation of all scam phrases."""
        if not self.scam_keywords:
            return None
        alternation = "|".join(re.escape(k) for k in self.scam_keywords)
        # \b cannot anchor phrases that start or end with a symbol (e.g. "100% secure")
        return re.compile(rf"(?<![\w])(?:{alternation})(?![\w])", re.IGNORECASE)

    def compiled_domain_patterns(self) -> list[tuple[re.Pattern[str], str]]:
        return [(re.compile(p, re.IGNORECASE), label) for p, label in self.high_risk_domain_patterns]


def load_reference_data() -> ReferenceData:
    """Defaults plus any JSON extensions named in the environment."""
    data = ReferenceData(
        scam_keywords=_merge(SCAM_KEYWORDS, _load_extension("SCAM_KEYWORDS_PATH")),
        sanctioned_terms=_merge(SANCTIONED_TERMS, _load_extension("SANCTIONED_TERMS_PATH")),
        audit_firms=_merge(RECOGNIZED_AUDIT_FIRMS, _load_extension("AUDIT_FIRMS_PATH")),
    )
    logger.debug(
        "reference_data_loaded",
        scam_keywords=len(data.scam_keywords),
        sanctioned_terms=len(data.sanctioned_terms),
        audit_firms=len(data.audit_firms),
    )
    return data


def domain_matches(domain: str, candidate: str) -> bool:
    """True when domain equals candidate or is a subdomain of it."""
    domain = domain.lower().rstrip(".")
    candidate = candidate.lower()
    return domain == candidate or domain.endswith("." + candidate)
