"""
Scam detection for submitted projects.

Evidence in precedence order (first decisive wins):
  1. known-phishing lookup of the website domain
  2. malware / social-engineering match of the website URL
  3. scam marketing phrases in name + description (whole-word, case-insensitive)
  4. ROI claim above ROI_RED_FLAG_PERCENT
Reference services that cannot be reached are skipped. Any unexpected error
fails the check with "unable to verify" instead of propagating.
"""

from __future__ import annotations

import math
from functools import partial

from backend_rwa.analytics.context import ValidationContext
from backend_rwa.analytics.evidence import Evidence, run_evidence_chain
from backend_rwa.analytics.models import Project, ValidationResult
from backend_rwa.rwa_logging import bind_project
from backend_rwa.utils.url_utils import extract_domain, normalize_url

ROI_RED_FLAG_PERCENT = 30.0

PASS_DETAIL = "No suspicious patterns or reports detected"
ERROR_DETAIL = "Error performing scam check, unable to verify"


def _phishing_evidence(domain: str, context: ValidationContext) -> Evidence:
    if not domain:
        return Evidence.no_finding()
    if context.phishing is None:
        return Evidence.source_unavailable("phishing service not configured")
    lookup = context.phishing.lookup_domain(domain)
    if lookup is None:
        return Evidence.source_unavailable("phishing service unavailable")
    if lookup.listed:
        ref = f" (phish id {lookup.phish_id})" if lookup.phish_id else ""
        return Evidence.failed(f"Website domain {domain} is listed as a known phishing site{ref}")
    return Evidence.no_finding()


def _threat_evidence(url: str, context: ValidationContext) -> Evidence:
    if not url:
        return Evidence.no_finding()
    if context.safe_browsing is None:
        return Evidence.source_unavailable("URL reputation service not configured")
    threats = context.safe_browsing.find_threats(url)
    if threats is None:
        return Evidence.source_unavailable("URL reputation service unavailable")
    if threats:
        kinds = ", ".join(t.lower().replace("_", " ") for t in threats)
        return Evidence.failed(f"Website flagged by URL reputation service: {kinds}")
    return Evidence.no_finding()


def _keyword_evidence(text: str, context: ValidationContext) -> Evidence:
    pattern = context.reference.scam_keyword_pattern()
    if pattern is None:
        return Evidence.no_finding()
    match = pattern.search(text)
    if match:
        return Evidence.failed(f"Suspicious terminology detected: {match.group(0)}")
    return Evidence.no_finding()


def _roi_evidence(roi: float) -> Evidence:
    if math.isfinite(roi) and roi > ROI_RED_FLAG_PERCENT:
        return Evidence.failed(
            f"Suspiciously high ROI claim: {roi:g}%. "
            "This exceeds typical market returns and raises red flags."
        )
    return Evidence.no_finding()


def check_for_scam_reports(project: Project, context: ValidationContext | None = None) -> ValidationResult:
    """Run the scam evidence chain for one project. Never raises."""
    context = context or ValidationContext.offline()
    log = bind_project(project.id, __name__, check="scam")
    try:
        url = normalize_url(project.website)
        domain = extract_domain(project.website)
        text = f"{project.name} {project.description}"
        result = run_evidence_chain(
            [
                ("phishing_lookup", partial(_phishing_evidence, domain, context)),
                ("url_reputation", partial(_threat_evidence, url if domain else "", context)),
                ("scam_keywords", partial(_keyword_evidence, text, context)),
                ("roi_threshold", partial(_roi_evidence, float(project.roi))),
            ],
            default_detail=PASS_DETAIL,
            log=log,
        )
    except Exception as e:
        log.exception("scam_check_failed", error=str(e))
        return ValidationResult(passed=False, details=ERROR_DETAIL)
    log.info(
        "scam_check_done",
        passed=result.passed,
        inconclusive=list(result.inconclusive_sources),
    )
    return result
