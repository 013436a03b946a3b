"""
Sanctions screening for submitted projects.

Evidence in precedence order (first decisive wins):
  1. fuzzy name match against the sanctions-list name search
  2. domain match against the sanctions-list address search
  3. sanctioned-country top-level domain
  4. high-risk country / region patterns in the domain
  5. sanctioned entities and prohibited topics in name + description
Same containment rule as the scam check: internal errors fail the check
with "unable to verify".
"""

from __future__ import annotations

from functools import partial

from backend_rwa.analytics.context import ValidationContext
from backend_rwa.analytics.evidence import Evidence, run_evidence_chain
from backend_rwa.analytics.models import Project, ValidationResult
from backend_rwa.rwa_logging import bind_project
from backend_rwa.utils.url_utils import extract_domain, top_level_domain

PASS_DETAIL = "No sanctions detected"
ERROR_DETAIL = "Error performing sanctions check, unable to verify"


def _describe_hit(hit) -> str:
    source = f" on {hit.source}" if hit.source else ""
    return f"{hit.name}{source} (match score {hit.score:.2f})"


def _name_search_evidence(name: str, context: ValidationContext) -> Evidence:
    if not name.strip():
        return Evidence.no_finding()
    if context.sanctions is None:
        return Evidence.source_unavailable("sanctions service not configured")
    hits = context.sanctions.search_name(name)
    if hits is None:
        return Evidence.source_unavailable("sanctions name search unavailable")
    if hits:
        return Evidence.failed(f"Project name matches sanctioned entity: {_describe_hit(hits[0])}")
    return Evidence.no_finding()


def _address_search_evidence(domain: str, context: ValidationContext) -> Evidence:
    if not domain:
        return Evidence.no_finding()
    if context.sanctions is None:
        return Evidence.source_unavailable("sanctions service not configured")
    hits = context.sanctions.search_address(domain)
    if hits is None:
        return Evidence.source_unavailable("sanctions address search unavailable")
    if hits:
        return Evidence.failed(f"Project website {domain} is associated with sanctioned entity: {_describe_hit(hits[0])}")
    return Evidence.no_finding()


def _tld_evidence(domain: str, context: ValidationContext) -> Evidence:
    country = context.reference.sanctioned_tlds.get(top_level_domain(domain))
    if country:
        return Evidence.failed(f"Project website has domain associated with sanctioned country: {country}")
    return Evidence.no_finding()


def _domain_pattern_evidence(domain: str, context: ValidationContext) -> Evidence:
    if not domain:
        return Evidence.no_finding()
    for pattern, label in context.reference.compiled_domain_patterns():
        match = pattern.search(domain)
        if match:
            return Evidence.failed(
                f"Project website domain {domain} references a high-risk jurisdiction: {label}"
            )
    return Evidence.no_finding()


def _terms_evidence(text: str, context: ValidationContext) -> Evidence:
    lowered = text.lower()
    for term in context.reference.sanctioned_terms:
        if term in lowered:
            return Evidence.failed(f"Project mentions sanctioned entity or prohibited activity: {term}")
    return Evidence.no_finding()


def check_for_sanctions(project: Project, context: ValidationContext | None = None) -> ValidationResult:
    """Run the sanctions evidence chain for one project. Never raises."""
    context = context or ValidationContext.offline()
    log = bind_project(project.id, __name__, check="sanctions")
    try:
        domain = extract_domain(project.website)
        text = f"{project.name} {project.description}"
        result = run_evidence_chain(
            [
                ("sanctions_name_search", partial(_name_search_evidence, project.name, context)),
                ("sanctions_address_search", partial(_address_search_evidence, domain, context)),
                ("sanctioned_tld", partial(_tld_evidence, domain, context)),
                ("high_risk_domain", partial(_domain_pattern_evidence, domain, context)),
                ("sanctioned_terms", partial(_terms_evidence, text, context)),
            ],
            default_detail=PASS_DETAIL,
            log=log,
        )
    except Exception as e:
        log.exception("sanctions_check_failed", error=str(e))
        return ValidationResult(passed=False, details=ERROR_DETAIL)
    log.info(
        "sanctions_check_done",
        passed=result.passed,
        inconclusive=list(result.inconclusive_sources),
    )
    return result
