"""
Heuristic verification of a project's security audit.

An external audit URL is judged by where it points; an uploaded document is
judged by its storage metadata (existence, size, file name, type). Neither
path proves an audit is genuine: anything short of a recognized firm asks
for manual review. Audit failure lowers the risk level but never blocks
overall_passed.
"""

from __future__ import annotations

import posixpath

from backend_rwa.analytics.context import ValidationContext
from backend_rwa.analytics.models import Project, ValidationResult
from backend_rwa.analytics.reference_data import ReferenceData, domain_matches
from backend_rwa.rwa_logging import bind_project
from backend_rwa.storage import AUDIT_BUCKET, FileStat
from backend_rwa.utils.url_utils import extract_domain, normalize_url

MIN_AUDIT_FILE_BYTES = 10 * 1024
BASIC_CHECK_MIN_BYTES = 100 * 1024

DOCUMENT_EXTENSIONS = (".pdf", ".doc", ".docx")
DOCUMENT_CONTENT_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)

NO_AUDIT_DETAIL = "No audit document or URL provided. Manual review recommended."
ERROR_DETAIL = "Error verifying audit, unable to verify. Manual review required."


def _find_firm(text: str, reference: ReferenceData) -> str | None:
    lowered = text.lower()
    for firm in reference.audit_firms:
        if firm in lowered:
            return firm
    return None


def _is_document(stat: FileStat) -> bool:
    if stat.content_type and stat.content_type.lower() in DOCUMENT_CONTENT_TYPES:
        return True
    return stat.name.lower().endswith(DOCUMENT_EXTENSIONS)


def _verify_audit_url(raw_url: str, context: ValidationContext, log) -> ValidationResult:
    url = normalize_url(raw_url)
    domain = extract_domain(url)
    reference = context.reference

    firm = _find_firm(url, reference)
    if firm:
        details = f"Verified audit from: {firm}"
        if context.url_probe is not None:
            reachable = context.url_probe.is_reachable(url)
            if reachable is False:
                log.warning("audit_url_unreachable", url=url, firm=firm)
                details += " (audit page could not be reached)"
        return ValidationResult(passed=True, details=details)

    if domain:
        for firm_domain, firm_name in reference.audit_firm_domains.items():
            if domain_matches(domain, firm_domain):
                return ValidationResult(passed=True, details=f"Verified audit from: {firm_name} ({domain})")
        for platform in reference.sharing_platforms:
            if domain_matches(domain, platform):
                return ValidationResult(
                    passed=False,
                    details=f"Audit document hosted on sharing platform ({domain}), manual review recommended.",
                )

    return ValidationResult(
        passed=False,
        details="Audit URL is not from a recognized security firm; manual verification required.",
    )


def _verify_audit_upload(path: str, context: ValidationContext) -> ValidationResult:
    if context.storage is None:
        return ValidationResult(
            passed=False,
            details="Audit document storage is not available, unable to verify. Manual review required.",
        )
    stat = context.storage.stat(AUDIT_BUCKET, path)
    if stat is None:
        return ValidationResult(
            passed=False,
            details="Audit document reference exists but file not found. Manual verification required.",
        )
    if stat.size < MIN_AUDIT_FILE_BYTES:
        return ValidationResult(
            passed=False,
            details=f"Audit document is suspiciously small ({stat.size} bytes). Manual verification required.",
        )

    firm = _find_firm(posixpath.basename(path), context.reference)
    if firm:
        return ValidationResult(
            passed=True,
            details=f"Verified audit from: {firm} (identified in document name)",
        )
    if _is_document(stat) and stat.size >= BASIC_CHECK_MIN_BYTES:
        return ValidationResult(
            passed=True,
            details="Audit document passed basic check (document type and size). Security firm not identified.",
        )
    return ValidationResult(
        passed=False,
        details="Could not verify the security firm; manual review recommended.",
    )


def verify_audit_document(project: Project, context: ValidationContext | None = None) -> ValidationResult:
    """
    Verify the audit evidence of one project. Never raises.

    When both an audit URL and an uploaded document are present, the URL is
    checked.
    """
    context = context or ValidationContext.offline()
    log = bind_project(project.id, __name__, check="audit")
    try:
        if project.audit_url and project.audit_url.strip():
            result = _verify_audit_url(project.audit_url.strip(), context, log)
            source = "url"
        elif project.audit_document_path and project.audit_document_path.strip():
            result = _verify_audit_upload(project.audit_document_path.strip(), context)
            source = "upload"
        else:
            result = ValidationResult(passed=False, details=NO_AUDIT_DETAIL)
            source = "none"
    except Exception as e:
        log.exception("audit_check_failed", error=str(e))
        return ValidationResult(passed=False, details=ERROR_DETAIL)
    log.info("audit_check_done", source=source, passed=result.passed)
    return result
