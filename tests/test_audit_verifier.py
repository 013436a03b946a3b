"""
Tests for audit verification (audit_verifier.verify_audit_document).

Uploaded documents live in a LocalFileStorage under tmp_path.
"""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import MagicMock

import httpx
import pytest

from backend_rwa.analytics.audit_verifier import (
    BASIC_CHECK_MIN_BYTES,
    MIN_AUDIT_FILE_BYTES,
    NO_AUDIT_DETAIL,
    verify_audit_document,
)
from backend_rwa.analytics.context import ValidationContext
from backend_rwa.analytics.models import Project
from backend_rwa.clients import UrlProbe
from backend_rwa.core.exceptions import StorageError
from backend_rwa.storage import AUDIT_BUCKET


@pytest.fixture
def project():
    return Project(id="p-audit", name="Audit Test", website="https://example-reit.com", roi=5)


def test_no_audit_evidence_fails(project, fake_context):
    """No URL and no upload fails with the manual-review message."""
    result = verify_audit_document(project, fake_context)
    assert result.passed is False
    assert result.details == NO_AUDIT_DETAIL


def test_url_with_recognized_firm_passes(project, fake_context):
    """A URL naming a recognized firm passes and is probed once."""
    project = replace(project, audit_url="https://certik.com/projects/example")
    result = verify_audit_document(project, fake_context)
    assert result.passed is True
    assert "certik" in result.details
    assert fake_context.url_probe.calls == ["https://certik.com/projects/example"]


def test_unreachable_firm_url_still_passes_with_note(project, fake_context):
    """An unreachable firm page still passes, with a note in the details."""
    fake_context.url_probe.reachable = False
    project = replace(project, audit_url="https://www.peckshield.com/audits/example.pdf")
    result = verify_audit_document(project, fake_context)
    assert result.passed is True
    assert "peckshield" in result.details
    assert "could not be reached" in result.details


def test_url_on_known_firm_domain_passes(project, fake_context):
    """A URL on a known firm domain passes even without the firm token."""
    project = replace(project, audit_url="https://reports.zellic.io/publications/example")
    result = verify_audit_document(project, fake_context)
    assert result.passed is True
    assert "zellic" in result.details


def test_url_on_sharing_platform_fails(project, fake_context):
    """An audit on a file-sharing platform fails for manual review."""
    project = replace(project, audit_url="https://github.com/example/audits/blob/main/report.pdf")
    result = verify_audit_document(project, fake_context)
    assert result.passed is False
    assert "sharing platform" in result.details
    assert "manual review" in result.details


def test_url_unknown_site_fails(project, fake_context):
    """A URL on an unrelated site fails."""
    project = replace(project, audit_url="https://some-auditor.example/report")
    result = verify_audit_document(project, fake_context)
    assert result.passed is False
    assert "not from a recognized security firm" in result.details


def test_url_checked_when_both_present(project, fake_context):
    """An audit URL takes precedence over an uploaded document."""
    project = replace(
        project,
        audit_url="https://hacken.io/audits/example",
        audit_document_path="missing/report.pdf",
    )
    result = verify_audit_document(project, fake_context)
    assert result.passed is True
    assert "hacken" in result.details


def test_upload_missing_file_fails(project, fake_context):
    """An upload reference whose file is missing fails."""
    project = replace(project, audit_document_path="p-audit/report.pdf")
    result = verify_audit_document(project, fake_context)
    assert result.passed is False
    assert "file not found" in result.details


def test_upload_suspiciously_small_fails(project, fake_context, audit_storage):
    """An upload under the minimum size fails as suspiciously small."""
    audit_storage.put(AUDIT_BUCKET, "p-audit/certik-report.pdf", b"x" * (MIN_AUDIT_FILE_BYTES - 1))
    project = replace(project, audit_document_path="p-audit/certik-report.pdf")
    result = verify_audit_document(project, fake_context)
    assert result.passed is False
    assert "suspiciously small" in result.details


def test_upload_firm_in_file_name_passes(project, fake_context, audit_storage):
    """A firm name in the uploaded file name passes."""
    audit_storage.put(AUDIT_BUCKET, "p-audit/CertiK_Audit_Final.pdf", b"%PDF" + b"0" * 20_000)
    project = replace(project, audit_document_path="p-audit/CertiK_Audit_Final.pdf")
    result = verify_audit_document(project, fake_context)
    assert result.passed is True
    assert "certik" in result.details
    assert "document name" in result.details


def test_large_pdf_without_firm_passes_basic_check(project, fake_context, audit_storage):
    """A large PDF with no firm passes the basic check."""
    audit_storage.put(AUDIT_BUCKET, "p-audit/security-review.pdf", b"%PDF" + b"0" * BASIC_CHECK_MIN_BYTES)
    project = replace(project, audit_document_path="p-audit/security-review.pdf")
    result = verify_audit_document(project, fake_context)
    assert result.passed is True
    assert "basic check" in result.details


def test_large_non_document_without_firm_fails(project, fake_context, audit_storage):
    """Exists, well above the minimum size, no firm token, not a document type."""
    audit_storage.put(AUDIT_BUCKET, "p-audit/report.zip", b"0" * (BASIC_CHECK_MIN_BYTES * 2))
    project = replace(project, audit_document_path="p-audit/report.zip")
    result = verify_audit_document(project, fake_context)
    assert result.passed is False
    assert "manual review" in result.details


def test_mid_size_pdf_without_firm_fails(project, fake_context, audit_storage):
    """A PDF between the minimum and basic-check sizes fails."""
    audit_storage.put(AUDIT_BUCKET, "p-audit/report.pdf", b"%PDF" + b"0" * 50_000)
    project = replace(project, audit_document_path="p-audit/report.pdf")
    result = verify_audit_document(project, fake_context)
    assert result.passed is False
    assert "Could not verify the security firm" in result.details


def test_upload_without_storage_fails_unable_to_verify(project):
    """An upload with no storage configured fails with unable to verify."""
    project = replace(project, audit_document_path="p-audit/report.pdf")
    result = verify_audit_document(project, ValidationContext.offline())
    assert result.passed is False
    assert "unable to verify" in result.details


def test_storage_error_fails_unable_to_verify(project, fake_context):
    """A storage error fails the check instead of raising."""
    storage = MagicMock()
    storage.stat.side_effect = StorageError("storage down")
    context = replace(fake_context, storage=storage)
    project = replace(project, audit_document_path="p-audit/report.pdf")
    result = verify_audit_document(project, context)
    assert result.passed is False
    assert "unable to verify" in result.details


def test_path_traversal_is_not_verified(project, fake_context):
    """A path escaping the audit bucket is never verified."""
    project = replace(project, audit_document_path="../../etc/passwd")
    result = verify_audit_document(project, fake_context)
    assert result.passed is False
    assert "unable to verify" in result.details


def test_firm_url_with_invalid_idna_host_still_passes(project, fake_context):
    """A firm URL passes even when the reachability check cannot encode its host."""
    fake_context.url_probe = UrlProbe(http_client=httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200))))
    project = replace(project, audit_url="https://xn--certik-.com/")
    result = verify_audit_document(project, fake_context)
    assert result.passed is True
    assert "certik" in result.details
    assert "unable to verify" not in result.details
