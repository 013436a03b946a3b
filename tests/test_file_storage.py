"""
Tests for audit-document storage (LocalFileStorage, SupabaseFileStorage).
"""

from __future__ import annotations

import httpx
import pytest

from backend_rwa.core.exceptions import StorageError
from backend_rwa.storage import AUDIT_BUCKET, LocalFileStorage, SupabaseFileStorage


def test_local_put_stat_download(tmp_path):
    """Local storage stores a file, reports its metadata and downloads it."""
    storage = LocalFileStorage(tmp_path)
    storage.put(AUDIT_BUCKET, "proj/report.pdf", b"%PDF-1.7 content")
    stat = storage.stat(AUDIT_BUCKET, "/proj/report.pdf")
    assert stat is not None
    assert stat.size == len(b"%PDF-1.7 content")
    assert stat.name == "report.pdf"
    assert stat.content_type == "application/pdf"
    assert storage.exists(AUDIT_BUCKET, "proj/report.pdf")
    assert storage.download(AUDIT_BUCKET, "proj/report.pdf") == b"%PDF-1.7 content"


def test_local_missing_file(tmp_path):
    """A missing local file has no stat."""
    storage = LocalFileStorage(tmp_path)
    assert storage.stat(AUDIT_BUCKET, "nope.pdf") is None
    assert storage.exists(AUDIT_BUCKET, "nope.pdf") is False
    with pytest.raises(StorageError):
        storage.download(AUDIT_BUCKET, "nope.pdf")


@pytest.mark.parametrize("path", ["../secret.pdf", "a/../../secret.pdf", "", "."])
def test_local_rejects_paths_outside_bucket(tmp_path, path):
    """Paths outside the bucket are rejected."""
    storage = LocalFileStorage(tmp_path)
    with pytest.raises(StorageError):
        storage.stat(AUDIT_BUCKET, path)


def _supabase(handler) -> SupabaseFileStorage:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return SupabaseFileStorage("https://proj.supabase.test/", "service-key", http_client=http)


def test_supabase_stat_reads_list_metadata():
    """Supabase stat reads size and content type from the list metadata."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"name": "report.pdf.bak", "metadata": {"size": 1}},
                {"name": "report.pdf", "metadata": {"size": 204800, "mimetype": "application/pdf"}},
            ],
        )

    stat = _supabase(handler).stat(AUDIT_BUCKET, "proj-1/report.pdf")
    assert stat is not None
    assert stat.size == 204800
    assert stat.content_type == "application/pdf"
    assert seen[0].url.path == "/storage/v1/object/list/audit-documents"
    assert seen[0].headers["Authorization"] == "Bearer service-key"


def test_supabase_stat_missing():
    """A file absent from the Supabase listing has no stat."""
    assert _supabase(lambda r: httpx.Response(200, json=[])).stat(AUDIT_BUCKET, "proj-1/x.pdf") is None


def test_supabase_errors_raise_storage_error():
    """Supabase HTTP failures raise StorageError."""
    storage = _supabase(lambda r: httpx.Response(500))
    with pytest.raises(StorageError):
        storage.stat(AUDIT_BUCKET, "proj-1/report.pdf")
    with pytest.raises(StorageError):
        storage.download(AUDIT_BUCKET, "proj-1/report.pdf")


def test_supabase_download():
    """Supabase download returns the object bytes."""
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/storage/v1/object/audit-documents/proj-1/report.pdf"
        return httpx.Response(200, content=b"%PDF")

    assert _supabase(handler).download(AUDIT_BUCKET, "proj-1/report.pdf") == b"%PDF"
