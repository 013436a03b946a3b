"""
File-storage capability for uploaded audit documents.

The validation engine only needs exists / stat / download against a bucket.
FileStorage is the abstract interface; LocalFileStorage keeps one directory
per bucket (development, tests, self-hosted), SupabaseFileStorage talks to
the hosted storage REST API the product uploads into.
"""

from __future__ import annotations

import mimetypes
import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from backend_rwa.config.env import DEFAULT_HTTP_TIMEOUT_SEC
from backend_rwa.core.exceptions import StorageError
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)

AUDIT_BUCKET = "audit-documents"


@dataclass(frozen=True)
class FileStat:
    """Metadata of a stored object."""

    path: str
    size: int
    content_type: str | None = None

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)


class FileStorage(ABC):
    """Abstract object storage; missing objects are None/False, transport failures raise StorageError."""

    @abstractmethod
    def stat(self, bucket: str, path: str) -> FileStat | None:
        """Return metadata for bucket/path, or None if it does not exist."""
        ...

    @abstractmethod
    def download(self, bucket: str, path: str) -> bytes:
        """Return object content. Raises StorageError if missing or unreadable."""
        ...

    def exists(self, bucket: str, path: str) -> bool:
        return self.stat(bucket, path) is not None


def _normalize_key(path: str) -> str:
    """Strip leading slashes and reject traversal outside the bucket."""
    key = posixpath.normpath((path or "").replace("\\", "/")).lstrip("/")
    if not key or key == "." or key.startswith("../") or key == "..":
        raise StorageError(f"Invalid storage path: {path!r}")
    return key


class LocalFileStorage(FileStorage):
    """Buckets are subdirectories of root."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _resolve(self, bucket: str, path: str) -> Path:
        return self._root / bucket / _normalize_key(path)

    def stat(self, bucket: str, path: str) -> FileStat | None:
        target = self._resolve(bucket, path)
        if not target.is_file():
            return None
        content_type, _ = mimetypes.guess_type(target.name)
        return FileStat(path=_normalize_key(path), size=target.stat().st_size, content_type=content_type)

    def download(self, bucket: str, path: str) -> bytes:
        target = self._resolve(bucket, path)
        try:
            return target.read_bytes()
        except OSError as e:
            raise StorageError(f"Cannot read {bucket}/{path}: {e}") from e

    def put(self, bucket: str, path: str, content: bytes) -> FileStat:
        """Write an object (used by tools and tests; uploads normally happen elsewhere)."""
        target = self._resolve(bucket, path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        return FileStat(path=_normalize_key(path), size=len(content), content_type=mimetypes.guess_type(target.name)[0])


class SupabaseFileStorage(FileStorage):
    """Hosted storage over its REST API, authenticated with the service-role key."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        *,
        timeout_sec: float = DEFAULT_HTTP_TIMEOUT_SEC,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._timeout = httpx.Timeout(timeout_sec)
        self._http = http_client or httpx.Client(timeout=self._timeout)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
        }

    def _list(self, bucket: str, prefix: str, search: str) -> list[dict[str, Any]]:
        url = f"{self._base_url}/storage/v1/object/list/{bucket}"
        body = {"prefix": prefix, "search": search, "limit": 100, "offset": 0}
        try:
            r = self._http.post(url, json=body, headers=self._headers(), timeout=self._timeout)
            r.raise_for_status()
            data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("storage_list_failed", bucket=bucket, prefix=prefix, error=str(e))
            raise StorageError(f"Storage list failed for {bucket}/{prefix}{search}: {e}") from e
        return data if isinstance(data, list) else []

    def stat(self, bucket: str, path: str) -> FileStat | None:
        key = _normalize_key(path)
        prefix, name = posixpath.split(key)
        for entry in self._list(bucket, prefix, name):
            if entry.get("name") != name:
                continue
            metadata = entry.get("metadata") or {}
            try:
                size = int(metadata.get("size") or metadata.get("contentLength") or 0)
            except (TypeError, ValueError):
                size = 0
            return FileStat(path=key, size=size, content_type=metadata.get("mimetype"))
        return None

    def download(self, bucket: str, path: str) -> bytes:
        key = _normalize_key(path)
        url = f"{self._base_url}/storage/v1/object/{bucket}/{key}"
        try:
            r = self._http.get(url, headers=self._headers(), timeout=self._timeout)
            r.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("storage_download_failed", bucket=bucket, path=key, error=str(e))
            raise StorageError(f"Storage download failed for {bucket}/{key}: {e}") from e
        return r.content
