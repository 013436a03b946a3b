"""
Object storage used to verify uploaded audit documents.
"""

from backend_rwa.storage.file_storage import (
    AUDIT_BUCKET,
    FileStat,
    FileStorage,
    LocalFileStorage,
    SupabaseFileStorage,
)

__all__ = [
    "AUDIT_BUCKET",
    "FileStat",
    "FileStorage",
    "LocalFileStorage",
    "SupabaseFileStorage",
]
