import os

from .filesystem_storage import FileSystemStorage
from .upload_storage import UploadStorage

# Root directory for uploaded files, also mounted for static serving
UPLOADS_DIR: str = os.getenv("UPLOADS_DIR", "./uploads")


def get_storage_backend() -> UploadStorage:
    """
    Factory for upload storage based on STORAGE_BACKEND env var.
    Defaults to FileSystemStorage rooted at UPLOADS_DIR.

    Supported values (case-insensitive):
      - 'filesystem'
    """
    backend = os.getenv("STORAGE_BACKEND", "filesystem").lower()
    if backend in ("filesystem", ""):  # default
        return FileSystemStorage(base_path=UPLOADS_DIR)
    error_message = f"Unknown storage backend: {backend}"
    raise ValueError(error_message)


__all__ = [
    "UPLOADS_DIR",
    "FileSystemStorage",
    "UploadStorage",
    "get_storage_backend",
]
