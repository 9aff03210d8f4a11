"""Attachment storage. Writes are not part of the database transaction."""

import logging
import uuid
from pathlib import Path
from typing import Optional, Protocol

from fastapi import UploadFile

from hr_portal.core.config import settings
from hr_portal.core.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({"pdf", "doc", "docx", "jpg", "jpeg", "png"})


class BlobStorage(Protocol):
    async def store(self, upload: UploadFile, folder: str, field: str = "document") -> str:
        ...

    async def delete(self, path: str) -> None:
        ...

    def url_for(self, path: Optional[str]) -> Optional[str]:
        ...


class LocalBlobStorage:
    """Stores files under a root directory; returned paths are relative to it."""

    def __init__(self, root: str, url_prefix: str = "/storage/", max_size_mb: int = 10) -> None:
        self.root = Path(root)
        self.url_prefix = url_prefix
        self.max_size_bytes = max_size_mb * 1024 * 1024

    def _validate(self, upload: UploadFile, field: str) -> str:
        filename = upload.filename or ""
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                "Validation failed",
                {field: [f"The {field} must be a file of type: {', '.join(sorted(ALLOWED_EXTENSIONS))}."]},
            )
        return ext

    async def store(self, upload: UploadFile, folder: str, field: str = "document") -> str:
        ext = self._validate(upload, field)
        content = await upload.read()
        if len(content) > self.max_size_bytes:
            raise ValidationError(
                "Validation failed",
                {field: [f"The {field} may not be greater than {self.max_size_bytes // 1024} kilobytes."]},
            )
        relative = f"{folder}/{uuid.uuid4().hex}.{ext}"
        target = self.root / relative
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            logger.exception("Could not write attachment %s", relative)
            raise StorageError("Could not store attachment") from e
        return relative

    async def delete(self, path: str) -> None:
        try:
            (self.root / path).unlink()
        except FileNotFoundError:
            logger.warning("Attachment %s already missing", path)
        except OSError:
            # Row is already gone; an orphaned file is tolerated
            logger.warning("Could not delete attachment %s", path, exc_info=True)

    def url_for(self, path: Optional[str]) -> Optional[str]:
        return f"{self.url_prefix}{path}" if path else None


def get_blob_storage() -> BlobStorage:
    return LocalBlobStorage(
        settings.upload_dir,
        url_prefix=settings.media_url_prefix,
        max_size_mb=settings.max_upload_size_mb,
    )


def has_upload(upload: Optional[UploadFile]) -> bool:
    # Browsers send an empty file part when no file was picked
    return upload is not None and bool(upload.filename)
