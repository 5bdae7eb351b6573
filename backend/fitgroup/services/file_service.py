"""
FitGroup Backend — Image Storage Service
========================================

What:  Validates, stores and serves uploaded images (group and record photos).
Why:   Centralizes all file system operations with security checks.
How:   Validates content type, extension, size and the real image type read
       from the file header, then writes the bytes under UPLOAD_DIR with a
       UUID filename and returns a public URL.
Who:   Called by the /images routes.

Security Model:
    1. Content type check: the multipart part must declare an image/* type
    2. Extension check:    only common web image formats are accepted
    3. Size check:         empty files and files over MAX_FILE_SIZE are refused
    4. Content check:      libmagic reads the header bytes, so a renamed
                           non-image is refused whatever it claims to be
    5. UUID filename:      stored names carry no user input
    6. Serving:            requested names are resolved inside UPLOAD_DIR only,
                           so `../` style traversal is rejected
"""

import logging
import os
import uuid
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import aiofiles
import magic

from fitgroup.config import settings
from fitgroup.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {"image/png", "image/jpeg", "image/gif", "image/webp"}
ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


class FileService:
    """
    Manages the upload → validate → store lifecycle of image files.

    Directory Structure:
        uploads/
        ├── 3f2b8c1e-....jpg
        └── 9a7d41f0-....png

    The layout is flat because stored names are served back verbatim as
    `/images/{filename}`.
    """

    def __init__(self, upload_dir: Optional[str] = None, base_url: Optional[str] = None):
        """
        Args:
            upload_dir: Override the storage directory (used in tests).
            base_url:   Override the public image URL prefix.
        """
        self.upload_dir = Path(upload_dir or settings.upload_dir).resolve()
        self.base_url = (base_url or settings.image_base_url).rstrip("/")

    def ensure_upload_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def validate_content_type(self, content_type: Optional[str]) -> None:
        if not content_type or not content_type.lower().startswith("image/"):
            raise ValidationError(
                message="Only image files are allowed",
                field="files",
                context={"content_type": content_type},
            )

    def validate_extension(self, filename: str) -> str:
        """
        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if the extension is not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="files",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, actual_size: int) -> None:
        max_mb = settings.max_file_size / (1024 * 1024)
        if actual_size == 0:
            raise ValidationError(message="Uploaded file is empty", field="files")
        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=(
                    f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds "
                    f"maximum of {max_mb:.0f}MB."
                ),
                field="files",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def validate_mime_type(self, content: bytes) -> str:
        """
        Detect the real file type from its header bytes.

        The declared content type and the extension are both chosen by the
        client; libmagic matches the leading bytes against known signatures
        (JPEG starts with FF D8 FF, PNG with 89 50 4E 47).

        Returns: detected MIME type (e.g. "image/jpeg")
        Raises:  ValidationError if the content is not an allowed image
        """
        mime_type = magic.from_buffer(content[:2048], mime=True)
        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message=(
                    f"File content type '{mime_type}' is not supported. "
                    "The file must be a valid image."
                ),
                field="files",
                context={"detected_type": mime_type, "allowed": sorted(ALLOWED_MIME_TYPES)},
            )
        return mime_type

    async def store_file(self, content: bytes, extension: str) -> str:
        """
        Write validated content to disk under a fresh UUID name.

        Returns: the stored filename (relative to the upload directory)

        Raises:
            FileStorageError if the directory or file cannot be written
        """
        filename = f"{uuid.uuid4()}{extension}"
        path = self.upload_dir / filename
        try:
            self.ensure_upload_dir()
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", filename, len(content))
        return filename

    async def cleanup_file(self, filename: str) -> None:
        """
        Remove a stored file, used to roll back a partially failed batch.

        Best-effort: a failure is logged, not raised, because the caller is
        already reporting the original error.
        """
        path = self.upload_dir / filename
        try:
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", filename)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", filename, str(e))

    async def validate_and_store(
        self,
        filename: str,
        content_type: Optional[str],
        content: bytes,
    ) -> str:
        """
        Validate one upload and store it; cheap checks run first.

        Returns: the stored filename
        """
        self.validate_content_type(content_type)
        ext = self.validate_extension(filename or "")
        self.validate_size(len(content))
        self.validate_mime_type(content)
        return await self.store_file(content, ext)

    async def save_uploads(self, files: Sequence[Tuple[str, Optional[str], bytes]]) -> List[str]:
        """
        Validate and store a batch of uploads, returning their public URLs.

        Args:
            files: (original filename, declared content type, bytes) per file

        The batch is all-or-nothing: if any file fails, files already
        written for this batch are removed before the error propagates.

        Raises:
            ValidationError: no files, too many files, or a file is rejected
            FileStorageError: disk write failure
        """
        if not files:
            raise ValidationError(message="No files uploaded", field="files")
        if len(files) > settings.max_upload_files:
            raise ValidationError(
                message=f"At most {settings.max_upload_files} files can be uploaded at once",
                field="files",
                context={"count": len(files)},
            )

        stored: List[str] = []
        try:
            for filename, content_type, content in files:
                stored.append(await self.validate_and_store(filename, content_type, content))
        except Exception:
            for name in stored:
                await self.cleanup_file(name)
            raise

        return [f"{self.base_url}/{name}" for name in stored]

    def resolve_path(self, filename: str) -> Path:
        """
        Map a requested filename to a stored file.

        Raises:
            ValidationError: the name escapes the upload directory
            NotFoundError: no such file
        """
        path = (self.upload_dir / filename).resolve()
        if path.parent != self.upload_dir:
            raise ValidationError(message="Invalid file name", field="filename")
        if not path.is_file():
            raise NotFoundError(resource="image", resource_id=filename)
        return path


# ── Singleton Instance ────────────────────────────────────────────────────
# Storage root doesn't change; no per-request state needed
file_service = FileService()
