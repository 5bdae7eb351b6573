"""
FitGroup Backend — Image Storage Unit Tests
===========================================

What:  Tests for FileService validation, storage and serving.
Why:   File upload is a security boundary.
How:   Each test uses a temporary upload directory.

Test Strategy:
    ✅ Allowed extensions (.jpg, .jpeg, .png, .gif, .webp), case-insensitive
    ✅ Rejected extensions and non-image content types
    ✅ Real file type read from header bytes (renamed non-images rejected)
    ✅ Empty files and files over MAX_FILE_SIZE
    ✅ UUID filenames and public URLs
    ✅ Batch is all-or-nothing
    ✅ Path traversal rejected when serving
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from fitgroup.config import settings
from fitgroup.exceptions import NotFoundError, ValidationError
from fitgroup.services.file_service import FileService

BASE_URL = "http://localhost:3001/images"


class TestFileValidation:
    def setup_method(self):
        self.service = FileService(upload_dir="unused", base_url=BASE_URL)

    @pytest.mark.parametrize("name", ["photo.jpg", "photo.jpeg", "photo.png", "a.gif", "b.webp"])
    def test_allowed_extensions(self, name):
        assert self.service.validate_extension(name) == Path(name).suffix

    def test_extension_is_case_insensitive(self):
        assert self.service.validate_extension("photo.JPG") == ".jpg"
        assert self.service.validate_extension("photo.Png") == ".png"

    @pytest.mark.parametrize("name", ["document.pdf", "malware.exe", "noextension"])
    def test_rejected_extensions(self, name):
        with pytest.raises(ValidationError, match="not supported"):
            self.service.validate_extension(name)

    @pytest.mark.parametrize("content_type", [None, "", "text/plain", "application/pdf"])
    def test_non_image_content_type_rejected(self, content_type):
        with pytest.raises(ValidationError, match="Only image files"):
            self.service.validate_content_type(content_type)

    def test_image_content_type_accepted(self):
        self.service.validate_content_type("image/jpeg")
        self.service.validate_content_type("IMAGE/PNG")

    def test_empty_file_rejected(self):
        with pytest.raises(ValidationError, match="empty"):
            self.service.validate_size(0)

    def test_size_at_limit_accepted(self):
        self.service.validate_size(settings.max_file_size)

    def test_size_over_limit_rejected(self):
        with pytest.raises(ValidationError, match="exceeds maximum"):
            self.service.validate_size(settings.max_file_size + 1)

    def test_real_image_content_accepted(self, sample_image_bytes):
        assert self.service.validate_mime_type(sample_image_bytes) == "image/jpeg"

    @pytest.mark.parametrize(
        "content",
        [
            b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n",
            b"hello world, this is plain text and not an image\n",
        ],
    )
    def test_non_image_content_rejected(self, content):
        with pytest.raises(ValidationError, match="must be a valid image"):
            self.service.validate_mime_type(content)


class TestFileStorage:
    @pytest.mark.asyncio
    async def test_save_uploads_returns_urls(self, temp_storage, sample_image_bytes):
        service = FileService(upload_dir=temp_storage, base_url=BASE_URL)

        urls = await service.save_uploads([("run.jpg", "image/jpeg", sample_image_bytes)])

        assert len(urls) == 1
        assert urls[0].startswith(f"{BASE_URL}/")
        filename = urls[0].rsplit("/", 1)[1]
        assert filename.endswith(".jpg")
        assert filename != "run.jpg"
        assert (Path(temp_storage) / filename).read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_no_files_rejected(self, temp_storage):
        service = FileService(upload_dir=temp_storage, base_url=BASE_URL)

        with pytest.raises(ValidationError, match="No files"):
            await service.save_uploads([])

    @pytest.mark.asyncio
    async def test_too_many_files_rejected(self, temp_storage, sample_image_bytes):
        service = FileService(upload_dir=temp_storage, base_url=BASE_URL)
        files = [("p.png", "image/png", sample_image_bytes)] * (settings.max_upload_files + 1)

        with pytest.raises(ValidationError, match="At most"):
            await service.save_uploads(files)

    @pytest.mark.asyncio
    async def test_batch_is_all_or_nothing(self, temp_storage, sample_image_bytes):
        service = FileService(upload_dir=temp_storage, base_url=BASE_URL)
        files = [
            ("ok.png", "image/png", sample_image_bytes),
            ("bad.pdf", "application/pdf", b"%PDF"),
        ]

        with pytest.raises(ValidationError):
            await service.save_uploads(files)

        assert list(Path(temp_storage).iterdir()) == []

    @pytest.mark.asyncio
    async def test_renamed_non_image_not_stored(self, temp_storage):
        service = FileService(upload_dir=temp_storage, base_url=BASE_URL)
        files = [("evil.png", "image/png", b"#!/bin/sh\necho not an image\n")]

        with pytest.raises(ValidationError, match="must be a valid image"):
            await service.save_uploads(files)

        assert list(Path(temp_storage).iterdir()) == []

    @pytest.mark.asyncio
    async def test_write_failure_raises_storage_error(self, temp_storage, sample_image_bytes):
        from fitgroup.exceptions import FileStorageError

        service = FileService(upload_dir=temp_storage, base_url=BASE_URL)

        with patch("fitgroup.services.file_service.aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(FileStorageError):
                await service.save_uploads([("p.png", "image/png", sample_image_bytes)])


class TestResolvePath:
    @pytest.mark.asyncio
    async def test_resolves_stored_file(self, temp_storage, sample_image_bytes):
        service = FileService(upload_dir=temp_storage, base_url=BASE_URL)
        url = (await service.save_uploads([("p.png", "image/png", sample_image_bytes)]))[0]
        filename = url.rsplit("/", 1)[1]

        assert service.resolve_path(filename).read_bytes() == sample_image_bytes

    def test_missing_file(self, temp_storage):
        service = FileService(upload_dir=temp_storage, base_url=BASE_URL)

        with pytest.raises(NotFoundError):
            service.resolve_path("does-not-exist.png")

    def test_traversal_rejected(self, temp_storage):
        service = FileService(upload_dir=temp_storage, base_url=BASE_URL)

        with pytest.raises(ValidationError):
            service.resolve_path("../secrets.txt")
