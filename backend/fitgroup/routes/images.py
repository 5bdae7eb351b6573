"""
FitGroup Backend — Image Route Handlers
=======================================

What:  Multipart image upload and serving of stored images.
Who:   Clients upload group/record photos here first, then send the returned
       URLs in group and record bodies.

    POST /images              form field `files`, 1..MAX_UPLOAD_FILES images
    GET  /images/{filename}   the stored file
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import FileResponse

from fitgroup.schemas.common import ErrorResponse
from fitgroup.schemas.image import ImageUploadResponse
from fitgroup.services.file_service import file_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/images", tags=["Images"])


@router.post(
    "",
    response_model=ImageUploadResponse,
    responses={
        400: {"description": "No files, too many files, or a rejected file", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Upload images",
)
async def upload_images(
    files: Optional[List[UploadFile]] = File(default=None, description="Image files"),
) -> ImageUploadResponse:
    uploads = []
    for upload in files or []:
        content = await upload.read()
        uploads.append((upload.filename or "", upload.content_type, content))

    urls = await file_service.save_uploads(uploads)
    logger.info("Stored %d uploaded image(s)", len(urls))
    return ImageUploadResponse(urls=urls)


@router.get(
    "/{filename}",
    responses={404: {"description": "Image not found", "model": ErrorResponse}},
    summary="Serve an uploaded image",
)
async def serve_image(filename: str) -> FileResponse:
    path = file_service.resolve_path(filename)
    # Stored names are UUIDs, so content under a given URL never changes
    return FileResponse(path=path, headers={"Cache-Control": "public, max-age=86400"})
