"""
FitGroup Backend — Image Upload Schemas
"""

from typing import List

from pydantic import Field

from fitgroup.schemas.common import CamelModel


class ImageUploadResponse(CamelModel):
    urls: List[str] = Field(description="Public URLs of the stored images, in upload order")
