"""
FitGroup Backend — Tag Schemas
"""

from typing import Annotated

from pydantic import Field, StringConstraints

from fitgroup.schemas.common import CamelModel

# 1-30 characters after trimming surrounding whitespace
TagName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]


class TagResponse(CamelModel):
    id: int
    name: str
    created_at: int = Field(description="Epoch milliseconds")
    updated_at: int = Field(description="Epoch milliseconds")
