"""
FitGroup Backend — Tag Route Handlers
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fitgroup.config import settings
from fitgroup.database import get_db_session
from fitgroup.formatters import format_tag
from fitgroup.schemas.common import ErrorResponse, Page
from fitgroup.schemas.tag import TagResponse
from fitgroup.services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["Tags"])


@router.get("", response_model=Page[TagResponse], summary="List tags")
async def list_tags(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Page[TagResponse]:
    tags, total = await TagService(db).list_tags(page, limit)
    return Page[TagResponse](data=[format_tag(t) for t in tags], total=total)


@router.get(
    "/{tag_id}",
    response_model=TagResponse,
    responses={404: {"description": "Tag not found", "model": ErrorResponse}},
    summary="Get a tag",
)
async def get_tag(
    tag_id: int,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> TagResponse:
    tag = await TagService(db).get_tag(tag_id)
    return format_tag(tag)
