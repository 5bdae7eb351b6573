"""
FitGroup Backend — Group Route Handlers
=======================================

What:  Group CRUD, likes and the leaderboard.
How:   Thin handlers: parse the request, call the service with the request's
       session, format the result. The session dependency commits after the
       handler returns, or rolls back if anything raised.

Endpoints:
    GET    /groups                 list / search / paginate
    POST   /groups                 create group + owner        (201)
    GET    /groups/{id}            detail
    PATCH  /groups/{id}            update (owner password)
    DELETE /groups/{id}            delete (owner password)     (204)
    POST   /groups/{id}/likes      like +1                     (201)
    DELETE /groups/{id}/likes      like -1
    GET    /groups/{id}/rank       leaderboard
"""

import logging

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from fitgroup.config import settings
from fitgroup.database import get_db_session
from fitgroup.formatters import format_group
from fitgroup.schemas.common import ErrorResponse, Page
from fitgroup.schemas.group import GroupCreate, GroupDelete, GroupResponse, GroupUpdate
from fitgroup.schemas.ranking import RankingEntry
from fitgroup.services.group_service import GroupService
from fitgroup.services.ranking_service import RankingService, parse_period

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["Groups"])

ERROR_RESPONSES = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    404: {"description": "Group not found", "model": ErrorResponse},
}
OWNER_ERROR_RESPONSES = {
    **ERROR_RESPONSES,
    401: {"description": "Wrong owner password", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=Page[GroupResponse],
    summary="List groups",
    description="Paginated group list with name search and sorting.",
)
async def list_groups(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    order: str = Query(default="desc", description="'asc' or 'desc'"),
    order_by: str = Query(
        default="createdAt",
        alias="orderBy",
        description="'createdAt', 'likeCount' or 'participantCount'",
    ),
    search: str = Query(default="", description="Case-insensitive group name filter"),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Page[GroupResponse]:
    groups, total = await GroupService(db).list_groups(
        page=page,
        limit=limit,
        order=order,
        order_by=order_by,
        search=search,
    )
    return Page[GroupResponse](data=[format_group(g) for g in groups], total=total)


@router.post(
    "",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: ERROR_RESPONSES[400]},
    summary="Create a group",
    description="Creates a group together with its owner participant and tags.",
)
async def create_group(
    body: GroupCreate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> GroupResponse:
    group = await GroupService(db).create_group(body)
    return format_group(group)


@router.get(
    "/{group_id}",
    response_model=GroupResponse,
    responses={404: ERROR_RESPONSES[404]},
    summary="Get a group",
)
async def get_group(
    group_id: int,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> GroupResponse:
    group = await GroupService(db).get_full_group(group_id)
    return format_group(group)


@router.patch(
    "/{group_id}",
    response_model=GroupResponse,
    responses=OWNER_ERROR_RESPONSES,
    summary="Update a group",
    description=(
        "Requires `ownerPassword`. Only supplied fields change; supplying "
        "`tags` replaces the whole tag set."
    ),
)
async def update_group(
    group_id: int,
    body: GroupUpdate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> GroupResponse:
    group = await GroupService(db).update_group(group_id, body)
    return format_group(group)


@router.delete(
    "/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=OWNER_ERROR_RESPONSES,
    summary="Delete a group",
    description="Deletes the group with its participants, records, badges and tag links.",
)
async def delete_group(
    group_id: int,
    body: GroupDelete = Body(...),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Response:
    await GroupService(db).delete_group(group_id, body.owner_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{group_id}/likes",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: ERROR_RESPONSES[404]},
    summary="Like a group",
)
async def like_group(
    group_id: int,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> GroupResponse:
    group = await GroupService(db).like(group_id)
    return format_group(group)


@router.delete(
    "/{group_id}/likes",
    response_model=GroupResponse,
    responses={404: ERROR_RESPONSES[404]},
    summary="Remove a like from a group",
)
async def unlike_group(
    group_id: int,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> GroupResponse:
    group = await GroupService(db).unlike(group_id)
    return format_group(group)


@router.get(
    "/{group_id}/rank",
    response_model=Page[RankingEntry],
    responses=ERROR_RESPONSES,
    summary="Group leaderboard",
    description=(
        "Ranks participants by number of records, then total time, inside a "
        "trailing weekly or monthly window."
    ),
)
async def get_rank(
    group_id: int,
    period: str = Query(default="weekly", description="'weekly' or 'monthly'"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Page[RankingEntry]:
    entries, total = await RankingService(db).compute_ranking(
        group_id,
        parse_period(period),
        page=page,
        limit=limit,
    )
    return Page[RankingEntry](data=entries, total=total)
