"""
FitGroup Backend — Record Route Handlers
========================================

What:  List, create and fetch exercise records of a group.
Why:   Creating a record is the one write with an outbound side effect: when
       the group has a webhook URL, a notification is queued as a background
       task. The session dependency is function-scoped, so the record is
       committed before the response is sent and before the task runs. A
       slow or failing webhook never delays or undoes the record.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fitgroup.config import settings
from fitgroup.database import get_db_session
from fitgroup.formatters import format_record
from fitgroup.schemas.common import ErrorResponse, Page
from fitgroup.schemas.record import RecordCreate, RecordResponse
from fitgroup.services.record_service import RecordService
from fitgroup.services.webhook_service import build_record_notification, webhook_notifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["Records"])


@router.get(
    "/{group_id}/records",
    response_model=Page[RecordResponse],
    responses={404: {"description": "Group not found", "model": ErrorResponse}},
    summary="List a group's records",
)
async def list_records(
    group_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    order: str = Query(default="desc", description="'asc' or 'desc'"),
    order_by: str = Query(default="createdAt", alias="orderBy", description="'createdAt' or 'time'"),
    search: str = Query(default="", description="Case-insensitive author nickname filter"),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Page[RecordResponse]:
    records, total = await RecordService(db).list_records(
        group_id,
        page=page,
        limit=limit,
        order=order,
        order_by=order_by,
        search=search,
    )
    return Page[RecordResponse](data=[format_record(r) for r in records], total=total)


@router.post(
    "/{group_id}/records",
    response_model=RecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        403: {"description": "Not a participant of this group", "model": ErrorResponse},
        404: {"description": "Group not found", "model": ErrorResponse},
    },
    summary="Create a record",
)
async def create_record(
    group_id: int,
    body: RecordCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> RecordResponse:
    record, group = await RecordService(db).create_record(group_id, body)

    if group.discord_webhook_url:
        # Payload is built now, while the entities are known to be loaded
        payload = build_record_notification(group.name, record)
        background_tasks.add_task(
            webhook_notifier.notify_record_created,
            group.discord_webhook_url,
            payload,
        )
        logger.debug("Queued webhook notification for record %s", record.id)

    return format_record(record)


@router.get(
    "/{group_id}/records/{record_id}",
    response_model=RecordResponse,
    responses={404: {"description": "Record not found", "model": ErrorResponse}},
    summary="Get a record",
)
async def get_record(
    group_id: int,
    record_id: int,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> RecordResponse:
    record = await RecordService(db).get_record(group_id, record_id)
    return format_record(record)
