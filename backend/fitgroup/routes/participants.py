"""
FitGroup Backend — Participant Route Handlers
=============================================

    POST   /groups/{id}/participants   join   (201)
    DELETE /groups/{id}/participants   leave  (204)
"""

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from fitgroup.database import get_db_session
from fitgroup.formatters import format_participant
from fitgroup.schemas.common import ErrorResponse
from fitgroup.schemas.participant import ParticipantJoin, ParticipantLeave, ParticipantResponse
from fitgroup.services.membership_service import MembershipService

router = APIRouter(prefix="/groups", tags=["Participants"])


@router.post(
    "/{group_id}/participants",
    response_model=ParticipantResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid input or nickname taken", "model": ErrorResponse},
        404: {"description": "Group not found", "model": ErrorResponse},
    },
    summary="Join a group",
)
async def join_group(
    group_id: int,
    body: ParticipantJoin,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> ParticipantResponse:
    participant = await MembershipService(db).join(group_id, body)
    return format_participant(participant)


@router.delete(
    "/{group_id}/participants",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        401: {"description": "Wrong password", "model": ErrorResponse},
        403: {"description": "The owner cannot leave", "model": ErrorResponse},
        404: {"description": "Group or participant not found", "model": ErrorResponse},
    },
    summary="Leave a group",
    description="Removes the participant and all of their records.",
)
async def leave_group(
    group_id: int,
    body: ParticipantLeave = Body(...),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Response:
    await MembershipService(db).leave(group_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
