"""
FitGroup Backend — Membership Service
=====================================

What:  Join and leave operations for group participants.
Why:   Keeps the membership rules in one place:
       - nicknames are unique within a group (different groups may reuse one)
       - the owner can never leave; the group must be deleted instead
       - leaving removes the participant's records as well
How:   Check-then-insert for a friendly error message, backed by the
       (group_id, nickname) unique constraint for concurrent joins.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitgroup.exceptions import ConflictError, ForbiddenError, NotFoundError
from fitgroup.models import Group, Participant, Record
from fitgroup.schemas.participant import ParticipantJoin, ParticipantLeave
from fitgroup.services.credentials import verify_participant_password

logger = logging.getLogger(__name__)


class MembershipService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def join(self, group_id: int, data: ParticipantJoin) -> Participant:
        """
        Add a non-owner participant to a group.

        Raises:
            NotFoundError: group does not exist
            ConflictError: nickname already used in this group (→ 400)
        """
        await self._ensure_group(group_id)

        existing = await self._find_participant(group_id, data.nickname)
        if existing is not None:
            raise ConflictError(
                message="Already joined the group",
                context={"group_id": group_id, "nickname": data.nickname},
            )

        participant = Participant(
            nickname=data.nickname,
            password=data.password,
            is_owner=False,
            group_id=group_id,
        )
        self.db.add(participant)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent join using the same nickname
            raise ConflictError(
                message="Already joined the group",
                context={"group_id": group_id, "nickname": data.nickname},
            ) from e

        logger.info("Participant '%s' joined group %s", participant.nickname, group_id)
        return participant

    async def leave(self, group_id: int, data: ParticipantLeave) -> None:
        """
        Remove a participant and all of their records.

        The owner check comes before the password check: an owner is refused
        with 403 whatever password was sent.

        Raises:
            NotFoundError: group or participant does not exist
            ForbiddenError: the participant is the owner
            AuthorizationError: password mismatch (→ 401)
        """
        await self._ensure_group(group_id)

        participant = await self._find_participant(group_id, data.nickname)
        if participant is None:
            raise NotFoundError(resource="participant", resource_id=data.nickname)
        if participant.is_owner:
            raise ForbiddenError(message="Owner cannot leave the group")

        verify_participant_password(participant, data.password)

        await self.db.execute(delete(Record).where(Record.author_id == participant.id))
        await self.db.execute(delete(Participant).where(Participant.id == participant.id))
        logger.info("Participant '%s' left group %s", data.nickname, group_id)

    async def _ensure_group(self, group_id: int) -> None:
        result = await self.db.execute(select(Group.id).where(Group.id == group_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="group", resource_id=group_id)

    async def _find_participant(self, group_id: int, nickname: str):
        result = await self.db.execute(
            select(Participant).where(
                Participant.group_id == group_id,
                Participant.nickname == nickname,
            )
        )
        return result.scalar_one_or_none()
