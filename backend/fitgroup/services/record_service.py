"""
FitGroup Backend — Record Service
=================================

What:  List, create and fetch exercise records within a group.
Why:   Records are authored by participants, so creating one re-checks the
       author's nickname and password against the group's membership.
How:   Records are scoped to a group through their author. Listing joins the
       author once and reuses that join for the nickname search, the
       ordering and the eager-loaded `author` relationship.
"""

import logging
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from fitgroup.exceptions import ForbiddenError, NotFoundError, ValidationError
from fitgroup.models import Group, Participant, Record
from fitgroup.schemas.record import RecordCreate
from fitgroup.services.credentials import password_matches
from fitgroup.services.group_service import resolve_direction

logger = logging.getLogger(__name__)

RECORD_SORT_COLUMNS = {
    "createdAt": Record.created_at,
    "time": Record.time,
}


class RecordService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_records(
        self,
        group_id: int,
        page: int = 1,
        limit: int = 10,
        order: str = "desc",
        order_by: str = "createdAt",
        search: str = "",
    ) -> Tuple[List[Record], int]:
        """
        List a group's records with offset pagination.

        Args:
            order_by: 'createdAt' or 'time'
            search:   case-insensitive substring of the author's nickname

        Returns:
            (records on the page with `author` loaded, total matching records)
        """
        await self._get_group(group_id)

        direction = resolve_direction(order)
        sort_column = RECORD_SORT_COLUMNS.get(order_by)
        if sort_column is None:
            raise ValidationError(
                message="The orderBy parameter must be one of the following values: ['time', 'createdAt'].",
                field="orderBy",
            )

        filters = [Participant.group_id == group_id]
        if search:
            filters.append(Participant.nickname.icontains(search, autoescape=True))

        offset = (page - 1) * limit
        result = await self.db.execute(
            select(Record)
            .join(Record.author)
            .where(*filters)
            .options(contains_eager(Record.author))
            .order_by(direction(sort_column), direction(Record.id))
            .offset(offset)
            .limit(limit)
        )
        records = list(result.scalars().all())

        count_result = await self.db.execute(
            select(func.count(Record.id)).join(Record.author).where(*filters)
        )
        total = count_result.scalar() or 0
        return records, total

    async def create_record(self, group_id: int, data: RecordCreate) -> Tuple[Record, Group]:
        """
        Log a record for a participant of the group.

        Returns:
            (the new record with `author` set, the group it belongs to).
            The group is returned so the caller can schedule the webhook.

        Raises:
            NotFoundError: group does not exist
            ForbiddenError: no participant matches nickname and password (→ 403)
        """
        group = await self._get_group(group_id)

        result = await self.db.execute(
            select(Participant).where(
                Participant.group_id == group_id,
                Participant.nickname == data.author_nickname,
            )
        )
        author = result.scalar_one_or_none()
        if author is None or not password_matches(author.password, data.author_password):
            raise ForbiddenError(
                message="Only participants of this group can create records",
                context={"group_id": group_id},
            )

        record = Record(
            exercise_type=data.exercise_type,
            description=data.description or None,
            time=data.time,
            distance=data.distance,
            photos=list(data.photos),
        )
        record.author = author
        self.db.add(record)
        await self.db.flush()

        logger.info(
            "Record %s created in group %s by '%s' (%s, %d min)",
            record.id,
            group_id,
            author.nickname,
            record.exercise_type.value,
            record.time,
        )
        return record, group

    async def get_record(self, group_id: int, record_id: int) -> Record:
        """
        Fetch one record of a group.

        Raises:
            NotFoundError: record missing or belonging to another group
        """
        result = await self.db.execute(
            select(Record)
            .join(Record.author)
            .where(Record.id == record_id, Participant.group_id == group_id)
            .options(contains_eager(Record.author))
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(resource="record", resource_id=record_id)
        return record

    async def _get_group(self, group_id: int) -> Group:
        result = await self.db.execute(select(Group).where(Group.id == group_id))
        group = result.scalar_one_or_none()
        if group is None:
            raise NotFoundError(resource="group", resource_id=group_id)
        return group
