"""
FitGroup Backend — Leaderboard Computation Service
==================================================

What:  Ranks a group's participants by activity inside a trailing window.
Why:   The leaderboard is the main motivational surface of a group, so its
       ordering must be deterministic and its window must be well-defined on
       month boundaries.
How:   1. Compute the window start from `now` (weekly: 7 days back; monthly:
          one calendar month back, day clamped to the month's length)
       2. One grouped query: participants LEFT OUTER JOIN qualifying records,
          so participants without records are kept with zeros
       3. Sort in Python (count desc, time desc, participant id asc)
       4. Slice the requested page out of the sorted list

Ordering Rules:
    recordCount desc → recordTime desc → participant id asc

    The query returns rows ordered by participant id, and Python's sort is
    stable, so the last tie-break comes for free.

Pure read: nothing in this module writes to the database.
"""

import calendar
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fitgroup.exceptions import NotFoundError, ValidationError
from fitgroup.models import Group, Participant, Record
from fitgroup.models.enums import RankPeriod
from fitgroup.schemas.ranking import RankingEntry

logger = logging.getLogger(__name__)

WEEK = timedelta(days=7)


def subtract_month(moment: datetime) -> datetime:
    """
    Step back one calendar month, clamping the day to the target month.

    >>> subtract_month(datetime(2024, 3, 31))
    datetime.datetime(2024, 2, 29, 0, 0)
    >>> subtract_month(datetime(2024, 1, 15))
    datetime.datetime(2023, 12, 15, 0, 0)
    """
    year, month = moment.year, moment.month - 1
    if month == 0:
        year, month = year - 1, 12
    last_day = calendar.monthrange(year, month)[1]
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))


def window_start(period: RankPeriod, now: datetime) -> datetime:
    """Inclusive lower bound of the ranking window ending at `now`."""
    if period is RankPeriod.WEEKLY:
        return now - WEEK
    return subtract_month(now)


def parse_period(value: str) -> RankPeriod:
    """Parse the `period` query parameter, case-insensitively."""
    try:
        return RankPeriod(value.strip().lower())
    except ValueError:
        raise ValidationError(
            message="Invalid period. Use 'weekly' or 'monthly'.",
            field="period",
        )


def sort_rankings(entries: Sequence[RankingEntry]) -> List[RankingEntry]:
    """Order entries by count, then time, both descending (stable)."""
    return sorted(entries, key=lambda e: (-e.record_count, -e.record_time))


class RankingService:
    """Leaderboard queries for a single group."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def compute_ranking(
        self,
        group_id: int,
        period: RankPeriod,
        page: int = 1,
        limit: int = 10,
        now: Optional[datetime] = None,
    ) -> Tuple[List[RankingEntry], int]:
        """
        Rank every participant of a group for the given period.

        Args:
            group_id: Group to rank
            period:   weekly or monthly trailing window
            page, limit: pagination over the sorted list
            now:      window end (defaults to the current UTC time)

        Returns:
            (entries on the page, number of participants in the group)

        Raises:
            NotFoundError: group does not exist
        """
        exists = await self.db.execute(select(Group.id).where(Group.id == group_id))
        if exists.scalar_one_or_none() is None:
            raise NotFoundError(resource="group", resource_id=group_id)

        now = now or datetime.now(timezone.utc)
        since = window_start(period, now)

        record_count = func.count(Record.id)
        record_time = func.coalesce(func.sum(Record.time), 0)
        result = await self.db.execute(
            select(Participant.id, Participant.nickname, record_count, record_time)
            .outerjoin(
                Record,
                and_(Record.author_id == Participant.id, Record.created_at >= since),
            )
            .where(Participant.group_id == group_id)
            .group_by(Participant.id, Participant.nickname)
            .order_by(Participant.id)
        )

        entries = [
            RankingEntry(
                participant_id=participant_id,
                nickname=nickname,
                record_count=count,
                record_time=int(total_time),
            )
            for participant_id, nickname, count, total_time in result.all()
        ]
        ranked = sort_rankings(entries)

        offset = (page - 1) * limit
        logger.debug(
            "Ranked %d participant(s) of group %s (%s, since %s)",
            len(ranked),
            group_id,
            period.value,
            since.isoformat(),
        )
        return ranked[offset:offset + limit], len(ranked)
