"""
FitGroup Backend — Leaderboard Tests
====================================

What:  Window arithmetic, ordering rules and the grouped ranking query.

Test Strategy:
    ✅ Weekly window is exactly 7 days
    ✅ Monthly window clamps the day (leap and non-leap February, year wrap)
    ✅ Ordering: count desc, then time desc, then participant id
    ✅ Participants without records are kept with zeros
    ✅ Records outside the window are ignored
    ✅ Pagination slices the sorted list; total is the participant count
"""

from datetime import datetime, timedelta, timezone

import pytest

from fitgroup.exceptions import NotFoundError, ValidationError
from fitgroup.models import ExerciseType, Record
from fitgroup.models.enums import RankPeriod
from fitgroup.schemas.participant import ParticipantJoin
from fitgroup.schemas.ranking import RankingEntry
from fitgroup.services.membership_service import MembershipService
from fitgroup.services.ranking_service import (
    RankingService,
    parse_period,
    sort_rankings,
    subtract_month,
    window_start,
)

NOW = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)


class TestWindow:
    def test_weekly_window_is_seven_days(self):
        assert window_start(RankPeriod.WEEKLY, NOW) == NOW - timedelta(days=7)

    def test_monthly_window_leap_year_clamps_to_feb_29(self):
        start = window_start(RankPeriod.MONTHLY, NOW)
        assert start == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)

    def test_monthly_window_non_leap_year_clamps_to_feb_28(self):
        assert subtract_month(datetime(2023, 3, 31)) == datetime(2023, 2, 28)

    def test_monthly_window_wraps_year(self):
        assert subtract_month(datetime(2024, 1, 15)) == datetime(2023, 12, 15)

    def test_monthly_window_keeps_existing_day(self):
        assert subtract_month(datetime(2024, 5, 31, 8, 30)) == datetime(2024, 4, 30, 8, 30)
        assert subtract_month(datetime(2024, 7, 10)) == datetime(2024, 6, 10)

    def test_window_preserves_timezone(self):
        assert subtract_month(NOW).tzinfo is timezone.utc


class TestParsePeriod:
    def test_accepts_any_case(self):
        assert parse_period("weekly") is RankPeriod.WEEKLY
        assert parse_period("MONTHLY") is RankPeriod.MONTHLY
        assert parse_period(" Weekly ") is RankPeriod.WEEKLY

    def test_rejects_unknown_period(self):
        with pytest.raises(ValidationError, match="Invalid period"):
            parse_period("yearly")


class TestSortRankings:
    def test_count_then_time_then_input_order(self):
        entries = [
            RankingEntry(participant_id=1, nickname="a", record_count=2, record_time=30),
            RankingEntry(participant_id=2, nickname="b", record_count=4, record_time=20),
            RankingEntry(participant_id=3, nickname="c", record_count=2, record_time=40),
            RankingEntry(participant_id=4, nickname="d", record_count=2, record_time=30),
        ]
        ranked = sort_rankings(entries)
        assert [e.participant_id for e in ranked] == [2, 3, 1, 4]

    def test_adjacent_pairs_respect_ordering(self):
        entries = [
            RankingEntry(participant_id=i, nickname=str(i), record_count=c, record_time=t)
            for i, (c, t) in enumerate([(1, 5), (3, 1), (3, 9), (0, 0), (1, 7)], start=1)
        ]
        ranked = sort_rankings(entries)
        for a, b in zip(ranked, ranked[1:]):
            assert a.record_count > b.record_count or (
                a.record_count == b.record_count and a.record_time >= b.record_time
            )


async def _add_records(db_session, author_id, durations, created_at):
    for minutes in durations:
        db_session.add(
            Record(
                exercise_type=ExerciseType.RUN,
                time=minutes,
                distance=1.0,
                photos=["http://localhost:3001/images/x.jpg"],
                author_id=author_id,
                created_at=created_at,
            )
        )
    await db_session.flush()


class TestComputeRanking:
    @pytest.mark.asyncio
    async def test_weekly_scenario(self, db_session, make_group):
        group = await make_group()
        members = MembershipService(db_session)
        bob = await members.join(group.id, ParticipantJoin(nickname="bob", password="bobpass12"))
        carol = await members.join(group.id, ParticipantJoin(nickname="carol", password="carolpass1"))

        recent = NOW - timedelta(days=1)
        await _add_records(db_session, bob.id, [10, 20], recent)
        await _add_records(db_session, carol.id, [5, 5, 5, 5], recent)
        # Outside the weekly window
        await _add_records(db_session, bob.id, [100, 100, 100], NOW - timedelta(days=8))

        entries, total = await RankingService(db_session).compute_ranking(
            group.id, RankPeriod.WEEKLY, now=NOW
        )

        assert total == 3
        assert [(e.nickname, e.record_count, e.record_time) for e in entries] == [
            ("carol", 4, 20),
            ("bob", 2, 30),
            ("alice", 0, 0),
        ]

    @pytest.mark.asyncio
    async def test_monthly_window_includes_older_records(self, db_session, make_group):
        group = await make_group()
        owner_id = group.owner.id
        await _add_records(db_session, owner_id, [15], NOW - timedelta(days=20))
        # Before 2024-02-29T12:00
        await _add_records(db_session, owner_id, [15], datetime(2024, 2, 29, 11, 0, tzinfo=timezone.utc))

        service = RankingService(db_session)
        weekly, _ = await service.compute_ranking(group.id, RankPeriod.WEEKLY, now=NOW)
        monthly, _ = await service.compute_ranking(group.id, RankPeriod.MONTHLY, now=NOW)

        assert weekly[0].record_count == 0
        assert monthly[0].record_count == 1
        assert monthly[0].record_time == 15

    @pytest.mark.asyncio
    async def test_pagination_and_total(self, db_session, make_group):
        group = await make_group()
        members = MembershipService(db_session)
        for i in range(4):
            await members.join(group.id, ParticipantJoin(nickname=f"m{i}", password="memberpass"))

        page_two, total = await RankingService(db_session).compute_ranking(
            group.id, RankPeriod.WEEKLY, page=2, limit=2, now=NOW
        )

        assert total == 5
        assert len(page_two) == 2
        # All counts tie at zero, so participant id order decides
        assert [e.nickname for e in page_two] == ["m1", "m2"]

    @pytest.mark.asyncio
    async def test_other_groups_records_are_not_counted(self, db_session, make_group):
        first = await make_group(name="First")
        second = await make_group(name="Second")
        await _add_records(db_session, second.owner.id, [30, 30], NOW - timedelta(hours=1))

        entries, total = await RankingService(db_session).compute_ranking(
            first.id, RankPeriod.WEEKLY, now=NOW
        )

        assert total == 1
        assert entries[0].record_count == 0

    @pytest.mark.asyncio
    async def test_missing_group(self, db_session):
        with pytest.raises(NotFoundError):
            await RankingService(db_session).compute_ranking(999, RankPeriod.WEEKLY, now=NOW)
