"""
FitGroup Backend — Record Service Tests
=======================================

What:  Record creation rules and listing.

Test Strategy:
    ✅ Only participants (nickname + password) may create records
    ✅ Exercise kind accepted in any case
    ✅ Records are scoped to their group
    ✅ Listing: nickname search, ordering by time, pagination
"""

import pytest

from fitgroup.exceptions import ForbiddenError, NotFoundError, ValidationError
from fitgroup.models import ExerciseType
from fitgroup.schemas.participant import ParticipantJoin
from fitgroup.schemas.record import RecordCreate
from fitgroup.services.membership_service import MembershipService
from fitgroup.services.record_service import RecordService

from conftest import OWNER_PASSWORD

PHOTO = "http://localhost:3001/images/photo.jpg"


def record_body(nickname="alice", password=OWNER_PASSWORD, **overrides):
    body = {
        "author_nickname": nickname,
        "author_password": password,
        "exercise_type": "run",
        "time": 30,
        "distance": 5.0,
        "photos": [PHOTO],
    }
    body.update(overrides)
    return RecordCreate(**body)


class TestCreateRecord:
    @pytest.mark.asyncio
    async def test_participant_creates_record(self, db_session, make_group):
        group = await make_group()

        record, owning_group = await RecordService(db_session).create_record(
            group.id, record_body(exercise_type="Bike", description="hills")
        )

        assert record.id is not None
        assert record.exercise_type is ExerciseType.BIKE
        assert record.author.nickname == "alice"
        assert record.description == "hills"
        assert owning_group.id == group.id

    @pytest.mark.asyncio
    async def test_empty_description_stored_as_null(self, db_session, make_group):
        group = await make_group()

        record, _ = await RecordService(db_session).create_record(
            group.id, record_body(description="")
        )

        assert record.description is None

    @pytest.mark.asyncio
    async def test_non_participant_is_forbidden(self, db_session, make_group):
        group = await make_group()

        with pytest.raises(ForbiddenError):
            await RecordService(db_session).create_record(
                group.id, record_body(nickname="mallory", password="whatever1")
            )

    @pytest.mark.asyncio
    async def test_wrong_password_is_forbidden(self, db_session, make_group):
        group = await make_group()

        with pytest.raises(ForbiddenError):
            await RecordService(db_session).create_record(
                group.id, record_body(password="not-the-password")
            )

    @pytest.mark.asyncio
    async def test_participant_of_other_group_is_forbidden(self, db_session, make_group):
        group = await make_group(name="Mine")
        other = await make_group(name="Other")
        await MembershipService(db_session).join(
            other.id, ParticipantJoin(nickname="bob", password="bobpass12")
        )

        with pytest.raises(ForbiddenError):
            await RecordService(db_session).create_record(
                group.id, record_body(nickname="bob", password="bobpass12")
            )

    @pytest.mark.asyncio
    async def test_missing_group(self, db_session):
        with pytest.raises(NotFoundError):
            await RecordService(db_session).create_record(404, record_body())

    def test_invalid_exercise_type_rejected_by_schema(self):
        with pytest.raises(ValueError):
            record_body(exercise_type="climb")


class TestReadRecords:
    @pytest.mark.asyncio
    async def test_get_record_scoped_to_group(self, db_session, make_group):
        group = await make_group(name="Mine")
        other = await make_group(name="Other")
        service = RecordService(db_session)
        record, _ = await service.create_record(group.id, record_body())

        fetched = await service.get_record(group.id, record.id)
        assert fetched.id == record.id

        with pytest.raises(NotFoundError):
            await service.get_record(other.id, record.id)

    @pytest.mark.asyncio
    async def test_list_search_by_nickname(self, db_session, make_group):
        group = await make_group()
        await MembershipService(db_session).join(
            group.id, ParticipantJoin(nickname="Bobby", password="bobpass12")
        )
        service = RecordService(db_session)
        await service.create_record(group.id, record_body())
        await service.create_record(group.id, record_body(nickname="Bobby", password="bobpass12"))

        records, total = await service.list_records(group.id, search="bob")

        assert total == 1
        assert records[0].author.nickname == "Bobby"

    @pytest.mark.asyncio
    async def test_list_order_by_time(self, db_session, make_group):
        group = await make_group()
        service = RecordService(db_session)
        for minutes in (20, 50, 10):
            await service.create_record(group.id, record_body(time=minutes))

        records, total = await service.list_records(group.id, order="asc", order_by="time")

        assert total == 3
        assert [r.time for r in records] == [10, 20, 50]

    @pytest.mark.asyncio
    async def test_list_pagination(self, db_session, make_group):
        group = await make_group()
        service = RecordService(db_session)
        for _ in range(3):
            await service.create_record(group.id, record_body())

        records, total = await service.list_records(group.id, page=2, limit=2)

        assert total == 3
        assert len(records) == 1

    @pytest.mark.asyncio
    async def test_list_invalid_order_by(self, db_session, make_group):
        group = await make_group()

        with pytest.raises(ValidationError, match="orderBy"):
            await RecordService(db_session).list_records(group.id, order_by="distance")
