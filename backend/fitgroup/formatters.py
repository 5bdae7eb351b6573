"""
FitGroup Backend — Response Formatters
======================================

What:  Pure projections from persisted ORM entities to response models.
Why:   One place decides the wire shape: epoch-millisecond timestamps,
       tag/badge entities flattened to strings, owner lifted out of the
       participant list, exercise kind in lower case, passwords dropped.
How:   Plain functions. They only read attributes, so formatting the same
       entity twice yields identical output.

Callers must pass fully loaded entities (see GroupService.get_full_group and
RecordService, which eager-load the relationships read here).
"""

from datetime import datetime, timezone

from fitgroup.models import Group, Participant, Record, Tag
from fitgroup.schemas.group import GroupResponse
from fitgroup.schemas.participant import ParticipantResponse
from fitgroup.schemas.record import RecordAuthor, RecordResponse
from fitgroup.schemas.tag import TagResponse


def to_epoch_ms(value: datetime) -> int:
    """Convert a timestamp to epoch milliseconds; naive values are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def format_participant(participant: Participant) -> ParticipantResponse:
    return ParticipantResponse(
        id=participant.id,
        nickname=participant.nickname,
        created_at=to_epoch_ms(participant.created_at),
        updated_at=to_epoch_ms(participant.updated_at),
    )


def format_group(group: Group) -> GroupResponse:
    owner = group.owner
    return GroupResponse(
        id=group.id,
        name=group.name,
        description=group.description,
        photo_url=group.photo_url,
        goal_rep=group.goal_rep,
        discord_webhook_url=group.discord_webhook_url,
        discord_invite_url=group.discord_invite_url,
        like_count=group.like_count,
        tags=[tag.name for tag in group.tags],
        owner=format_participant(owner) if owner is not None else None,
        participants=[format_participant(p) for p in group.participants],
        created_at=to_epoch_ms(group.created_at),
        updated_at=to_epoch_ms(group.updated_at),
        badges=[badge.type.value for badge in group.badges],
    )


def format_record(record: Record) -> RecordResponse:
    return RecordResponse(
        id=record.id,
        exercise_type=record.exercise_type.value.lower(),
        description=record.description,
        time=record.time,
        distance=record.distance,
        photos=list(record.photos),
        author=RecordAuthor(id=record.author.id, nickname=record.author.nickname),
        created_at=to_epoch_ms(record.created_at),
    )


def format_tag(tag: Tag) -> TagResponse:
    return TagResponse(
        id=tag.id,
        name=tag.name,
        created_at=to_epoch_ms(tag.created_at),
        updated_at=to_epoch_ms(tag.updated_at),
    )
