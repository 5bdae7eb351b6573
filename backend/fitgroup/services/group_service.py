"""
FitGroup Backend — Group Lifecycle Service
==========================================

What:  Create, read, list, update and delete groups, and adjust like counters.
Why:   Owns the group-level invariants:
       - a group is created together with exactly one owner participant
       - only the current owner's password unlocks update and delete
       - a tag set is replaced wholesale and orphaned tags are pruned
       - deletion removes every child row before the group itself
How:   Each public method runs inside the request's session. Steps are only
       flushed; the session dependency commits once at the end, so every
       multi-table mutation applies completely or not at all.

State Machine (per group):
    ┌──────────┐  create   ┌──────────┐  delete   ┌──────────┐
    │  (none)  │ ────────▶ │  Active  │ ────────▶ │ Deleted  │
    └──────────┘           └──────────┘           └──────────┘
                             ▲      │ update / like / join / leave
                             └──────┘
"""

import logging
from typing import List, Tuple

from sqlalchemy import asc, delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fitgroup.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from fitgroup.models import Badge, Group, Participant, Record, group_tags
from fitgroup.models.common import utcnow
from fitgroup.schemas.group import GroupCreate, GroupUpdate
from fitgroup.services.credentials import verify_participant_password
from fitgroup.services.tag_service import TagService

logger = logging.getLogger(__name__)

ORDER_DIRECTIONS = {"asc": asc, "desc": desc}
GROUP_SORT_FIELDS = ("createdAt", "likeCount", "participantCount")

# Group columns a PATCH body may change directly
UPDATABLE_FIELDS = (
    "name",
    "description",
    "photo_url",
    "goal_rep",
    "discord_webhook_url",
    "discord_invite_url",
)
NON_NULLABLE_FIELDS = {"name", "goal_rep"}


def resolve_direction(order: str):
    try:
        return ORDER_DIRECTIONS[order]
    except KeyError:
        raise ValidationError(
            message="The order parameter must be one of the following values: ['asc', 'desc'].",
            field="order",
        )


class GroupService:
    """
    Business logic for the group lifecycle.

    Responsibilities:
        - create_group(): group + owner + tags in one transaction
        - get_full_group(): eager-loaded group for formatting
        - list_groups(): search, sort and paginate
        - update_group() / delete_group(): owner-password gated
        - like() / unlike(): atomic counter adjustment
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tags = TagService(db)

    async def get_full_group(self, group_id: int) -> Group:
        """
        Load a group with tags, participants and badges.

        populate_existing refreshes objects already in the session, so the
        result reflects writes made earlier in the same transaction.

        Raises:
            NotFoundError: the group does not exist (→ 404)
        """
        result = await self.db.execute(
            select(Group)
            .where(Group.id == group_id)
            .options(
                selectinload(Group.tags),
                selectinload(Group.participants),
                selectinload(Group.badges),
            )
            .execution_options(populate_existing=True)
        )
        group = result.scalar_one_or_none()
        if group is None:
            raise NotFoundError(resource="group", resource_id=group_id)
        return group

    async def create_group(self, data: GroupCreate) -> Group:
        """
        Create a group and its owner participant.

        Workflow:
            1. Resolve tag names (get-or-create)
            2. Insert the group (flush assigns its id)
            3. Insert the owner participant (is_owner=True)
            4. Reload the full group for the response

        Nicknames are unique per group only, so a brand-new group's owner
        nickname cannot collide with anything.
        """
        tags = await self.tags.get_or_create_many(data.tags)

        group = Group(
            name=data.name,
            description=data.description,
            photo_url=data.photo_url,
            goal_rep=data.goal_rep,
            discord_webhook_url=data.discord_webhook_url,
            discord_invite_url=data.discord_invite_url,
            like_count=0,
            tags=tags,
        )
        self.db.add(group)
        await self.db.flush()

        owner = Participant(
            nickname=data.owner_nickname,
            password=data.owner_password,
            is_owner=True,
            group_id=group.id,
        )
        self.db.add(owner)
        await self.db.flush()

        logger.info(
            "Group %s created by owner '%s' with %d tag(s)",
            group.id,
            owner.nickname,
            len(tags),
        )
        return await self.get_full_group(group.id)

    async def list_groups(
        self,
        page: int = 1,
        limit: int = 10,
        order: str = "desc",
        order_by: str = "createdAt",
        search: str = "",
    ) -> Tuple[List[Group], int]:
        """
        List groups with offset pagination.

        Args:
            page, limit: 1-based page and page size
            order: 'asc' or 'desc'
            order_by: 'createdAt', 'likeCount' or 'participantCount'
            search: case-insensitive substring of the group name

        Returns:
            (groups on the page, total number of groups matching the search)
        """
        direction = resolve_direction(order)
        if order_by not in GROUP_SORT_FIELDS:
            raise ValidationError(
                message=(
                    "The orderBy parameter must be one of the following values: "
                    "['likeCount', 'participantCount', 'createdAt']."
                ),
                field="orderBy",
            )

        filters = []
        if search:
            filters.append(Group.name.icontains(search, autoescape=True))

        if order_by == "participantCount":
            sort_key = (
                select(func.count(Participant.id))
                .where(Participant.group_id == Group.id)
                .correlate(Group)
                .scalar_subquery()
            )
        elif order_by == "likeCount":
            sort_key = Group.like_count
        else:
            sort_key = Group.created_at

        offset = (page - 1) * limit
        result = await self.db.execute(
            select(Group)
            .where(*filters)
            .order_by(direction(sort_key), direction(Group.id))
            .offset(offset)
            .limit(limit)
            .options(
                selectinload(Group.tags),
                selectinload(Group.participants),
                selectinload(Group.badges),
            )
        )
        groups = list(result.scalars().all())

        count_result = await self.db.execute(select(func.count(Group.id)).where(*filters))
        total = count_result.scalar() or 0
        return groups, total

    async def update_group(self, group_id: int, data: GroupUpdate) -> Group:
        """
        Update a group's fields, tag set and owner credentials.

        Only fields present in the request body change. The current owner
        password is required even when only tags change.

        Raises:
            NotFoundError: group does not exist
            AuthorizationError: owner password mismatch (→ 401)
            ValidationError: a non-nullable field was sent as null
            ConflictError: new owner nickname is used by another participant
        """
        group = await self.get_full_group(group_id)
        owner = self._require_owner(group)
        verify_participant_password(owner, data.owner_password)

        changes = data.model_dump(exclude_unset=True, include=set(UPDATABLE_FIELDS))
        for field, value in changes.items():
            if value is None and field in NON_NULLABLE_FIELDS:
                raise ValidationError(
                    message=f"'{field}' cannot be null", field=field, status_code=422
                )
            setattr(group, field, value)

        retagged = "tags" in data.model_fields_set and data.tags is not None
        if retagged:
            group.tags = await self.tags.get_or_create_many(data.tags)

        if data.owner_nickname is not None and data.owner_nickname != owner.nickname:
            taken = any(
                p.nickname == data.owner_nickname for p in group.participants if p.id != owner.id
            )
            if taken:
                raise ConflictError(
                    message="Nickname already taken in this group",
                    context={"group_id": group_id, "nickname": data.owner_nickname},
                )
            owner.nickname = data.owner_nickname

        if data.new_owner_password is not None:
            owner.password = data.new_owner_password

        group.updated_at = utcnow()
        await self.db.flush()

        if retagged:
            await self.tags.prune_orphans()

        logger.info("Group %s updated (fields=%s, retagged=%s)", group_id, sorted(changes), retagged)
        return await self.get_full_group(group_id)

    async def delete_group(self, group_id: int, owner_password: str) -> None:
        """
        Delete a group and everything it owns.

        Order (all in one transaction):
            records of its participants → tag links → badges → participants
            → the group → tags left without any group

        Raises:
            NotFoundError: group does not exist
            AuthorizationError: owner password mismatch (→ 401)
        """
        group = await self.get_full_group(group_id)
        owner = self._require_owner(group)
        verify_participant_password(owner, owner_password)

        participant_ids = select(Participant.id).where(Participant.group_id == group_id)
        await self.db.execute(delete(Record).where(Record.author_id.in_(participant_ids)))
        await self.db.execute(delete(group_tags).where(group_tags.c.group_id == group_id))
        await self.db.execute(delete(Badge).where(Badge.group_id == group_id))
        await self.db.execute(delete(Participant).where(Participant.group_id == group_id))
        await self.db.execute(delete(Group).where(Group.id == group_id))
        await self.tags.prune_orphans()

        logger.info("Group %s deleted", group_id)

    async def like(self, group_id: int) -> Group:
        return await self._adjust_likes(group_id, 1)

    async def unlike(self, group_id: int) -> Group:
        # No floor: the counter may go negative
        return await self._adjust_likes(group_id, -1)

    async def _adjust_likes(self, group_id: int, delta: int) -> Group:
        """
        Apply `like_count = like_count + delta` as one UPDATE statement.

        The database evaluates the increment, so concurrent likes on the
        same group never lose updates.
        """
        result = await self.db.execute(
            update(Group)
            .where(Group.id == group_id)
            .values(like_count=Group.like_count + delta)
        )
        if result.rowcount == 0:
            raise NotFoundError(resource="group", resource_id=group_id)
        return await self.get_full_group(group_id)

    @staticmethod
    def _require_owner(group: Group) -> Participant:
        owner = group.owner
        if owner is None:
            # Unreachable while the single-owner invariant holds
            logger.error("Group %s has no owner participant", group.id)
            raise InternalError(
                message="Owner not found in participants",
                context={"group_id": group.id},
            )
        return owner
