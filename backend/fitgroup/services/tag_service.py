"""
FitGroup Backend — Tag Service
==============================

What:  Tag lookup, get-or-create resolution for group tag sets, and pruning
       of tags that no group references any more.
Who:   GroupService (create/update/delete) and the /tags routes.
"""

import logging
from typing import List, Sequence, Tuple

from sqlalchemy import delete, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fitgroup.exceptions import NotFoundError
from fitgroup.models import Tag, group_tags

logger = logging.getLogger(__name__)


def unique_names(names: Sequence[str]) -> List[str]:
    """Drop duplicate tag names, keeping first-seen order."""
    return list(dict.fromkeys(names))


class TagService:
    """Tag persistence operations bound to one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_or_create_many(self, names: Sequence[str]) -> List[Tag]:
        """
        Resolve tag names to Tag rows, creating the missing ones.

        Returns tags in the order of the (de-duplicated) input. New tags are
        flushed so they have ids before being linked to a group. A concurrent
        request creating the same name trips the unique constraint and the
        whole request rolls back (surfaced as a 400 conflict).
        """
        wanted = unique_names(names)
        if not wanted:
            return []

        result = await self.db.execute(select(Tag).where(Tag.name.in_(wanted)))
        by_name = {tag.name: tag for tag in result.scalars().all()}

        created = []
        for name in wanted:
            if name not in by_name:
                tag = Tag(name=name)
                self.db.add(tag)
                by_name[name] = tag
                created.append(name)

        if created:
            await self.db.flush()
            logger.info("Created %d new tag(s): %s", len(created), ", ".join(created))

        return [by_name[name] for name in wanted]

    async def prune_orphans(self) -> int:
        """
        Delete tags that are no longer linked to any group.

        Called after a group is deleted or re-tagged, inside the same
        transaction. Returns the number of deleted tags.
        """
        linked = exists().where(group_tags.c.tag_id == Tag.id)
        result = await self.db.execute(
            delete(Tag).where(~linked).execution_options(synchronize_session="fetch")
        )
        removed = result.rowcount or 0
        if removed > 0:
            logger.info("Pruned %d orphaned tag(s)", removed)
        return removed

    async def list_tags(self, page: int, limit: int) -> Tuple[List[Tag], int]:
        offset = (page - 1) * limit
        result = await self.db.execute(
            select(Tag).order_by(Tag.id).offset(offset).limit(limit)
        )
        tags = list(result.scalars().all())
        total = (await self.db.execute(select(func.count(Tag.id)))).scalar() or 0
        return tags, total

    async def get_tag(self, tag_id: int) -> Tag:
        result = await self.db.execute(select(Tag).where(Tag.id == tag_id))
        tag = result.scalar_one_or_none()
        if tag is None:
            raise NotFoundError(resource="tag", resource_id=tag_id)
        return tag
