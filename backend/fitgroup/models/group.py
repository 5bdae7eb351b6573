"""
FitGroup Backend — Group SQLAlchemy Model
=========================================

What:  ORM model representing the `groups` table.
Why:   A group is the unit everything else hangs off: participants (and
       through them records), tag links and badges.

Invariant:
    From creation until deletion a group has exactly one participant with
    is_owner=True. The service layer creates the owner together with the
    group and refuses to remove it; the partial unique index on
    participants(group_id) WHERE is_owner backs the "at most one" half.

Loading:
    Relationships are never lazy-loaded in async code. Callers that need
    them load the group through GroupService.get_full_group(), which
    eager-loads tags, participants and badges in one round of SELECT ... IN.
"""

from typing import List, Optional

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitgroup.database import Base
from fitgroup.models.badge import Badge
from fitgroup.models.common import TimestampMixin
from fitgroup.models.participant import Participant
from fitgroup.models.tag import Tag, group_tags


class Group(TimestampMixin, Base):
    """
    A team/challenge that participants join.

    Query Patterns:
        - List newest first: ORDER BY created_at DESC (idx_groups_created_at)
        - Search by name: case-insensitive substring match
        - Rank/detail: primary key lookup + eager-loaded children
    """

    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(60), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    goal_rep: Mapped[int] = mapped_column(Integer, nullable=False)
    discord_webhook_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    discord_invite_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    # Incremented/decremented with a single SQL UPDATE; no floor is enforced
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    tags: Mapped[List[Tag]] = relationship(
        Tag, secondary=group_tags, order_by=Tag.name
    )
    participants: Mapped[List[Participant]] = relationship(
        Participant, order_by=Participant.id
    )
    badges: Mapped[List[Badge]] = relationship(Badge, order_by=Badge.id)

    __table_args__ = (
        Index("idx_groups_created_at", "created_at"),
        Index("idx_groups_like_count", "like_count"),
    )

    @property
    def owner(self) -> Optional[Participant]:
        """The owner participant (requires participants to be loaded)."""
        return next((p for p in self.participants if p.is_owner), None)

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name='{self.name}', like_count={self.like_count})>"
