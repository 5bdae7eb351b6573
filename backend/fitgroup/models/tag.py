"""
FitGroup Backend — Tag SQLAlchemy Model
=======================================

What:  Shared labels attached to groups (many-to-many through `group_tags`).
Lifecycle:
    1. Created on first use (get-or-create by name)
    2. Linked to any number of groups
    3. Deleted once no group references it (after a group delete or retag)
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from fitgroup.database import Base
from fitgroup.models.common import TimestampMixin

# Association table: no ORM class, rows exist only as (group, tag) links
group_tags = Table(
    "group_tags",
    Base.metadata,
    Column("group_id", Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(TimestampMixin, Base):
    """A label shared across groups; unique by name."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"
