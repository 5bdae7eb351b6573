"""
FitGroup Backend — Badge SQLAlchemy Model

Achievement markers attached to a group. Read-only in this service: badges
are displayed with their group, never awarded here.
"""

from sqlalchemy import Enum, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from fitgroup.database import Base
from fitgroup.models.common import CreatedAtMixin
from fitgroup.models.enums import BadgeType


class Badge(CreatedAtMixin, Base):
    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[BadgeType] = mapped_column(
        Enum(BadgeType, name="badge_type", native_enum=False, length=30),
        nullable=False,
    )
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<Badge(id={self.id}, type='{self.type.value}', group_id={self.group_id})>"
