"""
FitGroup Backend — Participant SQLAlchemy Model
===============================================

What:  A member of exactly one group; one participant per group is the owner.

Constraints:
    uq_participants_group_nickname: nicknames are unique within a group
        (the same nickname may appear in different groups). This closes the
        check-then-insert race between two concurrent joins.
    uq_participants_group_owner: partial unique index, at most one owner
        per group.

Security Note:
    `password` is stored and compared as an opaque string. All comparisons go
    through services/credentials.py so hashing can be introduced in one place.
    The formatter never emits this column.
"""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from fitgroup.database import Base
from fitgroup.models.common import TimestampMixin


class Participant(TimestampMixin, Base):
    __tablename__ = "participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nickname: Mapped[str] = mapped_column(String(20), nullable=False)
    password: Mapped[str] = mapped_column(String(20), nullable=False)
    is_owner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("group_id", "nickname", name="uq_participants_group_nickname"),
        Index(
            "uq_participants_group_owner",
            "group_id",
            unique=True,
            postgresql_where=text("is_owner"),
            sqlite_where=text("is_owner"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Participant(id={self.id}, nickname='{self.nickname}', "
            f"group_id={self.group_id}, is_owner={self.is_owner})>"
        )
