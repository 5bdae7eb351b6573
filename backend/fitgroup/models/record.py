"""
FitGroup Backend — Record SQLAlchemy Model
==========================================

What:  One logged exercise activity, authored by one participant.

Columns:
    time:      duration in minutes (positive integer), summed by the leaderboard
    distance:  kilometres (non-negative)
    photos:    JSON array of 1-5 image URLs (validated by the request schema)

Index on (author_id, created_at):
    The leaderboard aggregates each participant's records inside a trailing
    window, which is exactly this index's prefix.
"""

from typing import List, Optional

from sqlalchemy import JSON, Enum, Float, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitgroup.database import Base
from fitgroup.models.common import CreatedAtMixin
from fitgroup.models.enums import ExerciseType
from fitgroup.models.participant import Participant


class Record(CreatedAtMixin, Base):
    __tablename__ = "records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    exercise_type: Mapped[ExerciseType] = mapped_column(
        Enum(ExerciseType, name="exercise_type", native_enum=False, length=20),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    time: Mapped[int] = mapped_column(Integer, nullable=False)
    distance: Mapped[float] = mapped_column(Float, nullable=False)
    photos: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("participants.id", ondelete="CASCADE"), nullable=False
    )

    author: Mapped[Participant] = relationship(Participant)

    __table_args__ = (
        Index("idx_records_author_created_at", "author_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Record(id={self.id}, type='{self.exercise_type.value}', "
            f"author_id={self.author_id}, time={self.time})>"
        )
