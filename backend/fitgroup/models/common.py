"""
FitGroup Backend — Shared model columns.

All timestamps are timezone-aware UTC. SQLite drops the offset on storage,
so readers treat naive values as UTC (see formatters.to_epoch_ms).
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this row was created (UTC)",
    )


class TimestampMixin(CreatedAtMixin):
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        comment="When this row was last modified (UTC)",
    )
