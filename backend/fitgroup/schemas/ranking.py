"""
FitGroup Backend — Leaderboard Schemas
"""

from pydantic import Field

from fitgroup.schemas.common import CamelModel


class RankingEntry(CamelModel):
    """One participant's activity inside the ranking window."""

    participant_id: int
    nickname: str
    record_count: int = Field(description="Records created inside the window")
    record_time: int = Field(description="Sum of those records' durations (minutes)")
