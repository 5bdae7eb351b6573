"""
FitGroup Backend — Enumerations shared by models and schemas.

Stored by name (VARCHAR, non-native enums) so the same schema works on
PostgreSQL and SQLite.
"""

import enum


class ExerciseType(str, enum.Enum):
    """Kinds of exercise a Record can log."""

    RUN = "RUN"
    BIKE = "BIKE"
    SWIM = "SWIM"


class BadgeType(str, enum.Enum):
    """Achievement markers a Group can carry (awarding happens elsewhere)."""

    PARTICIPATION_10 = "PARTICIPATION_10"
    RECORD_100 = "RECORD_100"
    LIKE_100 = "LIKE_100"


class RankPeriod(str, enum.Enum):
    """Trailing windows supported by the leaderboard."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
