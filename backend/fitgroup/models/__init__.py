"""
FitGroup Backend — ORM Models

Importing this package registers every table on Base.metadata, which
Alembic's env.py and the test fixtures rely on.
"""

from fitgroup.models.badge import Badge
from fitgroup.models.enums import BadgeType, ExerciseType, RankPeriod
from fitgroup.models.group import Group
from fitgroup.models.participant import Participant
from fitgroup.models.record import Record
from fitgroup.models.tag import Tag, group_tags

__all__ = [
    "Badge",
    "BadgeType",
    "ExerciseType",
    "Group",
    "Participant",
    "RankPeriod",
    "Record",
    "Tag",
    "group_tags",
]
