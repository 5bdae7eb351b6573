"""
FitGroup Backend — Record Schemas
=================================

Create body:
    {
        "authorNickname": "alice", "authorPassword": "password1",
        "exerciseType": "run", "description": "easy 5k",
        "time": 30, "distance": 5.0,
        "photos": ["http://localhost:3001/images/abc.jpg"]
    }

`exerciseType` is accepted in any case and stored upper case; responses
project it in lower case.
"""

from typing import List, Optional

from pydantic import Field, StrictInt, field_validator

from fitgroup.models.enums import ExerciseType
from fitgroup.schemas.common import CamelModel


class RecordCreate(CamelModel):
    author_nickname: str = Field(min_length=1, max_length=20)
    author_password: str
    exercise_type: ExerciseType
    description: Optional[str] = None
    time: StrictInt = Field(ge=1, description="Duration in minutes")
    distance: float = Field(ge=0, description="Distance in km")
    photos: List[str] = Field(min_length=1, max_length=5)

    @field_validator("exercise_type", mode="before")
    @classmethod
    def normalize_exercise_type(cls, v):
        """Accept 'run', 'Run' and 'RUN' alike."""
        if isinstance(v, str):
            return v.upper()
        return v


class RecordAuthor(CamelModel):
    id: int
    nickname: str


class RecordResponse(CamelModel):
    id: int
    exercise_type: str = Field(description="Lower-case exercise kind: run, bike, swim")
    description: Optional[str] = None
    time: int
    distance: float
    photos: List[str]
    author: RecordAuthor
    created_at: int = Field(description="Epoch milliseconds")
