"""
FitGroup Backend — Participant Schemas
======================================

Nickname: 1-20 characters. Password: 8-20 characters on join.
Leaving only needs a password to compare, so its length is not re-validated
(a wrong password is a 401, not a 400).
"""

from typing import Annotated

from pydantic import Field, StringConstraints

from fitgroup.schemas.common import CamelModel

Nickname = Annotated[str, StringConstraints(min_length=1, max_length=20)]
Password = Annotated[str, StringConstraints(min_length=8, max_length=20)]


class ParticipantJoin(CamelModel):
    """Body of POST /groups/{id}/participants."""

    nickname: Nickname
    password: Password


class ParticipantLeave(CamelModel):
    """Body of DELETE /groups/{id}/participants."""

    nickname: Nickname
    password: str


class ParticipantResponse(CamelModel):
    """Public view of a participant; never includes the password."""

    id: int
    nickname: str
    created_at: int = Field(description="Epoch milliseconds")
    updated_at: int = Field(description="Epoch milliseconds")
