"""
FitGroup Backend — Group Schemas
================================

What:  Request bodies for creating, updating and deleting groups, and the
       group response shape.

Create body (camelCase on the wire):
    {
        "ownerNickname": "alice", "ownerPassword": "password1",
        "name": "Morning Runners", "goalRep": 20,
        "description": "...", "photoUrl": "...",
        "discordWebhookUrl": "...", "discordInviteUrl": "...",
        "tags": ["run", "bike"]
    }

Update body:
    `ownerPassword` authenticates the request. Every other field is optional
    and only supplied fields change. `ownerNickname` renames the owner and
    `newOwnerPassword` replaces the owner's password.
"""

from typing import List, Optional

from pydantic import Field, StrictInt

from fitgroup.schemas.common import CamelModel
from fitgroup.schemas.participant import Nickname, ParticipantResponse, Password
from fitgroup.schemas.tag import TagName


class GroupFields(CamelModel):
    name: str = Field(min_length=1, max_length=60)
    description: Optional[str] = None
    photo_url: Optional[str] = None
    goal_rep: StrictInt = Field(ge=1, description="Target number of records per participant")
    discord_webhook_url: Optional[str] = None
    discord_invite_url: Optional[str] = None
    tags: List[TagName] = Field(default_factory=list)


class GroupCreate(GroupFields):
    """Body of POST /groups."""

    owner_nickname: Nickname
    owner_password: Password


class GroupUpdate(CamelModel):
    """Body of PATCH /groups/{id}."""

    owner_password: str = Field(description="Current owner password")
    owner_nickname: Optional[Nickname] = None
    new_owner_password: Optional[Password] = None

    name: Optional[str] = Field(default=None, min_length=1, max_length=60)
    description: Optional[str] = None
    photo_url: Optional[str] = None
    goal_rep: Optional[StrictInt] = Field(default=None, ge=1)
    discord_webhook_url: Optional[str] = None
    discord_invite_url: Optional[str] = None
    tags: Optional[List[TagName]] = None


class GroupDelete(CamelModel):
    """Body of DELETE /groups/{id}."""

    owner_password: str


class GroupResponse(CamelModel):
    """
    Wire shape of a group.

    `owner` is lifted out of the participant list for convenience; the owner
    also remains in `participants`. Timestamps are epoch milliseconds.
    """

    id: int
    name: str
    description: Optional[str] = None
    photo_url: Optional[str] = None
    goal_rep: int
    discord_webhook_url: Optional[str] = None
    discord_invite_url: Optional[str] = None
    like_count: int
    tags: List[str]
    owner: Optional[ParticipantResponse] = None
    participants: List[ParticipantResponse]
    created_at: int
    updated_at: int
    badges: List[str]
