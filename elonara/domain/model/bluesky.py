"""Bluesky account data kept for follower invitations."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from elonara.domain.model.common import DomainModel
from elonara.domain.value import BlueskyDID, UserId, utcnow


class Follower(DomainModel):
    """A Bluesky account following one of our users (cached)."""

    did: BlueskyDID
    handle: str
    display_name: str = ""
    avatar_url: Optional[str] = None


class BlueskyCredentials(DomainModel):
    """App-password session stored when a user connects Bluesky."""

    user_id: UserId
    did: BlueskyDID
    handle: str
    access_jwt: str
    refresh_jwt: str
    updated_at: datetime = Field(default_factory=utcnow)
