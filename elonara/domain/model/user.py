"""User entity."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from elonara.domain.model.common import DomainModel
from elonara.domain.value import BlueskyDID, EmailAddress, UserId, utcnow


class User(DomainModel):
    """Registered account.

    Accounts are created by the auth service; this API needs enough of
    them to resolve invitation recipients and check permissions.
    """

    id: UserId
    email: EmailAddress
    display_name: str
    bluesky_did: Optional[BlueskyDID] = None
    bluesky_handle: Optional[str] = None
    is_admin: bool = False
    created_at: datetime = Field(default_factory=utcnow)
