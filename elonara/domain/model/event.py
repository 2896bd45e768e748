"""Event entity."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from elonara.domain.model.common import DomainModel
from elonara.domain.value import CommunityId, EventId, Slug, UserId, utcnow


class Event(DomainModel):
    """An event guests RSVP to. The host manages its guest list."""

    id: EventId
    host_id: UserId
    title: str
    slug: Slug
    event_date: Optional[datetime] = None
    venue_info: str = ""
    description: str = ""

    # 0 means no limit
    max_guests: int = 0
    allow_plus_ones: bool = True

    community_id: Optional[CommunityId] = None
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def has_guest_limit(self) -> bool:
        return self.max_guests > 0
