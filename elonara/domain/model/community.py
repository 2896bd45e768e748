"""Community entity."""

from datetime import datetime

from pydantic import Field

from elonara.domain.model.common import DomainModel
from elonara.domain.value import CommunityId, CommunityKind, Slug, UserId, utcnow


class Community(DomainModel):
    """A group of members; circles are private communities."""

    id: CommunityId
    owner_id: UserId
    name: str
    slug: Slug
    kind: CommunityKind = CommunityKind.PUBLIC
    description: str = ""
    created_at: datetime = Field(default_factory=utcnow)
