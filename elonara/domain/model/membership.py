"""Membership entity."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from elonara.domain.model.common import DomainModel
from elonara.domain.value import (
    EntityId,
    EntityType,
    InvitationId,
    MembershipId,
    MembershipRole,
    MembershipStatus,
    UserId,
    utcnow,
)


class Membership(DomainModel):
    """A user's standing in a community.

    Only the roster reconciler creates memberships: from an accepted
    invitation, when an account is bound to a confirmed invitation, or when
    seeding the owner of a new community.
    """

    id: MembershipId
    entity_type: EntityType = EntityType.COMMUNITY
    entity_id: EntityId
    user_id: UserId
    role: MembershipRole = MembershipRole.MEMBER
    status: MembershipStatus = MembershipStatus.ACTIVE
    invitation_id: Optional[InvitationId] = None
    joined_at: datetime = Field(default_factory=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.ACTIVE
