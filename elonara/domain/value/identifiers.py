"""Strongly typed identifiers for Elonara domain entities.

Using NewType keeps event, community, invitation and user ids from being
mixed up while still being plain UUIDs at runtime.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
EventId = NewType("EventId", UUID)
CommunityId = NewType("CommunityId", UUID)
InvitationId = NewType("InvitationId", UUID)
MembershipId = NewType("MembershipId", UUID)

# Either an EventId or a CommunityId, discriminated by EntityType
EntityId = NewType("EntityId", UUID)
