"""Domain value objects for Elonara."""

from elonara.domain.value.common import RootValueObject, ValueObject, utcnow
from elonara.domain.value.identifiers import (
    CommunityId,
    EntityId,
    EventId,
    InvitationId,
    MembershipId,
    UserId,
)
from elonara.domain.value.types import (
    BlueskyDID,
    Channel,
    CommunityKind,
    EmailAddress,
    EntityType,
    InvitationStatus,
    LinkLabel,
    MembershipRole,
    MembershipStatus,
    NonceScope,
    RsvpResponse,
    RsvpToken,
    Slug,
)

__all__ = [
    "ValueObject",
    "RootValueObject",
    "utcnow",
    # Identifiers
    "UserId",
    "EventId",
    "CommunityId",
    "EntityId",
    "InvitationId",
    "MembershipId",
    # Types
    "EntityType",
    "InvitationStatus",
    "Channel",
    "MembershipRole",
    "MembershipStatus",
    "CommunityKind",
    "RsvpResponse",
    "NonceScope",
    "RsvpToken",
    "EmailAddress",
    "BlueskyDID",
    "LinkLabel",
    "Slug",
]
