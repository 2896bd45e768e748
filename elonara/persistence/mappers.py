"""Mappers for converting between database rows and domain models.

Domain models are immutable Pydantic models, so rows are mapped by hand
instead of through SQLAlchemy's imperative mapping. Enum construction
rejects unknown status strings coming back from the database.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from elonara.domain.model import (
    BlueskyCredentials,
    Community,
    Event,
    Follower,
    Invitation,
    Membership,
    User,
)
from elonara.domain.value import (
    BlueskyDID,
    Channel,
    CommunityId,
    CommunityKind,
    EmailAddress,
    EntityId,
    EntityType,
    EventId,
    InvitationId,
    InvitationStatus,
    MembershipId,
    MembershipRole,
    MembershipStatus,
    RsvpToken,
    Slug,
    UserId,
)


def _uuid(value: Any) -> Optional[UUID]:
    """asyncpg returns UUID objects; tests and raw SQL may hand us strings."""
    if value is None:
        return None
    return value if isinstance(value, UUID) else UUID(str(value))


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        email=EmailAddress(row["email"]),
        display_name=row["display_name"],
        bluesky_did=BlueskyDID(row["bluesky_did"]) if row.get("bluesky_did") else None,
        bluesky_handle=row.get("bluesky_handle"),
        is_admin=bool(row.get("is_admin", False)),
        created_at=row["created_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to a table row dict."""
    return {
        "id": user.id,
        "email": user.email.root,
        "display_name": user.display_name,
        "bluesky_did": user.bluesky_did.root if user.bluesky_did else None,
        "bluesky_handle": user.bluesky_handle,
        "is_admin": user.is_admin,
        "created_at": user.created_at,
    }


def row_to_event(row: Dict[str, Any]) -> Event:
    """Convert database row to Event domain model."""
    return Event(
        id=EventId(_uuid(row["id"])),
        host_id=UserId(_uuid(row["host_id"])),
        community_id=CommunityId(_uuid(row["community_id"]))
        if row.get("community_id")
        else None,
        title=row["title"],
        slug=Slug(row["slug"]),
        event_date=row.get("event_date"),
        venue_info=row.get("venue_info") or "",
        description=row.get("description") or "",
        max_guests=row.get("max_guests") or 0,
        allow_plus_ones=bool(row.get("allow_plus_ones", True)),
        created_at=row["created_at"],
    )


def event_to_dict(event: Event) -> Dict[str, Any]:
    """Convert Event domain model to a table row dict."""
    return {
        "id": event.id,
        "host_id": event.host_id,
        "community_id": event.community_id,
        "title": event.title,
        "slug": event.slug.root,
        "event_date": event.event_date,
        "venue_info": event.venue_info,
        "description": event.description,
        "max_guests": event.max_guests,
        "allow_plus_ones": event.allow_plus_ones,
        "created_at": event.created_at,
    }


def row_to_community(row: Dict[str, Any]) -> Community:
    """Convert database row to Community domain model."""
    return Community(
        id=CommunityId(_uuid(row["id"])),
        owner_id=UserId(_uuid(row["owner_id"])),
        name=row["name"],
        slug=Slug(row["slug"]),
        kind=CommunityKind(row["kind"]),
        description=row.get("description") or "",
        created_at=row["created_at"],
    )


def community_to_dict(community: Community) -> Dict[str, Any]:
    """Convert Community domain model to a table row dict."""
    return {
        "id": community.id,
        "owner_id": community.owner_id,
        "name": community.name,
        "slug": community.slug.root,
        "kind": community.kind.value,
        "description": community.description,
        "created_at": community.created_at,
    }


def row_to_invitation(row: Dict[str, Any]) -> Invitation:
    """Convert database row to Invitation domain model.

    Args:
        row: Database row as dict

    Returns:
        Invitation domain model

    Raises:
        ValueError: If the row carries an unknown status, channel or entity type
    """
    return Invitation(
        id=InvitationId(_uuid(row["id"])),
        entity_type=EntityType(row["entity_type"]),
        entity_id=EntityId(_uuid(row["entity_id"])),
        recipient_identifier=row["recipient_identifier"],
        status=InvitationStatus(row["status"]),
        rsvp_token=RsvpToken(row["rsvp_token"]),
        source_channel=Channel(row["source_channel"]),
        inviter_id=UserId(_uuid(row["inviter_id"])),
        personal_message=row.get("personal_message") or "",
        user_id=UserId(_uuid(row["user_id"])) if row.get("user_id") else None,
        responder_name=row.get("responder_name") or "",
        responder_phone=row.get("responder_phone") or "",
        plus_one=bool(row.get("plus_one", False)),
        plus_one_name=row.get("plus_one_name") or "",
        dietary_restrictions=row.get("dietary_restrictions") or "",
        notes=row.get("notes") or "",
        delivery_count=row.get("delivery_count") or 0,
        last_sent_at=row.get("last_sent_at"),
        created_at=row["created_at"],
        responded_at=row.get("responded_at"),
        expires_at=row.get("expires_at"),
    )


def invitation_to_dict(invitation: Invitation) -> Dict[str, Any]:
    """Convert Invitation domain model to a table row dict."""
    return {
        "id": invitation.id,
        "entity_type": invitation.entity_type.value,
        "entity_id": invitation.entity_id,
        "recipient_identifier": invitation.recipient_identifier,
        "status": invitation.status.value,
        "rsvp_token": invitation.rsvp_token.root,
        "source_channel": invitation.source_channel.value,
        "inviter_id": invitation.inviter_id,
        "personal_message": invitation.personal_message,
        "user_id": invitation.user_id,
        "responder_name": invitation.responder_name,
        "responder_phone": invitation.responder_phone,
        "plus_one": invitation.plus_one,
        "plus_one_name": invitation.plus_one_name,
        "dietary_restrictions": invitation.dietary_restrictions,
        "notes": invitation.notes,
        "delivery_count": invitation.delivery_count,
        "last_sent_at": invitation.last_sent_at,
        "created_at": invitation.created_at,
        "responded_at": invitation.responded_at,
        "expires_at": invitation.expires_at,
    }


def row_to_membership(row: Dict[str, Any]) -> Membership:
    """Convert database row to Membership domain model."""
    return Membership(
        id=MembershipId(_uuid(row["id"])),
        entity_type=EntityType(row["entity_type"]),
        entity_id=EntityId(_uuid(row["entity_id"])),
        user_id=UserId(_uuid(row["user_id"])),
        role=MembershipRole(row["role"]),
        status=MembershipStatus(row["status"]),
        invitation_id=InvitationId(_uuid(row["invitation_id"]))
        if row.get("invitation_id")
        else None,
        joined_at=row["joined_at"],
    )


def membership_to_dict(membership: Membership) -> Dict[str, Any]:
    """Convert Membership domain model to a table row dict."""
    return {
        "id": membership.id,
        "entity_type": membership.entity_type.value,
        "entity_id": membership.entity_id,
        "user_id": membership.user_id,
        "role": membership.role.value,
        "status": membership.status.value,
        "invitation_id": membership.invitation_id,
        "joined_at": membership.joined_at,
    }


def row_to_bluesky_credentials(row: Dict[str, Any]) -> BlueskyCredentials:
    """Convert database row to BlueskyCredentials."""
    return BlueskyCredentials(
        user_id=UserId(_uuid(row["user_id"])),
        did=BlueskyDID(row["did"]),
        handle=row["handle"],
        access_jwt=row["access_jwt"],
        refresh_jwt=row["refresh_jwt"],
        updated_at=row["updated_at"],
    )


def row_to_follower(row: Dict[str, Any]) -> Follower:
    """Convert cached follower row to Follower."""
    return Follower(
        did=BlueskyDID(row["did"]),
        handle=row["handle"],
        display_name=row.get("display_name") or "",
        avatar_url=row.get("avatar_url"),
    )
