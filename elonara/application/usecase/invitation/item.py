"""Invitation representation shared by invitation use cases."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from elonara.domain.model import Invitation
from elonara.domain.service import invitation_url
from elonara.domain.value import Channel, EntityType, InvitationStatus


class InvitationItem(BaseModel):
    """Invitation as shown to hosts and guests."""

    id: UUID
    entity_type: EntityType
    entity_id: UUID
    recipient: str
    status: InvitationStatus
    channel: Channel
    url: str
    personal_message: str
    responder_name: str
    plus_one: bool
    plus_one_name: str
    dietary_restrictions: str
    notes: str
    delivery_count: int
    created_at: datetime
    responded_at: datetime | None
    expires_at: datetime | None

    @classmethod
    def from_invitation(cls, invitation: Invitation, base_url: str) -> "InvitationItem":
        """Build from the domain entity."""
        return cls(
            id=invitation.id,
            entity_type=invitation.entity_type,
            entity_id=invitation.entity_id,
            recipient=invitation.recipient_identifier,
            status=invitation.status,
            channel=invitation.source_channel,
            url=invitation_url(invitation, base_url),
            personal_message=invitation.personal_message,
            responder_name=invitation.responder_name,
            plus_one=invitation.plus_one,
            plus_one_name=invitation.plus_one_name,
            dietary_restrictions=invitation.dietary_restrictions,
            notes=invitation.notes,
            delivery_count=invitation.delivery_count,
            created_at=invitation.created_at,
            responded_at=invitation.responded_at,
            expires_at=invitation.expires_at,
        )
