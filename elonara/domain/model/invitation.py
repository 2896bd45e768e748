"""Invitation entity.

An invitation asks one recipient (email address, Bluesky DID or link
label) to join one event or community. Rows are never deleted; history is
kept through the status field.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from elonara.domain.error import InvalidTransitionError
from elonara.domain.model.common import DomainModel
from elonara.domain.value import (
    Channel,
    EntityId,
    EntityType,
    InvitationId,
    InvitationStatus,
    RsvpToken,
    UserId,
    ValueObject,
    utcnow,
)

ALLOWED_TRANSITIONS: dict[InvitationStatus, frozenset[InvitationStatus]] = {
    InvitationStatus.PENDING: frozenset(
        {
            InvitationStatus.CONFIRMED,
            InvitationStatus.DECLINED,
            InvitationStatus.CANCELLED,
        }
    ),
    InvitationStatus.CONFIRMED: frozenset({InvitationStatus.CANCELLED}),
    InvitationStatus.DECLINED: frozenset({InvitationStatus.CANCELLED}),
    InvitationStatus.CANCELLED: frozenset(),
}


def can_transition(current: InvitationStatus, new: InvitationStatus) -> bool:
    """Whether ``current -> new`` is a legal lifecycle step."""
    return new in ALLOWED_TRANSITIONS[current]


class ResponderDetails(ValueObject):
    """Details a guest supplies when answering an invitation."""

    name: str = ""
    phone: str = ""
    plus_one: bool = False
    plus_one_name: str = ""
    dietary_restrictions: str = ""
    notes: str = ""

    # Account of a logged-in responder, if any
    user_id: Optional[UserId] = None


class Invitation(DomainModel):
    """Invitation entity.

    Business rules:
    - At most one active (non-cancelled) invitation per entity + recipient
    - The RSVP token is the capability: whoever holds it may answer
    - Community invitations expire; event invitations do not
    - A confirmed community invitation yields exactly one membership
    """

    id: InvitationId
    entity_type: EntityType
    entity_id: EntityId
    recipient_identifier: str
    status: InvitationStatus = InvitationStatus.PENDING
    rsvp_token: RsvpToken
    source_channel: Channel
    inviter_id: UserId
    personal_message: str = ""

    # Account the invitation is attached to, once known
    user_id: Optional[UserId] = None

    responder_name: str = ""
    responder_phone: str = ""
    plus_one: bool = False
    plus_one_name: str = ""
    dietary_restrictions: str = ""
    notes: str = ""

    delivery_count: int = 0
    last_sent_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    responded_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        """Active invitations occupy the recipient's uniqueness slot."""
        return not self.status.is_terminal

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the invitation passed its expiry (never, for events)."""
        if self.expires_at is None:
            return False
        return (now or utcnow()) >= self.expires_at

    def can_transition_to(self, new_status: InvitationStatus) -> bool:
        return can_transition(self.status, new_status)

    @property
    def guest_count(self) -> int:
        """Seats this invitation takes at an event (guest plus optional +1)."""
        if self.status != InvitationStatus.CONFIRMED:
            return 0
        return 2 if self.plus_one else 1

    def transitioned(
        self,
        new_status: InvitationStatus,
        response: ResponderDetails | None = None,
    ) -> "Invitation":
        """Copy moved to ``new_status``.

        Args:
            new_status: Target status
            response: Responder details for confirm/decline

        Returns:
            Updated copy (nothing is persisted)

        Raises:
            InvalidTransitionError: If the move is not allowed from the
                current status
        """
        if not self.can_transition_to(new_status):
            raise InvalidTransitionError(self.status.value, new_status.value)
        if response is not None:
            return self._with_response(response, new_status)
        update: dict = {"status": new_status}
        if new_status in (InvitationStatus.CONFIRMED, InvitationStatus.DECLINED):
            update["responded_at"] = utcnow()
        return self.model_copy(update=update)

    def _with_response(
        self, details: ResponderDetails, status: InvitationStatus
    ) -> "Invitation":
        return self.model_copy(
            update={
                "status": status,
                "responded_at": utcnow(),
                "responder_name": details.name,
                "responder_phone": details.phone,
                "plus_one": details.plus_one and status == InvitationStatus.CONFIRMED,
                "plus_one_name": details.plus_one_name
                if details.plus_one and status == InvitationStatus.CONFIRMED
                else "",
                "dietary_restrictions": details.dietary_restrictions,
                "notes": details.notes,
                "user_id": self.user_id or details.user_id,
            }
        )
