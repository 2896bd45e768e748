"""In-memory invitation repository for testing."""

import secrets
from datetime import datetime
from typing import Optional
from uuid import uuid4

from elonara.domain.error import InvalidTransitionError, NotFoundError
from elonara.domain.model import Invitation, ResponderDetails
from elonara.domain.repository import InvitationRepository
from elonara.domain.value import (
    Channel,
    EntityId,
    EntityType,
    EventId,
    InvitationId,
    InvitationStatus,
    RsvpToken,
    UserId,
    utcnow,
)

from .base import SnapshotMixin


class InMemoryInvitationRepository(SnapshotMixin, InvitationRepository):
    """In-memory implementation of InvitationRepository for testing.

    Methods do not await between their check and their write, so they are
    atomic on a single event loop just like the conditional SQL updates.
    """

    _state_attrs = ("_invitations",)

    def __init__(self, token_bytes: int = 32) -> None:
        self._invitations: list[Invitation] = []
        self.token_bytes = token_bytes

    def _active_for(
        self, entity_type: EntityType, entity_id: EntityId, recipient: str
    ) -> Optional[Invitation]:
        for invitation in self._invitations:
            if (
                invitation.entity_type == entity_type
                and invitation.entity_id == entity_id
                and invitation.recipient_identifier == recipient
                and invitation.is_active
            ):
                return invitation
        return None

    def _replace(self, invitation: Invitation) -> None:
        for i, existing in enumerate(self._invitations):
            if existing.id == invitation.id:
                self._invitations[i] = invitation
                return

    async def upsert_pending(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        recipient: str,
        channel: Channel,
        inviter_id: UserId,
        personal_message: str = "",
        expires_at: Optional[datetime] = None,
    ) -> tuple[Invitation, bool]:
        """Return the active invitation or append a new pending one."""
        existing = self._active_for(entity_type, entity_id, recipient)
        if existing:
            return existing, False

        invitation = Invitation(
            id=InvitationId(uuid4()),
            entity_type=entity_type,
            entity_id=entity_id,
            recipient_identifier=recipient,
            status=InvitationStatus.PENDING,
            rsvp_token=RsvpToken(secrets.token_hex(self.token_bytes)),
            source_channel=channel,
            inviter_id=inviter_id,
            personal_message=personal_message,
            expires_at=expires_at,
            created_at=utcnow(),
        )
        self._invitations.append(invitation)
        return invitation, True

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID."""
        for invitation in self._invitations:
            if invitation.id == invitation_id:
                return invitation
        return None

    async def find_by_token(self, token: RsvpToken) -> Optional[Invitation]:
        """Find an invitation by its RSVP token."""
        for invitation in self._invitations:
            if invitation.rsvp_token == token:
                return invitation
        return None

    async def set_status(
        self,
        invitation_id: InvitationId,
        new_status: InvitationStatus,
        response: ResponderDetails | None = None,
        expected_status: InvitationStatus | None = None,
    ) -> Invitation:
        """Validate the transition and replace the stored row."""
        current = await self.find_by_id(invitation_id)
        if current is None:
            raise NotFoundError("Invitation", str(invitation_id))
        if expected_status is not None and current.status != expected_status:
            raise InvalidTransitionError(current.status.value, new_status.value)

        updated = current.transitioned(new_status, response)
        self._replace(updated)
        return updated

    async def bind_user(
        self, invitation_id: InvitationId, user_id: UserId
    ) -> Invitation:
        """Attach an account if none is attached yet."""
        invitation = await self.find_by_id(invitation_id)
        if invitation is None:
            raise NotFoundError("Invitation", str(invitation_id))
        if invitation.user_id is not None:
            return invitation

        updated = invitation.model_copy(update={"user_id": user_id})
        self._replace(updated)
        return updated

    async def record_delivery(
        self, invitation_id: InvitationId, expires_at: Optional[datetime] = None
    ) -> Invitation:
        """Increment the delivery counter and refresh expiry."""
        invitation = await self.find_by_id(invitation_id)
        if invitation is None:
            raise NotFoundError("Invitation", str(invitation_id))

        update: dict = {
            "delivery_count": invitation.delivery_count + 1,
            "last_sent_at": utcnow(),
        }
        if expires_at is not None:
            update["expires_at"] = expires_at
        updated = invitation.model_copy(update=update)
        self._replace(updated)
        return updated

    async def list_for_entity(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        status: Optional[InvitationStatus] = None,
    ) -> list[Invitation]:
        """List invitations of an entity, newest first."""
        matches = [
            invitation
            for invitation in self._invitations
            if invitation.entity_type == entity_type
            and invitation.entity_id == entity_id
            and (status is None or invitation.status == status)
        ]
        matches.sort(key=lambda inv: inv.created_at, reverse=True)
        return matches

    async def find_unbound_for_recipients(
        self, recipients: list[str], statuses: list[InvitationStatus]
    ) -> list[Invitation]:
        """Find unbound invitations addressed to any of ``recipients``."""
        wanted = set(recipients)
        matches = [
            invitation
            for invitation in self._invitations
            if invitation.recipient_identifier in wanted
            and invitation.status in statuses
            and invitation.user_id is None
        ]
        matches.sort(key=lambda inv: inv.created_at)
        return matches

    async def count_guests(self, event_id: EventId) -> int:
        """Sum of confirmed guests and their plus-ones."""
        return sum(
            invitation.guest_count
            for invitation in self._invitations
            if invitation.entity_type == EntityType.EVENT
            and invitation.entity_id == event_id
        )
