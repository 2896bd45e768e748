"""Invitation repository interface (the invitation store)."""

from abc import ABC, abstractmethod
from datetime import datetime

from elonara.domain.model.invitation import Invitation, ResponderDetails
from elonara.domain.value import (
    Channel,
    EntityId,
    EntityType,
    EventId,
    InvitationId,
    InvitationStatus,
    RsvpToken,
    UserId,
)


class InvitationRepository(ABC):
    """Repository for Invitation entity.

    Owns the uniqueness rule (one active invitation per entity and
    recipient) and makes every status change a compare-and-swap on the
    current status.
    """

    @abstractmethod
    async def upsert_pending(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        recipient: str,
        channel: Channel,
        inviter_id: UserId,
        personal_message: str = "",
        expires_at: datetime | None = None,
    ) -> tuple[Invitation, bool]:
        """Create a pending invitation unless an active one already exists.

        Safe under concurrency: two simultaneous calls for the same
        recipient leave exactly one active row.

        Args:
            entity_type: Event or community
            entity_id: Target entity
            recipient: Normalized recipient identifier
            channel: Channel the invitation is sent through
            inviter_id: User sending the invitation
            personal_message: Optional note included in the delivery
            expires_at: Expiry for the new row (ignored for existing rows)

        Returns:
            The active invitation and whether this call created it
        """
        pass

    @abstractmethod
    async def find_by_id(self, invitation_id: InvitationId) -> Invitation | None:
        """Find an invitation by ID.

        Args:
            invitation_id: The invitation's unique identifier

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_token(self, token: RsvpToken) -> Invitation | None:
        """Find an invitation by its RSVP token.

        Args:
            token: The RSVP token from the invitation URL

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def set_status(
        self,
        invitation_id: InvitationId,
        new_status: InvitationStatus,
        response: ResponderDetails | None = None,
        expected_status: InvitationStatus | None = None,
    ) -> Invitation:
        """Move an invitation to a new status.

        Args:
            invitation_id: Invitation to update
            new_status: Target status
            response: Responder details stored with confirm/decline
            expected_status: Status the caller based its decision on; the
                update only applies while the row still has it

        Returns:
            The updated invitation

        Raises:
            NotFoundError: If the invitation does not exist
            InvalidTransitionError: If the move is illegal from the current
                status, or the row no longer has ``expected_status``
        """
        pass

    @abstractmethod
    async def bind_user(
        self, invitation_id: InvitationId, user_id: UserId
    ) -> Invitation:
        """Attach an account to an invitation that has none yet.

        Args:
            invitation_id: Invitation to update
            user_id: Account to attach

        Returns:
            The invitation (unchanged if already bound)
        """
        pass

    @abstractmethod
    async def record_delivery(
        self, invitation_id: InvitationId, expires_at: datetime | None = None
    ) -> Invitation:
        """Bump delivery bookkeeping after a (re)send.

        Args:
            invitation_id: Invitation that was delivered
            expires_at: New expiry, if the invitation expires

        Returns:
            The updated invitation
        """
        pass

    @abstractmethod
    async def list_for_entity(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        status: InvitationStatus | None = None,
    ) -> list[Invitation]:
        """List invitations of an entity, newest first.

        Args:
            entity_type: Event or community
            entity_id: Target entity
            status: Optional status filter

        Returns:
            List of invitations
        """
        pass

    @abstractmethod
    async def find_unbound_for_recipients(
        self, recipients: list[str], statuses: list[InvitationStatus]
    ) -> list[Invitation]:
        """Find invitations addressed to any recipient with no account yet.

        Used when a new account registers with a matching email or DID.

        Args:
            recipients: Normalized recipient identifiers
            statuses: Statuses to include

        Returns:
            Matching invitations, oldest first
        """
        pass

    @abstractmethod
    async def count_guests(self, event_id: EventId) -> int:
        """Count confirmed guests of an event, plus-ones included.

        Args:
            event_id: Event to count

        Returns:
            Total seats taken
        """
        pass
