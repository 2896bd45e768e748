"""Send invitation use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from elonara.adapter.bluesky.identity import resolve_handle_to_did
from elonara.adapter.error import IdentityResolutionError
from elonara.application.usecase.base import BaseUseCase
from elonara.application.usecase.invitation.item import InvitationItem
from elonara.config import InvitationSettings
from elonara.domain.error import ValidationError
from elonara.domain.service import InvitationService
from elonara.domain.value import Channel, EntityId, EntityType, UserId


class SendInvitationRequest(BaseModel):
    """Request to invite one recipient."""

    entity_type: EntityType
    entity_id: UUID
    inviter_id: UUID | None
    recipient: str = Field(max_length=255)
    channel: Channel = Channel.EMAIL
    personal_message: str | None = Field(default=None, max_length=2000)


class SendInvitationResponse(BaseModel):
    """Response after inviting a recipient."""

    invitation: InvitationItem
    created: bool
    delivered: bool
    message: str


class SendInvitationUseCase(BaseUseCase):
    """Invite a recipient by email, shareable link or Bluesky."""

    def __init__(
        self, invitation_service: InvitationService, settings: InvitationSettings
    ) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation domain service
            settings: Invitation settings
        """
        self.invitation_service = invitation_service
        self.settings = settings

    async def _bluesky_recipient(self, recipient: str) -> str:
        """Accept a handle ("@alice.bsky.social") as well as a DID."""
        recipient = recipient.strip()
        if recipient.lower().startswith("did:"):
            return recipient

        handle = recipient.lstrip("@").lower()
        if "." not in handle:
            raise ValidationError("Please provide a valid Bluesky handle or DID.")
        try:
            did = await resolve_handle_to_did(handle)
        except IdentityResolutionError as e:
            logfire.warn("Bluesky handle resolution failed", handle=handle, error=str(e))
            raise ValidationError(f"Could not find the Bluesky account @{handle}.")
        return did.root

    async def execute(self, request: SendInvitationRequest) -> SendInvitationResponse:
        """Execute send invitation use case.

        Args:
            request: Send invitation request

        Returns:
            The (new or existing) invitation and what happened to it
        """
        recipient = request.recipient
        if request.channel == Channel.BLUESKY:
            recipient = await self._bluesky_recipient(recipient)

        outcome = await self.invitation_service.invite(
            entity_type=request.entity_type,
            entity_id=EntityId(request.entity_id),
            recipient=recipient,
            channel=request.channel,
            inviter_user_id=UserId(request.inviter_id) if request.inviter_id else None,
            personal_message=request.personal_message,
        )

        delivered = outcome.delivery is not None and outcome.delivery.success
        if not outcome.created:
            if request.channel == Channel.EMAIL:
                message = "This email has already been invited."
            else:
                message = "This recipient has already been invited."
        elif not delivered and outcome.delivery is not None:
            message = outcome.delivery.error_message or "Invitation saved, but delivery failed."
        elif request.channel == Channel.LINK:
            message = "Invitation link created."
        else:
            message = "Invitation sent successfully!"

        return SendInvitationResponse(
            invitation=InvitationItem.from_invitation(
                outcome.invitation, self.settings.base_url
            ),
            created=outcome.created,
            delivered=delivered,
            message=message,
        )
