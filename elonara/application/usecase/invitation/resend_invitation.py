"""Resend invitation use case."""

from uuid import UUID

from pydantic import BaseModel

from elonara.application.usecase.base import BaseUseCase
from elonara.domain.error import AlreadyResolvedError, NotFoundError
from elonara.domain.service import InvitationService
from elonara.domain.value import (
    Channel,
    EntityType,
    InvitationId,
    InvitationStatus,
    UserId,
)

_RESENT_MESSAGES = {
    Channel.EMAIL: "Invitation email resent successfully.",
    Channel.BLUESKY: "Bluesky invitation resent successfully.",
    Channel.LINK: "Invitation link is ready to share again.",
}

_UNDELIVERED_MESSAGES = {
    Channel.EMAIL: "Invitation resent. Email delivery may have failed.",
    Channel.BLUESKY: "Invitation resent. The Bluesky message may not have been delivered.",
    Channel.LINK: "Invitation resent. The link could not be prepared.",
}


class ResendInvitationRequest(BaseModel):
    """Request to resend one invitation of an entity."""

    entity_type: EntityType
    entity_id: UUID
    invitation_id: UUID
    user_id: UUID | None


class ResendInvitationResponse(BaseModel):
    """Response after a resend."""

    delivered: bool
    message: str


class ResendInvitationUseCase(BaseUseCase):
    """Deliver a pending invitation again, same token."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(
        self, request: ResendInvitationRequest
    ) -> ResendInvitationResponse:
        """Execute resend use case.

        Raises:
            NotFoundError: If the invitation does not belong to the entity
            AlreadyResolvedError: If the guest already responded
        """
        invitation = await self.invitation_service.get_invitation(
            InvitationId(request.invitation_id)
        )
        if (
            invitation.entity_type != request.entity_type
            or invitation.entity_id != request.entity_id
        ):
            raise NotFoundError("Invitation", str(request.invitation_id))

        delivered = await self.invitation_service.resend(
            invitation.id, UserId(request.user_id) if request.user_id else None
        )
        if delivered:
            return ResendInvitationResponse(
                delivered=True, message=_RESENT_MESSAGES[invitation.source_channel]
            )

        current = await self.invitation_service.get_invitation(invitation.id)
        if current.status in (InvitationStatus.CONFIRMED, InvitationStatus.DECLINED):
            raise AlreadyResolvedError(
                current.status.value,
                "This guest has already responded. Remove them before sending a new invitation.",
            )
        if current.status == InvitationStatus.CANCELLED:
            raise AlreadyResolvedError(current.status.value)
        return ResendInvitationResponse(
            delivered=False, message=_UNDELIVERED_MESSAGES[current.source_channel]
        )
