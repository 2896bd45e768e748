"""Cancel invitation use case."""

from uuid import UUID

from pydantic import BaseModel

from elonara.application.usecase.base import BaseUseCase
from elonara.domain.error import AlreadyResolvedError, NotFoundError
from elonara.domain.service import InvitationService
from elonara.domain.value import EntityType, InvitationId, InvitationStatus, UserId


class CancelInvitationRequest(BaseModel):
    """Request to remove a guest / withdraw an invitation."""

    entity_type: EntityType
    entity_id: UUID
    invitation_id: UUID
    user_id: UUID | None


class CancelInvitationResponse(BaseModel):
    """Response after a cancellation."""

    message: str


class CancelInvitationUseCase(BaseUseCase):
    """Cancel an invitation; a second cancel reports "already resolved"."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(
        self, request: CancelInvitationRequest
    ) -> CancelInvitationResponse:
        """Execute cancel use case.

        Raises:
            NotFoundError: If the invitation does not belong to the entity
            AlreadyResolvedError: If it was already cancelled
        """
        invitation_id = InvitationId(request.invitation_id)
        invitation = await self.invitation_service.get_invitation(invitation_id)
        if (
            invitation.entity_type != request.entity_type
            or invitation.entity_id != request.entity_id
        ):
            raise NotFoundError("Invitation", str(request.invitation_id))

        cancelled = await self.invitation_service.cancel(
            invitation_id, UserId(request.user_id) if request.user_id else None
        )
        if not cancelled:
            raise AlreadyResolvedError(
                InvitationStatus.CANCELLED.value,
                "This invitation has already been cancelled.",
            )
        return CancelInvitationResponse(message="Invitation cancelled successfully.")
