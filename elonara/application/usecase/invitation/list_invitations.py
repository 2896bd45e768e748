"""List invitations use case."""

from uuid import UUID

from pydantic import BaseModel

from elonara.application.usecase.base import BaseUseCase
from elonara.application.usecase.invitation.item import InvitationItem
from elonara.config import InvitationSettings
from elonara.domain.service import InvitationService
from elonara.domain.value import EntityId, EntityType, EventId, InvitationStatus, UserId


class ListInvitationsRequest(BaseModel):
    """Request for an entity's invitations."""

    entity_type: EntityType
    entity_id: UUID
    user_id: UUID | None
    status: InvitationStatus | None = None


class ListInvitationsResponse(BaseModel):
    """An entity's invitations, newest first."""

    invitations: list[InvitationItem]

    # Events only: confirmed guests plus their plus-ones
    guest_total: int | None = None


class ListInvitationsUseCase(BaseUseCase):
    """Guest list of an event, or pending/accepted invitations of a community."""

    def __init__(
        self, invitation_service: InvitationService, settings: InvitationSettings
    ) -> None:
        self.invitation_service = invitation_service
        self.settings = settings

    async def execute(self, request: ListInvitationsRequest) -> ListInvitationsResponse:
        invitations = await self.invitation_service.list_invitations(
            request.entity_type,
            EntityId(request.entity_id),
            UserId(request.user_id) if request.user_id else None,
            request.status,
        )

        guest_total = None
        if request.entity_type == EntityType.EVENT:
            guest_total = await self.invitation_service.guest_total(
                EventId(request.entity_id)
            )

        return ListInvitationsResponse(
            invitations=[
                InvitationItem.from_invitation(i, self.settings.base_url)
                for i in invitations
            ],
            guest_total=guest_total,
        )
