"""Accept invitation use case (logged-in members)."""

from uuid import UUID

from pydantic import BaseModel

from elonara.application.usecase.base import BaseUseCase
from elonara.domain.error import NotAuthorizedError
from elonara.domain.model import ResponderDetails
from elonara.domain.service import InvitationService, RosterState
from elonara.domain.value import EntityType, UserId


class AcceptInvitationRequest(BaseModel):
    """Accept an invitation while logged in."""

    token: str
    user_id: UUID | None


class AcceptInvitationResponse(BaseModel):
    """Where accepting left the user."""

    entity_type: EntityType
    entity_id: UUID
    membership_id: UUID | None = None
    already_accepted: bool
    message: str


class AcceptInvitationUseCase(BaseUseCase):
    """Join a community (or confirm an event) from an invitation token."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(
        self, request: AcceptInvitationRequest
    ) -> AcceptInvitationResponse:
        """Execute accept use case.

        Raises:
            NotAuthorizedError: If nobody is logged in, or the invitation was
                sent to someone else
        """
        if request.user_id is None:
            raise NotAuthorizedError(
                "accept", "invitation", None, "Please log in to accept this invitation."
            )

        result = await self.invitation_service.accept(
            request.token, ResponderDetails(user_id=UserId(request.user_id))
        )

        membership_id = None
        if result.roster is not None and result.roster.membership is not None:
            membership_id = result.roster.membership.id

        if result.invitation.entity_type == EntityType.COMMUNITY:
            if result.roster is not None and result.roster.state == RosterState.MEMBER:
                message = "You have successfully joined the community!"
            else:
                message = "Invitation accepted successfully."
        else:
            message = "Invitation accepted successfully."

        return AcceptInvitationResponse(
            entity_type=result.invitation.entity_type,
            entity_id=result.invitation.entity_id,
            membership_id=membership_id,
            already_accepted=result.already_confirmed,
            message=message,
        )
