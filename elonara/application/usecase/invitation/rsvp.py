"""Guest RSVP use cases (token links)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from elonara.application.usecase.base import BaseUseCase
from elonara.application.usecase.invitation.item import InvitationItem
from elonara.config import InvitationSettings
from elonara.domain.model import Event, Invitation, ResponderDetails
from elonara.domain.service import AccessService, InvitationService
from elonara.domain.value import EntityType, EventId, RsvpResponse, UserId


class RsvpEntity(BaseModel):
    """What the guest was invited to."""

    entity_type: EntityType
    id: UUID
    name: str
    description: str
    event_date: datetime | None = None
    venue_info: str = ""
    allow_plus_ones: bool = False


class RsvpResponseBody(BaseModel):
    """Invitation context returned to the RSVP page."""

    invitation: InvitationItem
    entity: RsvpEntity
    guest_total: int | None = None
    message: str | None = None

    # Answer pre-filled on the form from a one-click link, not yet recorded
    preselected: RsvpResponse | None = None


class _RsvpBase(BaseUseCase):
    def __init__(
        self,
        invitation_service: InvitationService,
        access_service: AccessService,
        settings: InvitationSettings,
    ) -> None:
        self.invitation_service = invitation_service
        self.access_service = access_service
        self.settings = settings

    async def _body(
        self, invitation: Invitation, message: str | None = None
    ) -> RsvpResponseBody:
        entity = await self.access_service.load_entity(
            invitation.entity_type, invitation.entity_id
        )
        guest_total = None
        if isinstance(entity, Event):
            summary = RsvpEntity(
                entity_type=EntityType.EVENT,
                id=entity.id,
                name=entity.title,
                description=entity.description,
                event_date=entity.event_date,
                venue_info=entity.venue_info,
                allow_plus_ones=entity.allow_plus_ones,
            )
            guest_total = await self.invitation_service.guest_total(EventId(entity.id))
        else:
            summary = RsvpEntity(
                entity_type=EntityType.COMMUNITY,
                id=entity.id,
                name=entity.name,
                description=entity.description,
            )
        return RsvpResponseBody(
            invitation=InvitationItem.from_invitation(invitation, self.settings.base_url),
            entity=summary,
            guest_total=guest_total,
            message=message,
        )

    async def _apply(
        self, token: str, response: RsvpResponse, details: ResponderDetails
    ) -> RsvpResponseBody:
        if response == RsvpResponse.YES:
            result = await self.invitation_service.accept(token, details)
            if result.invitation.entity_type == EntityType.COMMUNITY:
                message = "You have successfully joined the community!"
            else:
                message = "RSVP confirmed! We'll see you there."
            return await self._body(result.invitation, message)

        invitation = await self.invitation_service.decline(token, details)
        return await self._body(invitation, "RSVP updated.")


class GetRsvpRequest(BaseModel):
    """Open an RSVP link, optionally with a one-click answer."""

    token: str
    response: RsvpResponse | None = None
    user_id: UUID | None = None


class GetRsvpUseCase(_RsvpBase):
    """Invitation context for an RSVP token.

    A ``?rsvp=yes`` link from the invitation email confirms directly: the
    token is the capability and accepting twice is harmless. ``?rsvp=no``
    only preselects the answer; declining needs the form POST.
    """

    async def execute(self, request: GetRsvpRequest) -> RsvpResponseBody:
        if request.response != RsvpResponse.YES:
            invitation = await self.invitation_service.get_by_token(request.token)
            body = await self._body(invitation)
            body.preselected = request.response
            return body

        details = ResponderDetails(
            user_id=UserId(request.user_id) if request.user_id else None
        )
        return await self._apply(request.token, request.response, details)


class RespondRsvpRequest(BaseModel):
    """RSVP form submission."""

    token: str
    response: RsvpResponse
    name: str = Field(default="", max_length=255)
    phone: str = Field(default="", max_length=50)
    plus_one: bool = False
    plus_one_name: str = Field(default="", max_length=255)
    dietary_restrictions: str = Field(default="", max_length=1000)
    notes: str = Field(default="", max_length=2000)
    user_id: UUID | None = None


class RespondRsvpUseCase(_RsvpBase):
    """Record a guest's answer with their details."""

    async def execute(self, request: RespondRsvpRequest) -> RsvpResponseBody:
        details = ResponderDetails(
            name=request.name.strip(),
            phone=request.phone.strip(),
            plus_one=request.plus_one,
            plus_one_name=request.plus_one_name.strip(),
            dietary_restrictions=request.dietary_restrictions.strip(),
            notes=request.notes.strip(),
            user_id=UserId(request.user_id) if request.user_id else None,
        )
        return await self._apply(request.token, request.response, details)
