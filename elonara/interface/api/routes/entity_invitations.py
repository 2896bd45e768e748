"""Host invitation routes for events and communities.

``/api/events/{id}/invitations`` and ``/api/communities/{id}/invitations``
share one implementation; the path segment selects the entity type and
the nonce scope.
"""

from enum import Enum
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, Response, status
from pydantic import BaseModel, Field

from elonara.application.usecase.invitation import (
    CancelInvitationRequest,
    CancelInvitationUseCase,
    ListInvitationsRequest,
    ListInvitationsUseCase,
    ResendInvitationRequest,
    ResendInvitationUseCase,
    SendInvitationRequest,
    SendInvitationUseCase,
)
from elonara.domain.model import RequestContext
from elonara.domain.service import NonceGuard
from elonara.domain.value import Channel, EntityType, InvitationStatus
from elonara.interface.api.envelope import Envelope, ok
from elonara.interface.api.security import require_nonce, rotate_nonce, scope_for

router = APIRouter(prefix="/api", tags=["invitations"], route_class=DishkaRoute)


class EntityPath(str, Enum):
    """Collection segment of the URL."""

    EVENTS = "events"
    COMMUNITIES = "communities"

    @property
    def entity_type(self) -> EntityType:
        if self is EntityPath.EVENTS:
            return EntityType.EVENT
        return EntityType.COMMUNITY


class SendInvitationAPIRequest(BaseModel):
    """API request for inviting one recipient."""

    recipient: str = Field(max_length=255)
    channel: Channel = Channel.EMAIL
    personal_message: str | None = Field(default=None, max_length=2000)
    nonce: str | None = None


class NonceAPIRequest(BaseModel):
    """Body of mutations that carry nothing but a nonce."""

    nonce: str | None = None


@router.post("/{entity_path}/{entity_id}/invitations", response_model=Envelope)
async def send_invitation(
    entity_path: EntityPath,
    entity_id: UUID,
    request: SendInvitationAPIRequest,
    response: Response,
    use_case: FromDishka[SendInvitationUseCase],
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
) -> Envelope:
    """Invite a recipient by email, link or Bluesky.

    Returns 201 for a new invitation, 200 when the recipient already had one.
    """
    scope = scope_for(entity_path.entity_type)
    await require_nonce(nonce_guard, context, scope, request.nonce)

    result = await use_case.execute(
        SendInvitationRequest(
            entity_type=entity_path.entity_type,
            entity_id=entity_id,
            inviter_id=context.user_id,
            recipient=request.recipient,
            channel=request.channel,
            personal_message=request.personal_message,
        )
    )
    if result.created:
        response.status_code = status.HTTP_201_CREATED

    nonce = await rotate_nonce(nonce_guard, context, scope)
    return ok(
        result.message,
        nonce,
        {
            "invitation": result.invitation.model_dump(mode="json"),
            "created": result.created,
            "delivered": result.delivered,
        },
    )


@router.get("/{entity_path}/{entity_id}/invitations", response_model=Envelope)
async def list_invitations(
    entity_path: EntityPath,
    entity_id: UUID,
    use_case: FromDishka[ListInvitationsUseCase],
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
    status_filter: InvitationStatus | None = Query(default=None, alias="status"),
) -> Envelope:
    """Guest list / invitation list, with a nonce for follow-up actions."""
    result = await use_case.execute(
        ListInvitationsRequest(
            entity_type=entity_path.entity_type,
            entity_id=entity_id,
            user_id=context.user_id,
            status=status_filter,
        )
    )
    nonce = await nonce_guard.issue(scope_for(entity_path.entity_type), context.user_id)
    return ok(nonce=nonce, payload=result)


@router.post(
    "/{entity_path}/{entity_id}/invitations/{invitation_id}/resend",
    response_model=Envelope,
)
async def resend_invitation(
    entity_path: EntityPath,
    entity_id: UUID,
    invitation_id: UUID,
    request: NonceAPIRequest,
    use_case: FromDishka[ResendInvitationUseCase],
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
) -> Envelope:
    """Resend a pending invitation; 409 once the guest has responded."""
    scope = scope_for(entity_path.entity_type)
    await require_nonce(nonce_guard, context, scope, request.nonce)

    result = await use_case.execute(
        ResendInvitationRequest(
            entity_type=entity_path.entity_type,
            entity_id=entity_id,
            invitation_id=invitation_id,
            user_id=context.user_id,
        )
    )
    nonce = await rotate_nonce(nonce_guard, context, scope)
    return ok(result.message, nonce, {"delivered": result.delivered})


@router.delete(
    "/{entity_path}/{entity_id}/invitations/{invitation_id}",
    response_model=Envelope,
)
async def cancel_invitation(
    entity_path: EntityPath,
    entity_id: UUID,
    invitation_id: UUID,
    use_case: FromDishka[CancelInvitationUseCase],
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
    nonce: str | None = Query(default=None),
) -> Envelope:
    """Remove a guest. A second removal answers 409 "already cancelled"."""
    scope = scope_for(entity_path.entity_type)
    await require_nonce(nonce_guard, context, scope, nonce)

    result = await use_case.execute(
        CancelInvitationRequest(
            entity_type=entity_path.entity_type,
            entity_id=entity_id,
            invitation_id=invitation_id,
            user_id=context.user_id,
        )
    )
    return ok(result.message, await rotate_nonce(nonce_guard, context, scope))
