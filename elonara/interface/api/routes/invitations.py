"""Member invitation routes: accepting, and bulk Bluesky invites."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel, Field

from elonara.application.usecase.invitation import (
    AcceptInvitationRequest,
    AcceptInvitationUseCase,
    InviteFollowersRequest,
    InviteFollowersUseCase,
)
from elonara.domain.model import RequestContext
from elonara.domain.service import NonceGuard
from elonara.domain.value import EntityType, NonceScope
from elonara.interface.api.envelope import Envelope, fail, ok
from elonara.interface.api.security import require_nonce, rotate_nonce

router = APIRouter(
    prefix="/api/invitations", tags=["invitations"], route_class=DishkaRoute
)


class AcceptAPIRequest(BaseModel):
    """Accept an invitation while logged in."""

    token: str
    nonce: str | None = None


class InviteFollowersAPIRequest(BaseModel):
    """Followers selected on the Bluesky invite screen."""

    follower_dids: list[str] = Field(max_length=500)
    personal_message: str | None = Field(default=None, max_length=2000)
    nonce: str | None = None


@router.post("/accept", response_model=Envelope)
async def accept_invitation(
    request: AcceptAPIRequest,
    use_case: FromDishka[AcceptInvitationUseCase],
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
) -> Envelope:
    """Accept a community (or event) invitation as the logged-in user."""
    await require_nonce(
        nonce_guard, context, NonceScope.COMMUNITY_ACTION, request.nonce
    )
    result = await use_case.execute(
        AcceptInvitationRequest(token=request.token, user_id=context.user_id)
    )
    nonce = await rotate_nonce(nonce_guard, context, NonceScope.COMMUNITY_ACTION)
    return ok(result.message, nonce, result.model_dump(mode="json", exclude={"message"}))


@router.post("/bluesky/{entity_type}/{entity_id}", response_model=Envelope)
async def invite_bluesky_followers(
    entity_type: EntityType,
    entity_id: UUID,
    request: InviteFollowersAPIRequest,
    use_case: FromDishka[InviteFollowersUseCase],
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
) -> Envelope:
    """Invite selected Bluesky followers; partial failure is still a 200."""
    await require_nonce(nonce_guard, context, NonceScope.BLUESKY_ACTION, request.nonce)

    result = await use_case.execute(
        InviteFollowersRequest(
            entity_type=entity_type,
            entity_id=entity_id,
            inviter_id=context.user_id,
            follower_dids=request.follower_dids,
            personal_message=request.personal_message,
        )
    )
    nonce = await rotate_nonce(nonce_guard, context, NonceScope.BLUESKY_ACTION)
    data = result.model_dump(mode="json", exclude={"message"})
    if result.needs_reauth:
        data["nonce"] = nonce
        return fail(result.errors[-1], data)
    return ok(result.message, nonce, data)
