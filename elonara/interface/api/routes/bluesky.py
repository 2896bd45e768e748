"""Bluesky follower routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from elonara.application.usecase.bluesky import (
    ListFollowersRequest,
    ListFollowersUseCase,
    SyncFollowersRequest,
    SyncFollowersUseCase,
)
from elonara.domain.model import RequestContext
from elonara.domain.service import NonceGuard
from elonara.domain.value import NonceScope
from elonara.interface.api.envelope import Envelope, ok
from elonara.interface.api.security import require_nonce, rotate_nonce

router = APIRouter(prefix="/api/bluesky", tags=["bluesky"], route_class=DishkaRoute)


class SyncAPIRequest(BaseModel):
    nonce: str | None = None


@router.get("/followers", response_model=Envelope)
async def list_followers(
    use_case: FromDishka[ListFollowersUseCase],
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
) -> Envelope:
    """Cached followers, with a nonce for the bulk invite call."""
    result = await use_case.execute(ListFollowersRequest(user_id=context.user_id))
    nonce = await nonce_guard.issue(NonceScope.BLUESKY_ACTION, context.user_id)
    return ok(nonce=nonce, payload=result)


@router.post("/followers/sync", response_model=Envelope)
async def sync_followers(
    request: SyncAPIRequest,
    use_case: FromDishka[SyncFollowersUseCase],
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
) -> Envelope:
    """Refresh the follower cache from Bluesky."""
    await require_nonce(nonce_guard, context, NonceScope.BLUESKY_ACTION, request.nonce)
    result = await use_case.execute(SyncFollowersRequest(user_id=context.user_id))
    nonce = await rotate_nonce(nonce_guard, context, NonceScope.BLUESKY_ACTION)
    return ok(result.message, nonce, {"count": result.count})
