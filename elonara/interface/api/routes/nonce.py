"""Nonce issuing route."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query

from elonara.domain.model import RequestContext
from elonara.domain.service import NonceGuard
from elonara.domain.value import NonceScope
from elonara.interface.api.envelope import Envelope, ok

router = APIRouter(prefix="/api", tags=["security"], route_class=DishkaRoute)


@router.get("/nonce", response_model=Envelope)
async def issue_nonce(
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
    scope: NonceScope = Query(...),
) -> Envelope:
    """Issue a nonce for an action scope.

    Stands in for the nonce a server-rendered page would embed.
    """
    nonce = await nonce_guard.issue(scope, context.user_id)
    return ok(nonce=nonce)
