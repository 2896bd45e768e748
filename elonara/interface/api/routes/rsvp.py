"""Guest RSVP routes.

The token in the URL is the capability: guests need no account.
"""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from elonara.application.usecase.invitation import (
    GetRsvpRequest,
    GetRsvpUseCase,
    RespondRsvpRequest,
    RespondRsvpUseCase,
)
from elonara.domain.model import RequestContext
from elonara.domain.service import NonceGuard
from elonara.domain.value import NonceScope, RsvpResponse
from elonara.interface.api.envelope import Envelope, ok
from elonara.interface.api.security import require_nonce, rotate_nonce

router = APIRouter(tags=["rsvp"], route_class=DishkaRoute)


class RsvpAPIRequest(BaseModel):
    """RSVP form body."""

    response: RsvpResponse
    name: str = Field(default="", max_length=255)
    phone: str = Field(default="", max_length=50)
    plus_one: bool = False
    plus_one_name: str = Field(default="", max_length=255)
    dietary_restrictions: str = Field(default="", max_length=1000)
    notes: str = Field(default="", max_length=2000)
    nonce: str | None = None


@router.get("/rsvp/{token}", response_model=Envelope)
async def get_rsvp(
    token: str,
    use_case: FromDishka[GetRsvpUseCase],
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
    rsvp: RsvpResponse | None = Query(default=None),
) -> Envelope:
    """Invitation context plus a guest nonce for the RSVP form.

    ``?rsvp=yes`` (the email's one-click link) confirms; ``?rsvp=no``
    only preselects the answer for the form POST.
    """
    result = await use_case.execute(
        GetRsvpRequest(token=token, response=rsvp, user_id=context.user_id)
    )
    nonce = await nonce_guard.issue(NonceScope.RSVP_ACTION, context.user_id)
    return ok(result.message, nonce, result.model_dump(mode="json", exclude={"message"}))


@router.post("/rsvp/{token}", response_model=Envelope)
async def respond_rsvp(
    token: str,
    request: RsvpAPIRequest,
    use_case: FromDishka[RespondRsvpUseCase],
    nonce_guard: FromDishka[NonceGuard],
    context: FromDishka[RequestContext],
) -> Envelope:
    """Submit the RSVP form."""
    await require_nonce(nonce_guard, context, NonceScope.RSVP_ACTION, request.nonce)

    result = await use_case.execute(
        RespondRsvpRequest(
            token=token,
            response=request.response,
            name=request.name,
            phone=request.phone,
            plus_one=request.plus_one,
            plus_one_name=request.plus_one_name,
            dietary_restrictions=request.dietary_restrictions,
            notes=request.notes,
            user_id=context.user_id,
        )
    )
    nonce = await rotate_nonce(nonce_guard, context, NonceScope.RSVP_ACTION)
    return ok(result.message, nonce, result.model_dump(mode="json", exclude={"message"}))
