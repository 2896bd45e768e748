"""Account routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Response, status
from pydantic import BaseModel, Field

from elonara.application.usecase.auth import RegisterUserRequest, RegisterUserUseCase
from elonara.config import Settings
from elonara.domain.service import JWTService
from elonara.interface.api.envelope import Envelope, ok

router = APIRouter(prefix="/api/auth", tags=["auth"], route_class=DishkaRoute)


class RegisterAPIRequest(BaseModel):
    """Sign-up form."""

    email: str = Field(max_length=255)
    display_name: str = Field(max_length=255)
    bluesky_did: str | None = None
    bluesky_handle: str | None = None


@router.post("/register", response_model=Envelope, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterAPIRequest,
    response: Response,
    use_case: FromDishka[RegisterUserUseCase],
    settings: FromDishka[Settings],
    jwt_service: FromDishka[JWTService],
) -> Envelope:
    """Create an account and log it in.

    Invitations already sent to the email (or Bluesky DID) are attached to
    the new account.
    """
    result = await use_case.execute(
        RegisterUserRequest(
            email=request.email,
            display_name=request.display_name,
            bluesky_did=request.bluesky_did,
            bluesky_handle=request.bluesky_handle,
        )
    )

    # Same cookie the auth service sets at login
    response.set_cookie(
        key=jwt_service.cookie_name,
        value=result.token,
        httponly=True,
        secure=settings.environment == "production",
        samesite="lax",
        max_age=jwt_service.max_age_seconds,
    )
    return ok(
        "Welcome to Elonara Social!",
        payload=result.model_dump(mode="json", exclude={"token"}),
    )
