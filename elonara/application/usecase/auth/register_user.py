"""Register user use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from elonara.application.usecase.base import BaseUseCase
from elonara.domain.service import JWTService, RosterState, UserService


class RegisterUserRequest(BaseModel):
    """New account details."""

    email: str = Field(max_length=255)
    display_name: str = Field(max_length=255)
    bluesky_did: str | None = None
    bluesky_handle: str | None = None


class RegisterUserResponse(BaseModel):
    """Created account and session token."""

    user_id: UUID
    display_name: str
    token: str
    community_ids: list[UUID]

    # Communities joined through invitations accepted before registering
    joined_community_ids: list[UUID]
    attached_invitations: int


class RegisterUserUseCase(BaseUseCase):
    """Create an account and pick up invitations already waiting for it."""

    def __init__(self, user_service: UserService, jwt_service: JWTService) -> None:
        """Initialize use case.

        Args:
            user_service: User domain service
            jwt_service: JWT domain service
        """
        self.user_service = user_service
        self.jwt_service = jwt_service

    async def execute(self, request: RegisterUserRequest) -> RegisterUserResponse:
        result = await self.user_service.register(
            email=request.email,
            display_name=request.display_name,
            bluesky_did=request.bluesky_did,
            bluesky_handle=request.bluesky_handle,
        )
        token = self.jwt_service.issue_session(result.user)
        return RegisterUserResponse(
            user_id=result.user.id,
            display_name=result.user.display_name,
            token=token,
            community_ids=[c.id for c in result.communities],
            joined_community_ids=[
                r.invitation.entity_id
                for r in result.attached
                if r.state == RosterState.MEMBER
            ],
            attached_invitations=len(result.attached),
        )
