"""Application layer DI providers."""

from dishka import Scope, provide

from elonara.adapter.bluesky.client import BlueskyClient
from elonara.application.usecase.auth import RegisterUserUseCase
from elonara.application.usecase.bluesky import (
    ListFollowersUseCase,
    SyncFollowersUseCase,
)
from elonara.application.usecase.invitation import (
    AcceptInvitationUseCase,
    CancelInvitationUseCase,
    GetRsvpUseCase,
    InviteFollowersUseCase,
    ListInvitationsUseCase,
    ResendInvitationUseCase,
    RespondRsvpUseCase,
    SendInvitationUseCase,
)
from elonara.config import InvitationSettings
from elonara.domain.service import (
    AccessService,
    InvitationService,
    JWTService,
    UserService,
)
from elonara.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    # Invitation use cases
    @provide
    def get_send_invitation_use_case(
        self, invitation_service: InvitationService, settings: InvitationSettings
    ) -> SendInvitationUseCase:
        """Provide send invitation use case."""
        return SendInvitationUseCase(
            invitation_service=invitation_service, settings=settings
        )

    @provide
    def get_list_invitations_use_case(
        self, invitation_service: InvitationService, settings: InvitationSettings
    ) -> ListInvitationsUseCase:
        """Provide list invitations use case."""
        return ListInvitationsUseCase(
            invitation_service=invitation_service, settings=settings
        )

    @provide
    def get_resend_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> ResendInvitationUseCase:
        """Provide resend invitation use case."""
        return ResendInvitationUseCase(invitation_service=invitation_service)

    @provide
    def get_cancel_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> CancelInvitationUseCase:
        """Provide cancel invitation use case."""
        return CancelInvitationUseCase(invitation_service=invitation_service)

    @provide
    def get_accept_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> AcceptInvitationUseCase:
        """Provide accept invitation use case."""
        return AcceptInvitationUseCase(invitation_service=invitation_service)

    @provide
    def get_get_rsvp_use_case(
        self,
        invitation_service: InvitationService,
        access_service: AccessService,
        settings: InvitationSettings,
    ) -> GetRsvpUseCase:
        """Provide RSVP page use case."""
        return GetRsvpUseCase(
            invitation_service=invitation_service,
            access_service=access_service,
            settings=settings,
        )

    @provide
    def get_respond_rsvp_use_case(
        self,
        invitation_service: InvitationService,
        access_service: AccessService,
        settings: InvitationSettings,
    ) -> RespondRsvpUseCase:
        """Provide RSVP form use case."""
        return RespondRsvpUseCase(
            invitation_service=invitation_service,
            access_service=access_service,
            settings=settings,
        )

    @provide
    def get_invite_followers_use_case(
        self, invitation_service: InvitationService
    ) -> InviteFollowersUseCase:
        """Provide bulk follower invite use case."""
        return InviteFollowersUseCase(invitation_service=invitation_service)

    # Auth use cases
    @provide
    def get_register_user_use_case(
        self, user_service: UserService, jwt_service: JWTService
    ) -> RegisterUserUseCase:
        """Provide registration use case."""
        return RegisterUserUseCase(user_service=user_service, jwt_service=jwt_service)

    # Bluesky use cases
    @provide
    def get_list_followers_use_case(
        self, bluesky_client: BlueskyClient
    ) -> ListFollowersUseCase:
        """Provide follower list use case."""
        return ListFollowersUseCase(bluesky_client=bluesky_client)

    @provide
    def get_sync_followers_use_case(
        self, bluesky_client: BlueskyClient
    ) -> SyncFollowersUseCase:
        """Provide follower sync use case."""
        return SyncFollowersUseCase(bluesky_client=bluesky_client)
