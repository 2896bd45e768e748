"""Domain layer DI providers."""

from dishka import Scope, provide

from elonara.config import AuthSettings, InvitationSettings, NonceSettings
from elonara.domain.model import RequestContext
from elonara.domain.repository import (
    CommunityRepository,
    EventRepository,
    InvitationRepository,
    MembershipRepository,
    NonceStore,
    TransactionManager,
    UserRepository,
)
from elonara.domain.service import (
    AccessService,
    ChannelAdapter,
    CommunityService,
    InvitationService,
    JWTService,
    NonceGuard,
    RosterReconciler,
    UserService,
)
from elonara.domain.value import Channel
from elonara.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_nonce_guard(
        self,
        nonce_store: NonceStore,
        settings: NonceSettings,
        context: RequestContext,
    ) -> NonceGuard:
        """Provide nonce guard bound to the caller's session."""
        return NonceGuard(nonce_store=nonce_store, settings=settings, context=context)

    @provide
    def get_access_service(
        self,
        event_repository: EventRepository,
        community_repository: CommunityRepository,
        membership_repository: MembershipRepository,
        context: RequestContext,
    ) -> AccessService:
        """Provide permission checks."""
        return AccessService(
            event_repository=event_repository,
            community_repository=community_repository,
            membership_repository=membership_repository,
            context=context,
        )

    @provide
    def get_roster_reconciler(
        self,
        invitation_repository: InvitationRepository,
        membership_repository: MembershipRepository,
        user_repository: UserRepository,
    ) -> RosterReconciler:
        """Provide roster reconciler."""
        return RosterReconciler(
            invitation_repository=invitation_repository,
            membership_repository=membership_repository,
            user_repository=user_repository,
        )

    @provide
    def get_invitation_service(
        self,
        invitation_repository: InvitationRepository,
        user_repository: UserRepository,
        transaction_manager: TransactionManager,
        access_service: AccessService,
        roster_reconciler: RosterReconciler,
        channels: dict[Channel, ChannelAdapter],
        settings: InvitationSettings,
    ) -> InvitationService:
        """Provide invitation domain service."""
        return InvitationService(
            invitation_repository=invitation_repository,
            user_repository=user_repository,
            transaction_manager=transaction_manager,
            access_service=access_service,
            roster_reconciler=roster_reconciler,
            channels=channels,
            settings=settings,
        )

    @provide
    def get_community_service(
        self,
        community_repository: CommunityRepository,
        roster_reconciler: RosterReconciler,
    ) -> CommunityService:
        """Provide community domain service."""
        return CommunityService(
            community_repository=community_repository,
            roster_reconciler=roster_reconciler,
        )

    @provide
    def get_user_service(
        self,
        user_repository: UserRepository,
        transaction_manager: TransactionManager,
        community_service: CommunityService,
        roster_reconciler: RosterReconciler,
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository,
            transaction_manager=transaction_manager,
            community_service=community_service,
            roster_reconciler=roster_reconciler,
        )
