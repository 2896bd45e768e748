"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from elonara.config import InvitationSettings, Settings
from elonara.domain.repository import (
    BlueskyCredentialRepository,
    CommunityRepository,
    EventRepository,
    FollowerRepository,
    InvitationRepository,
    MembershipRepository,
    TransactionManager,
    UserRepository,
)
from elonara.persistence.database import create_engine, create_session_factory
from elonara.persistence.repository import (
    PostgresBlueskyCredentialRepository,
    PostgresCommunityRepository,
    PostgresEventRepository,
    PostgresFollowerRepository,
    PostgresInvitationRepository,
    PostgresMembershipRepository,
    PostgresUserRepository,
    SqlAlchemyTransactionManager,
)
from elonara.util.di.base import ProviderBase
from elonara.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        Atomic blocks commit as they finish; whatever is left (reads) is
        committed at the end of the request, or rolled back on error.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_transaction_manager(self, session: AsyncSession) -> TransactionManager:
        """Provide transaction manager on the request's session."""
        return SqlAlchemyTransactionManager(session)

    @provide(scope=Scope.REQUEST)
    def get_invitation_repository(
        self, session: AsyncSession, settings: InvitationSettings
    ) -> InvitationRepository:
        """Provide Invitation repository."""
        return PostgresInvitationRepository(session, token_bytes=settings.token_bytes)

    @provide(scope=Scope.REQUEST)
    def get_membership_repository(self, session: AsyncSession) -> MembershipRepository:
        """Provide Membership repository."""
        return PostgresMembershipRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        """Provide User repository."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_event_repository(self, session: AsyncSession) -> EventRepository:
        """Provide Event repository."""
        return PostgresEventRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_community_repository(self, session: AsyncSession) -> CommunityRepository:
        """Provide Community repository."""
        return PostgresCommunityRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_bluesky_credential_repository(
        self, session: AsyncSession
    ) -> BlueskyCredentialRepository:
        """Provide Bluesky credential repository."""
        return PostgresBlueskyCredentialRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_follower_repository(self, session: AsyncSession) -> FollowerRepository:
        """Provide follower cache repository."""
        return PostgresFollowerRepository(session)
