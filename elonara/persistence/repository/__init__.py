"""PostgreSQL repository implementations."""

from elonara.persistence.repository.bluesky import (
    PostgresBlueskyCredentialRepository,
    PostgresFollowerRepository,
)
from elonara.persistence.repository.community import PostgresCommunityRepository
from elonara.persistence.repository.event import PostgresEventRepository
from elonara.persistence.repository.invitation import PostgresInvitationRepository
from elonara.persistence.repository.membership import PostgresMembershipRepository
from elonara.persistence.repository.transaction import SqlAlchemyTransactionManager
from elonara.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresBlueskyCredentialRepository",
    "PostgresFollowerRepository",
    "PostgresCommunityRepository",
    "PostgresEventRepository",
    "PostgresInvitationRepository",
    "PostgresMembershipRepository",
    "PostgresUserRepository",
    "SqlAlchemyTransactionManager",
]
