"""Repository interfaces (domain layer)."""

from elonara.domain.repository.bluesky import (
    BlueskyCredentialRepository,
    FollowerRepository,
)
from elonara.domain.repository.community import CommunityRepository
from elonara.domain.repository.event import EventRepository
from elonara.domain.repository.invitation import InvitationRepository
from elonara.domain.repository.membership import MembershipRepository
from elonara.domain.repository.nonce import NonceStore
from elonara.domain.repository.transaction import TransactionManager
from elonara.domain.repository.user import UserRepository

__all__ = [
    "BlueskyCredentialRepository",
    "FollowerRepository",
    "CommunityRepository",
    "EventRepository",
    "InvitationRepository",
    "MembershipRepository",
    "NonceStore",
    "TransactionManager",
    "UserRepository",
]
