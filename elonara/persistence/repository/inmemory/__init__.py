"""In-memory repository implementations for testing."""

from .bluesky import InMemoryBlueskyCredentialRepository, InMemoryFollowerRepository
from .community import InMemoryCommunityRepository
from .event import InMemoryEventRepository
from .invitation import InMemoryInvitationRepository
from .membership import InMemoryMembershipRepository
from .transaction import InMemoryTransactionManager
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryBlueskyCredentialRepository",
    "InMemoryFollowerRepository",
    "InMemoryCommunityRepository",
    "InMemoryEventRepository",
    "InMemoryInvitationRepository",
    "InMemoryMembershipRepository",
    "InMemoryTransactionManager",
    "InMemoryUserRepository",
]
