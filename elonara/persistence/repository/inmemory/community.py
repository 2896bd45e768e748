"""In-memory community repository for testing."""

from typing import Optional

from elonara.domain.model import Community
from elonara.domain.repository import CommunityRepository
from elonara.domain.value import CommunityId, UserId

from .base import SnapshotMixin


class InMemoryCommunityRepository(SnapshotMixin, CommunityRepository):
    """In-memory implementation of CommunityRepository for testing."""

    _state_attrs = ("_communities",)

    def __init__(self) -> None:
        self._communities: dict[CommunityId, Community] = {}

    async def find_by_id(self, community_id: CommunityId) -> Optional[Community]:
        return self._communities.get(community_id)

    async def find_by_owner(self, owner_id: UserId) -> list[Community]:
        owned = [c for c in self._communities.values() if c.owner_id == owner_id]
        owned.sort(key=lambda c: c.created_at)
        return owned

    async def save(self, community: Community) -> Community:
        self._communities[community.id] = community
        return community
