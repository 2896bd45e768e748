"""Community domain service."""

from uuid import uuid4

import logfire

from elonara.domain.error import NotFoundError
from elonara.domain.model import Community, User
from elonara.domain.repository import CommunityRepository
from elonara.domain.value import (
    CommunityId,
    CommunityKind,
    EntityType,
    MembershipRole,
    Slug,
    UserId,
)

from .base import Service
from .roster_reconciler import RosterReconciler


class CommunityService(Service):
    """Domain service for community operations."""

    def __init__(
        self,
        community_repository: CommunityRepository,
        roster_reconciler: RosterReconciler,
    ) -> None:
        """Initialize community service.

        Args:
            community_repository: Community repository
            roster_reconciler: Seeds the owner membership
        """
        self.community_repository = community_repository
        self.roster_reconciler = roster_reconciler

    async def get_by_id(self, community_id: CommunityId) -> Community:
        """Get community by ID.

        Raises:
            NotFoundError: If community not found
        """
        community = await self.community_repository.find_by_id(community_id)
        if community is None:
            raise NotFoundError("Community", str(community_id))
        return community

    async def create_community(
        self,
        owner_id: UserId,
        name: str,
        kind: CommunityKind = CommunityKind.PUBLIC,
        description: str = "",
    ) -> Community:
        """Create a community and make its creator the owner.

        Callers wrap this in a transaction together with whatever else
        they create.

        Args:
            owner_id: Creating user
            name: Display name
            kind: Public community or private circle
            description: Optional description

        Returns:
            Created community
        """
        with logfire.span(
            "community_service.create_community",
            owner_id=str(owner_id),
            kind=kind.value,
        ):
            community_id = CommunityId(uuid4())
            community = await self.community_repository.save(
                Community(
                    id=community_id,
                    owner_id=owner_id,
                    name=name,
                    slug=Slug.from_name(name, community_id.hex[:8]),
                    kind=kind,
                    description=description,
                )
            )
            await self.roster_reconciler.seed_owner(
                EntityType.COMMUNITY, community.id, owner_id, MembershipRole.OWNER
            )
            logfire.info(
                "Community created", community_id=str(community.id), kind=kind.value
            )
            return community

    async def create_default_communities(self, user: User) -> list[Community]:
        """Personal public community and private circle for a new account."""
        return [
            await self.create_community(
                user.id, user.display_name, CommunityKind.PUBLIC
            ),
            await self.create_community(
                user.id, f"{user.display_name} Inner", CommunityKind.CIRCLE
            ),
        ]
