"""In-memory membership repository for testing."""

from typing import Optional

from elonara.domain.model import Membership
from elonara.domain.repository import MembershipRepository
from elonara.domain.value import (
    EntityId,
    EntityType,
    MembershipId,
    MembershipStatus,
    UserId,
)

from .base import SnapshotMixin


class InMemoryMembershipRepository(SnapshotMixin, MembershipRepository):
    """In-memory implementation of MembershipRepository for testing."""

    _state_attrs = ("_memberships",)

    def __init__(self) -> None:
        self._memberships: list[Membership] = []

    async def find_active(
        self, entity_type: EntityType, entity_id: EntityId, user_id: UserId
    ) -> Optional[Membership]:
        """Find the active membership of a user in an entity."""
        for membership in self._memberships:
            if (
                membership.entity_type == entity_type
                and membership.entity_id == entity_id
                and membership.user_id == user_id
                and membership.is_active
            ):
                return membership
        return None

    async def add_active(self, membership: Membership) -> tuple[Membership, bool]:
        """Insert unless an active membership already exists."""
        existing = await self.find_active(
            membership.entity_type, membership.entity_id, membership.user_id
        )
        if existing:
            return existing, False
        self._memberships.append(membership)
        return membership, True

    async def set_status(
        self, membership_id: MembershipId, status: MembershipStatus
    ) -> Optional[Membership]:
        """Change a membership's status."""
        for i, membership in enumerate(self._memberships):
            if membership.id == membership_id:
                updated = membership.model_copy(update={"status": status})
                self._memberships[i] = updated
                return updated
        return None

    async def list_for_entity(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        status: Optional[MembershipStatus] = MembershipStatus.ACTIVE,
    ) -> list[Membership]:
        """List memberships of an entity, oldest first."""
        matches = [
            membership
            for membership in self._memberships
            if membership.entity_type == entity_type
            and membership.entity_id == entity_id
            and (status is None or membership.status == status)
        ]
        matches.sort(key=lambda m: m.joined_at)
        return matches
