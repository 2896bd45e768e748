"""Integration tests for PostgresMembershipRepository."""

from uuid import uuid4

import pytest

from elonara.domain.model import Membership
from elonara.domain.repository import MembershipRepository, UserRepository
from elonara.domain.value import EntityId, EntityType, MembershipId, MembershipStatus
from tests.conftest import make_user
from tests.harness import create_env_fixture

pytestmark = pytest.mark.integration

integration_env = create_env_fixture(unmock={"persistence"})


def _membership(community_id, user_id) -> Membership:
    return Membership(
        id=MembershipId(uuid4()),
        entity_type=EntityType.COMMUNITY,
        entity_id=community_id,
        user_id=user_id,
    )


async def _saved_member(env):
    users = await env.get(UserRepository)
    return await users.save(make_user(email=f"member-{uuid4().hex[:8]}@example.com"))


class TestAddActive:
    @pytest.mark.asyncio
    async def test_second_add_returns_existing_membership(self, integration_env):
        repo = await integration_env.get(MembershipRepository)
        member = await _saved_member(integration_env)
        community_id = EntityId(uuid4())

        first, created = await repo.add_active(_membership(community_id, member.id))
        second, created_again = await repo.add_active(
            _membership(community_id, member.id)
        )

        assert created is True
        assert created_again is False
        assert second.id == first.id

        roster = await repo.list_for_entity(EntityType.COMMUNITY, community_id)
        assert [m.user_id for m in roster] == [member.id]

    @pytest.mark.asyncio
    async def test_removed_member_can_rejoin(self, integration_env):
        repo = await integration_env.get(MembershipRepository)
        member = await _saved_member(integration_env)
        community_id = EntityId(uuid4())

        first, _ = await repo.add_active(_membership(community_id, member.id))
        removed = await repo.set_status(first.id, MembershipStatus.REMOVED)
        rejoined, created = await repo.add_active(_membership(community_id, member.id))

        assert removed is not None
        assert removed.status == MembershipStatus.REMOVED
        assert created is True
        assert rejoined.id != first.id

        active = await repo.find_active(EntityType.COMMUNITY, community_id, member.id)
        assert active is not None
        assert active.id == rejoined.id
