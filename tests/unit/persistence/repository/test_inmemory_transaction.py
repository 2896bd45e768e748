"""Unit tests for the in-memory repositories and transaction manager."""

from uuid import uuid4

import pytest

from elonara.domain.error import InvalidTransitionError
from elonara.domain.model import Membership
from elonara.domain.value import (
    Channel,
    EntityId,
    EntityType,
    InvitationStatus,
    MembershipId,
    UserId,
)
from elonara.persistence.repository.inmemory import (
    InMemoryInvitationRepository,
    InMemoryMembershipRepository,
    InMemoryTransactionManager,
)


async def pending(repo, recipient="guest@example.com", entity_id=None):
    return await repo.upsert_pending(
        entity_type=EntityType.EVENT,
        entity_id=entity_id or EntityId(uuid4()),
        recipient=recipient,
        channel=Channel.EMAIL,
        inviter_id=UserId(uuid4()),
    )


class TestInvitationRepository:
    @pytest.mark.asyncio
    async def test_one_active_invitation_per_recipient(self):
        repo = InMemoryInvitationRepository()
        entity_id = EntityId(uuid4())

        first, created = await pending(repo, entity_id=entity_id)
        again, created_again = await pending(repo, entity_id=entity_id)

        assert created is True
        assert created_again is False
        assert again.id == first.id

    @pytest.mark.asyncio
    async def test_tokens_are_hex_of_configured_length(self):
        repo = InMemoryInvitationRepository(token_bytes=16)

        invitation, _ = await pending(repo)

        assert len(invitation.rsvp_token.root) == 32
        int(invitation.rsvp_token.root, 16)

    @pytest.mark.asyncio
    async def test_set_status_rejects_illegal_move(self):
        repo = InMemoryInvitationRepository()
        invitation, _ = await pending(repo)
        await repo.set_status(invitation.id, InvitationStatus.DECLINED)

        with pytest.raises(InvalidTransitionError):
            await repo.set_status(invitation.id, InvitationStatus.CONFIRMED)

    @pytest.mark.asyncio
    async def test_bind_user_keeps_first_binding(self):
        repo = InMemoryInvitationRepository()
        invitation, _ = await pending(repo)
        first_user, second_user = UserId(uuid4()), UserId(uuid4())

        await repo.bind_user(invitation.id, first_user)
        bound = await repo.bind_user(invitation.id, second_user)

        assert bound.user_id == first_user


class TestTransactionManager:
    @pytest.mark.asyncio
    async def test_error_rolls_back_every_repository(self):
        invitations = InMemoryInvitationRepository()
        memberships = InMemoryMembershipRepository()
        manager = InMemoryTransactionManager([invitations, memberships])
        invitation, _ = await pending(invitations)

        with pytest.raises(RuntimeError):
            async with manager.atomic():
                await invitations.set_status(invitation.id, InvitationStatus.CONFIRMED)
                await memberships.add_active(
                    Membership(
                        id=MembershipId(uuid4()),
                        entity_id=EntityId(uuid4()),
                        user_id=UserId(uuid4()),
                    )
                )
                raise RuntimeError("boom")

        stored = await invitations.find_by_id(invitation.id)
        assert stored is not None and stored.status == InvitationStatus.PENDING
        assert memberships.snapshot()["_memberships"] == []

    @pytest.mark.asyncio
    async def test_nested_blocks_join_outer(self):
        invitations = InMemoryInvitationRepository()
        manager = InMemoryTransactionManager([invitations])

        with pytest.raises(RuntimeError):
            async with manager.atomic():
                async with manager.atomic():
                    await pending(invitations)
                raise RuntimeError("outer fails")

        assert invitations.snapshot()["_invitations"] == []
