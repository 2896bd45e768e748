"""Unit tests for BlueskyChannel."""

import pytest

from elonara.adapter.bluesky.client import MockBlueskyClient
from elonara.adapter.channel.bluesky import BlueskyChannel
from elonara.config import InvitationSettings
from elonara.domain.model import Follower
from elonara.domain.value import BlueskyDID, Channel, EntityType
from elonara.persistence.repository.inmemory import (
    InMemoryCommunityRepository,
    InMemoryEventRepository,
    InMemoryInvitationRepository,
)
from tests.conftest import make_event, make_user

SETTINGS = InvitationSettings(base_url="https://elonara.test")
FOLLOWER_DID = "did:plc:follower1"


@pytest.fixture
def client():
    client = MockBlueskyClient()
    host_id = make_user().id
    client.followers[host_id] = [
        Follower(did=BlueskyDID(FOLLOWER_DID), handle="friend.bsky.social")
    ]
    return client


async def setup(client, recipient: str = FOLLOWER_DID):
    events = InMemoryEventRepository()
    invitations = InMemoryInvitationRepository()
    host = make_user()
    event = await events.save(make_event(host, title="Launch Party"))
    invitation, _ = await invitations.upsert_pending(
        entity_type=EntityType.EVENT,
        entity_id=event.id,
        recipient=recipient,
        channel=Channel.BLUESKY,
        inviter_id=host.id,
    )
    channel = BlueskyChannel(
        client=client,
        event_repository=events,
        community_repository=InMemoryCommunityRepository(),
        settings=SETTINGS,
    )
    return channel, invitation


class TestBlueskyChannel:
    @pytest.mark.asyncio
    async def test_posts_mention(self, client):
        channel, invitation = await setup(client)

        result = await channel.send(invitation)

        assert result.success is True
        assert result.posted is True
        _, text, mentions = client.posts[0]
        assert text.startswith("@friend.bsky.social You've been invited to Launch Party!")
        assert text.endswith(f"/rsvp/{invitation.rsvp_token.root}")
        assert mentions[0].did.root == FOLLOWER_DID

    @pytest.mark.asyncio
    async def test_unknown_profile_skips_post(self, client):
        """Without a handle there is nothing to mention; the link still works."""
        channel, invitation = await setup(client, recipient="did:plc:stranger")

        result = await channel.send(invitation)

        assert result.success is True
        assert result.posted is False
        assert client.posts == []

    @pytest.mark.asyncio
    async def test_expired_session_needs_reauth(self, client):
        client.needs_reauth = True
        channel, invitation = await setup(client)

        result = await channel.send(invitation)

        assert result.success is False
        assert result.needs_reauth is True

    @pytest.mark.asyncio
    async def test_rejected_post_reported(self, client):
        client.failing_mentions.add(FOLLOWER_DID)
        channel, invitation = await setup(client)

        result = await channel.send(invitation)

        assert result.success is False
        assert result.needs_reauth is False
        assert client.posts == []
