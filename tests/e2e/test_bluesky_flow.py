"""End-to-end tests for Bluesky follower invitations."""

from uuid import UUID

import httpx
import pytest
import pytest_asyncio

from elonara.adapter.bluesky.client import MockBlueskyClient
from elonara.domain.model import Follower
from elonara.domain.value import BlueskyDID, UserId
from elonara.interface.api.app import create_app
from tests.harness import create_container_fixture

e2e_container = create_container_fixture(unmock={"context"})


@pytest_asyncio.fixture
async def app(e2e_container):
    return create_app(e2e_container)


@pytest_asyncio.fixture
async def owner(app, e2e_container):
    """Registered owner with two remote followers, logged in."""
    client = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    )
    response = await client.post(
        "/api/auth/register",
        json={
            "email": "owner@example.com",
            "display_name": "Olga",
            "bluesky_did": "did:plc:owner",
            "bluesky_handle": "olga.bsky.social",
        },
    )
    account = response.json()["data"]
    bluesky = await e2e_container.get(MockBlueskyClient)
    bluesky.remote_followers[UserId(UUID(account["user_id"]))] = [
        Follower(did=BlueskyDID("did:plc:f1"), handle="f1.bsky.social"),
        Follower(did=BlueskyDID("did:plc:f2"), handle="f2.bsky.social"),
    ]
    yield client, account
    await client.aclose()


class TestFollowerInvitations:
    @pytest.mark.asyncio
    async def test_sync_list_and_invite(self, owner, e2e_container):
        owner, account = owner
        listing = await owner.get("/api/bluesky/followers")
        nonce = listing.json()["data"]["nonce"]
        assert listing.json()["data"]["followers"] == []

        synced = await owner.post("/api/bluesky/followers/sync", json={"nonce": nonce})
        assert synced.json()["message"] == "Synced 2 followers from Bluesky."

        community_id = account["community_ids"][0]
        response = await owner.post(
            f"/api/invitations/bluesky/community/{community_id}",
            json={
                "follower_dids": ["did:plc:f1", "did:plc:f2", "did:plc:f1"],
                "nonce": synced.json()["data"]["nonce"],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Invited 2 followers, posted 2 invitations to Bluesky"
        bluesky = await e2e_container.get(MockBlueskyClient)
        assert len(bluesky.posts) == 2

    @pytest.mark.asyncio
    async def test_expired_bluesky_session(self, owner, e2e_container):
        owner, account = owner
        bluesky = await e2e_container.get(MockBlueskyClient)
        bluesky.followers[UserId(UUID(account["user_id"]))] = [
            Follower(did=BlueskyDID("did:plc:f1"), handle="f1.bsky.social"),
        ]
        bluesky.needs_reauth = True
        listing = await owner.get("/api/bluesky/followers")

        response = await owner.post(
            f"/api/invitations/bluesky/community/{account['community_ids'][0]}",
            json={
                "follower_dids": ["did:plc:f1"],
                "nonce": listing.json()["data"]["nonce"],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Bluesky authorization expired. Please reauthorize."
        assert body["data"]["needs_reauth"] is True
        assert body["data"]["nonce"]
