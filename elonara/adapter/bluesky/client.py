"""Bluesky API client.

Reads (followers, profiles) go to the public AppView; writes (posts) go to
the user's PDS with the app-password session stored when they connected
their account.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone

import httpx
import logfire
from pydantic import BaseModel

from elonara.adapter.error import BlueskyClientError, BlueskyReauthRequiredError
from elonara.config import BlueskySettings
from elonara.domain.model import BlueskyCredentials, Follower
from elonara.domain.repository import BlueskyCredentialRepository, FollowerRepository
from elonara.domain.value import BlueskyDID, UserId, utcnow


class Mention(BaseModel):
    """An account tagged in a post."""

    handle: str
    did: BlueskyDID


class BlueskyClient(ABC):
    """Base class for Bluesky clients."""

    @abstractmethod
    async def list_followers(self, user_id: UserId) -> list[Follower]:
        """Cached followers of a user (empty until the first sync)."""
        pass

    @abstractmethod
    async def sync_followers(self, user_id: UserId) -> int:
        """Fetch followers from Bluesky and replace the cache.

        Returns:
            Number of followers cached

        Raises:
            BlueskyReauthRequiredError: If the user has not connected Bluesky
            BlueskyClientError: If the API call fails
        """
        pass

    @abstractmethod
    async def get_profile(self, did: BlueskyDID) -> Follower | None:
        """Public profile of an account, None if it does not exist."""
        pass

    @abstractmethod
    async def create_post(
        self, user_id: UserId, text: str, mentions: list[Mention]
    ) -> str:
        """Publish a post on the user's account.

        Args:
            user_id: Author (must have connected Bluesky)
            text: Post text; each mention's "@handle" must appear in it
            mentions: Accounts to tag

        Returns:
            AT URI of the created post

        Raises:
            BlueskyReauthRequiredError: If the session is missing or expired
            BlueskyClientError: If the API call fails
        """
        pass


def mention_facets(text: str, mentions: list[Mention]) -> list[dict]:
    """Rich-text facets tagging each ``@handle`` occurrence.

    Facet offsets are UTF-8 byte positions.
    """
    encoded = text.encode("utf-8")
    facets = []
    for mention in mentions:
        needle = f"@{mention.handle}".encode("utf-8")
        start = encoded.find(needle)
        if start < 0:
            continue
        facets.append(
            {
                "index": {"byteStart": start, "byteEnd": start + len(needle)},
                "features": [
                    {
                        "$type": "app.bsky.richtext.facet#mention",
                        "did": mention.did.root,
                    }
                ],
            }
        )
    return facets


class RealBlueskyClient(BlueskyClient):
    """Bluesky client backed by the XRPC HTTP API."""

    def __init__(
        self,
        credential_repository: BlueskyCredentialRepository,
        follower_repository: FollowerRepository,
        settings: BlueskySettings,
    ) -> None:
        self.credential_repository = credential_repository
        self.follower_repository = follower_repository
        self.settings = settings

    async def _credentials(self, user_id: UserId) -> BlueskyCredentials:
        credentials = await self.credential_repository.find_by_user(user_id)
        if credentials is None:
            raise BlueskyReauthRequiredError("Bluesky account is not connected")
        return credentials

    async def list_followers(self, user_id: UserId) -> list[Follower]:
        return await self.follower_repository.list_for_user(user_id)

    async def sync_followers(self, user_id: UserId) -> int:
        with logfire.span("bluesky_client.sync_followers", user_id=str(user_id)):
            credentials = await self._credentials(user_id)
            followers: list[Follower] = []
            cursor: str | None = None

            async with httpx.AsyncClient(
                base_url=self.settings.public_api_url, timeout=self.settings.timeout
            ) as client:
                for _ in range(self.settings.max_follower_pages):
                    params = {
                        "actor": credentials.did.root,
                        "limit": self.settings.follower_page_size,
                    }
                    if cursor:
                        params["cursor"] = cursor
                    try:
                        response = await client.get(
                            "/xrpc/app.bsky.graph.getFollowers", params=params
                        )
                        response.raise_for_status()
                    except httpx.HTTPError as e:
                        logfire.error("Follower fetch failed", error=str(e))
                        raise BlueskyClientError(f"Failed to fetch followers: {e}") from e

                    data = response.json()
                    for item in data.get("followers", []):
                        try:
                            followers.append(
                                Follower(
                                    did=BlueskyDID(item["did"]),
                                    handle=item.get("handle", ""),
                                    display_name=item.get("displayName") or "",
                                    avatar_url=item.get("avatar"),
                                )
                            )
                        except (KeyError, ValueError):
                            logfire.warn("Skipping malformed follower", item=item)
                    cursor = data.get("cursor")
                    if not cursor:
                        break

            count = await self.follower_repository.replace_for_user(user_id, followers)
            logfire.info("Followers synced", user_id=str(user_id), count=count)
            return count

    async def get_profile(self, did: BlueskyDID) -> Follower | None:
        async with httpx.AsyncClient(
            base_url=self.settings.public_api_url, timeout=self.settings.timeout
        ) as client:
            try:
                response = await client.get(
                    "/xrpc/app.bsky.actor.getProfile", params={"actor": did.root}
                )
            except httpx.HTTPError as e:
                raise BlueskyClientError(f"Failed to fetch profile: {e}") from e

        if response.status_code == 400:
            return None
        if response.status_code >= 300:
            raise BlueskyClientError(
                f"Profile lookup failed with status {response.status_code}"
            )
        data = response.json()
        return Follower(
            did=BlueskyDID(data["did"]),
            handle=data.get("handle", ""),
            display_name=data.get("displayName") or "",
            avatar_url=data.get("avatar"),
        )

    async def create_post(
        self, user_id: UserId, text: str, mentions: list[Mention]
    ) -> str:
        with logfire.span("bluesky_client.create_post", user_id=str(user_id)):
            credentials = await self._credentials(user_id)
            record = {
                "$type": "app.bsky.feed.post",
                "text": text,
                "createdAt": datetime.now(timezone.utc)
                .isoformat()
                .replace("+00:00", "Z"),
            }
            facets = mention_facets(text, mentions)
            if facets:
                record["facets"] = facets

            async with httpx.AsyncClient(
                base_url=self.settings.service_url, timeout=self.settings.timeout
            ) as client:
                response = await self._post_record(client, credentials, record)
                if self._is_expired(response):
                    credentials = await self._refresh_session(client, credentials)
                    response = await self._post_record(client, credentials, record)

            if self._is_expired(response):
                raise BlueskyReauthRequiredError("Bluesky session expired")
            if response.status_code >= 300:
                logfire.error(
                    "Bluesky post failed",
                    status=response.status_code,
                    body=response.text[:200],
                )
                raise BlueskyClientError(
                    f"Post failed with status {response.status_code}"
                )

            uri = response.json().get("uri", "")
            logfire.info("Bluesky post created", user_id=str(user_id), uri=uri)
            return uri

    async def _post_record(
        self,
        client: httpx.AsyncClient,
        credentials: BlueskyCredentials,
        record: dict,
    ) -> httpx.Response:
        try:
            return await client.post(
                "/xrpc/com.atproto.repo.createRecord",
                headers={"Authorization": f"Bearer {credentials.access_jwt}"},
                json={
                    "repo": credentials.did.root,
                    "collection": "app.bsky.feed.post",
                    "record": record,
                },
            )
        except httpx.HTTPError as e:
            raise BlueskyClientError(f"Failed to create post: {e}") from e

    @staticmethod
    def _is_expired(response: httpx.Response) -> bool:
        if response.status_code == 401:
            return True
        if response.status_code == 400:
            try:
                return response.json().get("error") in ("ExpiredToken", "InvalidToken")
            except ValueError:
                return False
        return False

    async def _refresh_session(
        self, client: httpx.AsyncClient, credentials: BlueskyCredentials
    ) -> BlueskyCredentials:
        try:
            response = await client.post(
                "/xrpc/com.atproto.server.refreshSession",
                headers={"Authorization": f"Bearer {credentials.refresh_jwt}"},
            )
        except httpx.HTTPError as e:
            raise BlueskyClientError(f"Failed to refresh session: {e}") from e

        if response.status_code >= 300:
            logfire.warn("Bluesky session refresh rejected", user_id=str(credentials.user_id))
            raise BlueskyReauthRequiredError("Bluesky session expired")

        data = response.json()
        refreshed = credentials.model_copy(
            update={
                "access_jwt": data["accessJwt"],
                "refresh_jwt": data["refreshJwt"],
                "updated_at": utcnow(),
            }
        )
        await self.credential_repository.save(refreshed)
        logfire.info("Bluesky session refreshed", user_id=str(credentials.user_id))
        return refreshed


class MockBlueskyClient(BlueskyClient):
    """Mock Bluesky client for testing.

    Followers are seeded through ``followers``; posts are recorded in
    ``posts``. Set ``needs_reauth`` to simulate an expired session, or add
    DIDs to ``failing_mentions`` to make posts tagging them fail.
    """

    def __init__(self) -> None:
        self.followers: dict[UserId, list[Follower]] = {}
        self.remote_followers: dict[UserId, list[Follower]] = {}
        self.posts: list[tuple[UserId, str, list[Mention]]] = []
        self.needs_reauth = False
        self.failing_mentions: set[str] = set()

    async def list_followers(self, user_id: UserId) -> list[Follower]:
        return sorted(self.followers.get(user_id, []), key=lambda f: f.handle)

    async def sync_followers(self, user_id: UserId) -> int:
        if self.needs_reauth:
            raise BlueskyReauthRequiredError("Bluesky session expired")
        self.followers[user_id] = list(self.remote_followers.get(user_id, []))
        return len(self.followers[user_id])

    async def get_profile(self, did: BlueskyDID) -> Follower | None:
        for followers in [*self.followers.values(), *self.remote_followers.values()]:
            for follower in followers:
                if follower.did == did:
                    return follower
        return None

    async def create_post(
        self, user_id: UserId, text: str, mentions: list[Mention]
    ) -> str:
        if self.needs_reauth:
            raise BlueskyReauthRequiredError("Bluesky session expired")
        if any(m.did.root in self.failing_mentions for m in mentions):
            raise BlueskyClientError("Post rejected")
        self.posts.append((user_id, text, mentions))
        return f"at://mock/app.bsky.feed.post/{len(self.posts)}"
