"""Bluesky follower use cases."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from elonara.adapter.bluesky.client import BlueskyClient
from elonara.adapter.error import BlueskyClientError, BlueskyReauthRequiredError
from elonara.application.usecase.base import BaseUseCase
from elonara.domain.error import BusinessRuleViolationError, NotAuthorizedError
from elonara.domain.value import UserId


class FollowerItem(BaseModel):
    """A follower that can be invited."""

    did: str
    handle: str
    display_name: str
    avatar_url: str | None


class ListFollowersRequest(BaseModel):
    user_id: UUID | None


class ListFollowersResponse(BaseModel):
    followers: list[FollowerItem]


def _require_user(user_id: UUID | None) -> UserId:
    if user_id is None:
        raise NotAuthorizedError(
            "view", "followers", None, "Please log in to manage Bluesky followers."
        )
    return UserId(user_id)


class ListFollowersUseCase(BaseUseCase):
    """Cached followers of the current user."""

    def __init__(self, bluesky_client: BlueskyClient) -> None:
        self.bluesky_client = bluesky_client

    async def execute(self, request: ListFollowersRequest) -> ListFollowersResponse:
        followers = await self.bluesky_client.list_followers(
            _require_user(request.user_id)
        )
        return ListFollowersResponse(
            followers=[
                FollowerItem(
                    did=f.did.root,
                    handle=f.handle,
                    display_name=f.display_name,
                    avatar_url=f.avatar_url,
                )
                for f in followers
            ]
        )


class SyncFollowersRequest(BaseModel):
    user_id: UUID | None


class SyncFollowersResponse(BaseModel):
    count: int
    message: str


class SyncFollowersUseCase(BaseUseCase):
    """Refresh the follower cache from Bluesky."""

    def __init__(self, bluesky_client: BlueskyClient) -> None:
        self.bluesky_client = bluesky_client

    async def execute(self, request: SyncFollowersRequest) -> SyncFollowersResponse:
        """Execute sync use case.

        Raises:
            NotAuthorizedError: If not logged in or Bluesky is not connected
            BusinessRuleViolationError: If Bluesky could not be reached
        """
        user_id = _require_user(request.user_id)
        try:
            count = await self.bluesky_client.sync_followers(user_id)
        except BlueskyReauthRequiredError:
            raise NotAuthorizedError(
                "sync",
                "followers",
                str(user_id),
                "Please connect your Bluesky account to sync followers.",
            )
        except BlueskyClientError as e:
            logfire.warn("Follower sync failed", user_id=str(user_id), error=str(e))
            raise BusinessRuleViolationError(
                "Could not reach Bluesky. Please try again later."
            )
        return SyncFollowersResponse(
            count=count, message=f"Synced {count} followers from Bluesky."
        )
