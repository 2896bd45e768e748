"""Bluesky infrastructure providers."""

from dishka import Scope, provide

from elonara.adapter.bluesky.client import BlueskyClient, RealBlueskyClient
from elonara.config import BlueskySettings
from elonara.domain.repository import BlueskyCredentialRepository, FollowerRepository
from elonara.util.di.base import ProviderBase


class BlueskyProvider(ProviderBase):
    """Bluesky component base."""

    __mock_component__ = "bluesky"


class ProdBlueskyProvider(BlueskyProvider):
    """Production Bluesky provider."""

    __is_mock__ = False

    @provide(scope=Scope.REQUEST)
    def get_bluesky_client(
        self,
        credential_repository: BlueskyCredentialRepository,
        follower_repository: FollowerRepository,
        settings: BlueskySettings,
    ) -> BlueskyClient:
        """Provide Bluesky XRPC client.

        REQUEST-scoped because it reads stored sessions and caches
        followers through the request's repositories.
        """
        return RealBlueskyClient(
            credential_repository=credential_repository,
            follower_repository=follower_repository,
            settings=settings,
        )
