"""Adapter DI providers."""

from dishka import Scope, provide

from elonara.adapter.bluesky.client import BlueskyClient
from elonara.adapter.channel import BlueskyChannel, EmailChannel, LinkChannel
from elonara.adapter.mail.renderer import MailRenderer
from elonara.adapter.mail.transport import MailTransport
from elonara.config import InvitationSettings
from elonara.domain.repository import (
    CommunityRepository,
    EventRepository,
    UserRepository,
)
from elonara.domain.service import ChannelAdapter
from elonara.domain.value import Channel
from elonara.util.di.base import ProviderBase


class ProdAdapterProvider(ProviderBase):
    """Delivery channels, assembled once per request from their collaborators."""

    @provide(scope=Scope.APP)
    def get_mail_renderer(self) -> MailRenderer:
        """Provide the Jinja2 mail renderer (templates load once)."""
        return MailRenderer()

    @provide(scope=Scope.REQUEST)
    def get_channels(
        self,
        transport: MailTransport,
        renderer: MailRenderer,
        bluesky_client: BlueskyClient,
        event_repository: EventRepository,
        community_repository: CommunityRepository,
        user_repository: UserRepository,
        settings: InvitationSettings,
    ) -> dict[Channel, ChannelAdapter]:
        """Provide one adapter per delivery channel.

        Returns:
            Dictionary mapping channels to their adapters
        """
        return {
            Channel.EMAIL: EmailChannel(
                transport=transport,
                renderer=renderer,
                event_repository=event_repository,
                community_repository=community_repository,
                user_repository=user_repository,
                settings=settings,
            ),
            Channel.LINK: LinkChannel(settings=settings),
            Channel.BLUESKY: BlueskyChannel(
                client=bluesky_client,
                event_repository=event_repository,
                community_repository=community_repository,
                settings=settings,
            ),
        }
