"""Shareable link channel."""

from elonara.config import InvitationSettings
from elonara.domain.model import Invitation
from elonara.domain.service.channel import (
    ChannelAdapter,
    DeliveryResult,
    invitation_url,
)
from elonara.domain.value import Channel


class LinkChannel(ChannelAdapter):
    """Delivers nothing: the inviter shares the returned URL themselves."""

    channel = Channel.LINK

    def __init__(self, settings: InvitationSettings) -> None:
        self.settings = settings

    async def send(
        self, invitation: Invitation, personal_message: str = ""
    ) -> DeliveryResult:
        return DeliveryResult(
            channel=self.channel,
            success=True,
            url=invitation_url(invitation, self.settings.base_url),
        )
