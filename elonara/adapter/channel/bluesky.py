"""Bluesky channel."""

import logfire

from elonara.adapter.bluesky.client import BlueskyClient, Mention
from elonara.adapter.error import BlueskyClientError, BlueskyReauthRequiredError
from elonara.config import InvitationSettings
from elonara.domain.model import Community, Event, Invitation
from elonara.domain.repository import CommunityRepository, EventRepository
from elonara.domain.service.channel import (
    ChannelAdapter,
    DeliveryResult,
    invitation_url,
)
from elonara.domain.value import (
    BlueskyDID,
    Channel,
    CommunityId,
    EntityType,
    EventId,
)


class BlueskyChannel(ChannelAdapter):
    """Mentions the recipient in a post on the inviter's Bluesky account.

    Recipients whose handle cannot be looked up still get a working
    invitation; the post is simply skipped.
    """

    channel = Channel.BLUESKY

    def __init__(
        self,
        client: BlueskyClient,
        event_repository: EventRepository,
        community_repository: CommunityRepository,
        settings: InvitationSettings,
    ) -> None:
        self.client = client
        self.event_repository = event_repository
        self.community_repository = community_repository
        self.settings = settings

    async def _entity_name(self, invitation: Invitation) -> str:
        entity: Event | Community | None
        if invitation.entity_type == EntityType.EVENT:
            entity = await self.event_repository.find_by_id(
                EventId(invitation.entity_id)
            )
            return entity.title if entity else "an event"
        entity = await self.community_repository.find_by_id(
            CommunityId(invitation.entity_id)
        )
        return entity.name if entity else "a community"

    async def send(
        self, invitation: Invitation, personal_message: str = ""
    ) -> DeliveryResult:
        with logfire.span(
            "bluesky_channel.send", invitation_id=str(invitation.id)
        ):
            url = invitation_url(invitation, self.settings.base_url)
            did = BlueskyDID(invitation.recipient_identifier)

            try:
                profile = await self.client.get_profile(did)
                if profile is None or not profile.handle:
                    logfire.info(
                        "No Bluesky handle for recipient, skipping post",
                        invitation_id=str(invitation.id),
                    )
                    return DeliveryResult(channel=self.channel, success=True, url=url)

                name = await self._entity_name(invitation)
                text = f"@{profile.handle} You've been invited to {name}! RSVP: {url}"
                await self.client.create_post(
                    invitation.inviter_id,
                    text,
                    [Mention(handle=profile.handle, did=did)],
                )
            except BlueskyReauthRequiredError as e:
                logfire.warn(
                    "Bluesky re-authorization required",
                    inviter_id=str(invitation.inviter_id),
                    error=str(e),
                )
                return DeliveryResult(
                    channel=self.channel,
                    success=False,
                    url=url,
                    needs_reauth=True,
                    error_message="Please reconnect your Bluesky account.",
                )
            except BlueskyClientError as e:
                logfire.warn(
                    "Bluesky post failed",
                    invitation_id=str(invitation.id),
                    error=str(e),
                )
                return DeliveryResult(
                    channel=self.channel,
                    success=False,
                    url=url,
                    error_message="Invitation saved, but the Bluesky post failed.",
                )

            return DeliveryResult(
                channel=self.channel, success=True, url=url, posted=True
            )
