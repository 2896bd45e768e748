"""Email channel."""

from typing import Any

import jinja2
import logfire

from elonara.adapter.error import MailTransportError
from elonara.adapter.mail.renderer import MailRenderer
from elonara.adapter.mail.transport import MailTransport
from elonara.config import InvitationSettings
from elonara.domain.model import Community, Event, Invitation
from elonara.domain.repository import (
    CommunityRepository,
    EventRepository,
    UserRepository,
)
from elonara.domain.service.channel import (
    ChannelAdapter,
    DeliveryResult,
    invitation_url,
)
from elonara.domain.value import Channel, CommunityId, EntityType, EventId


class EmailChannel(ChannelAdapter):
    """Renders the invitation email and hands it to the mail transport.

    Transport failures are reported in the result, never raised.
    """

    channel = Channel.EMAIL

    def __init__(
        self,
        transport: MailTransport,
        renderer: MailRenderer,
        event_repository: EventRepository,
        community_repository: CommunityRepository,
        user_repository: UserRepository,
        settings: InvitationSettings,
    ) -> None:
        """Initialize email channel.

        Args:
            transport: Mail transport chosen at startup
            renderer: Jinja2 template renderer
            event_repository: Event repository (template context)
            community_repository: Community repository (template context)
            user_repository: User repository (inviter name)
            settings: Invitation settings
        """
        self.transport = transport
        self.renderer = renderer
        self.event_repository = event_repository
        self.community_repository = community_repository
        self.user_repository = user_repository
        self.settings = settings

    async def _context(
        self, invitation: Invitation, personal_message: str
    ) -> dict[str, Any] | None:
        entity: Event | Community | None
        if invitation.entity_type == EntityType.EVENT:
            entity = await self.event_repository.find_by_id(
                EventId(invitation.entity_id)
            )
        else:
            entity = await self.community_repository.find_by_id(
                CommunityId(invitation.entity_id)
            )
        if entity is None:
            return None

        inviter = await self.user_repository.find_by_id(invitation.inviter_id)
        url = invitation_url(invitation, self.settings.base_url)
        app_name = self.settings.app_name

        if isinstance(entity, Event):
            entity_name = entity.title
            subject = f"You're invited to {entity_name} on {app_name}"
            event_when = (
                entity.event_date.strftime("%A, %B %d, %Y at %I:%M %p UTC")
                if entity.event_date
                else ""
            )
            venue_info = entity.venue_info
            rsvp_yes_url, rsvp_no_url = f"{url}?rsvp=yes", f"{url}?rsvp=no"
        else:
            entity_name = entity.name
            subject = f"You've been invited to join {entity_name} on {app_name}"
            event_when = ""
            venue_info = ""
            rsvp_yes_url = rsvp_no_url = ""

        return {
            "subject": subject,
            "entity_type": invitation.entity_type.value,
            "entity_name": entity_name,
            "inviter_name": inviter.display_name if inviter else "Someone",
            "personal_message": personal_message,
            "invitation_url": url,
            "rsvp_yes_url": rsvp_yes_url,
            "rsvp_no_url": rsvp_no_url,
            "event_when": event_when,
            "venue_info": venue_info,
            "description": entity.description,
            "expires_on": invitation.expires_at.strftime("%B %d, %Y")
            if invitation.expires_at
            else "",
            "site_name": app_name,
            "site_url": self.settings.base_url,
        }

    async def send(
        self, invitation: Invitation, personal_message: str = ""
    ) -> DeliveryResult:
        with logfire.span(
            "email_channel.send",
            invitation_id=str(invitation.id),
            entity_type=invitation.entity_type.value,
        ):
            url = invitation_url(invitation, self.settings.base_url)
            context = await self._context(invitation, personal_message)
            if context is None:
                return DeliveryResult(
                    channel=self.channel,
                    success=False,
                    url=url,
                    error_message="The invited event or community no longer exists.",
                )

            try:
                html_body, text_body = self.renderer.render("invitation", context)
                sent = await self.transport.send(
                    invitation.recipient_identifier,
                    context["subject"],
                    html_body,
                    text_body,
                )
            except (jinja2.TemplateError, MailTransportError) as e:
                logfire.error(
                    "Invitation email failed",
                    invitation_id=str(invitation.id),
                    error=str(e),
                )
                sent = False

            if not sent:
                return DeliveryResult(
                    channel=self.channel,
                    success=False,
                    url=url,
                    error_message="Invitation saved, but the email could not be sent.",
                )
            return DeliveryResult(channel=self.channel, success=True, url=url)
