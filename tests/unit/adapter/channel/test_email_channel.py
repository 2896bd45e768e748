"""Unit tests for EmailChannel."""

from uuid import uuid4

import pytest

from elonara.adapter.channel.email import EmailChannel
from elonara.adapter.error import MailTransportError
from elonara.adapter.mail.renderer import MailRenderer
from elonara.adapter.mail.transport import RecordingMailTransport
from elonara.config import InvitationSettings
from elonara.domain.value import Channel, EntityId, EntityType, InvitationStatus
from elonara.persistence.repository.inmemory import (
    InMemoryCommunityRepository,
    InMemoryEventRepository,
    InMemoryInvitationRepository,
    InMemoryUserRepository,
)
from tests.conftest import make_community, make_event, make_user

SETTINGS = InvitationSettings(base_url="https://elonara.test")


class FailingTransport(RecordingMailTransport):
    async def send(self, to, subject, html_body, text_body):
        raise MailTransportError("connection refused")


@pytest.fixture
def repos():
    return {
        "events": InMemoryEventRepository(),
        "communities": InMemoryCommunityRepository(),
        "users": InMemoryUserRepository(),
        "invitations": InMemoryInvitationRepository(),
    }


def channel_for(repos, transport) -> EmailChannel:
    return EmailChannel(
        transport=transport,
        renderer=MailRenderer(),
        event_repository=repos["events"],
        community_repository=repos["communities"],
        user_repository=repos["users"],
        settings=SETTINGS,
    )


async def pending_invitation(repos, entity_type, entity_id, inviter_id):
    invitation, _ = await repos["invitations"].upsert_pending(
        entity_type=entity_type,
        entity_id=entity_id,
        recipient="guest@example.com",
        channel=Channel.EMAIL,
        inviter_id=inviter_id,
    )
    return invitation


class TestEmailChannel:
    @pytest.mark.asyncio
    async def test_event_email_has_one_click_links(self, repos):
        """Event emails carry yes/no RSVP links built on the token URL."""
        host = await repos["users"].save(make_user(display_name="Hana"))
        event = await repos["events"].save(make_event(host, title="Picnic"))
        invitation = await pending_invitation(repos, EntityType.EVENT, event.id, host.id)
        transport = RecordingMailTransport()

        result = await channel_for(repos, transport).send(invitation, "See you!")

        assert result.success is True
        token = invitation.rsvp_token.root
        assert result.url == f"https://elonara.test/rsvp/{token}"
        message = transport.sent[0]
        assert message.subject == "You're invited to Picnic on Elonara Social"
        assert f"/rsvp/{token}?rsvp=yes" in message.text_body
        assert f"/rsvp/{token}?rsvp=no" in message.text_body
        assert "Hana" in message.text_body
        assert "See you!" in message.text_body

    @pytest.mark.asyncio
    async def test_community_email_links_to_accept(self, repos):
        owner = await repos["users"].save(make_user())
        community = await repos["communities"].save(
            make_community(owner, name="Chess Club")
        )
        invitation = await pending_invitation(
            repos, EntityType.COMMUNITY, community.id, owner.id
        )
        transport = RecordingMailTransport()

        result = await channel_for(repos, transport).send(invitation)

        assert result.success is True
        assert result.url == (
            "https://elonara.test/invitation/accept"
            f"?token={invitation.rsvp_token.root}"
        )
        assert transport.sent[0].subject == (
            "You've been invited to join Chess Club on Elonara Social"
        )
        assert "?rsvp=" not in transport.sent[0].text_body

    @pytest.mark.asyncio
    async def test_html_body_escapes_personal_message(self, repos):
        host = await repos["users"].save(make_user())
        event = await repos["events"].save(make_event(host))
        invitation = await pending_invitation(repos, EntityType.EVENT, event.id, host.id)
        transport = RecordingMailTransport()

        await channel_for(repos, transport).send(invitation, "<script>x</script>")

        assert "<script>" not in transport.sent[0].html_body

    @pytest.mark.asyncio
    async def test_transport_error_reported_not_raised(self, repos):
        host = await repos["users"].save(make_user())
        event = await repos["events"].save(make_event(host))
        invitation = await pending_invitation(repos, EntityType.EVENT, event.id, host.id)

        result = await channel_for(repos, FailingTransport()).send(invitation)

        assert result.success is False
        assert result.error_message == (
            "Invitation saved, but the email could not be sent."
        )
        assert invitation.status == InvitationStatus.PENDING

    @pytest.mark.asyncio
    async def test_missing_entity(self, repos):
        host = await repos["users"].save(make_user())
        invitation = await pending_invitation(
            repos, EntityType.EVENT, EntityId(uuid4()), host.id
        )
        transport = RecordingMailTransport()

        result = await channel_for(repos, transport).send(invitation)

        assert result.success is False
        assert transport.sent == []
