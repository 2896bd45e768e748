"""Unit tests for ResendInvitationUseCase."""

from uuid import uuid4

import pytest

from elonara.adapter.bluesky.client import MockBlueskyClient
from elonara.adapter.mail.transport import RecordingMailTransport
from elonara.application.usecase.invitation import (
    ResendInvitationRequest,
    ResendInvitationUseCase,
)
from elonara.domain.error import AlreadyResolvedError, NotFoundError
from elonara.domain.model import Follower
from elonara.domain.service import InvitationService
from elonara.domain.value import BlueskyDID, Channel, EntityType
from tests.conftest import seed_event
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def invite(env, host, event, channel=Channel.EMAIL, recipient="guest@example.com"):
    service = await env.get(InvitationService)
    outcome = await service.invite(EntityType.EVENT, event.id, recipient, channel, host.id)
    return outcome.invitation


def request_for(host, event, invitation_id):
    return ResendInvitationRequest(
        entity_type=EntityType.EVENT,
        entity_id=event.id,
        invitation_id=invitation_id,
        user_id=host.id,
    )


class TestResendInvitation:
    @pytest.mark.asyncio
    async def test_resend_email(self, unit_env):
        host, event = await seed_event(unit_env)
        invitation = await invite(unit_env, host, event)
        use_case = await unit_env.get(ResendInvitationUseCase)

        result = await use_case.execute(request_for(host, event, invitation.id))

        assert result.delivered is True
        assert result.message == "Invitation email resent successfully."

    @pytest.mark.asyncio
    async def test_resend_after_rsvp_conflicts(self, unit_env):
        host, event = await seed_event(unit_env)
        invitation = await invite(unit_env, host, event)
        service = await unit_env.get(InvitationService)
        await service.decline(invitation.rsvp_token.root)
        use_case = await unit_env.get(ResendInvitationUseCase)
        mail = await unit_env.get(RecordingMailTransport)

        with pytest.raises(AlreadyResolvedError, match="already responded"):
            await use_case.execute(request_for(host, event, invitation.id))

        assert len(mail.sent) == 1

    @pytest.mark.asyncio
    async def test_resend_cancelled_conflicts(self, unit_env):
        host, event = await seed_event(unit_env)
        invitation = await invite(unit_env, host, event)
        service = await unit_env.get(InvitationService)
        await service.cancel(invitation.id, host.id)
        use_case = await unit_env.get(ResendInvitationUseCase)

        with pytest.raises(AlreadyResolvedError):
            await use_case.execute(request_for(host, event, invitation.id))

    @pytest.mark.asyncio
    async def test_resend_delivery_failure(self, unit_env):
        host, event = await seed_event(unit_env)
        invitation = await invite(unit_env, host, event)
        mail = await unit_env.get(RecordingMailTransport)
        mail.fail_next = True
        use_case = await unit_env.get(ResendInvitationUseCase)

        result = await use_case.execute(request_for(host, event, invitation.id))

        assert result.delivered is False
        assert result.message == "Invitation resent. Email delivery may have failed."

    @pytest.mark.asyncio
    async def test_bluesky_delivery_failure_names_bluesky(self, unit_env):
        host, event = await seed_event(unit_env)
        invitation = await invite(
            unit_env, host, event, Channel.BLUESKY, "did:plc:guest"
        )
        client = await unit_env.get(MockBlueskyClient)
        client.followers[host.id] = [
            Follower(did=BlueskyDID("did:plc:guest"), handle="guest.bsky.social")
        ]
        client.needs_reauth = True
        use_case = await unit_env.get(ResendInvitationUseCase)

        result = await use_case.execute(request_for(host, event, invitation.id))

        assert result.delivered is False
        assert "Bluesky" in result.message
        assert "Email" not in result.message

    @pytest.mark.asyncio
    async def test_invitation_of_other_entity(self, unit_env):
        host, event = await seed_event(unit_env)
        invitation = await invite(unit_env, host, event)
        use_case = await unit_env.get(ResendInvitationUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(
                ResendInvitationRequest(
                    entity_type=EntityType.EVENT,
                    entity_id=uuid4(),
                    invitation_id=invitation.id,
                    user_id=host.id,
                )
            )
