"""Unit tests for the RSVP use cases."""

import pytest

from elonara.application.usecase.invitation import (
    AcceptInvitationRequest,
    AcceptInvitationUseCase,
    GetRsvpRequest,
    GetRsvpUseCase,
    RespondRsvpRequest,
    RespondRsvpUseCase,
)
from elonara.domain.error import NotAuthorizedError, NotFoundError
from elonara.domain.repository import UserRepository
from elonara.domain.service import InvitationService
from elonara.domain.value import Channel, EntityType, InvitationStatus, RsvpResponse
from tests.conftest import make_user, seed_community, seed_event
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def event_token(env, **event_kwargs):
    host, event = await seed_event(env, **event_kwargs)
    service = await env.get(InvitationService)
    outcome = await service.invite(
        EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
    )
    return event, outcome.invitation.rsvp_token.root


class TestGetRsvp:
    @pytest.mark.asyncio
    async def test_view_does_not_change_status(self, unit_env):
        event, token = await event_token(unit_env)
        use_case = await unit_env.get(GetRsvpUseCase)

        body = await use_case.execute(GetRsvpRequest(token=token))

        assert body.invitation.status == InvitationStatus.PENDING
        assert body.entity.name == event.title
        assert body.guest_total == 0
        assert body.message is None

    @pytest.mark.asyncio
    async def test_one_click_yes(self, unit_env):
        """``?rsvp=yes`` from the email confirms immediately."""
        _, token = await event_token(unit_env)
        use_case = await unit_env.get(GetRsvpUseCase)

        body = await use_case.execute(
            GetRsvpRequest(token=token, response=RsvpResponse.YES)
        )

        assert body.invitation.status == InvitationStatus.CONFIRMED
        assert body.guest_total == 1
        assert body.message == "RSVP confirmed! We'll see you there."

    @pytest.mark.asyncio
    async def test_one_click_yes_twice(self, unit_env):
        _, token = await event_token(unit_env)
        use_case = await unit_env.get(GetRsvpUseCase)
        request = GetRsvpRequest(token=token, response=RsvpResponse.YES)

        await use_case.execute(request)
        body = await use_case.execute(request)

        assert body.invitation.status == InvitationStatus.CONFIRMED
        assert body.guest_total == 1

    @pytest.mark.asyncio
    async def test_one_click_no_only_preselects(self, unit_env):
        """Opening ``?rsvp=no`` records nothing; a later yes still confirms."""
        _, token = await event_token(unit_env)
        use_case = await unit_env.get(GetRsvpUseCase)

        body = await use_case.execute(
            GetRsvpRequest(token=token, response=RsvpResponse.NO)
        )
        accepted = await use_case.execute(
            GetRsvpRequest(token=token, response=RsvpResponse.YES)
        )

        assert body.invitation.status == InvitationStatus.PENDING
        assert body.preselected == RsvpResponse.NO
        assert body.message is None
        assert accepted.invitation.status == InvitationStatus.CONFIRMED
        assert accepted.preselected is None

    @pytest.mark.asyncio
    async def test_unknown_token(self, unit_env):
        use_case = await unit_env.get(GetRsvpUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(GetRsvpRequest(token="f" * 64))


class TestRespondRsvp:
    @pytest.mark.asyncio
    async def test_decline(self, unit_env):
        _, token = await event_token(unit_env)
        use_case = await unit_env.get(RespondRsvpUseCase)

        body = await use_case.execute(
            RespondRsvpRequest(token=token, response=RsvpResponse.NO, name=" Guest ")
        )

        assert body.invitation.status == InvitationStatus.DECLINED
        assert body.invitation.responder_name == "Guest"
        assert body.message == "RSVP updated."

    @pytest.mark.asyncio
    async def test_yes_with_plus_one(self, unit_env):
        _, token = await event_token(unit_env)
        use_case = await unit_env.get(RespondRsvpUseCase)

        body = await use_case.execute(
            RespondRsvpRequest(
                token=token,
                response=RsvpResponse.YES,
                name="Guest",
                plus_one=True,
                plus_one_name="Sam",
            )
        )

        assert body.invitation.plus_one is True
        assert body.guest_total == 2

    @pytest.mark.asyncio
    async def test_community_yes_message(self, unit_env):
        owner, community = await seed_community(unit_env)
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.COMMUNITY, community.id, "Friend", Channel.LINK, owner.id
        )
        use_case = await unit_env.get(RespondRsvpUseCase)

        body = await use_case.execute(
            RespondRsvpRequest(
                token=outcome.invitation.rsvp_token.root, response=RsvpResponse.YES
            )
        )

        assert body.message == "You have successfully joined the community!"
        assert body.guest_total is None


class TestAcceptInvitation:
    @pytest.mark.asyncio
    async def test_requires_login(self, unit_env):
        use_case = await unit_env.get(AcceptInvitationUseCase)

        with pytest.raises(NotAuthorizedError, match="log in"):
            await use_case.execute(AcceptInvitationRequest(token="a" * 64, user_id=None))

    @pytest.mark.asyncio
    async def test_link_invitation_joins_logged_in_user(self, unit_env):
        owner, community = await seed_community(unit_env)
        joiner = await (await unit_env.get(UserRepository)).save(
            make_user("joiner@example.com", "Joiner")
        )
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.COMMUNITY, community.id, "Group chat", Channel.LINK, owner.id
        )
        use_case = await unit_env.get(AcceptInvitationUseCase)
        request = AcceptInvitationRequest(
            token=outcome.invitation.rsvp_token.root, user_id=joiner.id
        )

        first = await use_case.execute(request)
        second = await use_case.execute(request)

        assert first.membership_id is not None
        assert first.already_accepted is False
        assert first.message == "You have successfully joined the community!"
        assert second.already_accepted is True
        assert second.membership_id == first.membership_id
