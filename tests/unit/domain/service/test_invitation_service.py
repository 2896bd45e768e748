"""Unit tests for InvitationService."""

from datetime import timedelta

import pytest

from elonara.adapter.mail.transport import RecordingMailTransport
from elonara.domain.error import (
    AlreadyResolvedError,
    BusinessRuleViolationError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from elonara.domain.model import ResponderDetails
from elonara.domain.repository import (
    InvitationRepository,
    MembershipRepository,
    UserRepository,
)
from elonara.domain.service import InvitationService, RosterState, UserService
from elonara.domain.value import (
    Channel,
    EntityType,
    InvitationStatus,
    MembershipRole,
    MembershipStatus,
    utcnow,
)
from elonara.persistence.repository.inmemory import InMemoryInvitationRepository
from tests.conftest import make_user, seed_community, seed_event
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestInvite:
    """Tests for invite method."""

    @pytest.mark.asyncio
    async def test_invite_creates_pending_and_sends_email(self, unit_env):
        """A new email invitation is stored and mailed once."""
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        mail = await unit_env.get(RecordingMailTransport)

        outcome = await service.invite(
            EntityType.EVENT, event.id, " Guest@Example.com ", Channel.EMAIL, host.id
        )

        assert outcome.created is True
        assert outcome.delivery is not None and outcome.delivery.success
        assert outcome.invitation.status == InvitationStatus.PENDING
        assert outcome.invitation.recipient_identifier == "guest@example.com"
        assert outcome.invitation.expires_at is None
        assert len(mail.sent) == 1
        assert mail.sent[0].to == "guest@example.com"
        assert outcome.invitation.rsvp_token.root in mail.sent[0].text_body

        stored = await service.get_invitation(outcome.invitation.id)
        assert stored.delivery_count == 1

    @pytest.mark.asyncio
    async def test_invite_twice_is_idempotent(self, unit_env):
        """Inviting the same recipient again returns the existing invitation."""
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        mail = await unit_env.get(RecordingMailTransport)

        first = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )
        second = await service.invite(
            EntityType.EVENT, event.id, "GUEST@example.com", Channel.EMAIL, host.id
        )

        assert second.created is False
        assert second.invitation.id == first.invitation.id
        assert second.invitation.rsvp_token == first.invitation.rsvp_token
        assert len(mail.sent) == 1

    @pytest.mark.asyncio
    async def test_invite_after_cancel_creates_new_token(self, unit_env):
        """A cancelled invitation frees the recipient slot."""
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)

        first = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )
        await service.cancel(first.invitation.id, host.id)
        second = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )

        assert second.created is True
        assert second.invitation.id != first.invitation.id
        assert second.invitation.rsvp_token != first.invitation.rsvp_token

    @pytest.mark.asyncio
    async def test_invite_community_sets_expiry(self, unit_env):
        owner, community = await seed_community(unit_env)
        service = await unit_env.get(InvitationService)

        outcome = await service.invite(
            EntityType.COMMUNITY,
            community.id,
            "friend@example.com",
            Channel.EMAIL,
            owner.id,
        )

        assert outcome.invitation.expires_at is not None
        assert outcome.invitation.expires_at > utcnow() + timedelta(days=6)

    @pytest.mark.asyncio
    async def test_invite_by_non_host_rejected(self, unit_env):
        _, event = await seed_event(unit_env)
        stranger = await (await unit_env.get(UserRepository)).save(
            make_user("stranger@example.com")
        )
        service = await unit_env.get(InvitationService)

        with pytest.raises(NotAuthorizedError):
            await service.invite(
                EntityType.EVENT,
                event.id,
                "guest@example.com",
                Channel.EMAIL,
                stranger.id,
            )

    @pytest.mark.asyncio
    async def test_invite_missing_entity(self, unit_env):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)

        with pytest.raises(NotFoundError):
            await service.invite(
                EntityType.COMMUNITY,
                event.id,
                "guest@example.com",
                Channel.EMAIL,
                host.id,
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "channel,recipient",
        [
            (Channel.EMAIL, "not-an-email"),
            (Channel.BLUESKY, "alice.bsky.social"),
            (Channel.LINK, "   "),
        ],
    )
    async def test_invite_invalid_recipient(self, unit_env, channel, recipient):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)

        with pytest.raises(ValidationError):
            await service.invite(EntityType.EVENT, event.id, recipient, channel, host.id)

    @pytest.mark.asyncio
    async def test_failed_email_keeps_invitation(self, unit_env):
        """Delivery failure leaves a pending, resendable invitation."""
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        mail = await unit_env.get(RecordingMailTransport)
        mail.fail_next = True

        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )

        assert outcome.created is True
        assert outcome.delivery is not None and not outcome.delivery.success
        stored = await service.get_invitation(outcome.invitation.id)
        assert stored.status == InvitationStatus.PENDING
        assert stored.delivery_count == 0

        assert await service.resend(stored.id, host.id) is True
        assert len(mail.sent) == 1

    @pytest.mark.asyncio
    async def test_link_invitation_sends_nothing(self, unit_env):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        mail = await unit_env.get(RecordingMailTransport)

        outcome = await service.invite(
            EntityType.EVENT, event.id, "Aunt May", Channel.LINK, host.id
        )

        assert outcome.delivery is not None and outcome.delivery.success
        assert outcome.delivery.url.endswith(f"/rsvp/{outcome.invitation.rsvp_token.root}")
        assert mail.sent == []


class TestResend:
    """Tests for resend method."""

    @pytest.mark.asyncio
    async def test_resend_pending_keeps_token(self, unit_env):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        mail = await unit_env.get(RecordingMailTransport)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )

        assert await service.resend(outcome.invitation.id, host.id) is True

        stored = await service.get_invitation(outcome.invitation.id)
        assert stored.rsvp_token == outcome.invitation.rsvp_token
        assert stored.delivery_count == 2
        assert len(mail.sent) == 2

    @pytest.mark.asyncio
    async def test_resend_after_response_sends_nothing(self, unit_env):
        """Resending a confirmed invitation returns False and sends no mail."""
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        mail = await unit_env.get(RecordingMailTransport)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )
        await service.accept(outcome.invitation.rsvp_token.root)

        assert await service.resend(outcome.invitation.id, host.id) is False
        assert len(mail.sent) == 1

    @pytest.mark.asyncio
    async def test_resend_requires_manager(self, unit_env):
        host, event = await seed_event(unit_env)
        stranger = await (await unit_env.get(UserRepository)).save(
            make_user("stranger@example.com")
        )
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )

        with pytest.raises(NotAuthorizedError):
            await service.resend(outcome.invitation.id, stranger.id)


class TestCancel:
    """Tests for cancel method."""

    @pytest.mark.asyncio
    async def test_cancel_twice(self, unit_env):
        """The second removal reports that nothing changed."""
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )

        assert await service.cancel(outcome.invitation.id, host.id) is True
        assert await service.cancel(outcome.invitation.id, host.id) is False

        stored = await service.get_invitation(outcome.invitation.id)
        assert stored.status == InvitationStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancelled_token_unavailable(self, unit_env):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )
        await service.cancel(outcome.invitation.id, host.id)

        with pytest.raises(AlreadyResolvedError):
            await service.accept(outcome.invitation.rsvp_token.root)

    @pytest.mark.asyncio
    async def test_cancel_confirmed_community_invitation_removes_membership(
        self, unit_env
    ):
        owner, community = await seed_community(unit_env)
        member = await (await unit_env.get(UserRepository)).save(
            make_user("member@example.com", "Member")
        )
        service = await unit_env.get(InvitationService)
        memberships = await unit_env.get(MembershipRepository)

        outcome = await service.invite(
            EntityType.COMMUNITY,
            community.id,
            "member@example.com",
            Channel.EMAIL,
            owner.id,
        )
        result = await service.accept(
            outcome.invitation.rsvp_token.root, ResponderDetails(user_id=member.id)
        )
        assert result.roster is not None and result.roster.state == RosterState.MEMBER

        assert await service.cancel(outcome.invitation.id, owner.id) is True

        assert (
            await memberships.find_active(EntityType.COMMUNITY, community.id, member.id)
            is None
        )
        owner_membership = await memberships.find_active(
            EntityType.COMMUNITY, community.id, owner.id
        )
        assert owner_membership is not None
        assert owner_membership.role == MembershipRole.OWNER

    @pytest.mark.asyncio
    async def test_cancel_racing_accept_still_removes_membership(
        self, unit_env, monkeypatch
    ):
        """An accept landing after cancel read the row is cancelled with it."""
        owner, community = await seed_community(unit_env)
        member = await (await unit_env.get(UserRepository)).save(
            make_user("member@example.com", "Member")
        )
        service = await unit_env.get(InvitationService)
        memberships = await unit_env.get(MembershipRepository)
        outcome = await service.invite(
            EntityType.COMMUNITY,
            community.id,
            "member@example.com",
            Channel.EMAIL,
            owner.id,
        )
        token = outcome.invitation.rsvp_token.root

        read_invitation = service.get_invitation
        reads = 0

        async def read_then_guest_accepts(invitation_id):
            nonlocal reads
            reads += 1
            snapshot = await read_invitation(invitation_id)
            if reads == 1:
                await service.accept(token, ResponderDetails(user_id=member.id))
            return snapshot

        monkeypatch.setattr(service, "get_invitation", read_then_guest_accepts)

        assert await service.cancel(outcome.invitation.id, owner.id) is True

        assert reads == 2
        cancelled = await read_invitation(outcome.invitation.id)
        assert cancelled.status == InvitationStatus.CANCELLED
        assert (
            await memberships.find_active(EntityType.COMMUNITY, community.id, member.id)
            is None
        )

    @pytest.mark.asyncio
    async def test_cancel_by_stranger_rejected(self, unit_env):
        host, event = await seed_event(unit_env)
        stranger = await (await unit_env.get(UserRepository)).save(
            make_user("stranger@example.com")
        )
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )

        with pytest.raises(NotAuthorizedError):
            await service.cancel(outcome.invitation.id, stranger.id)


class TestAccept:
    """Tests for accept and decline."""

    @pytest.mark.asyncio
    async def test_accept_event_invitation(self, unit_env):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )

        result = await service.accept(
            outcome.invitation.rsvp_token.root,
            ResponderDetails(name="Guest", dietary_restrictions="vegan"),
        )

        assert result.already_confirmed is False
        assert result.roster is not None and result.roster.state == RosterState.GUEST
        assert result.invitation.status == InvitationStatus.CONFIRMED
        assert result.invitation.responder_name == "Guest"
        assert result.invitation.dietary_restrictions == "vegan"
        assert result.invitation.responded_at is not None

    @pytest.mark.asyncio
    async def test_double_accept_is_idempotent(self, unit_env):
        """A second click on the yes link succeeds without changes."""
        owner, community = await seed_community(unit_env)
        member = await (await unit_env.get(UserRepository)).save(
            make_user("member@example.com", "Member")
        )
        service = await unit_env.get(InvitationService)
        memberships = await unit_env.get(MembershipRepository)
        outcome = await service.invite(
            EntityType.COMMUNITY,
            community.id,
            "member@example.com",
            Channel.EMAIL,
            owner.id,
        )
        token = outcome.invitation.rsvp_token.root

        first = await service.accept(token, ResponderDetails(user_id=member.id))
        second = await service.accept(token, ResponderDetails(user_id=member.id))

        assert first.already_confirmed is False
        assert second.already_confirmed is True
        active = await memberships.list_for_entity(
            EntityType.COMMUNITY, community.id, MembershipStatus.ACTIVE
        )
        assert [m.user_id for m in active].count(member.id) == 1

    @pytest.mark.asyncio
    async def test_accept_after_decline_rejected(self, unit_env):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )
        token = outcome.invitation.rsvp_token.root
        await service.decline(token)

        with pytest.raises(AlreadyResolvedError):
            await service.accept(token)

    @pytest.mark.asyncio
    async def test_decline_twice_is_noop(self, unit_env):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )
        token = outcome.invitation.rsvp_token.root

        first = await service.decline(token)
        second = await service.decline(token)

        assert first.status == InvitationStatus.DECLINED
        assert second.responded_at == first.responded_at

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["", "zz", "0" * 64, "NOT-HEX" * 10])
    async def test_unknown_tokens_unavailable(self, unit_env, token):
        """Malformed and unknown tokens look the same to the caller."""
        service = await unit_env.get(InvitationService)

        with pytest.raises(NotFoundError, match="This invitation is unavailable."):
            await service.get_by_token(token)

    @pytest.mark.asyncio
    async def test_expired_community_invitation_unavailable(self, unit_env):
        owner, community = await seed_community(unit_env)
        service = await unit_env.get(InvitationService)
        repo = await unit_env.get(InvitationRepository)
        assert isinstance(repo, InMemoryInvitationRepository)
        invitation, _ = await repo.upsert_pending(
            entity_type=EntityType.COMMUNITY,
            entity_id=community.id,
            recipient="late@example.com",
            channel=Channel.EMAIL,
            inviter_id=owner.id,
            expires_at=utcnow() - timedelta(minutes=1),
        )

        with pytest.raises(NotFoundError):
            await service.accept(invitation.rsvp_token.root)

    @pytest.mark.asyncio
    async def test_community_accept_by_wrong_account_rejected(self, unit_env):
        owner, community = await seed_community(unit_env)
        other = await (await unit_env.get(UserRepository)).save(
            make_user("other@example.com", "Other")
        )
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.COMMUNITY,
            community.id,
            "member@example.com",
            Channel.EMAIL,
            owner.id,
        )

        with pytest.raises(NotAuthorizedError, match="different email address"):
            await service.accept(
                outcome.invitation.rsvp_token.root, ResponderDetails(user_id=other.id)
            )

    @pytest.mark.asyncio
    async def test_anonymous_community_accept_defers_membership(self, unit_env):
        owner, community = await seed_community(unit_env)
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.COMMUNITY,
            community.id,
            "newcomer@example.com",
            Channel.EMAIL,
            owner.id,
        )

        result = await service.accept(outcome.invitation.rsvp_token.root)

        assert result.roster is not None
        assert result.roster.state == RosterState.PENDING_ACCOUNT
        assert result.invitation.status == InvitationStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_confirmed_community_invitation_cannot_be_claimed_by_other_account(
        self, unit_env
    ):
        """Re-accepting a confirmed invitation still checks who is accepting."""
        owner, community = await seed_community(unit_env)
        users = await unit_env.get(UserRepository)
        other = await users.save(make_user("other@example.com", "Other"))
        service = await unit_env.get(InvitationService)
        memberships = await unit_env.get(MembershipRepository)
        outcome = await service.invite(
            EntityType.COMMUNITY,
            community.id,
            "newcomer@example.com",
            Channel.EMAIL,
            owner.id,
        )
        token = outcome.invitation.rsvp_token.root
        await service.accept(token)

        with pytest.raises(NotAuthorizedError, match="different email address"):
            await service.accept(token, ResponderDetails(user_id=other.id))

        assert (
            await memberships.find_active(EntityType.COMMUNITY, community.id, other.id)
            is None
        )

        registered = await (await unit_env.get(UserService)).register(
            "newcomer@example.com", "Newcomer"
        )

        assert len(registered.attached) == 1
        assert (
            await memberships.find_active(
                EntityType.COMMUNITY, community.id, registered.user.id
            )
            is not None
        )


class TestEventRules:
    """Plus-one and guest limit rules."""

    @pytest.mark.asyncio
    async def test_plus_one_counts_toward_total(self, unit_env):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )

        await service.accept(
            outcome.invitation.rsvp_token.root,
            ResponderDetails(plus_one=True, plus_one_name="Sam"),
        )

        assert await service.guest_total(event.id) == 2

    @pytest.mark.asyncio
    async def test_plus_one_requires_name(self, unit_env):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )

        with pytest.raises(ValidationError):
            await service.accept(
                outcome.invitation.rsvp_token.root, ResponderDetails(plus_one=True)
            )

        stored = await service.get_invitation(outcome.invitation.id)
        assert stored.status == InvitationStatus.PENDING

    @pytest.mark.asyncio
    async def test_plus_one_disallowed(self, unit_env):
        host, event = await seed_event(unit_env, allow_plus_ones=False)
        service = await unit_env.get(InvitationService)
        outcome = await service.invite(
            EntityType.EVENT, event.id, "guest@example.com", Channel.EMAIL, host.id
        )

        with pytest.raises(BusinessRuleViolationError):
            await service.accept(
                outcome.invitation.rsvp_token.root,
                ResponderDetails(plus_one=True, plus_one_name="Sam"),
            )

    @pytest.mark.asyncio
    async def test_guest_limit_enforced(self, unit_env):
        """The invitation past the limit stays pending."""
        host, event = await seed_event(unit_env, max_guests=1)
        service = await unit_env.get(InvitationService)
        first = await service.invite(
            EntityType.EVENT, event.id, "one@example.com", Channel.EMAIL, host.id
        )
        second = await service.invite(
            EntityType.EVENT, event.id, "two@example.com", Channel.EMAIL, host.id
        )
        await service.accept(first.invitation.rsvp_token.root)

        with pytest.raises(BusinessRuleViolationError, match="guest limit"):
            await service.accept(second.invitation.rsvp_token.root)

        stored = await service.get_invitation(second.invitation.id)
        assert stored.status == InvitationStatus.PENDING
        assert await service.guest_total(event.id) == 1

    @pytest.mark.asyncio
    async def test_declined_guests_do_not_count(self, unit_env):
        host, event = await seed_event(unit_env, max_guests=1)
        service = await unit_env.get(InvitationService)
        first = await service.invite(
            EntityType.EVENT, event.id, "one@example.com", Channel.EMAIL, host.id
        )
        second = await service.invite(
            EntityType.EVENT, event.id, "two@example.com", Channel.EMAIL, host.id
        )
        await service.decline(first.invitation.rsvp_token.root)

        result = await service.accept(second.invitation.rsvp_token.root)

        assert result.invitation.status == InvitationStatus.CONFIRMED


class TestListInvitations:
    @pytest.mark.asyncio
    async def test_list_filters_by_status(self, unit_env):
        host, event = await seed_event(unit_env)
        service = await unit_env.get(InvitationService)
        first = await service.invite(
            EntityType.EVENT, event.id, "one@example.com", Channel.EMAIL, host.id
        )
        await service.invite(
            EntityType.EVENT, event.id, "two@example.com", Channel.EMAIL, host.id
        )
        await service.accept(first.invitation.rsvp_token.root)

        everyone = await service.list_invitations(EntityType.EVENT, event.id, host.id)
        confirmed = await service.list_invitations(
            EntityType.EVENT, event.id, host.id, InvitationStatus.CONFIRMED
        )

        assert len(everyone) == 2
        assert [inv.id for inv in confirmed] == [first.invitation.id]
