"""Invitation domain service."""

from datetime import datetime, timedelta

import logfire

from elonara.config import InvitationSettings
from elonara.domain.error import (
    AlreadyResolvedError,
    BusinessRuleViolationError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from elonara.domain.model import Event, Invitation, ResponderDetails
from elonara.domain.repository import (
    InvitationRepository,
    TransactionManager,
    UserRepository,
)
from elonara.domain.value import (
    BlueskyDID,
    Channel,
    EmailAddress,
    EntityId,
    EntityType,
    EventId,
    InvitationId,
    InvitationStatus,
    LinkLabel,
    RsvpToken,
    UserId,
    ValueObject,
    utcnow,
)

from .access import AccessService
from .base import Service
from .channel import ChannelAdapter, DeliveryResult
from .roster_reconciler import ReconcileResult, RosterReconciler

UNAVAILABLE_MESSAGE = "This invitation is unavailable."
CANCEL_ATTEMPTS = 3


class InviteOutcome(ValueObject):
    """Result of ``InvitationService.invite``."""

    invitation: Invitation

    # False when an active invitation already existed (nothing was sent)
    created: bool
    delivery: DeliveryResult | None = None


class AcceptResult(ValueObject):
    """Result of ``InvitationService.accept``."""

    invitation: Invitation
    roster: ReconcileResult | None = None

    # True when the invitation was confirmed before this call
    already_confirmed: bool = False


class InvitationService(Service):
    """Creates, delivers, resends, cancels and resolves invitations.

    Each mutation runs in its own short transaction. Channel delivery
    happens after the transaction commits, so a failed email or Bluesky
    post never removes the invitation: it stays resendable and its link
    keeps working.
    """

    def __init__(
        self,
        invitation_repository: InvitationRepository,
        user_repository: UserRepository,
        transaction_manager: TransactionManager,
        access_service: AccessService,
        roster_reconciler: RosterReconciler,
        channels: dict[Channel, ChannelAdapter],
        settings: InvitationSettings,
    ) -> None:
        """Initialize invitation service.

        Args:
            invitation_repository: Invitation store
            user_repository: User repository (responder checks)
            transaction_manager: Transaction boundary
            access_service: Management permission checks
            roster_reconciler: Membership bookkeeping
            channels: One delivery adapter per channel
            settings: Invitation settings
        """
        self.invitation_repository = invitation_repository
        self.user_repository = user_repository
        self.transaction_manager = transaction_manager
        self.access_service = access_service
        self.roster_reconciler = roster_reconciler
        self.channels = channels
        self.settings = settings

    @staticmethod
    def normalize_recipient(channel: Channel, recipient: str) -> str:
        """Validate and normalize a recipient for its channel.

        Args:
            channel: Delivery channel
            recipient: Raw recipient (email, DID or link label)

        Returns:
            Normalized recipient identifier

        Raises:
            ValidationError: If the recipient is malformed for the channel
        """
        try:
            if channel == Channel.EMAIL:
                return EmailAddress(recipient).root
            if channel == Channel.BLUESKY:
                return BlueskyDID(recipient).root
            return LinkLabel(recipient).root
        except ValueError:
            if channel == Channel.EMAIL:
                raise ValidationError("Please provide a valid email address.")
            if channel == Channel.BLUESKY:
                raise ValidationError("Please provide a valid Bluesky DID.")
            raise ValidationError("Please provide a label for this link.")

    def _expiry_for(self, entity_type: EntityType) -> datetime | None:
        if entity_type == EntityType.COMMUNITY:
            return utcnow() + timedelta(days=self.settings.community_expiry_days)
        return None

    async def _dispatch(
        self, invitation: Invitation, personal_message: str
    ) -> DeliveryResult:
        """Hand an invitation to its channel and record successful delivery."""
        adapter = self.channels[invitation.source_channel]
        result = await adapter.send(invitation, personal_message)

        if not result.success:
            logfire.warn(
                "Invitation delivery failed",
                invitation_id=str(invitation.id),
                channel=invitation.source_channel.value,
                error=result.error_message,
            )
            return result

        async with self.transaction_manager.atomic():
            await self.invitation_repository.record_delivery(
                invitation.id, self._expiry_for(invitation.entity_type)
            )
        return result

    async def invite(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        recipient: str,
        channel: Channel,
        inviter_user_id: UserId | None,
        personal_message: str | None = None,
    ) -> InviteOutcome:
        """Invite a recipient to an event or community.

        Inviting a recipient that already holds an active invitation returns
        that invitation and sends nothing.

        Args:
            entity_type: Event or community
            entity_id: Target entity
            recipient: Email, Bluesky DID or link label
            channel: Delivery channel
            inviter_user_id: Acting user
            personal_message: Optional note for the recipient

        Returns:
            Invite outcome with the delivery result of a new invitation

        Raises:
            NotFoundError: If the entity does not exist
            NotAuthorizedError: If the inviter may not manage the entity
            ValidationError: If the recipient is malformed
        """
        with logfire.span(
            "invitation_service.invite",
            entity_type=entity_type.value,
            entity_id=str(entity_id),
            channel=channel.value,
        ):
            await self.access_service.require_manage(
                entity_type, entity_id, inviter_user_id, "invite guests to"
            )
            normalized = self.normalize_recipient(channel, recipient)
            message = (personal_message or "").strip()

            async with self.transaction_manager.atomic():
                invitation, created = await self.invitation_repository.upsert_pending(
                    entity_type=entity_type,
                    entity_id=entity_id,
                    recipient=normalized,
                    channel=channel,
                    inviter_id=inviter_user_id,
                    personal_message=message,
                    expires_at=self._expiry_for(entity_type),
                )

            if not created:
                logfire.info(
                    "Active invitation already exists",
                    invitation_id=str(invitation.id),
                    status=invitation.status.value,
                )
                return InviteOutcome(invitation=invitation, created=False)

            logfire.info(
                "Invitation created",
                invitation_id=str(invitation.id),
                token=invitation.rsvp_token.root[:8] + "...",
            )
            delivery = await self._dispatch(invitation, message)
            return InviteOutcome(invitation=invitation, created=True, delivery=delivery)

    async def get_invitation(self, invitation_id: InvitationId) -> Invitation:
        """Load an invitation by ID.

        Raises:
            NotFoundError: If it does not exist
        """
        invitation = await self.invitation_repository.find_by_id(invitation_id)
        if invitation is None:
            raise NotFoundError("Invitation", str(invitation_id))
        return invitation

    async def resend(
        self, invitation_id: InvitationId, acting_user_id: UserId | None
    ) -> bool:
        """Deliver a pending invitation again through its original channel.

        The token is unchanged; the delivery counter is bumped and a
        community invitation's expiry is refreshed.

        Args:
            invitation_id: Invitation to resend
            acting_user_id: Acting user (must manage the entity)

        Returns:
            True if the invitation was pending and the channel accepted it,
            False otherwise (nothing is sent for non-pending invitations)

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the user may not manage the entity
        """
        with logfire.span(
            "invitation_service.resend", invitation_id=str(invitation_id)
        ):
            invitation = await self.get_invitation(invitation_id)
            await self.access_service.require_manage(
                invitation.entity_type,
                invitation.entity_id,
                acting_user_id,
                "resend invitations for",
            )

            if not invitation.is_pending:
                logfire.info(
                    "Resend skipped, invitation already resolved",
                    invitation_id=str(invitation_id),
                    status=invitation.status.value,
                )
                return False

            result = await self._dispatch(invitation, invitation.personal_message)
            return result.success

    async def cancel(
        self, invitation_id: InvitationId, acting_user_id: UserId | None
    ) -> bool:
        """Cancel an invitation (host "Remove guest").

        Cancelling a confirmed community invitation also removes the
        membership it granted, in the same transaction.

        Args:
            invitation_id: Invitation to cancel
            acting_user_id: Original inviter or an entity manager

        Returns:
            True if this call cancelled it, False if it already was

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the user may not cancel it
        """
        with logfire.span(
            "invitation_service.cancel", invitation_id=str(invitation_id)
        ):
            invitation = await self.get_invitation(invitation_id)

            is_inviter = (
                acting_user_id is not None and invitation.inviter_id == acting_user_id
            )
            if not is_inviter and not await self.access_service.can_manage(
                invitation.entity_type, invitation.entity_id, acting_user_id
            ):
                raise NotAuthorizedError(
                    "cancel", "invitation", str(acting_user_id) if acting_user_id else None
                )

            # A guest may answer between our read and the update; re-read and
            # retry so the membership release follows the status replaced
            for _ in range(CANCEL_ATTEMPTS):
                if invitation.status == InvitationStatus.CANCELLED:
                    logfire.info(
                        "Invitation already cancelled",
                        invitation_id=str(invitation_id),
                    )
                    return False

                try:
                    async with self.transaction_manager.atomic():
                        cancelled = await self.invitation_repository.set_status(
                            invitation.id,
                            InvitationStatus.CANCELLED,
                            expected_status=invitation.status,
                        )
                        if invitation.status == InvitationStatus.CONFIRMED:
                            await self.roster_reconciler.release(cancelled)
                except InvalidTransitionError:
                    logfire.info(
                        "Invitation changed during cancel",
                        invitation_id=str(invitation_id),
                        seen_status=invitation.status.value,
                    )
                    invitation = await self.get_invitation(invitation_id)
                    continue

                logfire.info(
                    "Invitation cancelled",
                    invitation_id=str(invitation_id),
                    previous_status=invitation.status.value,
                )
                return True

            raise InvalidTransitionError(
                invitation.status.value, InvitationStatus.CANCELLED.value
            )

    async def get_by_token(self, token: str) -> Invitation:
        """Look up the invitation a token grants access to.

        Unknown, malformed and expired tokens all raise the same error.

        Raises:
            NotFoundError: If the token does not grant access
        """
        try:
            rsvp_token = RsvpToken(token)
        except ValueError:
            raise NotFoundError("Invitation", "token", UNAVAILABLE_MESSAGE)

        invitation = await self.invitation_repository.find_by_token(rsvp_token)
        if invitation is None or (
            invitation.is_pending and invitation.is_expired()
        ):
            logfire.warn("Invitation token unavailable", token=token[:8] + "...")
            raise NotFoundError("Invitation", "token", UNAVAILABLE_MESSAGE)
        return invitation

    async def _check_responder(
        self, invitation: Invitation, responder: ResponderDetails
    ) -> None:
        """A logged-in community responder must be the invited account."""
        if invitation.entity_type != EntityType.COMMUNITY or responder.user_id is None:
            return

        mismatch = False
        if invitation.user_id is not None:
            mismatch = invitation.user_id != responder.user_id
        elif invitation.source_channel != Channel.LINK:
            user = await self.user_repository.find_by_id(responder.user_id)
            if user is not None:
                identifiers = {user.email.root}
                if user.bluesky_did is not None:
                    identifiers.add(user.bluesky_did.root)
                mismatch = invitation.recipient_identifier not in identifiers

        if mismatch:
            raise NotAuthorizedError(
                "accept",
                "invitation",
                str(responder.user_id),
                "This invitation was sent to a different email address.",
            )

    async def _check_event_rules(
        self, invitation: Invitation, responder: ResponderDetails
    ) -> None:
        """Plus-one and guest limit rules for event RSVPs."""
        event = await self.access_service.load_entity(
            EntityType.EVENT, invitation.entity_id
        )
        if not isinstance(event, Event):
            raise NotFoundError("Event", str(invitation.entity_id))

        if responder.plus_one:
            if not event.allow_plus_ones:
                raise BusinessRuleViolationError("This event does not allow plus-ones.")
            if not responder.plus_one_name.strip():
                raise ValidationError("Please provide your plus one's name.")

        if event.has_guest_limit:
            taken = await self.invitation_repository.count_guests(EventId(event.id))
            seats = 2 if responder.plus_one else 1
            if taken + seats > event.max_guests:
                logfire.warn(
                    "Guest limit reached",
                    event_id=str(event.id),
                    taken=taken,
                    max_guests=event.max_guests,
                )
                raise BusinessRuleViolationError(
                    "This event has reached its guest limit."
                )

    async def _already_confirmed(
        self, invitation: Invitation, responder: ResponderDetails
    ) -> AcceptResult:
        roster = None
        if (
            invitation.entity_type == EntityType.COMMUNITY
            and responder.user_id is not None
        ):
            # A later logged-in visit completes a deferred membership
            async with self.transaction_manager.atomic():
                roster = await self.roster_reconciler.reconcile(
                    invitation, responder.user_id
                )
            invitation = roster.invitation
        return AcceptResult(
            invitation=invitation, roster=roster, already_confirmed=True
        )

    async def accept(
        self, token: str, responder: ResponderDetails | None = None
    ) -> AcceptResult:
        """Confirm an invitation.

        Accepting an already-confirmed invitation succeeds without changes
        (double clicks, mail clients prefetching links). The status change
        and the roster update commit together.

        Args:
            token: RSVP token
            responder: Details the guest supplied

        Returns:
            Accept result

        Raises:
            NotFoundError: If the token does not grant access
            AlreadyResolvedError: If the invitation was declined or cancelled
            NotAuthorizedError: If a logged-in responder is not the recipient
            BusinessRuleViolationError: If the event is full or disallows
                plus-ones
            ValidationError: If a plus-one has no name
        """
        responder = responder or ResponderDetails()
        with logfire.span("invitation_service.accept", token=token[:8] + "..."):
            invitation = await self.get_by_token(token)

            await self._check_responder(invitation, responder)

            if invitation.status == InvitationStatus.CONFIRMED:
                logfire.info(
                    "Invitation already confirmed", invitation_id=str(invitation.id)
                )
                return await self._already_confirmed(invitation, responder)
            if invitation.status != InvitationStatus.PENDING:
                raise AlreadyResolvedError(invitation.status.value)

            try:
                async with self.transaction_manager.atomic():
                    if invitation.entity_type == EntityType.EVENT:
                        await self._check_event_rules(invitation, responder)
                    confirmed = await self.invitation_repository.set_status(
                        invitation.id,
                        InvitationStatus.CONFIRMED,
                        responder,
                        expected_status=InvitationStatus.PENDING,
                    )
                    roster = await self.roster_reconciler.reconcile(
                        confirmed, responder.user_id
                    )
            except InvalidTransitionError:
                current = await self.get_invitation(invitation.id)
                if current.status == InvitationStatus.CONFIRMED:
                    return AcceptResult(invitation=current, already_confirmed=True)
                raise AlreadyResolvedError(current.status.value)

            logfire.info(
                "Invitation accepted",
                invitation_id=str(invitation.id),
                roster_state=roster.state.value,
            )
            return AcceptResult(invitation=roster.invitation, roster=roster)

    async def decline(
        self, token: str, responder: ResponderDetails | None = None
    ) -> Invitation:
        """Decline an invitation. Declining twice is a no-op.

        Raises:
            NotFoundError: If the token does not grant access
            AlreadyResolvedError: If the invitation was confirmed or cancelled
        """
        responder = responder or ResponderDetails()
        with logfire.span("invitation_service.decline", token=token[:8] + "..."):
            invitation = await self.get_by_token(token)

            if invitation.status == InvitationStatus.DECLINED:
                return invitation
            if invitation.status != InvitationStatus.PENDING:
                raise AlreadyResolvedError(invitation.status.value)

            try:
                async with self.transaction_manager.atomic():
                    declined = await self.invitation_repository.set_status(
                        invitation.id,
                        InvitationStatus.DECLINED,
                        responder,
                        expected_status=InvitationStatus.PENDING,
                    )
            except InvalidTransitionError:
                current = await self.get_invitation(invitation.id)
                if current.status == InvitationStatus.DECLINED:
                    return current
                raise AlreadyResolvedError(current.status.value)

            logfire.info("Invitation declined", invitation_id=str(invitation.id))
            return declined

    async def list_invitations(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        acting_user_id: UserId | None,
        status: InvitationStatus | None = None,
    ) -> list[Invitation]:
        """List an entity's invitations for its managers, newest first.

        Raises:
            NotFoundError: If the entity does not exist
            NotAuthorizedError: If the user may not manage it
        """
        with logfire.span(
            "invitation_service.list_invitations",
            entity_type=entity_type.value,
            entity_id=str(entity_id),
        ):
            await self.access_service.require_manage(
                entity_type, entity_id, acting_user_id, "view invitations for"
            )
            return await self.invitation_repository.list_for_entity(
                entity_type, entity_id, status
            )

    async def guest_total(self, event_id: EventId) -> int:
        """Confirmed guests of an event, plus-ones included."""
        return await self.invitation_repository.count_guests(event_id)
