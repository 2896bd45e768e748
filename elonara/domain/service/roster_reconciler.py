"""Roster reconciler.

Turns confirmed invitations into community memberships, now or once the
recipient has an account. Events keep their guest list on the invitation
rows themselves and never get memberships.
"""

from enum import Enum
from uuid import uuid4

import logfire

from elonara.domain.error import BusinessRuleViolationError
from elonara.domain.model import Invitation, Membership, User
from elonara.domain.repository import (
    InvitationRepository,
    MembershipRepository,
    UserRepository,
)
from elonara.domain.value import (
    BlueskyDID,
    Channel,
    EmailAddress,
    EntityId,
    EntityType,
    InvitationStatus,
    MembershipId,
    MembershipRole,
    MembershipStatus,
    UserId,
    ValueObject,
)

from .base import Service


class RosterState(str, Enum):
    """Where a confirmed invitation leaves its recipient."""

    MEMBER = "member"
    GUEST = "guest"
    PENDING_ACCOUNT = "pending_account"


class ReconcileResult(ValueObject):
    """Outcome of reconciling one confirmed invitation."""

    state: RosterState
    invitation: Invitation
    membership: Membership | None = None

    # True when this call inserted the membership
    created: bool = False


class RosterReconciler(Service):
    """Keeps memberships consistent with confirmed invitations.

    Callers run it inside the same transaction as the status change that
    triggered it.
    """

    def __init__(
        self,
        invitation_repository: InvitationRepository,
        membership_repository: MembershipRepository,
        user_repository: UserRepository,
    ) -> None:
        self.invitation_repository = invitation_repository
        self.membership_repository = membership_repository
        self.user_repository = user_repository

    async def _resolve_user(
        self, invitation: Invitation, user_id: UserId | None
    ) -> UserId | None:
        if invitation.user_id is not None:
            return invitation.user_id
        if user_id is not None:
            return user_id

        recipient = invitation.recipient_identifier
        user: User | None = None
        if invitation.source_channel == Channel.BLUESKY:
            try:
                user = await self.user_repository.find_by_bluesky_did(
                    BlueskyDID(recipient)
                )
            except ValueError:
                return None
        else:
            try:
                email = EmailAddress(recipient)
            except ValueError:
                # Link labels that are not addresses never match an account
                return None
            user = await self.user_repository.find_by_email(email)
        return user.id if user else None

    async def reconcile(
        self, invitation: Invitation, user_id: UserId | None = None
    ) -> ReconcileResult:
        """Apply a confirmed invitation to the roster.

        Idempotent: an existing active membership is returned unchanged.

        Args:
            invitation: Confirmed invitation
            user_id: Logged-in responder, if any

        Returns:
            Reconcile result

        Raises:
            BusinessRuleViolationError: If the invitation is not confirmed
        """
        with logfire.span(
            "roster_reconciler.reconcile",
            invitation_id=str(invitation.id),
            entity_type=invitation.entity_type.value,
        ):
            if invitation.status != InvitationStatus.CONFIRMED:
                raise BusinessRuleViolationError(
                    "Only confirmed invitations can be added to a roster."
                )

            resolved = await self._resolve_user(invitation, user_id)
            if resolved is not None and invitation.user_id is None:
                invitation = await self.invitation_repository.bind_user(
                    invitation.id, resolved
                )

            if invitation.entity_type == EntityType.EVENT:
                return ReconcileResult(state=RosterState.GUEST, invitation=invitation)

            if resolved is None:
                logfire.info(
                    "Membership deferred until the recipient registers",
                    invitation_id=str(invitation.id),
                )
                return ReconcileResult(
                    state=RosterState.PENDING_ACCOUNT, invitation=invitation
                )

            membership, created = await self.membership_repository.add_active(
                Membership(
                    id=MembershipId(uuid4()),
                    entity_type=invitation.entity_type,
                    entity_id=invitation.entity_id,
                    user_id=resolved,
                    role=MembershipRole.MEMBER,
                    invitation_id=invitation.id,
                )
            )
            if created:
                logfire.info(
                    "Membership created",
                    membership_id=str(membership.id),
                    entity_id=str(invitation.entity_id),
                    user_id=str(resolved),
                )
            return ReconcileResult(
                state=RosterState.MEMBER,
                invitation=invitation,
                membership=membership,
                created=created,
            )

    async def attach_pending_for_user(self, user: User) -> list[ReconcileResult]:
        """Bind invitations addressed to a new account.

        Pending invitations are only bound; confirmed ones are reconciled,
        which creates the memberships deferred at acceptance time.

        Args:
            user: Newly registered user

        Returns:
            Results for the confirmed invitations
        """
        with logfire.span("roster_reconciler.attach_pending", user_id=str(user.id)):
            recipients = [user.email.root]
            if user.bluesky_did is not None:
                recipients.append(user.bluesky_did.root)

            invitations = await self.invitation_repository.find_unbound_for_recipients(
                recipients, [InvitationStatus.PENDING, InvitationStatus.CONFIRMED]
            )

            results = []
            for invitation in invitations:
                if invitation.status == InvitationStatus.CONFIRMED:
                    results.append(await self.reconcile(invitation, user.id))
                else:
                    await self.invitation_repository.bind_user(invitation.id, user.id)

            logfire.info(
                "Pending invitations attached",
                user_id=str(user.id),
                bound=len(invitations),
                reconciled=len(results),
            )
            return results

    async def seed_owner(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        user_id: UserId,
        role: MembershipRole = MembershipRole.OWNER,
    ) -> Membership:
        """Give the creator of a community its first membership."""
        membership, _ = await self.membership_repository.add_active(
            Membership(
                id=MembershipId(uuid4()),
                entity_type=entity_type,
                entity_id=entity_id,
                user_id=user_id,
                role=role,
            )
        )
        return membership

    async def release(self, invitation: Invitation) -> Membership | None:
        """Remove the membership a cancelled community invitation granted.

        Owners and staff roles are left alone.

        Returns:
            The removed membership, None if there was nothing to remove
        """
        if invitation.entity_type != EntityType.COMMUNITY or invitation.user_id is None:
            return None

        membership = await self.membership_repository.find_active(
            invitation.entity_type, invitation.entity_id, invitation.user_id
        )
        if membership is None or membership.role != MembershipRole.MEMBER:
            return None

        removed = await self.membership_repository.set_status(
            membership.id, MembershipStatus.REMOVED
        )
        logfire.info(
            "Membership released",
            membership_id=str(membership.id),
            invitation_id=str(invitation.id),
        )
        return removed
