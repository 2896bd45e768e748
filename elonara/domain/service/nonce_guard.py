"""Action nonce guard."""

import hmac
import secrets
from datetime import timedelta

import logfire

from elonara.config import NonceSettings
from elonara.domain.model import Nonce, NonceKey, RequestContext
from elonara.domain.repository import NonceStore
from elonara.domain.value import NonceScope, UserId, utcnow
from elonara.util.observability import redact

from .base import Service

NONCE_LENGTH = 12


class NonceGuard(Service):
    """Issues and checks short-lived tokens bound to an action scope.

    A nonce is bound to the caller's browser session, the action scope and
    the acting user (None for anonymous guests), for admins and everyone
    else alike. Validation fails closed and never raises.
    """

    def __init__(
        self,
        nonce_store: NonceStore,
        settings: NonceSettings,
        context: RequestContext,
    ) -> None:
        """Initialize nonce guard.

        Args:
            nonce_store: Process-local nonce storage
            settings: Nonce lifetime settings
            context: Caller context (session id)
        """
        self.nonce_store = nonce_store
        self.settings = settings
        self.context = context

    def _key(self, scope: NonceScope, subject_id: UserId | None) -> NonceKey:
        return NonceKey(
            session_id=self.context.session_id, scope=scope, subject_id=subject_id
        )

    async def _mint(self, key: NonceKey) -> str:
        now = utcnow()
        # 9 random bytes -> 12 URL-safe characters
        value = secrets.token_urlsafe(9)[:NONCE_LENGTH]
        nonce = Nonce(
            key=key,
            value=value,
            issued_at=now,
            expires_at=now + timedelta(seconds=self.settings.ttl_seconds),
        )
        await self.nonce_store.add(nonce, self.settings.max_live_per_key)
        return value

    async def issue(self, scope: NonceScope, subject_id: UserId | None = None) -> str:
        """Nonce to embed in a page or response.

        Reuses the newest live nonce for the same binding so that repeated
        page renders hand out one value.

        Args:
            scope: Action family
            subject_id: Acting user, None for anonymous guests

        Returns:
            Nonce value
        """
        with logfire.span("nonce_guard.issue", scope=scope.value):
            await self.nonce_store.purge_expired()
            key = self._key(scope, subject_id)
            live = await self.nonce_store.live(key)
            if live:
                return live[0].value
            return await self._mint(key)

    async def validate(
        self, scope: NonceScope, subject_id: UserId | None, token: str | None
    ) -> bool:
        """Check a submitted nonce. Does not consume it.

        Args:
            scope: Action family the request performs
            subject_id: Acting user, None for anonymous guests
            token: Submitted nonce

        Returns:
            True only for a live nonce issued for this exact binding
        """
        with logfire.span("nonce_guard.validate", scope=scope.value):
            if not token or not isinstance(token, str) or len(token) > 64:
                logfire.warn("Nonce missing or malformed", scope=scope.value)
                return False
            try:
                live = await self.nonce_store.live(self._key(scope, subject_id))
            except Exception as e:
                logfire.error("Nonce store unavailable", error=str(e))
                return False

            submitted = token.encode()
            valid = False
            for nonce in live:
                # Compare against every live value to keep timing uniform
                if hmac.compare_digest(nonce.value.encode(), submitted):
                    valid = True
            if not valid:
                logfire.warn(
                    "Nonce rejected", scope=scope.value, nonce=redact(token)
                )
            return valid

    async def rotate(self, scope: NonceScope, subject_id: UserId | None = None) -> str:
        """Mint a replacement after a successful mutation.

        Previous values stay valid until they expire (up to
        ``max_live_per_key``), so other open tabs keep working.

        Returns:
            The new nonce value
        """
        with logfire.span("nonce_guard.rotate", scope=scope.value):
            return await self._mint(self._key(scope, subject_id))
