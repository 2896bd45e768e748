"""Session token domain service."""

from uuid import UUID

import logfire

from elonara.config import AuthSettings
from elonara.domain.model import User
from elonara.domain.value import UserId
from elonara.util.jwt import JWTError, decode_session, encode_session

from .base import Service


class JWTService(Service):
    """Issues and reads the signed session cookie."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        self.auth_settings = auth_settings

    @property
    def cookie_name(self) -> str:
        return self.auth_settings.token_cookie_name

    @property
    def max_age_seconds(self) -> int:
        return self.auth_settings.jwt_expiry_days * 24 * 60 * 60

    def issue_session(self, user: User) -> str:
        """Sign a session token for a freshly registered or logged-in user."""
        token = encode_session(str(user.id), user.email.root, self.auth_settings)
        logfire.info("Session token issued", user_id=str(user.id))
        return token

    def resolve_user_id(self, token: str | None) -> UserId | None:
        """User ID carried by a session token.

        Missing, expired and tampered tokens all mean an anonymous caller.

        Args:
            token: Cookie value, if the cookie was sent

        Returns:
            User ID, or None for anonymous callers
        """
        if not token:
            return None

        try:
            claims = decode_session(token, self.auth_settings)
            return UserId(UUID(claims.sub))
        except (JWTError, ValueError) as e:
            logfire.debug("Session token rejected, treating as anonymous", error=str(e))
            return None
