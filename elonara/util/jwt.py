"""Session token encoding.

Login lives in the external auth service. It and this API share
``auth.jwt_secret``; the resulting token travels in the ``auth.token_cookie_name``
cookie. Standard registered claims are used so either side can verify.
"""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from elonara.config import AuthSettings


class SessionClaims(BaseModel):
    """Decoded session token."""

    sub: str  # User ID
    email: str
    iat: datetime
    exp: datetime


class JWTError(Exception):
    """Session token could not be verified."""

    pass


def encode_session(user_id: str, email: str, settings: AuthSettings) -> str:
    """Sign a session token valid for ``settings.jwt_expiry_days``."""
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_session(token: str, settings: AuthSettings) -> SessionClaims:
    """Verify signature and expiry of a session token.

    Raises:
        JWTError: If the token is expired, tampered with or malformed
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise JWTError("Session token has expired") from e
    except jwt.InvalidTokenError as e:
        raise JWTError(f"Invalid session token: {e}") from e
    return SessionClaims(**claims)
