"""Unit tests for JWTService."""

from datetime import datetime, timedelta, timezone

import jwt

from elonara.config import AuthSettings
from elonara.domain.service import JWTService
from tests.conftest import make_user

SETTINGS = AuthSettings(jwt_secret="test-secret")


class TestJWTService:
    def test_issued_token_resolves_to_user(self):
        service = JWTService(auth_settings=SETTINGS)
        user = make_user()

        token = service.issue_session(user)

        assert service.resolve_user_id(token) == user.id

    def test_missing_token_is_anonymous(self):
        service = JWTService(auth_settings=SETTINGS)

        assert service.resolve_user_id(None) is None
        assert service.resolve_user_id("") is None

    def test_token_signed_with_other_secret_is_anonymous(self):
        user = make_user()
        forged = JWTService(
            auth_settings=AuthSettings(jwt_secret="other-secret")
        ).issue_session(user)

        assert JWTService(auth_settings=SETTINGS).resolve_user_id(forged) is None

    def test_expired_token_is_anonymous(self):
        past = datetime.now(timezone.utc) - timedelta(days=2)
        token = jwt.encode(
            {
                "sub": str(make_user().id),
                "email": "host@example.com",
                "iat": past,
                "exp": past + timedelta(days=1),
            },
            SETTINGS.jwt_secret,
            algorithm=SETTINGS.jwt_algorithm,
        )

        assert JWTService(auth_settings=SETTINGS).resolve_user_id(token) is None

    def test_non_uuid_subject_is_anonymous(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": "alice",
                "email": "a@example.com",
                "iat": now,
                "exp": now + timedelta(hours=1),
            },
            SETTINGS.jwt_secret,
            algorithm=SETTINGS.jwt_algorithm,
        )

        assert JWTService(auth_settings=SETTINGS).resolve_user_id(token) is None

    def test_cookie_lifetime_follows_settings(self):
        service = JWTService(auth_settings=AuthSettings(jwt_expiry_days=2))

        assert service.cookie_name == "auth_token"
        assert service.max_age_seconds == 2 * 24 * 60 * 60
