"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from elonara.config import (
    AuthSettings,
    BlueskySettings,
    InvitationSettings,
    MailSettings,
    NonceSettings,
    Settings,
)
from elonara.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        return settings.auth

    @provide
    def provide_nonce_settings(self, settings: Settings) -> NonceSettings:
        return settings.nonce

    @provide
    def provide_invitation_settings(self, settings: Settings) -> InvitationSettings:
        return settings.invitations

    @provide
    def provide_mail_settings(self, settings: Settings) -> MailSettings:
        return settings.mail

    @provide
    def provide_bluesky_settings(self, settings: Settings) -> BlueskySettings:
        return settings.bluesky
