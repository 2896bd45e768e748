"""Mail infrastructure providers."""

from dishka import Scope, provide

from elonara.adapter.mail.transport import (
    ConsoleMailTransport,
    MailTransport,
    SmtpMailTransport,
)
from elonara.config import MailSettings
from elonara.util.di.base import ProviderBase


class MailProvider(ProviderBase):
    """Mail component base."""

    __mock_component__ = "mail"


class ProdMailProvider(MailProvider):
    """Production mail provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_mail_transport(self, settings: MailSettings) -> MailTransport:
        """Provide the transport named by ``mail.transport``.

        Chosen once at startup; nothing branches on it afterwards.
        """
        if settings.transport == "console":
            return ConsoleMailTransport()
        return SmtpMailTransport(settings)
