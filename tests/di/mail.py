"""Mock mail providers for testing."""

from dishka import Scope, provide

from elonara.adapter.mail.transport import MailTransport, RecordingMailTransport
from elonara.util.di.infrastructure.mail import MailProvider


class MockMailProvider(MailProvider):
    """Mock mail provider recording outgoing messages."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_recording_transport(self) -> RecordingMailTransport:
        """Provide the recorder tests inspect."""
        return RecordingMailTransport()

    @provide(scope=Scope.APP)
    def get_mail_transport(self, transport: RecordingMailTransport) -> MailTransport:
        return transport
