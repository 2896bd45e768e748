"""Mail transports.

One transport is chosen at startup from ``mail.transport``; callers only
see ``MailTransport.send`` returning whether the message was accepted.
"""

import asyncio
import smtplib
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid

import logfire
from pydantic import BaseModel

from elonara.adapter.error import MailTransportError
from elonara.config import MailSettings


class MailMessage(BaseModel):
    """An outgoing message (kept by the recording transport)."""

    to: str
    subject: str
    html_body: str
    text_body: str


class MailTransport(ABC):
    """Base class for mail transports."""

    @abstractmethod
    async def send(self, to: str, subject: str, html_body: str, text_body: str) -> bool:
        """Send one message.

        Failures are logged and reported as ``False``; they never raise.

        Args:
            to: Recipient address
            subject: Subject line
            html_body: HTML alternative
            text_body: Plain text alternative

        Returns:
            True if the transport accepted the message
        """
        pass


class SmtpMailTransport(MailTransport):
    """SMTP transport (smtplib, run in a worker thread)."""

    def __init__(self, settings: MailSettings) -> None:
        self.settings = settings

    def _build_message(
        self, to: str, subject: str, html_body: str, text_body: str
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((self.settings.from_name, self.settings.from_address))
        msg["To"] = to
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid(domain=self.settings.from_address.split("@")[-1])
        if self.settings.reply_to_address:
            msg["Reply-To"] = self.settings.reply_to_address

        # Plain text first; clients show the last alternative they support
        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))
        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        try:
            with smtplib.SMTP(
                self.settings.host, self.settings.port, timeout=self.settings.timeout
            ) as server:
                if self.settings.use_tls:
                    server.starttls()
                if self.settings.username:
                    server.login(self.settings.username, self.settings.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(str(e)) from e

    async def send(self, to: str, subject: str, html_body: str, text_body: str) -> bool:
        with logfire.span("smtp_mail_transport.send", host=self.settings.host):
            msg = self._build_message(to, subject, html_body, text_body)
            try:
                await asyncio.to_thread(self._deliver, msg)
            except MailTransportError as e:
                logfire.error("Mail delivery failed", to=to, error=str(e))
                return False
            logfire.info("Mail sent", to=to, subject=subject)
            return True


class ConsoleMailTransport(MailTransport):
    """Logs messages instead of sending them (local development)."""

    async def send(self, to: str, subject: str, html_body: str, text_body: str) -> bool:
        logfire.info(
            "Mail (console transport)", to=to, subject=subject, body=text_body
        )
        return True


class RecordingMailTransport(MailTransport):
    """Mock transport for tests: records messages, optionally fails."""

    def __init__(self) -> None:
        self.sent: list[MailMessage] = []
        self.fail_next = False

    async def send(self, to: str, subject: str, html_body: str, text_body: str) -> bool:
        if self.fail_next:
            self.fail_next = False
            return False
        self.sent.append(
            MailMessage(to=to, subject=subject, html_body=html_body, text_body=text_body)
        )
        return True
