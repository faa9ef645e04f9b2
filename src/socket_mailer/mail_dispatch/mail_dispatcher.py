"""Single-message mail dispatch: validation, composition, and SMTP delivery."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import cast

from socket_mailer.address_validation import (
    AddressValidator,
    EmailAddressValidator,
    MailValidator,
)
from socket_mailer.configuration.runtime_settings import MailSettings, SMTPSettings
from socket_mailer.delivery_failures import (
    DispatcherAlreadyUsedError,
    IncompleteMessageError,
    NoRecipientsError,
)
from socket_mailer.message_composition import (
    Attachment,
    ComposedMessage,
    Sender,
    compose_message,
    normalize_whitespace,
    sanitize_text,
)
from socket_mailer.smtp_transport import SmtpTransport

from .attachment_reading import FileReader, LocalFileReader, load_attachment
from .delivery_receipt import DeliveryReceipt

logger = logging.getLogger(__name__)

TransportFactory = Callable[[SMTPSettings], SmtpTransport]


class MailDispatcher:  # pylint: disable=too-many-instance-attributes
    """Builds and sends exactly one email.

    Configure recipients and sender, set subject and body, optionally add
    attachments, then call :meth:`send` once. Every input is validated when it
    is set, so a send never composes or connects with unvalidated data.
    """

    def __init__(
        self,
        smtp_settings: SMTPSettings,
        mail_settings: MailSettings,
        *,
        address_validator: AddressValidator | None = None,
        file_reader: FileReader | None = None,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self._smtp_settings = smtp_settings
        self._mail_settings = mail_settings
        self._validator = MailValidator(
            address_validator or EmailAddressValidator(), mail_settings.subject_length
        )
        self._validator.validate_charset(mail_settings.charset)
        self._file_reader = file_reader or LocalFileReader()
        self._transport_factory = transport_factory or SmtpTransport
        self._sender: Sender | None = None
        self._recipients: tuple[str, ...] = ()
        self._subject: str | None = None
        self._body: str | None = None
        self._attachments: list[Attachment] = []
        self._has_attachments = False
        self._sent = False

    @property
    def has_attachments(self) -> bool:
        return self._has_attachments

    @property
    def attachments(self) -> tuple[Attachment, ...]:
        return tuple(self._attachments)

    def configure(self, recipients: Sequence[str], sender: Sender | None = None) -> MailDispatcher:
        """Validate and store recipients and sender; the default sender fills a missing one."""
        if isinstance(recipients, str):
            recipients = [recipients]
        normalized = tuple(recipient.strip() for recipient in recipients)
        if not normalized:
            raise NoRecipientsError()
        for recipient in normalized:
            self._validator.validate_address(recipient)
        resolved_sender = sender if sender is not None else self._mail_settings.default_sender
        self._validator.validate_sender(resolved_sender)
        self._recipients = normalized
        self._sender = resolved_sender
        return self

    def set_subject(self, text: str) -> MailDispatcher:
        self._validator.validate_subject(normalize_whitespace(text))
        self._subject = sanitize_text(text)
        return self

    def set_body(self, text: str) -> MailDispatcher:
        self._body = sanitize_text(text)
        return self

    def add_attachments(self, paths: Sequence[str]) -> MailDispatcher:
        """Read every file before storing any, so one bad path leaves the message unchanged."""
        loaded = []
        for path in paths:
            logger.debug("Reading attachment %s", path)
            loaded.append(load_attachment(self._file_reader, str(path)))
        if loaded:
            self._attachments.extend(loaded)
            self._has_attachments = True
        return self

    def compose(self) -> ComposedMessage:
        """Compose the message after checking every required field is present."""
        if self._sender is None:
            raise IncompleteMessageError("sender")
        if not self._recipients:
            raise IncompleteMessageError("recipients")
        if not self._subject:
            raise IncompleteMessageError("subject")
        if not self._body:
            raise IncompleteMessageError("body")
        return compose_message(
            self._sender,
            self._recipients,
            self._subject,
            self._body,
            self._attachments,
            charset=self._mail_settings.charset,
        )

    def send(self) -> DeliveryReceipt:
        """Deliver the message; a dispatcher sends at most once, even when a send fails."""
        if self._sent:
            raise DispatcherAlreadyUsedError()
        message = self.compose()
        payload = message.as_bytes(self._mail_settings.charset)
        sender = cast(Sender, self._sender)
        self._sent = True

        logger.info(
            "Sending mail from %s to %d recipient(s) with %d attachment(s) via %s:%s",
            sender.formatted(),
            len(self._recipients),
            len(self._attachments),
            self._smtp_settings.host,
            self._smtp_settings.port,
        )
        with self._transport_factory(self._smtp_settings) as transport:
            transport.greet()
            transport.hello()
            transport.authenticate()
            transport.mail_from(sender.email)
            for recipient in self._recipients:
                transport.rcpt_to(recipient)
            transport.data()
            reply = transport.transmit(payload)
            transport.quit()
        logger.info("Mail accepted: %s", reply.final_line)

        return DeliveryReceipt(
            sender=sender.email,
            recipients=self._recipients,
            attachment_count=len(self._attachments),
            server_reply=reply.final_line,
        )
