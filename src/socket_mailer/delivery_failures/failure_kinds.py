"""Error taxonomy shared by validation, composition, and transport."""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class DeliveryStage(str, Enum):
    """SMTP dialog stage, valued by the reason reported when it fails."""

    CONNECT = "connection failed"
    GREETING = "greeting rejected"
    HELLO = "hello rejected"
    AUTH_REQUEST = "authentication request rejected"
    AUTH_USERNAME = "username rejected"
    AUTH_PASSWORD = "password rejected"
    MAIL_FROM = "sender rejected"
    RCPT_TO = "recipient rejected"
    DATA = "data command rejected"
    MESSAGE_BODY = "message body rejected"


class MailDeliveryError(Exception):
    """Base class for every failure raised by a send."""

    kind = "delivery"


class LocalValidationError(MailDeliveryError):
    """Input problem detected before any network activity."""

    kind = "validation"


class InvalidEmailError(LocalValidationError):
    """Raised when an address fails syntax validation."""

    def __init__(self, address: str, reason: str | None = None) -> None:
        self.address = address
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Email address '{address}' is not valid{detail}.")


class MissingSenderError(LocalValidationError):
    """Raised when neither an explicit nor a default sender is available."""

    def __init__(self) -> None:
        super().__init__("Sender email address is missing.")


class NoRecipientsError(LocalValidationError):
    """Raised when a message has no recipients."""

    def __init__(self) -> None:
        super().__init__("At least one recipient is required.")


class SubjectTooLongError(LocalValidationError):
    """Raised when the subject exceeds the configured maximum length."""

    def __init__(self, limit: int, length: int) -> None:
        self.limit = limit
        self.length = length
        super().__init__(f"Subject is {length} characters long; the limit is {limit}.")


class UnsupportedCharsetError(LocalValidationError):
    """Raised when the mail charset cannot carry SMTP's ASCII line framing."""

    def __init__(self, charset: str) -> None:
        self.charset = charset
        super().__init__(f"Charset '{charset}' is not ASCII-compatible.")


class IncompleteMessageError(LocalValidationError):
    """Raised by send() when a required message field was never set."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Cannot compose a message without {field_name}.")


class DispatcherAlreadyUsedError(LocalValidationError):
    """Raised on a second send() from the same dispatcher."""

    def __init__(self) -> None:
        super().__init__("This dispatcher has already performed its send.")


class AttachmentError(MailDeliveryError):
    """Attachment could not be loaded."""

    kind = "attachment"

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = str(path)
        super().__init__(message)


class AttachmentNotFoundError(AttachmentError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, f"Attachment file not found: {path}")


class AttachmentNotReadableError(AttachmentError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, f"Attachment file is not readable: {path}")


class RemoteDeliveryError(MailDeliveryError):
    """The SMTP server answered a stage with an unexpected reply code."""

    kind = "remote"

    def __init__(self, stage: DeliveryStage, server_line: str | None) -> None:
        self.stage = stage
        self.server_line = server_line
        super().__init__(self._describe(stage, server_line))

    @staticmethod
    def _describe(stage: DeliveryStage, detail: str | None) -> str:
        return f"{stage.value}: {detail}" if detail else stage.value


class SmtpConnectionError(RemoteDeliveryError):
    """Network level failure: connect, TLS, timeout, or a dropped connection.

    No reply was received, so the message names the stage in progress rather than
    a rejection.
    """

    kind = "connection"

    @staticmethod
    def _describe(stage: DeliveryStage, detail: str | None) -> str:
        if stage is DeliveryStage.CONNECT:
            prefix = stage.value
        else:
            prefix = f"connection lost during {stage.name}"
        return f"{prefix}: {detail}" if detail else prefix
