"""Delivery failure exports."""

from .failure_kinds import (
    AttachmentError,
    AttachmentNotFoundError,
    AttachmentNotReadableError,
    DeliveryStage,
    DispatcherAlreadyUsedError,
    IncompleteMessageError,
    InvalidEmailError,
    LocalValidationError,
    MailDeliveryError,
    MissingSenderError,
    NoRecipientsError,
    RemoteDeliveryError,
    SmtpConnectionError,
    SubjectTooLongError,
    UnsupportedCharsetError,
)

__all__ = [
    "DeliveryStage",
    "MailDeliveryError",
    "LocalValidationError",
    "InvalidEmailError",
    "MissingSenderError",
    "NoRecipientsError",
    "SubjectTooLongError",
    "UnsupportedCharsetError",
    "IncompleteMessageError",
    "DispatcherAlreadyUsedError",
    "AttachmentError",
    "AttachmentNotFoundError",
    "AttachmentNotReadableError",
    "RemoteDeliveryError",
    "SmtpConnectionError",
]
