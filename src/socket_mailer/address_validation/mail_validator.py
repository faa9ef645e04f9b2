"""Sender and subject validation rules."""

from __future__ import annotations

from socket_mailer.delivery_failures import (
    MissingSenderError,
    SubjectTooLongError,
    UnsupportedCharsetError,
)
from socket_mailer.message_composition import Sender, is_ascii_compatible

from .email_addresses import AddressValidator

DEFAULT_SUBJECT_LENGTH = 78


class MailValidator:
    """Applies the configured mail rules.

    ``subject_length`` of ``None`` disables the subject length check.
    """

    def __init__(self, address_validator: AddressValidator, subject_length: int | None) -> None:
        self._address_validator = address_validator
        self._subject_length = subject_length

    def validate_address(self, address: str) -> None:
        self._address_validator.validate(address)

    def validate_sender(self, sender: Sender | None) -> None:
        if sender is None or not sender.email:
            raise MissingSenderError()
        self._address_validator.validate(sender.email)

    def validate_subject(self, subject: str) -> None:
        if self._subject_length is not None and len(subject) > self._subject_length:
            raise SubjectTooLongError(self._subject_length, len(subject))

    def validate_charset(self, charset: str) -> None:
        if not is_ascii_compatible(charset):
            raise UnsupportedCharsetError(charset)
