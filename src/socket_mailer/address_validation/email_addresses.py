"""Email address syntax validation."""

from __future__ import annotations

from typing import Protocol

from email_validator import EmailNotValidError, validate_email

from socket_mailer.delivery_failures import InvalidEmailError


class AddressValidator(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for validators applied to every sender and recipient address."""

    def validate(self, address: str) -> None: ...


class EmailAddressValidator:  # pylint: disable=too-few-public-methods
    """Syntax-only validation backed by email-validator; no DNS lookups."""

    def validate(self, address: str) -> None:
        if not isinstance(address, str) or not address.strip():
            raise InvalidEmailError(str(address), "empty address")
        # SMTPUTF8 is never negotiated, so addresses must be plain ASCII on the wire.
        if not address.isascii():
            raise InvalidEmailError(address, "non-ASCII addresses are not supported")
        try:
            validate_email(address, check_deliverability=False, allow_smtputf8=False)
        except EmailNotValidError as exc:
            raise InvalidEmailError(address, str(exc)) from exc
