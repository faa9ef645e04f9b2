"""Address and mail field validation tests."""

from __future__ import annotations

import pytest
from socket_mailer.address_validation import EmailAddressValidator, MailValidator
from socket_mailer.delivery_failures import (
    InvalidEmailError,
    MissingSenderError,
    SubjectTooLongError,
    UnsupportedCharsetError,
)
from socket_mailer.message_composition import Sender


@pytest.mark.parametrize(
    "address",
    ["user@example.com", "first.last+tag@mail.example.org", "x@sub.example.net"],
)
def test_accepts_valid_addresses(address: str) -> None:
    EmailAddressValidator().validate(address)


@pytest.mark.parametrize(
    "address",
    ["", "   ", "plainaddress", "@example.com", "user@", "user@@example.com", "a b@example.com"],
)
def test_rejects_invalid_addresses(address: str) -> None:
    with pytest.raises(InvalidEmailError) as excinfo:
        EmailAddressValidator().validate(address)

    assert excinfo.value.kind == "validation"
    assert excinfo.value.address == address


def test_subject_at_limit_is_accepted() -> None:
    MailValidator(EmailAddressValidator(), subject_length=78).validate_subject("s" * 78)


def test_subject_over_limit_is_rejected() -> None:
    validator = MailValidator(EmailAddressValidator(), subject_length=78)

    with pytest.raises(SubjectTooLongError) as excinfo:
        validator.validate_subject("s" * 79)

    assert excinfo.value.limit == 78
    assert excinfo.value.length == 79


def test_subject_length_counts_characters_not_bytes() -> None:
    MailValidator(EmailAddressValidator(), subject_length=6).validate_subject("Привет")


def test_no_limit_accepts_any_subject() -> None:
    MailValidator(EmailAddressValidator(), subject_length=None).validate_subject("s" * 10_000)


def test_sender_is_required() -> None:
    validator = MailValidator(EmailAddressValidator(), subject_length=None)

    with pytest.raises(MissingSenderError):
        validator.validate_sender(None)
    with pytest.raises(MissingSenderError):
        validator.validate_sender(Sender(email=""))


def test_sender_address_is_validated() -> None:
    validator = MailValidator(EmailAddressValidator(), subject_length=None)

    validator.validate_sender(Sender(email="noreply@example.com", name="Service"))
    with pytest.raises(InvalidEmailError):
        validator.validate_sender(Sender(email="not-an-address"))


@pytest.mark.parametrize(
    "address", ["josé@example.com", "user@bücher.example", "用户@example.com"]
)
def test_rejects_addresses_that_would_need_smtputf8(address: str) -> None:
    with pytest.raises(InvalidEmailError) as excinfo:
        EmailAddressValidator().validate(address)

    assert excinfo.value.address == address
    assert "non-ASCII" in str(excinfo.value)


def test_charset_must_keep_ascii_framing() -> None:
    validator = MailValidator(EmailAddressValidator(), subject_length=None)
    validator.validate_charset("iso-8859-1")

    with pytest.raises(UnsupportedCharsetError) as excinfo:
        validator.validate_charset("utf-16")

    assert excinfo.value.kind == "validation"
