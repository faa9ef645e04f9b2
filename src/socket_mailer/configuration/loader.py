"""Configuration loader service."""

from __future__ import annotations

import codecs
import socket
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from socket_mailer.address_validation import AddressValidator, EmailAddressValidator
from socket_mailer.delivery_failures import InvalidEmailError
from socket_mailer.message_composition import Sender, is_ascii_compatible

from .runtime_settings import Configuration, MailSettings, SMTPSettings


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(
    config_path: Path | str, *, address_validator: AddressValidator | None = None
) -> Configuration:
    """Load and validate the configuration file (YAML, or JSON as its subset)."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    smtp = _parse_smtp_section(parsed.get("smtp"))
    mail = _parse_mail_section(
        parsed.get("mail"), address_validator=address_validator or EmailAddressValidator()
    )
    return Configuration(path=path, smtp=smtp, mail=mail)


def _parse_smtp_section(value: Any) -> SMTPSettings:
    section = _require_mapping(value, "smtp")
    host = _require_non_empty_string(section.get("host"), "smtp.host")
    port = _require_positive_int(section.get("port"), "smtp.port")
    username = _require_non_empty_string(section.get("username"), "smtp.username")
    password = _require_string(section.get("password"), "smtp.password")
    if not password:
        raise ConfigurationError("smtp.password must not be empty.")
    use_ssl = _optional_bool(section.get("use_ssl"), "smtp.use_ssl", default=True)
    timeout_seconds = _require_positive_int(
        section.get("timeout_seconds", 30), "smtp.timeout_seconds"
    )
    local_hostname = _optional_string(section.get("local_hostname"), "smtp.local_hostname")
    return SMTPSettings(
        host=host,
        port=port,
        username=username,
        password=password,
        use_ssl=use_ssl,
        timeout_seconds=timeout_seconds,
        local_hostname=local_hostname or socket.getfqdn(),
    )


def _parse_mail_section(value: Any, *, address_validator: AddressValidator) -> MailSettings:
    if value is None:
        return MailSettings()
    section = _require_mapping(value, "mail")
    charset = _optional_string(section.get("charset"), "mail.charset") or "utf-8"
    try:
        codecs.lookup(charset)
    except LookupError as exc:
        raise ConfigurationError(f"mail.charset '{charset}' is not a known encoding.") from exc
    if not is_ascii_compatible(charset):
        raise ConfigurationError(
            f"mail.charset '{charset}' must encode ASCII text and CRLF unchanged."
        )
    subject_length_raw = section.get("subject_length")
    subject_length = (
        None
        if subject_length_raw is None
        else _require_positive_int(subject_length_raw, "mail.subject_length")
    )
    default_sender = _parse_sender(section.get("from"), address_validator)
    return MailSettings(
        charset=charset,
        default_sender=default_sender,
        subject_length=subject_length,
    )


def _parse_sender(value: Any, address_validator: AddressValidator) -> Sender | None:
    if value is None:
        return None
    section = _require_mapping(value, "mail.from")
    email = _require_non_empty_string(section.get("email"), "mail.from.email")
    name = _optional_string(section.get("name"), "mail.from.name")
    try:
        address_validator.validate(email)
    except InvalidEmailError as exc:
        raise ConfigurationError(f"mail.from.email: {exc}") from exc
    return Sender(email=email, name=name)


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    stripped = _require_string(value, field_name).strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    stripped = _require_string(value, field_name).strip()
    return stripped or None


def _optional_bool(value: Any, field_name: str, *, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
