"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from socket_mailer.message_composition.message_models import Sender


@dataclass(frozen=True)
class SMTPSettings:  # pylint: disable=too-many-instance-attributes
    """SMTP server connectivity and credentials."""

    host: str
    port: int
    username: str
    password: str
    use_ssl: bool = True
    timeout_seconds: int = 30
    local_hostname: str = "localhost"


@dataclass(frozen=True)
class MailSettings:
    """Message composition and validation settings."""

    charset: str = "utf-8"
    default_sender: Sender | None = None
    subject_length: int | None = None


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    smtp: SMTPSettings
    mail: MailSettings
