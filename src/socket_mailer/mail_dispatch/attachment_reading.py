"""Attachment file access."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from socket_mailer.delivery_failures import AttachmentNotFoundError, AttachmentNotReadableError
from socket_mailer.message_composition import Attachment


class FileReader(Protocol):
    """Protocol for the file access used to load attachments."""

    def exists(self, path: str) -> bool: ...

    def readable(self, path: str) -> bool: ...

    def read_bytes(self, path: str) -> bytes: ...

    def base_name(self, path: str) -> str: ...


class LocalFileReader:
    """Reads attachments from the local filesystem."""

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def readable(self, path: str) -> bool:
        return os.access(path, os.R_OK)

    def read_bytes(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def base_name(self, path: str) -> str:
        return Path(path).name


def load_attachment(reader: FileReader, path: str) -> Attachment:
    """Read one attachment, mapping missing and unreadable files to attachment errors."""
    if not reader.exists(path):
        raise AttachmentNotFoundError(path)
    if not reader.readable(path):
        raise AttachmentNotReadableError(path)
    try:
        content = reader.read_bytes(path)
    except FileNotFoundError as exc:
        raise AttachmentNotFoundError(path) from exc
    except OSError as exc:
        raise AttachmentNotReadableError(path) from exc
    return Attachment(filename=reader.base_name(path), content=content)
