"""MIME message composition for raw SMTP transmission.

Produces the header block and body of an RFC 5322 message. Messages without
attachments are sent as a single text/html part; messages with attachments
become multipart/mixed (RFC 2046) with one inline base64 text part followed by
one application/octet-stream part per attachment.
"""

from __future__ import annotations

import base64
import hashlib
import html
import re
import secrets
import time
from collections.abc import Sequence
from datetime import UTC, datetime
from email.utils import encode_rfc2231, format_datetime, formataddr
from importlib import metadata

from .message_models import CRLF, Attachment, ComposedMessage, Sender

MAILER_NAME = "socket-mailer"
BASE64_LINE_LENGTH = 76

_DUPLICATE_WHITESPACE = re.compile(r"\s{2,}")
_LINE_BREAKS = re.compile(r"[\r\n]")
_FRAMING_SAMPLE = "A\r\n"


def _mailer_version() -> str:
    try:
        return metadata.version(MAILER_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"


def sanitize_text(text: str) -> str:
    """Trim, collapse repeated whitespace, and escape HTML special characters."""
    return html.escape(normalize_whitespace(text), quote=True)


def normalize_whitespace(text: str) -> str:
    """Trim and collapse runs of two or more whitespace characters to one space."""
    return _DUPLICATE_WHITESPACE.sub(" ", text.strip())


def is_ascii_compatible(charset: str) -> bool:
    """True when ASCII text and CRLF encode to the same bytes in ``charset``."""
    try:
        return _FRAMING_SAMPLE.encode(charset) == _FRAMING_SAMPLE.encode("ascii")
    except LookupError:
        return False


def encode_text(text: str, charset: str) -> bytes:
    """Encode already HTML-escaped text; characters outside ``charset`` become references."""
    return text.encode(charset, errors="xmlcharrefreplace")


def crlf_lines(text: str) -> str:
    return CRLF.join(text.splitlines())


def encode_base64_lines(payload: bytes) -> str:
    """Base64-encode payload wrapped at 76 characters, each line CRLF-terminated."""
    encoded = base64.b64encode(payload).decode("ascii")
    lines = [
        encoded[index : index + BASE64_LINE_LENGTH]
        for index in range(0, len(encoded), BASE64_LINE_LENGTH)
    ]
    return "".join(line + CRLF for line in lines)


def encode_subject(subject: str, charset: str) -> str:
    encoded = base64.b64encode(encode_text(subject, charset)).decode("ascii")
    return f"=?{charset}?B?{encoded}?="


def generate_boundary(encoded_parts: Sequence[str] = ()) -> str:
    """Return a boundary token that does not occur in any of the encoded parts."""
    while True:
        seed = f"{time.time_ns()}{secrets.token_hex(8)}".encode("ascii")
        boundary = hashlib.sha1(seed, usedforsecurity=False).hexdigest()
        if not any(boundary in part for part in encoded_parts):
            return boundary


def compose_headers(
    sender: Sender,
    recipients: Sequence[str],
    subject: str,
    *,
    has_attachments: bool,
    boundary: str | None,
    charset: str,
    sent_at: datetime | None = None,
) -> tuple[str, ...]:
    """Build the ordered header lines for a message."""
    if has_attachments and not boundary:
        raise ValueError("A boundary is required for messages with attachments.")
    timestamp = sent_at or datetime.now(UTC)
    if has_attachments:
        content_type = f'Content-Type: multipart/mixed; boundary="{boundary}"'
    else:
        content_type = f"Content-Type: text/html; charset={charset}"
    return (
        f"Date: {format_datetime(timestamp)}",
        f"Subject: {encode_subject(subject, charset)}",
        "MIME-Version: 1.0",
        f"From: {_format_sender(sender)}",
        f"To: {', '.join(recipients)}",
        f"X-Mailer: {MAILER_NAME}/{_mailer_version()}",
        f"Return-Path: {sender.email}",
        content_type,
    )


def compose_body(
    text: str,
    attachments: Sequence[Attachment],
    boundary: str | None,
    charset: str,
) -> str:
    """Build the body block; multipart framing is only emitted when attachments exist."""
    if not attachments:
        return crlf_lines(text) + CRLF
    if not boundary:
        raise ValueError("A boundary is required for messages with attachments.")
    return _multipart_body(
        encode_base64_lines(encode_text(crlf_lines(text), charset)),
        _encode_attachments(attachments),
        boundary,
        charset,
    )


def compose_message(
    sender: Sender,
    recipients: Sequence[str],
    subject: str,
    text: str,
    attachments: Sequence[Attachment],
    *,
    charset: str,
    sent_at: datetime | None = None,
) -> ComposedMessage:
    """Compose the complete message from already validated inputs."""
    if not attachments:
        headers = compose_headers(
            sender,
            recipients,
            subject,
            has_attachments=False,
            boundary=None,
            charset=charset,
            sent_at=sent_at,
        )
        return ComposedMessage(headers=headers, body=compose_body(text, (), None, charset))

    encoded_text = encode_base64_lines(encode_text(crlf_lines(text), charset))
    encoded_files = _encode_attachments(attachments)
    boundary = generate_boundary([encoded_text, *(encoded for _, encoded in encoded_files)])
    headers = compose_headers(
        sender,
        recipients,
        subject,
        has_attachments=True,
        boundary=boundary,
        charset=charset,
        sent_at=sent_at,
    )
    body = _multipart_body(encoded_text, encoded_files, boundary, charset)
    return ComposedMessage(headers=headers, body=body, boundary=boundary)


def _format_sender(sender: Sender) -> str:
    name = _LINE_BREAKS.sub(" ", sender.name).strip() if sender.name else None
    return formataddr((name, sender.email))


def _filename_parameter(key: str, filename: str) -> str:
    """Render a MIME filename parameter; non-ASCII names use RFC 2231 encoding."""
    cleaned = _LINE_BREAKS.sub("", filename)
    if not cleaned.isascii():
        return f"{key}*={encode_rfc2231(cleaned, 'utf-8')}"
    quoted = cleaned.replace("\\", "\\\\").replace('"', '\\"')
    return f'{key}="{quoted}"'


def _encode_attachments(attachments: Sequence[Attachment]) -> list[tuple[str, str]]:
    return [
        (attachment.filename, encode_base64_lines(attachment.content)) for attachment in attachments
    ]


def _multipart_body(
    encoded_text: str,
    encoded_files: Sequence[tuple[str, str]],
    boundary: str,
    charset: str,
) -> str:
    parts = [
        f"--{boundary}{CRLF}"
        f"Content-Type: text/html; charset={charset}{CRLF}"
        f"Content-Transfer-Encoding: base64{CRLF}"
        f"{CRLF}"
        f"{encoded_text}"
    ]
    for filename, encoded in encoded_files:
        name = _filename_parameter("name", filename)
        disposition_name = _filename_parameter("filename", filename)
        parts.append(
            f"{CRLF}--{boundary}{CRLF}"
            f"Content-Type: application/octet-stream; {name}{CRLF}"
            f"Content-Transfer-Encoding: base64{CRLF}"
            f"Content-Disposition: attachment; {disposition_name}{CRLF}"
            f"{CRLF}"
            f"{encoded}"
        )
    parts.append(f"{CRLF}--{boundary}--{CRLF}")
    return "".join(parts)
