"""Message composition exports."""

from .message_composer import (
    MAILER_NAME,
    compose_body,
    compose_headers,
    compose_message,
    encode_base64_lines,
    encode_text,
    generate_boundary,
    is_ascii_compatible,
    normalize_whitespace,
    sanitize_text,
)
from .message_models import Attachment, ComposedMessage, Sender

__all__ = [
    "Sender",
    "Attachment",
    "ComposedMessage",
    "MAILER_NAME",
    "compose_headers",
    "compose_body",
    "compose_message",
    "encode_base64_lines",
    "encode_text",
    "generate_boundary",
    "is_ascii_compatible",
    "normalize_whitespace",
    "sanitize_text",
]
