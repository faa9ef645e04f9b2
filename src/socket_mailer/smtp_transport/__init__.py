"""SMTP transport exports."""

from .protocol_stages import EXPECTED_REPLY_CODES, expected_code
from .server_replies import ServerReply, read_reply
from .socket_transport import (
    ConnectionFactory,
    SmtpSocket,
    SmtpTransport,
    dot_stuff,
    open_smtp_socket,
)

__all__ = [
    "EXPECTED_REPLY_CODES",
    "expected_code",
    "ServerReply",
    "read_reply",
    "ConnectionFactory",
    "SmtpSocket",
    "SmtpTransport",
    "dot_stuff",
    "open_smtp_socket",
]
