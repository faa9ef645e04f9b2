"""SMTP command/response dialog over a raw socket."""

from __future__ import annotations

import base64
import logging
import re
import socket
import ssl
from collections.abc import Callable
from types import TracebackType
from typing import BinaryIO, Protocol

from socket_mailer.configuration.runtime_settings import SMTPSettings
from socket_mailer.delivery_failures import (
    DeliveryStage,
    RemoteDeliveryError,
    SmtpConnectionError,
)

from .protocol_stages import expected_code
from .server_replies import ServerReply, read_reply

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
_LINE_START_DOT = re.compile(rb"(?m)^\.")


class SmtpSocket(Protocol):
    """Subset of the socket API used by the transport."""

    def sendall(self, data: bytes, /) -> None: ...

    def makefile(self, mode: str) -> BinaryIO: ...

    def close(self) -> None: ...


ConnectionFactory = Callable[[SMTPSettings], SmtpSocket]


def open_smtp_socket(settings: SMTPSettings) -> socket.socket:
    """Connect to the configured server, wrapping in TLS for implicit-TLS ports.

    The timeout stays on the socket, so every later read and write is bounded too.
    """
    sock = socket.create_connection(
        (settings.host, settings.port), timeout=settings.timeout_seconds
    )
    if not settings.use_ssl:
        return sock
    try:
        return ssl.create_default_context().wrap_socket(sock, server_hostname=settings.host)
    except OSError:
        sock.close()
        raise


def dot_stuff(message: bytes) -> bytes:
    """Double leading dots and terminate the payload with the end-of-data line."""
    stuffed = _LINE_START_DOT.sub(b"..", message)
    if not stuffed.endswith(CRLF):
        stuffed += CRLF
    return stuffed + b"." + CRLF


class SmtpTransport:
    """Owns one SMTP connection and runs its dialog one gated stage at a time.

    Use as a context manager; the socket is closed on every exit path.
    """

    def __init__(
        self,
        settings: SMTPSettings,
        connection_factory: ConnectionFactory | None = None,
    ) -> None:
        self._settings = settings
        self._connection_factory = connection_factory or open_smtp_socket
        self._socket: SmtpSocket | None = None
        self._stream: BinaryIO | None = None

    def __enter__(self) -> SmtpTransport:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def is_connected(self) -> bool:
        return self._socket is not None

    def connect(self) -> None:
        settings = self._settings
        try:
            self._socket = self._connection_factory(settings)
            self._stream = self._socket.makefile("rb")
        except OSError as exc:
            self.close()
            raise SmtpConnectionError(
                DeliveryStage.CONNECT, f"{settings.host}:{settings.port} ({exc})"
            ) from exc
        logger.debug("Connected to %s:%s (ssl=%s)", settings.host, settings.port, settings.use_ssl)

    def close(self) -> None:
        stream, sock = self._stream, self._socket
        self._stream = None
        self._socket = None
        if stream is not None:
            stream.close()
        if sock is not None:
            sock.close()

    def greet(self) -> ServerReply:
        return self._expect(DeliveryStage.GREETING, self._read(DeliveryStage.GREETING))

    def hello(self) -> ServerReply:
        """EHLO, falling back to HELO when the server does not accept it."""
        local_hostname = self._settings.local_hostname
        reply = self._command(f"EHLO {local_hostname}", DeliveryStage.HELLO)
        if reply.matches(expected_code(DeliveryStage.HELLO)):
            return reply
        logger.debug("EHLO refused (%s), falling back to HELO", reply.final_line)
        reply = self._command(f"HELO {local_hostname}", DeliveryStage.HELLO)
        return self._expect(DeliveryStage.HELLO, reply)

    def authenticate(self) -> ServerReply:
        """AUTH LOGIN with base64 username and password."""
        reply = self._command("AUTH LOGIN", DeliveryStage.AUTH_REQUEST)
        self._expect(DeliveryStage.AUTH_REQUEST, reply)
        username = _b64(self._settings.username)
        reply = self._command(username, DeliveryStage.AUTH_USERNAME, sensitive=True)
        self._expect(DeliveryStage.AUTH_USERNAME, reply)
        password = _b64(self._settings.password)
        reply = self._command(password, DeliveryStage.AUTH_PASSWORD, sensitive=True)
        return self._expect(DeliveryStage.AUTH_PASSWORD, reply)

    def mail_from(self, address: str) -> ServerReply:
        reply = self._command(f"MAIL FROM:<{address}>", DeliveryStage.MAIL_FROM)
        return self._expect(DeliveryStage.MAIL_FROM, reply)

    def rcpt_to(self, address: str) -> ServerReply:
        reply = self._command(f"RCPT TO:<{address}>", DeliveryStage.RCPT_TO)
        return self._expect(DeliveryStage.RCPT_TO, reply)

    def data(self) -> ServerReply:
        return self._expect(DeliveryStage.DATA, self._command("DATA", DeliveryStage.DATA))

    def transmit(self, message: bytes) -> ServerReply:
        payload = dot_stuff(message)
        logger.debug("C: <message body, %d bytes>", len(payload))
        self._send(payload, DeliveryStage.MESSAGE_BODY)
        return self._expect(DeliveryStage.MESSAGE_BODY, self._read(DeliveryStage.MESSAGE_BODY))

    def quit(self) -> None:
        """Send QUIT without waiting on the reply; the dialog is already complete."""
        if self._socket is None:
            return
        logger.debug("C: QUIT")
        try:
            self._socket.sendall(b"QUIT" + CRLF)
        except OSError as exc:
            logger.debug("QUIT could not be sent: %s", exc)

    def _command(self, line: str, stage: DeliveryStage, *, sensitive: bool = False) -> ServerReply:
        logger.debug("C: %s", "<redacted>" if sensitive else line)
        self._send(line.encode("utf-8") + CRLF, stage)
        return self._read(stage)

    def _send(self, data: bytes, stage: DeliveryStage) -> None:
        if self._socket is None:
            raise SmtpConnectionError(stage, "not connected")
        try:
            self._socket.sendall(data)
        except OSError as exc:
            raise SmtpConnectionError(stage, f"write failed: {exc}") from exc

    def _read(self, stage: DeliveryStage) -> ServerReply:
        if self._stream is None:
            raise SmtpConnectionError(stage, "not connected")
        return read_reply(self._stream, stage)

    @staticmethod
    def _expect(stage: DeliveryStage, reply: ServerReply) -> ServerReply:
        if not reply.matches(expected_code(stage)):
            raise RemoteDeliveryError(stage, reply.final_line)
        return reply


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")
