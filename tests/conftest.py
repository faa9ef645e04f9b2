"""Shared fakes for socket-level SMTP tests."""

from __future__ import annotations

import base64
import io
import socketserver
import threading
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

import pytest
from socket_mailer.configuration.runtime_settings import MailSettings, SMTPSettings
from socket_mailer.message_composition import Sender
from socket_mailer.smtp_transport import SmtpTransport

HAPPY_PATH_REPLIES = (
    "220 mail.example.com ESMTP ready",
    "250 mail.example.com greets client.example.com",
    "334 VXNlcm5hbWU6",
    "334 UGFzc3dvcmQ6",
    "235 2.7.0 Authentication successful",
    "250 2.1.0 Sender OK",
    "250 2.1.5 Recipient OK",
    "354 End data with <CR><LF>.<CR><LF>",
    "250 2.0.0 Ok: queued as 4F2A1",
)


class ScriptedSocket:
    """Socket double that records writes and replays canned server replies."""

    def __init__(self, replies: Sequence[str]) -> None:
        self._script = "".join(f"{reply}\r\n" for reply in replies).encode("ascii")
        self.written = bytearray()
        self.closed = False

    def sendall(self, data: bytes, /) -> None:
        if self.closed:
            raise OSError("socket is closed")
        self.written.extend(data)

    def makefile(self, mode: str) -> io.BytesIO:
        assert mode == "rb"
        return io.BytesIO(self._script)

    def close(self) -> None:
        self.closed = True

    @property
    def lines(self) -> list[str]:
        return self.written.decode("utf-8").split("\r\n")

    def commands(self) -> list[str]:
        """Command lines written before the message body."""
        commands = []
        for line in self.lines:
            commands.append(line)
            if line == "DATA":
                break
        return commands


@pytest.fixture
def smtp_settings() -> SMTPSettings:
    return SMTPSettings(
        host="smtp.example.com",
        port=465,
        username="mailer",
        password="s3cret",
        use_ssl=True,
        timeout_seconds=5,
        local_hostname="client.example.com",
    )


@pytest.fixture
def mail_settings() -> MailSettings:
    return MailSettings(
        charset="utf-8",
        default_sender=Sender(email="noreply@example.com", name="Service"),
        subject_length=78,
    )


@pytest.fixture
def scripted_transport() -> Callable[[Sequence[str]], tuple[ScriptedSocket, Callable]]:
    """Build a transport factory bound to one scripted socket."""

    def build(replies: Sequence[str]) -> tuple[ScriptedSocket, Callable]:
        sock = ScriptedSocket(replies)

        def factory(settings: SMTPSettings) -> SmtpTransport:
            return SmtpTransport(settings, connection_factory=lambda _settings: sock)

        return sock, factory

    return build


@pytest.fixture
def scripted_socket() -> Callable[[Sequence[str]], ScriptedSocket]:
    return ScriptedSocket


@pytest.fixture
def happy_path_replies() -> list[str]:
    return list(HAPPY_PATH_REPLIES)


class _ScriptedSmtpHandler(socketserver.StreamRequestHandler):
    """Speaks a minimal SMTP dialog, answering each stage from the server's script."""

    server: _ScriptedTcpServer

    def _reply(self, stage: str, default: str) -> str:
        reply = self.server.script.rejections.get(stage, default)
        self.wfile.write(reply.encode("ascii") + b"\r\n")
        return reply

    def handle(self) -> None:
        script = self.server.script
        if script.silent:
            while self.rfile.readline():
                pass
            return
        if not self._reply("GREETING", "220 mail.example.com ESMTP").startswith("220"):
            return
        auth_step = None
        while True:
            raw = self.rfile.readline()
            if not raw:
                return
            line = raw.decode("utf-8").rstrip("\r\n")
            if auth_step == "username":
                script.credentials.append(base64.b64decode(line).decode("utf-8"))
                reply = self._reply("USER", "334 UGFzc3dvcmQ6")
                auth_step = "password" if reply.startswith("334") else None
                continue
            if auth_step == "password":
                script.credentials.append(base64.b64decode(line).decode("utf-8"))
                self._reply("PASS", "235 2.7.0 Authentication successful")
                auth_step = None
                continue
            script.commands.append(line)
            verb = line.split(" ", 1)[0].split(":", 1)[0].upper()
            if verb == "EHLO":
                self._reply("EHLO", "250-mail.example.com\r\n250-AUTH LOGIN\r\n250 8BITMIME")
            elif verb == "HELO":
                self._reply("HELO", "250 mail.example.com")
            elif verb == "AUTH":
                if self._reply("AUTH", "334 VXNlcm5hbWU6").startswith("334"):
                    auth_step = "username"
            elif verb == "MAIL":
                self._reply("MAIL", "250 2.1.0 Ok")
            elif verb == "RCPT":
                self._reply("RCPT", "250 2.1.5 Ok")
            elif verb == "DATA":
                if self._reply("DATA", "354 End data with <CR><LF>.<CR><LF>").startswith("354"):
                    script.messages.append(self._read_data())
                    self._reply("BODY", "250 2.0.0 Ok: queued as 7C1D2")
            elif verb == "QUIT":
                self._reply("QUIT", "221 2.0.0 Bye")
                return
            else:
                self._reply("UNKNOWN", "500 5.5.2 Syntax error")

    def _read_data(self) -> bytes:
        chunks = []
        while True:
            raw = self.rfile.readline()
            if not raw or raw == b".\r\n":
                return b"".join(chunks)
            chunks.append(raw)


class _ScriptedTcpServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, script: ScriptedSmtpServer) -> None:
        super().__init__(("127.0.0.1", 0), _ScriptedSmtpHandler)
        self.script = script


@dataclass
class ScriptedSmtpServer:
    """State recorded by a scripted SMTP server running on localhost."""

    rejections: dict[str, str] = field(default_factory=dict)
    silent: bool = False
    commands: list[str] = field(default_factory=list)
    credentials: list[str] = field(default_factory=list)
    # DATA payloads as received, still dot-stuffed.
    messages: list[bytes] = field(default_factory=list)
    port: int = 0


@pytest.fixture
def smtp_server() -> Iterator[Callable[..., ScriptedSmtpServer]]:
    """Start scripted SMTP servers on 127.0.0.1; each is shut down after the test."""
    servers: list[_ScriptedTcpServer] = []

    def start(rejections: dict[str, str] | None = None, silent: bool = False) -> ScriptedSmtpServer:
        script = ScriptedSmtpServer(rejections=dict(rejections or {}), silent=silent)
        server = _ScriptedTcpServer(script)
        script.port = server.server_address[1]
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return script

    yield start

    for server in servers:
        server.shutdown()
        server.server_close()
