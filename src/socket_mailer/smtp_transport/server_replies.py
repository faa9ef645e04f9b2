"""SMTP server reply parsing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO

from socket_mailer.delivery_failures import DeliveryStage, SmtpConnectionError

logger = logging.getLogger(__name__)

MAX_REPLY_LINE = 8192


@dataclass(frozen=True)
class ServerReply:
    """One complete, possibly multi-line, server reply."""

    code: str
    lines: tuple[str, ...]

    @property
    def final_line(self) -> str:
        return self.lines[-1]

    def matches(self, expected: str) -> bool:
        return self.code == expected


def read_reply(stream: BinaryIO, stage: DeliveryStage) -> ServerReply:
    """Read lines until the final one of a reply.

    A line whose fourth character is "-" continues the reply; any other line
    ends it. The reply code is the first three characters of the final line.
    """
    lines: list[str] = []
    while True:
        try:
            raw = stream.readline(MAX_REPLY_LINE)
        except OSError as exc:
            raise SmtpConnectionError(stage, f"read failed: {exc}") from exc
        if not raw:
            raise SmtpConnectionError(stage, "connection closed by server")
        line = raw.decode("ascii", errors="replace").rstrip("\r\n")
        logger.debug("S: %s", line)
        lines.append(line)
        if line[3:4] != "-":
            return ServerReply(code=line[:3], lines=tuple(lines))
