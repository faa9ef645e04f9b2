"""Message composition entities."""

from __future__ import annotations

from dataclasses import dataclass

CRLF = "\r\n"


@dataclass(frozen=True)
class Sender:
    """Envelope and header sender."""

    email: str
    name: str | None = None

    def formatted(self) -> str:
        if self.name:
            return f"{self.name} <{self.email}>"
        return self.email


@dataclass(frozen=True)
class Attachment:
    """File payload attached as application/octet-stream."""

    filename: str
    content: bytes


@dataclass(frozen=True)
class ComposedMessage:
    """Ready-to-transmit message: ordered header lines, optional boundary, body block."""

    headers: tuple[str, ...]
    body: str
    boundary: str | None = None

    @property
    def is_multipart(self) -> bool:
        return self.boundary is not None

    def as_text(self) -> str:
        return CRLF.join(self.headers) + CRLF + CRLF + self.body

    def as_bytes(self, charset: str = "utf-8") -> bytes:
        """Header block as ASCII, body in ``charset`` with unencodable text as references."""
        header_block = (CRLF.join(self.headers) + CRLF + CRLF).encode("ascii")
        return header_block + self.body.encode(charset, errors="xmlcharrefreplace")
