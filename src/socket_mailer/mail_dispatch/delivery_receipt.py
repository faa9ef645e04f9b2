"""Mail dispatch outcome entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(frozen=True)
class DeliveryReceipt:
    """Outcome of a message accepted by the SMTP server."""

    sender: str
    recipients: tuple[str, ...]
    attachment_count: int
    server_reply: str
    sent_at: datetime = field(default_factory=lambda: datetime.now(UTC))
