"""Domain entities for outbound delivery requests and acknowledgements."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EmailEvent(str, Enum):
    """Auction lifecycle events that trigger an email."""

    AUCTION_WINNER = "AUCTION_WINNER"
    AUCTION_JOIN = "AUCTION_JOIN"
    AUCTION_THANX = "AUCTION_THANX"


@dataclass(frozen=True)
class EmailSendResult:
    """Outcome of an email dispatch together with the logged notification."""

    sent: bool
    notification_id: str | None = None


@dataclass(frozen=True)
class SendAcknowledgement:
    """Acknowledgement returned by channels without real delivery."""

    acknowledged: bool
    status: str
    transaction_id: str


__all__ = ["EmailEvent", "EmailSendResult", "SendAcknowledgement"]
