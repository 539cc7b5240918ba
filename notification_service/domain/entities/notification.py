"""Domain entities describing notifications and their delivery records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """Delivery channel of a notification."""

    IN_APP = "InApp"
    EMAIL = "Email"
    TEXT = "Text"


class NotificationSubject(str, Enum):
    """Semantic category of a notification."""

    AUCTION_JOIN = "AuctionJoin"
    AUCTION_THANKS = "AuctionThanks"
    AUCTION_WINNER = "AuctionWinner"


@dataclass
class Notification:
    """A message fanned out to one or more recipients."""

    id: str | None
    title: str
    body: str
    type: NotificationType
    subject: NotificationSubject
    sender_id: str | None = None
    action_payload: dict[str, Any] = field(default_factory=dict)
    is_deleted: bool = False
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Recipient:
    """Delivery record linking a notification to one identity."""

    id: str | None
    notification_id: str
    recipient_id: str
    seen_by_user: bool = False
    created_at: datetime | None = None


@dataclass
class EnrichedRecipient:
    """A recipient joined with the identity profile fetched at read time."""

    recipient: Recipient
    user: dict[str, Any]


@dataclass
class NotificationView:
    """Notification with its enriched recipients and optional sender."""

    notification: Notification
    recipients: list[EnrichedRecipient] = field(default_factory=list)
    sender: dict[str, Any] | None = None


@dataclass
class NotificationPage:
    """One page of notifications plus the total number of matches."""

    count: int
    data: list[NotificationView] = field(default_factory=list)


__all__ = [
    "EnrichedRecipient",
    "Notification",
    "NotificationPage",
    "NotificationSubject",
    "NotificationType",
    "NotificationView",
    "Recipient",
]
