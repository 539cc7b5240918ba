"""Domain entities exposed by the application."""

from .delivery import EmailEvent, EmailSendResult, SendAcknowledgement
from .notification import (
    EnrichedRecipient,
    Notification,
    NotificationPage,
    NotificationSubject,
    NotificationType,
    NotificationView,
    Recipient,
)

__all__ = [
    "EmailEvent",
    "EmailSendResult",
    "EnrichedRecipient",
    "Notification",
    "NotificationPage",
    "NotificationSubject",
    "NotificationType",
    "NotificationView",
    "Recipient",
    "SendAcknowledgement",
]
