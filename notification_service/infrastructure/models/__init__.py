"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .recipient import RecipientModel

__all__ = [
    "NotificationModel",
    "RecipientModel",
]
