"""Typed errors raised by the notification engine and its collaborators."""

from __future__ import annotations


class NotificationServiceError(Exception):
    """Base class for every error surfaced by the service."""


class NotificationNotFoundError(NotificationServiceError):
    """The requested notification does not exist."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(f"Notification {notification_id} not found")
        self.notification_id = notification_id


class IdentityLookupError(NotificationServiceError):
    """The identity service failed to resolve a user."""

    def __init__(self, user_id: str, reason: str) -> None:
        super().__init__(f"Identity lookup for user {user_id} failed: {reason}")
        self.user_id = user_id
        self.reason = reason


class StoreError(NotificationServiceError):
    """A persistence operation failed and was rolled back."""


class EmailError(NotificationServiceError):
    """Base class for email failures.

    ``notification_id`` is set when the in-app notification for the event was
    already persisted before the email failed.
    """

    def __init__(self, message: str, *, notification_id: str | None = None) -> None:
        super().__init__(message)
        self.notification_id = notification_id


class EmailTemplateError(EmailError):
    """An email template could not be loaded or rendered."""


class EmailDeliveryError(EmailError):
    """The email transport rejected or failed to send a message."""


__all__ = [
    "EmailDeliveryError",
    "EmailError",
    "EmailTemplateError",
    "IdentityLookupError",
    "NotificationNotFoundError",
    "NotificationServiceError",
    "StoreError",
]
