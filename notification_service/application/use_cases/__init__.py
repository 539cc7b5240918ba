"""Aggregate application use cases."""

from .notifications import (
    create_notification,
    delete_notification,
    get_notification,
    list_notifications,
    send_email,
    update_notification,
)

__all__ = [
    "create_notification",
    "delete_notification",
    "get_notification",
    "list_notifications",
    "send_email",
    "update_notification",
]
