"""Notification engine use cases."""

from .create_notification import create_notification
from .delete_notification import delete_notification
from .enrichment import IdentityResolver, assemble_views
from .get_notification import get_notification
from .list_notifications import list_notifications
from .send_acknowledgements import send_in_app, send_text
from .send_email import EMAIL_EVENT_ROUTES, EmailEventRoute, send_email
from .update_notification import update_notification

__all__ = [
    "EMAIL_EVENT_ROUTES",
    "EmailEventRoute",
    "IdentityResolver",
    "assemble_views",
    "create_notification",
    "delete_notification",
    "get_notification",
    "list_notifications",
    "send_email",
    "send_in_app",
    "send_text",
    "update_notification",
]
