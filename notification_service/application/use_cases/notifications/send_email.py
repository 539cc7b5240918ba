"""Use case mapping auction events to an in-app notification and an email."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import anyio
from anyio import to_thread
from sqlalchemy.orm import Session

from notification_service.config import get_settings
from notification_service.domain.entities import (
    EmailEvent,
    EmailSendResult,
    NotificationSubject,
    NotificationType,
)
from notification_service.domain.exceptions import EmailDeliveryError, EmailError
from notification_service.infrastructure.email import (
    EmailSender,
    auction_join_subject,
    auction_thanks_subject,
    auction_winner_subject,
)
from notification_service.infrastructure.identity import IdentityLookup

from .create_notification import create_notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailEventRoute:
    """How one auction event is logged in-app and which email it sends."""

    subject: NotificationSubject
    title: Callable[[str], str]
    body: str
    sender_method: str


EMAIL_EVENT_ROUTES: dict[EmailEvent, EmailEventRoute] = {
    EmailEvent.AUCTION_JOIN: EmailEventRoute(
        subject=NotificationSubject.AUCTION_JOIN,
        title=auction_join_subject,
        body="Вы приглашены для участия в аукционе.",
        sender_method="send_auction_join_email",
    ),
    EmailEvent.AUCTION_THANX: EmailEventRoute(
        subject=NotificationSubject.AUCTION_THANKS,
        title=auction_thanks_subject,
        body="Аукцион завершен. Спасибо за участие.",
        sender_method="send_auction_thanks_email",
    ),
    EmailEvent.AUCTION_WINNER: EmailEventRoute(
        subject=NotificationSubject.AUCTION_WINNER,
        title=auction_winner_subject,
        body="Вы выиграли аукцион.",
        sender_method="send_auction_winner_email",
    ),
}


async def send_email(
    session: Session,
    identity: IdentityLookup,
    email_sender: EmailSender,
    *,
    email: str,
    type: EmailEvent,
    body: Mapping[str, Any],
    recipient_ids: Sequence[str],
    email_timeout: float | None = None,
) -> EmailSendResult:
    """Record the event as an in-app notification, then send its email.

    When the notification cannot be stored no email is sent. When the email
    fails after the notification was stored, the raised :class:`EmailError`
    carries the id of that notification. Delivery taking longer than
    ``email_timeout`` seconds counts as a failure.
    """

    route = EMAIL_EVENT_ROUTES[EmailEvent(type)]
    product = "" if body.get("product") is None else str(body.get("product"))

    view = await create_notification(
        session,
        identity,
        title=route.title(product),
        body=route.body,
        type=NotificationType.IN_APP,
        subject=route.subject,
        recipient_ids=recipient_ids,
    )
    notification_id = view.notification.id

    if email_timeout is None:
        email_timeout = get_settings().email_timeout_seconds

    send = getattr(email_sender, route.sender_method)
    try:
        try:
            with anyio.fail_after(email_timeout):
                sent = await to_thread.run_sync(
                    send, email, dict(body), abandon_on_cancel=True
                )
        except TimeoutError as exc:
            raise EmailDeliveryError(
                f"Email delivery timed out after {email_timeout:g}s"
            ) from exc
    except EmailError as exc:
        exc.notification_id = notification_id
        logger.error(
            "Email %s to %s failed after notification %s was stored: %s",
            route.sender_method,
            email,
            notification_id,
            exc,
        )
        raise

    return EmailSendResult(sent=bool(sent), notification_id=notification_id)
