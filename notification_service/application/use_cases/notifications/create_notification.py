"""Use case for creating a notification and fanning it out to recipients."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from anyio import to_thread
from sqlalchemy.orm import Session

from notification_service.domain.entities import (
    Notification,
    NotificationSubject,
    NotificationType,
    NotificationView,
    Recipient,
)
from notification_service.infrastructure.database import unit_of_work
from notification_service.infrastructure.identity import IdentityLookup
from notification_service.infrastructure.repositories import (
    NotificationRepository,
    RecipientRepository,
)

from .enrichment import IdentityResolver, assemble_views

logger = logging.getLogger(__name__)


async def create_notification(
    session: Session,
    identity: IdentityLookup,
    *,
    title: str,
    body: str,
    type: NotificationType,
    subject: NotificationSubject,
    recipient_ids: Sequence[str],
    sender_id: str | None = None,
) -> NotificationView:
    """Persist a notification with one delivery record per recipient.

    Recipients are stored in the order given and enriched with their live
    identity. Every identity is resolved before the write transaction opens,
    so a failed lookup leaves nothing behind.
    """

    if not recipient_ids:
        raise ValueError("At least one recipient is required")

    resolver = IdentityResolver(identity)
    await resolver.resolve_many([*recipient_ids, *([sender_id] if sender_id else [])])

    def persist() -> tuple[Notification, list[Recipient]]:
        with unit_of_work(session):
            notification = NotificationRepository(session).create(
                Notification(
                    id=None,
                    title=title,
                    body=body,
                    type=type,
                    subject=subject,
                    sender_id=sender_id,
                    action_payload={},
                )
            )
            recipients = RecipientRepository(session).create_many(
                notification.id, recipient_ids
            )
        return notification, recipients

    notification, recipients = await to_thread.run_sync(persist)
    (view,) = await assemble_views(resolver, [notification], {notification.id: recipients})

    logger.info(
        "Created notification %s (%s) for %d recipients",
        notification.id,
        subject.value,
        len(recipients),
    )
    return view
