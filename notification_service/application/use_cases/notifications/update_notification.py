"""Use case for updating the text of a notification."""

from dataclasses import replace

from anyio import to_thread
from sqlalchemy.orm import Session

from notification_service.domain.entities import NotificationView
from notification_service.domain.exceptions import NotificationNotFoundError
from notification_service.infrastructure.database import unit_of_work
from notification_service.infrastructure.identity import IdentityLookup
from notification_service.infrastructure.repositories import (
    NotificationRepository,
    RecipientRepository,
)

from .enrichment import IdentityResolver, assemble_views


async def update_notification(
    session: Session,
    identity: IdentityLookup,
    notification_id: str,
    *,
    title: str | None = None,
    body: str | None = None,
) -> NotificationView:
    """Change the title and/or body and return the freshly enriched view.

    Identities are resolved between a read and a separate write transaction;
    the update is not applied when a lookup fails.
    """

    def load():
        with unit_of_work(session):
            current = NotificationRepository(session).get(notification_id)
            if current is None:
                raise NotificationNotFoundError(notification_id)
            recipients = RecipientRepository(session).list_for_notification(notification_id)
        return current, recipients

    def persist():
        with unit_of_work(session):
            repository = NotificationRepository(session)
            latest = repository.get(notification_id)
            if latest is None:
                raise NotificationNotFoundError(notification_id)
            return repository.update(
                replace(
                    latest,
                    title=title if title is not None else latest.title,
                    body=body if body is not None else latest.body,
                )
            )

    current, recipients = await to_thread.run_sync(load)
    resolver = IdentityResolver(identity)
    await assemble_views(resolver, [current], {notification_id: recipients})

    notification = await to_thread.run_sync(persist)
    (view,) = await assemble_views(resolver, [notification], {notification_id: recipients})
    return view
