"""Use case for paginated notification search."""

from anyio import to_thread
from sqlalchemy.orm import Session

from notification_service.domain.entities import NotificationPage
from notification_service.infrastructure.database import unit_of_work
from notification_service.infrastructure.identity import IdentityLookup
from notification_service.infrastructure.repositories import (
    NotificationRepository,
    RecipientRepository,
)

from .enrichment import IdentityResolver, assemble_views


async def list_notifications(
    session: Session,
    identity: IdentityLookup,
    *,
    skip: int = 0,
    take: int = 10,
    search_term: str | None = None,
    user_id: str | None = None,
) -> NotificationPage:
    """Return one page of notifications and the total number of matches.

    ``user_id`` restricts the result to notifications addressed to that user;
    ``search_term`` must equal the title or the body exactly. Soft-deleted
    notifications are not listed.
    """

    if skip < 0 or take < 0:
        raise ValueError("skip and take must not be negative")

    filters = {"recipient_id": user_id, "search_term": search_term}

    def load():
        with unit_of_work(session):
            repository = NotificationRepository(session)
            count = repository.count(**filters)
            notifications = list(repository.list(skip=skip, take=take, **filters))
            recipients = RecipientRepository(session).list_for_notifications(
                [notification.id for notification in notifications]
            )
        return count, notifications, recipients

    count, notifications, recipients = await to_thread.run_sync(load)
    views = await assemble_views(IdentityResolver(identity), notifications, recipients)
    return NotificationPage(count=count, data=views)
