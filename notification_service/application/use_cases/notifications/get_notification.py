"""Use case for retrieving a single enriched notification."""

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


async def get_notification(
    session: Session, identity: IdentityLookup, notification_id: str
) -> NotificationView:
    """Return the notification, soft-deleted or not, with live identities."""

    def load():
        with unit_of_work(session):
            notification = NotificationRepository(session).get(notification_id)
            if notification is None:
                raise NotificationNotFoundError(notification_id)
            recipients = RecipientRepository(session).list_for_notification(notification_id)
        return notification, recipients

    notification, recipients = await to_thread.run_sync(load)
    (view,) = await assemble_views(
        IdentityResolver(identity),
        [notification],
        {notification_id: recipients},
    )
    return view
