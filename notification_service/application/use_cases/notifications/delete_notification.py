"""Use case for soft deleting a notification."""

from sqlalchemy.orm import Session

from notification_service.infrastructure.database import unit_of_work
from notification_service.infrastructure.repositories import NotificationRepository


def delete_notification(session: Session, notification_id: str) -> None:
    """Flag the notification as deleted; its recipients are left untouched."""

    with unit_of_work(session):
        NotificationRepository(session).soft_delete(notification_id)
