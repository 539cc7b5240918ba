"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from notification_service.domain.entities import (
    Notification,
    NotificationSubject,
    NotificationType,
)
from notification_service.domain.exceptions import NotificationNotFoundError
from notification_service.infrastructure.models import NotificationModel, RecipientModel
from notification_service.utils import from_utc_naive, to_utc_naive, utc_now_naive


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Changes are flushed, never committed: the calling use case owns the
    transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            type=notification.type,
            subject=notification.subject,
            sender_id=notification.sender_id,
        )
        if notification.id is not None:
            model.id = notification.id
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.flush()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, notification: Notification) -> Notification:
        if notification.id is None:
            raise ValueError("Notification id is required for updates")
        model = self._require_model(notification.id)
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.flush()
        self.session.refresh(model)
        return self._to_entity(model)

    def soft_delete(self, notification_id: str) -> None:
        model = self._require_model(notification_id)
        model.is_deleted = True
        model.deleted_at = utc_now_naive()
        self.session.add(model)
        self.session.flush()

    def count(
        self,
        *,
        recipient_id: str | None = None,
        search_term: str | None = None,
        include_deleted: bool = False,
    ) -> int:
        query = self._filtered_query(
            recipient_id=recipient_id,
            search_term=search_term,
            include_deleted=include_deleted,
        )
        return query.count()

    def list(
        self,
        *,
        skip: int = 0,
        take: int = 10,
        recipient_id: str | None = None,
        search_term: str | None = None,
        include_deleted: bool = False,
    ) -> Sequence[Notification]:
        query = (
            self._filtered_query(
                recipient_id=recipient_id,
                search_term=search_term,
                include_deleted=include_deleted,
            )
            .order_by(NotificationModel.created_at.asc(), NotificationModel.id.asc())
            .offset(skip)
            .limit(take)
        )
        return [self._to_entity(model) for model in query.all()]

    def _filtered_query(
        self,
        *,
        recipient_id: str | None,
        search_term: str | None,
        include_deleted: bool,
    ) -> Query:
        query = self.session.query(NotificationModel)
        if not include_deleted:
            query = query.filter(NotificationModel.is_deleted.is_(False))
        if recipient_id:
            query = query.filter(
                NotificationModel.recipients.any(
                    RecipientModel.recipient_id == recipient_id
                )
            )
        if search_term:
            # Exact match on either field, not a substring search.
            query = query.filter(
                or_(
                    NotificationModel.title == search_term,
                    NotificationModel.body == search_term,
                )
            )
        return query

    def _require_model(self, notification_id: str) -> NotificationModel:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            raise NotificationNotFoundError(notification_id)
        return model

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        # ``id``, ``type`` and ``subject`` are only written on creation.
        model.title = notification.title
        model.body = notification.body
        model.action_payload = notification.action_payload or {}
        model.is_deleted = notification.is_deleted
        model.deleted_at = to_utc_naive(notification.deleted_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            title=model.title,
            body=model.body,
            type=NotificationType(model.type),
            subject=NotificationSubject(model.subject),
            sender_id=model.sender_id,
            action_payload=model.action_payload or {},
            is_deleted=bool(model.is_deleted),
            deleted_at=from_utc_naive(model.deleted_at),
            created_at=from_utc_naive(model.created_at),
            updated_at=from_utc_naive(model.updated_at),
        )


__all__ = ["NotificationRepository"]
