"""Persistence helpers for notification recipients."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from notification_service.domain.entities import Recipient
from notification_service.infrastructure.models import RecipientModel
from notification_service.utils import from_utc_naive


class RecipientRepository:
    """Create and read delivery records for notifications."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_many(
        self, notification_id: str, recipient_ids: Iterable[str]
    ) -> list[Recipient]:
        """Persist one unseen recipient per id, keeping the given order."""

        models = [
            RecipientModel(
                notification_id=notification_id,
                recipient_id=recipient_id,
                position=position,
                seen_by_user=False,
            )
            for position, recipient_id in enumerate(recipient_ids)
        ]
        self.session.add_all(models)
        self.session.flush()
        return [self._to_entity(model) for model in models]

    def list_for_notification(self, notification_id: str) -> Sequence[Recipient]:
        return self.list_for_notifications([notification_id]).get(notification_id, [])

    def list_for_notifications(
        self, notification_ids: Sequence[str]
    ) -> dict[str, list[Recipient]]:
        if not notification_ids:
            return {}

        query = (
            self.session.query(RecipientModel)
            .filter(RecipientModel.notification_id.in_(set(notification_ids)))
            .order_by(RecipientModel.position.asc(), RecipientModel.created_at.asc())
        )
        grouped: defaultdict[str, list[Recipient]] = defaultdict(list)
        for model in query.all():
            grouped[model.notification_id].append(self._to_entity(model))
        return dict(grouped)

    @staticmethod
    def _to_entity(model: RecipientModel) -> Recipient:
        return Recipient(
            id=model.id,
            notification_id=model.notification_id,
            recipient_id=model.recipient_id,
            seen_by_user=bool(model.seen_by_user),
            created_at=from_utc_naive(model.created_at),
        )


__all__ = ["RecipientRepository"]
