"""Identity enrichment of notifications and their recipients."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import anyio

from notification_service.config import get_settings
from notification_service.domain.entities import (
    EnrichedRecipient,
    Notification,
    NotificationView,
    Recipient,
)
from notification_service.domain.exceptions import IdentityLookupError
from notification_service.infrastructure.identity import IdentityLookup

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolve user ids through ``identity`` for the duration of one request.

    Distinct ids are looked up once and concurrently, with at most
    ``max_concurrency`` lookups in flight. The first failure cancels the
    lookups still running and is raised as :class:`IdentityLookupError`.
    """

    def __init__(self, identity: IdentityLookup, *, max_concurrency: int | None = None) -> None:
        if max_concurrency is None:
            max_concurrency = get_settings().identity_max_concurrency
        self._identity = identity
        self._limiter = anyio.CapacityLimiter(max_concurrency)
        self._cache: dict[str, dict[str, Any]] = {}

    async def resolve(self, user_id: str) -> dict[str, Any]:
        (profile,) = await self.resolve_many([user_id])
        return profile

    async def resolve_many(self, user_ids: Sequence[str]) -> list[dict[str, Any]]:
        """Return one profile per entry of ``user_ids``, in the same order."""

        pending = [user_id for user_id in dict.fromkeys(user_ids) if user_id not in self._cache]
        if pending:
            await self._fetch(pending)
        return [self._cache[user_id] for user_id in user_ids]

    async def _fetch(self, user_ids: list[str]) -> None:
        results: dict[str, dict[str, Any]] = {}
        failures: list[IdentityLookupError] = []

        async with anyio.create_task_group() as task_group:

            async def lookup(user_id: str) -> None:
                async with self._limiter:
                    try:
                        results[user_id] = await self._identity.get_user_by_id(user_id)
                    except IdentityLookupError as exc:
                        failures.append(exc)
                        task_group.cancel_scope.cancel()
                    except Exception as exc:
                        logger.exception("Identity lookup for %s raised unexpectedly", user_id)
                        failure = IdentityLookupError(user_id, f"unexpected error: {exc!r}")
                        failure.__cause__ = exc
                        failures.append(failure)
                        task_group.cancel_scope.cancel()

            for user_id in user_ids:
                task_group.start_soon(lookup, user_id)

        if failures:
            logger.warning(
                "Aborting enrichment after identity lookup failure: %s", failures[0]
            )
            raise failures[0]
        self._cache.update(results)


async def assemble_views(
    resolver: IdentityResolver,
    notifications: Sequence[Notification],
    recipients_by_notification: Mapping[str, Sequence[Recipient]],
) -> list[NotificationView]:
    """Attach live identities to ``notifications`` with a single fan-out."""

    user_ids: list[str] = []
    for notification in notifications:
        user_ids.extend(
            recipient.recipient_id
            for recipient in recipients_by_notification.get(notification.id, ())
        )
        if notification.sender_id:
            user_ids.append(notification.sender_id)

    profiles = dict(zip(user_ids, await resolver.resolve_many(user_ids)))

    views: list[NotificationView] = []
    for notification in notifications:
        recipients = recipients_by_notification.get(notification.id, ())
        views.append(
            NotificationView(
                notification=notification,
                recipients=[
                    EnrichedRecipient(recipient=recipient, user=profiles[recipient.recipient_id])
                    for recipient in recipients
                ],
                sender=profiles.get(notification.sender_id) if notification.sender_id else None,
            )
        )
    return views


__all__ = ["IdentityResolver", "assemble_views"]
