"""Client for the identity service ``getUserById`` RPC."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Protocol

import anyio
import httpx

from notification_service.config import Settings, get_settings
from notification_service.domain.exceptions import IdentityLookupError

logger = logging.getLogger(__name__)

GET_USER_BY_ID = "getUserById"


class IdentityLookup(Protocol):
    """Anything able to resolve a user id into an identity profile."""

    async def get_user_by_id(self, user_id: str) -> dict[str, Any]:
        ...


class IdentityClient:
    """Request/reply client for the identity service.

    The client must be opened with :meth:`connect` (or ``async with``) before
    use and released with :meth:`close`. Each lookup is independent and
    bounded by ``timeout`` seconds.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        max_connections: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._max_connections = max_connections
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "IdentityClient":
        settings = settings or get_settings()
        return cls(
            settings.identity_service_url,
            timeout=settings.identity_timeout_seconds,
            max_connections=max(settings.identity_max_concurrency, 1),
        )

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(max_connections=self._max_connections),
            transport=self._transport,
        )
        logger.info("Identity client connected to %s", self.base_url)

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aclose()
        logger.info("Identity client disconnected from %s", self.base_url)

    async def __aenter__(self) -> "IdentityClient":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def get_user_by_id(self, user_id: str) -> dict[str, Any]:
        """Return the identity profile for ``user_id``."""

        if self._client is None:
            raise IdentityLookupError(user_id, "identity client is not connected")

        try:
            with anyio.fail_after(self.timeout):
                response = await self._client.post(
                    f"/rpc/{GET_USER_BY_ID}", json={"userId": user_id}
                )
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Identity lookup for %s timed out", user_id)
            raise IdentityLookupError(user_id, "timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("Identity lookup for %s failed: %s", user_id, exc)
            raise IdentityLookupError(user_id, f"transport error: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise IdentityLookupError(user_id, "user not found")
        if not response.is_success:
            logger.warning(
                "Identity service answered %s for user %s", response.status_code, user_id
            )
            raise IdentityLookupError(
                user_id, f"identity service responded with status {response.status_code}"
            )

        try:
            profile = response.json()
        except ValueError as exc:
            raise IdentityLookupError(user_id, "response is not valid JSON") from exc

        if not isinstance(profile, dict) or not profile:
            raise IdentityLookupError(user_id, "empty identity profile")
        return profile


__all__ = ["GET_USER_BY_ID", "IdentityClient", "IdentityLookup"]
