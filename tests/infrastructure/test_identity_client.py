"""Tests for the identity service RPC client."""

from __future__ import annotations

import json

import httpx
import pytest

from notification_service.domain.exceptions import IdentityLookupError
from notification_service.infrastructure.identity import IdentityClient

pytestmark = pytest.mark.anyio


def _client(handler) -> IdentityClient:
    return IdentityClient(
        "http://identity.test/",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


async def test_get_user_by_id_sends_rpc_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "u1", "email": "u1@example.com"})

    async with _client(handler) as client:
        profile = await client.get_user_by_id("u1")

    assert profile == {"id": "u1", "email": "u1@example.com"}
    assert seen[0].method == "POST"
    assert seen[0].url == httpx.URL("http://identity.test/rpc/getUserById")
    assert json.loads(seen[0].content) == {"userId": "u1"}
    assert client.is_connected is False


async def test_lookup_requires_connect() -> None:
    client = _client(lambda request: httpx.Response(200, json={"id": "u1"}))

    with pytest.raises(IdentityLookupError, match="not connected"):
        await client.get_user_by_id("u1")


@pytest.mark.parametrize(
    ("response", "reason"),
    [
        (httpx.Response(404, json={"message": "missing"}), "user not found"),
        (httpx.Response(500, text="boom"), "status 500"),
        (httpx.Response(200, json={}), "empty identity profile"),
        (httpx.Response(200, text="not json"), "not valid JSON"),
    ],
)
async def test_unusable_responses_raise_lookup_error(response, reason) -> None:
    async with _client(lambda request: response) as client:
        with pytest.raises(IdentityLookupError) as exc_info:
            await client.get_user_by_id("u1")

    assert exc_info.value.user_id == "u1"
    assert reason in exc_info.value.reason


async def test_timeouts_raise_lookup_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    async with _client(handler) as client:
        with pytest.raises(IdentityLookupError) as exc_info:
            await client.get_user_by_id("u1")

    assert exc_info.value.reason == "timed out"


async def test_transport_errors_raise_lookup_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(IdentityLookupError, match="transport error"):
            await client.get_user_by_id("u1")
