"""Shared fixtures: in-memory store, fake identity service and email sender."""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

import anyio
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("IDENTITY_SERVICE_URL", "http://identity.test")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notification_service.domain.exceptions import EmailDeliveryError, IdentityLookupError
from notification_service.infrastructure.database import Base, initialize_database


class FakeIdentityService:
    """In-memory stand-in for the identity RPC."""

    def __init__(self, delay: float = 0) -> None:
        self.delay = delay
        self.failing: set[str] = set()
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @staticmethod
    def profile(user_id: str) -> dict[str, str]:
        return {"id": user_id, "name": f"User {user_id}", "email": f"{user_id}@example.com"}

    async def get_user_by_id(self, user_id: str) -> dict[str, str]:
        self.calls.append(user_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await anyio.sleep(self.delay)
            if user_id in self.failing:
                raise IdentityLookupError(user_id, "identity service unavailable")
            return self.profile(user_id)
        finally:
            self.in_flight -= 1


class FakeEmailSender:
    """Records auction emails instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict]] = []
        self.error: Exception | None = None
        self.delay: float = 0

    def _record(self, kind: str, email: str, body: dict) -> bool:
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.sent.append((kind, email, dict(body)))
        return True

    def send_auction_join_email(self, email: str, body: dict) -> bool:
        return self._record("join", email, body)

    def send_auction_thanks_email(self, email: str, body: dict) -> bool:
        return self._record("thanks", email, body)

    def send_auction_winner_email(self, email: str, body: dict) -> bool:
        return self._record("winner", email, body)

    def fail(self, message: str = "SendGrid API responded with status 500") -> None:
        self.error = EmailDeliveryError(message)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_database(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def identity():
    return FakeIdentityService()


@pytest.fixture
def email_sender():
    return FakeEmailSender()


@pytest.fixture
def identity_factory():
    return FakeIdentityService
