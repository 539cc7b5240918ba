"""Unit tests for the email rendering and SendGrid delivery helpers."""

from __future__ import annotations

import json
import types

import pytest

from notification_service.domain.exceptions import EmailDeliveryError, EmailTemplateError
from notification_service.infrastructure import email as email_module


class DummySettings:
    sendgrid_api_key = "SG.fake"
    sendgrid_sender = "support@example.com"
    email_timeout_seconds = 7.5
    email_templates_dir = None


class UnconfiguredSettings(DummySettings):
    sendgrid_api_key = None
    sendgrid_sender = None


class _StubSendGridAPIClient:
    """Default stub client that returns a successful response."""

    def __init__(self, api_key: str):
        self.api_key = api_key
        self.client = types.SimpleNamespace(timeout=None)

    def send(self, message):
        return types.SimpleNamespace(status_code=202, body=None)


@pytest.fixture(autouse=True)
def configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(email_module, "get_settings", lambda: DummySettings())


def test_render_join_template_substitutes_values() -> None:
    html = email_module.render_template(
        email_module.JOIN_TEMPLATE,
        {
            "toName": "Ivan",
            "company": "Fishstat",
            "companyLogo": "https://example.com/logo.png",
            "product": "Salmon",
            "auctionHref": "https://example.com/auction/1",
            "auctionChat": "https://example.com/chat/1",
        },
    )

    assert "Ivan" in html
    assert "https://example.com/auction/1" in html
    assert "https://example.com/chat/1" in html


def test_render_escapes_html_in_values() -> None:
    html = email_module.render_template(
        email_module.THANKS_TEMPLATE,
        {
            "toName": "<script>",
            "company": "Fishstat",
            "companyLogo": "",
            "product": "Salmon",
            "auctionHref": "",
        },
    )

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_missing_template_raises_template_error() -> None:
    with pytest.raises(EmailTemplateError):
        email_module.render_template("missing.html", {})


def test_missing_replacement_raises_template_error() -> None:
    with pytest.raises(EmailTemplateError):
        email_module.render_template(email_module.WINNER_TEMPLATE, {"toName": "Ivan"})


def test_send_email_without_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    """Missing SendGrid settings must be reported, not skipped."""

    monkeypatch.setattr(email_module, "get_settings", lambda: UnconfiguredSettings())

    with pytest.raises(EmailDeliveryError):
        email_module.send_email("Subject", "<p>Body</p>", "user@example.com")


def test_send_email_success(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(email_module, "SendGridAPIClient", _StubSendGridAPIClient)

    assert email_module.send_email("Subject", "<p>Body</p>", "user@example.com") is True


def test_send_email_rejected_status(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    class RejectingClient(_StubSendGridAPIClient):
        def send(self, message):
            return types.SimpleNamespace(status_code=400, body=b'{"errors": [{"message": "Bad sender"}]}')

    monkeypatch.setattr(email_module, "SendGridAPIClient", RejectingClient)

    with caplog.at_level("ERROR"):
        with pytest.raises(EmailDeliveryError, match="Bad sender"):
            email_module.send_email("Subject", "<p>Body</p>", "user@example.com")

    assert "status 400" in caplog.text


def test_send_email_logs_forbidden_error(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    """Forbidden responses from SendGrid should surface meaningful log details."""

    class FakeForbiddenError(Exception):
        status_code = 403
        body = json.dumps(
            {"errors": [{"message": "The provided authorization grant is invalid."}]}
        ).encode()

    class FailingClient(_StubSendGridAPIClient):
        def send(self, message):
            raise FakeForbiddenError()

    monkeypatch.setattr(email_module, "SendGridAPIClient", FailingClient)

    with caplog.at_level("ERROR"):
        with pytest.raises(EmailDeliveryError):
            email_module.send_email("Subject", "<p>Body</p>", "user@example.com")

    assert "status 403" in caplog.text
    assert "authorization grant is invalid" in caplog.text


def test_winner_email_uses_winner_template_and_product_subject(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    sent: list[tuple[str, str, str]] = []
    monkeypatch.setattr(
        email_module,
        "send_email",
        lambda subject, html, recipient: sent.append((subject, html, recipient)) or True,
    )

    result = email_module.send_auction_winner_email(
        "ivan@example.com",
        {
            "toName": "Ivan",
            "company": "Fishstat",
            "companyLogo": "https://example.com/logo.png",
            "product": "Salmon",
            "auctionHref": "https://example.com/auction/1",
            "companyChat": "https://example.com/company-chat",
        },
    )

    assert result is True
    subject, html, recipient = sent[0]
    assert subject == "Поздравляем! Вы выиграли наш аукцион на лот «Salmon»."
    assert "https://example.com/company-chat" in html
    assert recipient == "ivan@example.com"


def test_join_subject_contains_product_name() -> None:
    assert email_module.auction_join_subject("Salmon").endswith("«Salmon»")


def test_send_email_bounds_the_sendgrid_request(monkeypatch: pytest.MonkeyPatch) -> None:
    clients: list[_StubSendGridAPIClient] = []

    class RecordingClient(_StubSendGridAPIClient):
        def __init__(self, api_key: str):
            super().__init__(api_key)
            clients.append(self)

    monkeypatch.setattr(email_module, "SendGridAPIClient", RecordingClient)

    email_module.send_email("Subject", "<p>Body</p>", "user@example.com")

    assert clients[0].client.timeout == 7.5


def test_send_email_timeout_raises_delivery_error(monkeypatch: pytest.MonkeyPatch) -> None:
    class SlowClient(_StubSendGridAPIClient):
        def send(self, message):
            raise TimeoutError("timed out")

    monkeypatch.setattr(email_module, "SendGridAPIClient", SlowClient)

    with pytest.raises(EmailDeliveryError, match="timed out"):
        email_module.send_email("Subject", "<p>Body</p>", "user@example.com")
