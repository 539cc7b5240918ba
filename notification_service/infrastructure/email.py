"""Rendering and delivery of the auction emails via Jinja2 and SendGrid."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, select_autoescape
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from notification_service.config import get_settings
from notification_service.domain.exceptions import EmailDeliveryError, EmailTemplateError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

JOIN_TEMPLATE = "join.html"
THANKS_TEMPLATE = "thanx.html"
WINNER_TEMPLATE = "winner.html"

JOIN_FIELDS = ("toName", "companyLogo", "company", "product", "auctionHref", "auctionChat")
THANKS_FIELDS = ("toName", "companyLogo", "company", "product", "auctionHref")
WINNER_FIELDS = ("toName", "companyLogo", "company", "product", "auctionHref", "companyChat")


def auction_join_subject(product: str) -> str:
    return f"Вы приглашены для участия в аукционе на лот «{product}»"


def auction_thanks_subject(product: str) -> str:
    return f"Аукцион на «{product}» завершен."


def auction_winner_subject(product: str) -> str:
    return f"Поздравляем! Вы выиграли наш аукцион на лот «{product}»."


@lru_cache(maxsize=4)
def _get_environment(templates_dir: str) -> Environment:
    return Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
    )


def _templates_dir() -> str:
    configured = get_settings().email_templates_dir
    return str(Path(configured) if configured else DEFAULT_TEMPLATES_DIR)


def render_template(template_name: str, replacements: Mapping[str, Any]) -> str:
    """Render ``template_name`` with ``replacements`` into an HTML string."""

    templates_dir = _templates_dir()
    try:
        template = _get_environment(templates_dir).get_template(template_name)
        return template.render(**dict(replacements))
    except (TemplateError, OSError) as exc:
        logger.error(
            "Error rendering email template %s from %s: %s", template_name, templates_dir, exc
        )
        raise EmailTemplateError(f"Error loading email template {template_name}") from exc


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_failure(source: Any) -> str:
    status_code = getattr(source, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(source, "body", None))
    if status_code and details:
        return f"status {status_code}: {details}"
    if status_code:
        return f"status {status_code}"
    return details or str(source)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials.

    Returns ``True`` on success; every failure raises :class:`EmailDeliveryError`.
    """

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.error("SendGrid configuration incomplete; cannot deliver email to %s", recipient)
        raise EmailDeliveryError("Email delivery is not configured")

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        client.client.timeout = settings.email_timeout_seconds
        response = client.send(message)
    except Exception as exc:  # SendGrid raises plain HTTPError subclasses
        description = _describe_failure(exc)
        logger.error("SendGrid API request failed with %s", description)
        raise EmailDeliveryError(f"Error sending email: {description}") from exc

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        description = _describe_failure(response)
        logger.error("SendGrid API responded with %s", description)
        raise EmailDeliveryError(f"Error sending email: {description}")

    return True


def _replacements(body: Mapping[str, Any], fields: tuple[str, ...]) -> dict[str, str]:
    return {name: "" if body.get(name) is None else str(body.get(name)) for name in fields}


def send_auction_join_email(email: str, body: Mapping[str, Any]) -> bool:
    """Invite ``email`` to take part in an auction."""

    replacements = _replacements(body, JOIN_FIELDS)
    html_content = render_template(JOIN_TEMPLATE, replacements)
    return send_email(auction_join_subject(replacements["product"]), html_content, email)


def send_auction_thanks_email(email: str, body: Mapping[str, Any]) -> bool:
    """Thank ``email`` for participating in a closed auction."""

    replacements = _replacements(body, THANKS_FIELDS)
    html_content = render_template(THANKS_TEMPLATE, replacements)
    return send_email(auction_thanks_subject(replacements["product"]), html_content, email)


def send_auction_winner_email(email: str, body: Mapping[str, Any]) -> bool:
    """Congratulate ``email`` on winning an auction."""

    replacements = _replacements(body, WINNER_FIELDS)
    html_content = render_template(WINNER_TEMPLATE, replacements)
    return send_email(auction_winner_subject(replacements["product"]), html_content, email)


class EmailSender:
    """Bundle of the auction email senders, injectable into the use cases."""

    def send_auction_join_email(self, email: str, body: Mapping[str, Any]) -> bool:
        return send_auction_join_email(email, body)

    def send_auction_thanks_email(self, email: str, body: Mapping[str, Any]) -> bool:
        return send_auction_thanks_email(email, body)

    def send_auction_winner_email(self, email: str, body: Mapping[str, Any]) -> bool:
        return send_auction_winner_email(email, body)


__all__ = [
    "EmailSender",
    "render_template",
    "send_auction_join_email",
    "send_auction_thanks_email",
    "send_auction_winner_email",
    "send_email",
]
