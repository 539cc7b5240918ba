"""FastAPI dependency utilities."""

from fastapi import Header, HTTPException, Request, status

from notification_service.infrastructure.email import EmailSender
from notification_service.infrastructure.identity import IdentityClient


def get_identity_client(request: Request) -> IdentityClient:
    """Return the identity client opened during the application lifespan."""

    client: IdentityClient | None = getattr(request.app.state, "identity_client", None)
    if client is None or not client.is_connected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity service client is not available",
        )
    return client


def get_email_sender() -> EmailSender:
    """Return the sender used for auction emails."""

    return EmailSender()


def get_caller_id(x_user_id: str | None = Header(default=None)) -> str | None:
    """Return the caller identity forwarded by the gateway, if any."""

    if x_user_id is None:
        return None
    return x_user_id.strip() or None
