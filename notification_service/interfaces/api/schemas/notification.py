"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from notification_service.domain.entities import (
    EmailEvent,
    NotificationSubject,
    NotificationType,
)


class NotificationCreate(BaseModel):
    """Payload used to create a notification for a list of recipients."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)
    type: NotificationType
    subject: NotificationSubject
    recipient_ids: list[str] = Field(
        ..., min_length=1, description="Identificadores de los destinatarios, en orden"
    )


class NotificationUpdate(BaseModel):
    """Only the text of a notification can change after creation."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    body: str | None = Field(default=None, min_length=1)


class RecipientRead(BaseModel):
    """A delivery record joined with the recipient identity."""

    id: str
    notification_id: str
    recipient_id: str
    seen_by_user: bool
    created_at: datetime | None = None
    user: dict[str, Any]


class NotificationRead(BaseModel):
    """Representation of an enriched notification delivered to the client."""

    id: str
    title: str
    body: str
    type: NotificationType
    subject: NotificationSubject
    sender_id: str | None = None
    action_payload: dict[str, Any] = Field(default_factory=dict)
    is_deleted: bool
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    recipients: list[RecipientRead] = Field(default_factory=list)
    sender: dict[str, Any] | None = None


class NotificationPageRead(BaseModel):
    """One page of notifications and the total number of matches."""

    count: int
    data: list[NotificationRead]


class AuctionEmailBody(BaseModel):
    """Replacement values shared by every auction email template."""

    model_config = ConfigDict(extra="ignore")

    toName: str
    company: str
    companyLogo: str
    product: str
    auctionHref: str


class AuctionJoinEmailBody(AuctionEmailBody):
    auctionChat: str


class AuctionThanksEmailBody(AuctionEmailBody):
    pass


class AuctionWinnerEmailBody(AuctionEmailBody):
    companyChat: str


EMAIL_BODY_MODELS: dict[EmailEvent, type[AuctionEmailBody]] = {
    EmailEvent.AUCTION_JOIN: AuctionJoinEmailBody,
    EmailEvent.AUCTION_THANX: AuctionThanksEmailBody,
    EmailEvent.AUCTION_WINNER: AuctionWinnerEmailBody,
}


class SendEmailRequest(BaseModel):
    """Auction event to log in-app and deliver by email."""

    email: EmailStr
    type: EmailEvent
    body: dict[str, Any]
    recipient_ids: list[str] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _validate_body_for_event(self) -> "SendEmailRequest":
        model = EMAIL_BODY_MODELS[self.type]
        self.body = model.model_validate(self.body).model_dump()
        return self


class SendEmailResponse(BaseModel):
    sent: bool
    notification_id: str | None = None


class SendTextRequest(BaseModel):
    phone: str
    message: str


class SendInAppRequest(BaseModel):
    user_id: str
    title: str
    message: str


class SendAcknowledgementRead(BaseModel):
    """Acknowledgement returned by channels without real delivery."""

    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool
    status: str
    transaction_id: str = Field(..., serialization_alias="transactionId")


__all__ = [
    "AuctionJoinEmailBody",
    "AuctionThanksEmailBody",
    "AuctionWinnerEmailBody",
    "NotificationCreate",
    "NotificationPageRead",
    "NotificationRead",
    "NotificationUpdate",
    "RecipientRead",
    "SendAcknowledgementRead",
    "SendEmailRequest",
    "SendEmailResponse",
    "SendInAppRequest",
    "SendTextRequest",
]
