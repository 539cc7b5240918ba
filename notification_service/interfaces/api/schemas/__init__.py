from .notification import (
    AuctionJoinEmailBody,
    AuctionThanksEmailBody,
    AuctionWinnerEmailBody,
    NotificationCreate,
    NotificationPageRead,
    NotificationRead,
    NotificationUpdate,
    RecipientRead,
    SendAcknowledgementRead,
    SendEmailRequest,
    SendEmailResponse,
    SendInAppRequest,
    SendTextRequest,
)

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
