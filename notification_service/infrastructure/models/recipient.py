"""SQLAlchemy model for per-recipient delivery records."""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from notification_service.infrastructure.database import Base
from notification_service.utils import utc_now_naive


class RecipientModel(Base):
    """Database representation of a notification recipient."""

    __tablename__ = "recipient"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    notification_id = Column(
        String(36), ForeignKey("notification.id"), nullable=False, index=True
    )
    recipient_id = Column(String(64), nullable=False, index=True)
    # Index of the recipient in the list given at creation time.
    position = Column(Integer, nullable=False, default=0)
    seen_by_user = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)

    notification = relationship("NotificationModel", back_populates="recipients")


__all__ = ["RecipientModel"]
