"""SQLAlchemy model for persisted notifications."""

from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from notification_service.domain.entities import NotificationSubject, NotificationType
from notification_service.infrastructure.database import Base
from notification_service.utils import utc_now_naive


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class NotificationModel(Base):
    """Database representation for notifications."""

    __tablename__ = "notification"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    type = Column(
        Enum(NotificationType, name="notification_type", values_callable=_enum_values),
        nullable=False,
    )
    subject = Column(
        Enum(
            NotificationSubject,
            name="notification_subject",
            values_callable=_enum_values,
        ),
        nullable=False,
    )
    sender_id = Column(String(64), nullable=True, index=True)
    action_payload = Column(JSON, nullable=False, default=dict)
    is_deleted = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    deleted_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=utc_now_naive,
        onupdate=utc_now_naive,
    )

    recipients = relationship("RecipientModel", back_populates="notification")


__all__ = ["NotificationModel"]
