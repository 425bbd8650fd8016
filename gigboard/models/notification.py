"""
Notification model for Gigboard Service.
"""

from enum import Enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index

from .base import Base, utcnow


class NotificationType(str, Enum):
    """Notification type enumeration."""
    APPLICATION_RECEIVED = "application_received"
    APPLICATION_APPROVED = "application_approved"
    APPLICATION_REJECTED = "application_rejected"
    PAYMENT_RECEIVED = "payment_received"
    RATING_RECEIVED = "rating_received"
    NEW_MESSAGE = "new_message"


class Notification(Base):
    """
    In-app notification written alongside the mutation that caused it.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(40), nullable=False)
    related_event_id = Column(Integer, ForeignKey("events.id"), nullable=True)
    related_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_notification_user_read', 'user_id', 'is_read'),
    )

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}')>"
