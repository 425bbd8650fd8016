"""
Application and Participant models for Gigboard Service.
An approved application materializes exactly one participant row.
"""

from enum import Enum
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean, Numeric, ForeignKey,
    UniqueConstraint, Index
)
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class ApplicationStatus(str, Enum):
    """Application status enumeration."""
    PENDING = "pending"      # Waiting for the organizer
    APPROVED = "approved"    # Terminal, participant created
    REJECTED = "rejected"    # Terminal


class PaymentStatus(str, Enum):
    """Participant payment status enumeration."""
    PENDING = "pending"
    LOCKED = "locked"
    RELEASED = "released"
    REFUNDED = "refunded"


class Application(Base):
    """
    A participant's request to work an event.
    """
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ApplicationStatus.PENDING.value, index=True)
    message = Column(Text, nullable=True)
    organizer_notes = Column(Text, nullable=True)
    applied_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    responded_at = Column(DateTime(timezone=True), nullable=True)

    event = relationship("Event")

    __table_args__ = (
        UniqueConstraint('event_id', 'user_id', name='uq_application_event_user'),
    )

    def __repr__(self):
        return f"<Application(id={self.id}, event_id={self.event_id}, user_id={self.user_id}, status='{self.status}')>"

    @property
    def is_pending(self) -> bool:
        return self.status == ApplicationStatus.PENDING.value


class Participant(Base):
    """
    Roster entry for a user whose application was approved.
    """
    __tablename__ = "participants"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    application_id = Column(Integer, ForeignKey("applications.id"), nullable=False, unique=True)
    role = Column(String(100), nullable=True)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    payment_amount = Column(Numeric(10, 2), nullable=False, default=0)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True)
    attendance_confirmed = Column(Boolean, nullable=False, default=False)

    event = relationship("Event", back_populates="participants")
    user = relationship("User", lazy="joined", innerjoin=True)

    __table_args__ = (
        UniqueConstraint('event_id', 'user_id', name='uq_participant_event_user'),
        Index('idx_participant_event_payment', 'event_id', 'payment_status'),
    )

    def __repr__(self):
        return f"<Participant(id={self.id}, event_id={self.event_id}, user_id={self.user_id})>"
