"""
Event model for Gigboard Service.
"""

from enum import Enum
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean, Numeric, Float, JSON,
    ForeignKey, CheckConstraint, Index
)
from sqlalchemy.orm import relationship

from .base import Base, utcnow, ensure_utc


class EventStatus(str, Enum):
    """Event status enumeration."""
    DRAFT = "draft"
    PUBLISHED = "published"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_EVENT_STATUSES = {EventStatus.COMPLETED.value, EventStatus.CANCELLED.value}


class Event(Base):
    """
    Event model representing an organizer's gig posting.
    """
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    location = Column(String(255), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    date_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_date_time = Column(DateTime(timezone=True), nullable=True)

    # Capacity and denormalized counters
    required_people = Column(Integer, nullable=False)
    applied_count = Column(Integer, nullable=False, default=0)
    approved_count = Column(Integer, nullable=False, default=0)

    # Payment terms
    payment_per_person = Column(Numeric(10, 2), nullable=False, default=0)
    payment_details = Column(String(500), nullable=False, default="")

    skills = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    extra_notes = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default=EventStatus.PUBLISHED.value, index=True)
    is_highlighted = Column(Boolean, nullable=False, default=False, index=True)
    highlight_expires_at = Column(DateTime(timezone=True), nullable=True)

    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    organizer = relationship("User", lazy="joined", innerjoin=True)
    participants = relationship("Participant", back_populates="event", order_by="Participant.joined_at")

    __table_args__ = (
        CheckConstraint('required_people >= 1', name='check_required_people_positive'),
        CheckConstraint('payment_per_person >= 0', name='check_payment_non_negative'),
        CheckConstraint('approved_count <= applied_count', name='check_approved_within_applied'),
        Index('idx_event_status_date', 'status', 'date_time'),
    )

    def __repr__(self):
        return f"<Event(id={self.id}, title='{self.title}', status='{self.status}')>"

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_EVENT_STATUSES

    @property
    def is_full(self) -> bool:
        return self.approved_count >= self.required_people

    @property
    def spots_left(self) -> int:
        return max(self.required_people - self.approved_count, 0)

    @property
    def is_highlight_active(self) -> bool:
        """Check if the premium boost is on and not expired."""
        if not self.is_highlighted:
            return False
        expires_at = ensure_utc(self.highlight_expires_at)
        return expires_at is None or expires_at > utcnow()
