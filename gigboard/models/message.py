"""
Message model for per-event chat, announcements and polls.
"""

from enum import Enum
from typing import Dict
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean, JSON, ForeignKey, Index
)

from .base import Base, utcnow


class MessageType(str, Enum):
    """Message type enumeration."""
    TEXT = "text"
    IMAGE = "image"
    LOCATION = "location"
    ANNOUNCEMENT = "announcement"
    POLL = "poll"


DELETED_MESSAGE_PLACEHOLDER = "This message was deleted"


class Message(Base):
    """
    A message in an event's thread.
    Never physically removed; deletion is a tombstone so replies keep resolving.
    """
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    message_type = Column(String(20), nullable=False, default=MessageType.TEXT.value)
    is_announcement = Column(Boolean, nullable=False, default=False)
    attachments = Column(JSON, nullable=False, default=list)
    reply_to = Column(Integer, ForeignKey("messages.id"), nullable=True)
    latitude = Column(String(32), nullable=True)
    longitude = Column(String(32), nullable=True)
    poll_options = Column(JSON, nullable=True)
    # option -> list of voter ids
    poll_votes = Column(JSON, nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    edited_at = Column(DateTime(timezone=True), nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index('idx_message_event_time', 'event_id', 'sent_at'),
    )

    def __repr__(self):
        return f"<Message(id={self.id}, event_id={self.event_id}, type='{self.message_type}')>"

    @property
    def is_poll(self) -> bool:
        return self.message_type == MessageType.POLL.value

    @property
    def vote_counts(self) -> Dict[str, int]:
        if not self.poll_votes:
            return {}
        return {option: len(voters) for option, voters in self.poll_votes.items()}
