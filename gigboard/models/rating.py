"""
Rating model for Gigboard Service.
"""

from enum import Enum
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Float, ForeignKey, UniqueConstraint, CheckConstraint
)

from .base import Base, utcnow


class RatingType(str, Enum):
    """Direction of a rating."""
    ORGANIZER_TO_PARTICIPANT = "organizer_to_participant"
    PARTICIPANT_TO_ORGANIZER = "participant_to_organizer"


class Rating(Base):
    """
    Post-event feedback from one user about another. Immutable.
    """
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    rater_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rated_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Float, nullable=False)
    review = Column(Text, nullable=True)
    rating_type = Column(String(40), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint('event_id', 'rater_id', 'rated_user_id', name='uq_rating_event_rater_rated'),
        CheckConstraint('rating >= 1 AND rating <= 5', name='check_rating_value_range'),
    )

    def __repr__(self):
        return f"<Rating(id={self.id}, rated_user_id={self.rated_user_id}, rating={self.rating})>"
