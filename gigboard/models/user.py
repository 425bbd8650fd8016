"""
User model for Gigboard Service.
Organizers and participants share one table.
"""

from enum import Enum
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean, Float, JSON, CheckConstraint
)

from .base import Base, utcnow, ensure_utc


class UserType(str, Enum):
    """User type enumeration."""
    ORGANIZER = "organizer"
    PARTICIPANT = "participant"
    BOTH = "both"


# New profiles start at a perfect score until someone rates them.
DEFAULT_RATING = 5.0


class User(Base):
    """
    User model representing an organizer, a participant, or both.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(32), nullable=False, index=True)
    user_type = Column(String(20), nullable=False, default=UserType.BOTH.value, index=True)
    skills = Column(JSON, nullable=False, default=list)
    bio = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    profile_image = Column(String(255), nullable=True)

    # Aggregates
    rating = Column(Float, nullable=False, default=DEFAULT_RATING, index=True)
    total_ratings = Column(Integer, nullable=False, default=0)
    # Unrounded sum of every rating received; `rating` is derived from it.
    rating_sum = Column(Float, nullable=False, default=0.0)
    events_attended = Column(Integer, nullable=False, default=0)
    events_organized = Column(Integer, nullable=False, default=0)

    # Flags
    is_verified = Column(Boolean, nullable=False, default=False)
    is_premium = Column(Boolean, nullable=False, default=False)
    premium_expires_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint('total_ratings >= 0', name='check_total_ratings_non_negative'),
        CheckConstraint('rating >= 0 AND rating <= 5', name='check_rating_range'),
    )

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}')>"

    @property
    def has_active_premium(self) -> bool:
        """Premium flag that also honours the optional expiry."""
        if not self.is_premium:
            return False
        expires_at = ensure_utc(self.premium_expires_at)
        return expires_at is None or expires_at > utcnow()
