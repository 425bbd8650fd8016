"""
Pydantic schemas for User-related operations.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class UserTypeEnum(str, Enum):
    """User type enumeration for API."""
    ORGANIZER = "organizer"
    PARTICIPANT = "participant"
    BOTH = "both"


class UserCreate(BaseModel):
    """Schema for registering (or re-registering) a user."""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str = Field(..., min_length=1, max_length=32)
    user_type: UserTypeEnum = Field(UserTypeEnum.BOTH)
    skills: List[str] = Field(default_factory=list, description="e.g. photography, anchor, stage setup")
    bio: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    profile_image: Optional[str] = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Shape check only; ownership is verified by the auth service."""
        if "@" not in v:
            raise ValueError('Invalid email address')
        return v.strip().lower()


class UserUpdate(BaseModel):
    """Schema for updating a profile. Omitted fields stay unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    bio: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    skills: Optional[List[str]] = None
    profile_image: Optional[str] = None


class UserSummary(BaseModel):
    """Public card shown next to events, messages and applications."""
    id: int
    name: str
    rating: float
    is_verified: bool
    profile_image: Optional[str] = None

    class Config:
        from_attributes = True


class RatingResponse(BaseModel):
    """Schema for rating response."""
    id: int
    event_id: int
    rater_id: int
    rated_user_id: int
    rating: float
    review: Optional[str] = None
    rating_type: str
    created_at: datetime

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    """Schema for user response."""
    id: int
    name: str
    email: str
    phone: str
    user_type: UserTypeEnum
    skills: List[str]
    bio: Optional[str] = None
    location: Optional[str] = None
    profile_image: Optional[str] = None
    rating: float
    total_ratings: int
    events_attended: int
    events_organized: int
    is_verified: bool
    is_premium: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserProfileResponse(UserResponse):
    """User with their most recent ratings."""
    recent_ratings: List[RatingResponse] = []


class NotificationResponse(BaseModel):
    """Schema for notification response."""
    id: int
    title: str
    message: str
    type: str
    related_event_id: Optional[int] = None
    related_user_id: Optional[int] = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True
