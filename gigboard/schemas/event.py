"""
Pydantic schemas for Event, Application, Participant and Rating operations.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from .user import UserSummary


class EventStatusEnum(str, Enum):
    """Event status enumeration for API."""
    DRAFT = "draft"
    PUBLISHED = "published"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ApplicationDecision(str, Enum):
    """Organizer's answer to an application."""
    APPROVED = "approved"
    REJECTED = "rejected"


class RatingTypeEnum(str, Enum):
    ORGANIZER_TO_PARTICIPANT = "organizer_to_participant"
    PARTICIPANT_TO_ORGANIZER = "participant_to_organizer"


class EventCreate(BaseModel):
    """
    Schema for creating a new event.
    Field rules are checked by the service so every violation is reported at once.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    date_time: Optional[datetime] = None
    end_date_time: Optional[datetime] = None
    required_people: Optional[int] = None
    payment_per_person: Optional[Decimal] = None
    payment_details: Optional[str] = Field(None, max_length=500)
    skills: List[str] = Field(default_factory=list)
    extra_notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    images: List[str] = Field(default_factory=list)


class EventHighlight(BaseModel):
    duration_hours: Optional[int] = Field(None, gt=0, description="Leave empty for no expiry")


class EventResponse(BaseModel):
    """Schema for event response."""
    id: int
    organizer_id: int
    title: str
    description: str
    location: str
    category: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    date_time: datetime
    end_date_time: Optional[datetime] = None
    required_people: int
    applied_count: int
    approved_count: int
    spots_left: int
    payment_per_person: float
    payment_details: str
    skills: List[str]
    extra_notes: Optional[str] = None
    status: EventStatusEnum
    is_highlighted: bool
    highlight_expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    organizer: Optional[UserSummary] = None

    class Config:
        from_attributes = True


class ParticipantResponse(BaseModel):
    """Schema for participant roster entry."""
    id: int
    event_id: int
    user_id: int
    role: Optional[str] = None
    joined_at: datetime
    payment_amount: float
    payment_status: str
    attendance_confirmed: bool
    user: Optional[UserSummary] = None

    class Config:
        from_attributes = True


class EventDetailResponse(EventResponse):
    """Event with its roster."""
    participants: List[ParticipantResponse] = []


class ApplicationCreate(BaseModel):
    message: Optional[str] = Field(None, max_length=1000, description="Note to the organizer")


class ApplicationRespond(BaseModel):
    status: ApplicationDecision
    organizer_notes: Optional[str] = Field(None, max_length=1000)
    role: Optional[str] = Field(None, max_length=100, description="Roster role when approving")


class ApplicationResponse(BaseModel):
    """Schema for application response."""
    id: int
    event_id: int
    user_id: int
    status: str
    message: Optional[str] = None
    organizer_notes: Optional[str] = None
    applied_at: datetime
    responded_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserApplicationResponse(ApplicationResponse):
    """An application together with the event it targets."""
    event: Optional[EventResponse] = None


class RatingCreate(BaseModel):
    rated_user_id: int = Field(..., gt=0)
    rating: float
    rating_type: RatingTypeEnum
    review: Optional[str] = Field(None, max_length=2000)
