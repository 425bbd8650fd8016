"""
Pydantic schemas for event messages.
Outgoing messages are a tagged union on message_type so each variant only
carries the payload it needs.
"""

from datetime import datetime
from typing import Annotated, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator


class BaseMessageCreate(BaseModel):
    content: str = Field("", max_length=4000)
    reply_to: Optional[int] = Field(None, gt=0)


class TextMessageCreate(BaseMessageCreate):
    message_type: Literal["text"]
    is_announcement: bool = False


class ImageMessageCreate(BaseMessageCreate):
    message_type: Literal["image"]
    attachments: List[str] = Field(..., min_length=1)


class LocationMessageCreate(BaseMessageCreate):
    message_type: Literal["location"]
    latitude: str
    longitude: str


class AnnouncementMessageCreate(BaseMessageCreate):
    message_type: Literal["announcement"]


class PollMessageCreate(BaseMessageCreate):
    message_type: Literal["poll"]
    poll_options: List[str] = Field(..., min_length=2)

    @field_validator('poll_options')
    @classmethod
    def validate_options(cls, v):
        """Reject blank and repeated options."""
        options = [option.strip() for option in v]
        if any(not option for option in options):
            raise ValueError('Poll options cannot be blank')
        if len(set(options)) != len(options):
            raise ValueError('Poll options must be unique')
        return options


MessageCreate = Annotated[
    Union[
        TextMessageCreate,
        ImageMessageCreate,
        LocationMessageCreate,
        AnnouncementMessageCreate,
        PollMessageCreate,
    ],
    Field(discriminator="message_type"),
]


class MessageEdit(BaseModel):
    content: str = Field(..., min_length=1, max_length=4000)


class PollVote(BaseModel):
    option: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Schema for message response."""
    id: int
    event_id: int
    sender_id: int
    content: str
    message_type: str
    is_announcement: bool
    attachments: List[str] = []
    reply_to: Optional[int] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    poll_options: Optional[List[str]] = None
    poll_votes: Optional[Dict[str, List[int]]] = None
    sent_at: datetime
    edited_at: Optional[datetime] = None
    is_deleted: bool

    class Config:
        from_attributes = True


class UnreadCountResponse(BaseModel):
    """Recent messages from others across the caller's events."""
    unread_count: int
