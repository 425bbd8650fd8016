"""
Gigboard models. Importing this package registers every table on Base.
"""

from .base import Base, utcnow, ensure_utc
from .user import User, UserType, DEFAULT_RATING
from .event import Event, EventStatus, TERMINAL_EVENT_STATUSES
from .application import Application, ApplicationStatus, Participant, PaymentStatus
from .message import Message, MessageType, DELETED_MESSAGE_PLACEHOLDER
from .rating import Rating, RatingType
from .notification import Notification, NotificationType

__all__ = [
    "Base", "utcnow", "ensure_utc",
    "User", "UserType", "DEFAULT_RATING",
    "Event", "EventStatus", "TERMINAL_EVENT_STATUSES",
    "Application", "ApplicationStatus", "Participant", "PaymentStatus",
    "Message", "MessageType", "DELETED_MESSAGE_PLACEHOLDER",
    "Rating", "RatingType", "Notification", "NotificationType",
]
