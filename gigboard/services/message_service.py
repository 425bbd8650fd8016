"""
Message Service for Gigboard Service.
Handles the per-event thread: messages, announcements, replies and polls.
Only the organizer and approved participants may post or vote.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.logging import log_mutation, log_rejected
from ..db.database import transaction
from ..models import (
    Event, Message, MessageType, Participant, NotificationType, DELETED_MESSAGE_PLACEHOLDER,
    utcnow, ensure_utc
)
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

MESSAGE_TYPES = [message_type.value for message_type in MessageType]
# Recent messages from others count as unread.
UNREAD_WINDOW = timedelta(hours=24)


def validate_poll_options(poll_options: Optional[List[str]]) -> List[str]:
    """
    Normalize poll options.

    Raises:
        ValidationError: If fewer than two distinct non-blank options are given
    """
    options = [option.strip() for option in (poll_options or []) if option and option.strip()]
    errors = []
    if len(options) < 2:
        errors.append("A poll needs at least two options")
    if len(set(options)) != len(options):
        errors.append("Poll options must be unique")
    if errors:
        raise ValidationError(errors)
    return options


class MessageService:
    """
    Service for event messaging.
    """

    def __init__(self, session: Session, policy: Optional[Dict[str, Any]] = None):
        self.session = session
        self.policy = policy or {}
        self.notifications = NotificationService(session)

    @property
    def edit_window(self) -> timedelta:
        return timedelta(hours=int(self.policy.get("message_edit_window_hours", 24)))

    def _get_event(self, event_id: int) -> Event:
        event = self.session.get(Event, event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    def _get_message(self, message_id: int, for_update: bool = False) -> Message:
        query = self.session.query(Message).filter(Message.id == message_id)
        if for_update:
            query = query.with_for_update()
        message = query.first()
        if message is None:
            raise NotFoundError("Message", message_id)
        return message

    def membership(self, event: Event, user_id: int) -> Tuple[bool, bool]:
        """
        Returns:
            (is_organizer, is_participant) for the user in this event
        """
        is_organizer = event.organizer_id == user_id
        is_participant = (
            self.session.query(Participant.id)
            .filter(Participant.event_id == event.id, Participant.user_id == user_id)
            .first()
            is not None
        )
        return is_organizer, is_participant

    def send_message(
        self,
        event_id: int,
        sender_id: int,
        content: str,
        message_type: str = MessageType.TEXT.value,
        is_announcement: bool = False,
        reply_to: Optional[int] = None,
        poll_options: Optional[List[str]] = None,
        attachments: Optional[List[str]] = None,
        latitude: Optional[str] = None,
        longitude: Optional[str] = None
    ) -> Message:
        """
        Post a message to an event thread.
        is_announcement is quietly dropped for anyone but the organizer.

        Raises:
            NotFoundError: If the event does not exist
            AuthorizationError: If the sender is not organizer or participant,
                or a non-organizer sends an announcement-typed message
            ValidationError: If the payload does not fit the message type
        """
        message_type = getattr(message_type, "value", message_type)

        with transaction(self.session):
            event = self._get_event(event_id)
            is_organizer, is_participant = self.membership(event, sender_id)
            if not is_organizer and not is_participant:
                log_rejected("message.sent", "not a member", actor_id=sender_id)
                raise AuthorizationError("You are not authorized to send messages in this event")

            if message_type not in MESSAGE_TYPES:
                raise ValidationError(f"Message type must be one of {', '.join(MESSAGE_TYPES)}")
            if message_type == MessageType.ANNOUNCEMENT.value and not is_organizer:
                raise AuthorizationError("Only the organizer can send announcements")

            attachments = list(attachments or [])
            errors = []
            if not (content and content.strip()) and not (message_type == MessageType.IMAGE.value and attachments):
                errors.append("Message content is required")
            if message_type != MessageType.POLL.value and poll_options:
                errors.append("Only poll messages can carry poll options")
            if errors:
                raise ValidationError(errors)

            options = None
            votes = None
            if message_type == MessageType.POLL.value:
                options = validate_poll_options(poll_options)
                votes = {option: [] for option in options}

            if reply_to is not None:
                original = self.session.get(Message, reply_to)
                if original is None or original.event_id != event_id:
                    raise ValidationError("Replies must reference a message in the same event")

            message = Message(
                event_id=event_id,
                sender_id=sender_id,
                content=(content or "").strip(),
                message_type=message_type,
                is_announcement=is_organizer and (
                    bool(is_announcement) or message_type == MessageType.ANNOUNCEMENT.value
                ),
                attachments=attachments,
                reply_to=reply_to,
                latitude=latitude,
                longitude=longitude,
                poll_options=options,
                poll_votes=votes,
                sent_at=utcnow(),
                is_deleted=False
            )
            self.session.add(message)
            self.session.flush()

            if message.is_announcement:
                self._notify_participants(event, message)

        log_mutation("message.sent", message.id, actor_id=sender_id, extra={"event_id": event_id})
        return message

    def _notify_participants(self, event: Event, message: Message):
        recipients = (
            self.session.query(Participant.user_id)
            .filter(Participant.event_id == event.id)
            .all()
        )
        for (user_id,) in recipients:
            self.notifications.notify(
                user_id,
                NotificationType.NEW_MESSAGE,
                "New announcement",
                f"The organizer of '{event.title}' posted an announcement",
                related_event_id=event.id,
                related_user_id=message.sender_id
            )

    def vote_in_poll(self, message_id: int, user_id: int, option: str) -> Message:
        """
        Cast or replace a user's vote. A user sits in at most one option.

        Raises:
            NotFoundError: If the message does not exist
            ValidationError: If the message is not an open poll or the option is unknown
            AuthorizationError: If the voter is not organizer or participant
        """
        with transaction(self.session):
            message = self._get_message(message_id, for_update=True)
            if not message.is_poll or not message.poll_votes or message.is_deleted:
                raise ValidationError("Invalid poll message")

            event = self._get_event(message.event_id)
            is_organizer, is_participant = self.membership(event, user_id)
            if not is_organizer and not is_participant:
                log_rejected("poll.voted", "not a member", actor_id=user_id)
                raise AuthorizationError("You are not authorized to vote in this poll")

            if option not in (message.poll_options or []):
                raise ValidationError(f"'{option}' is not an option in this poll")

            votes = {
                choice: [voter for voter in voters if voter != user_id]
                for choice, voters in message.poll_votes.items()
            }
            votes.setdefault(option, []).append(user_id)
            message.poll_votes = votes

        log_mutation("poll.voted", message_id, actor_id=user_id, extra={"option": option})
        return message

    def edit_message(self, message_id: int, user_id: int, content: str,
                     now: Optional[datetime] = None) -> Message:
        """
        Edit a message's content within the edit window.

        Raises:
            NotFoundError, AuthorizationError, ValidationError
        """
        now = ensure_utc(now) or utcnow()
        with transaction(self.session):
            message = self._get_message(message_id, for_update=True)
            if message.sender_id != user_id:
                raise AuthorizationError("You can only edit your own messages")
            if message.is_deleted:
                raise ValidationError("Deleted messages cannot be edited")
            if now - ensure_utc(message.sent_at) > self.edit_window:
                raise ValidationError(
                    f"Cannot edit messages older than {int(self.edit_window.total_seconds() // 3600)} hours"
                )
            if not content or not content.strip():
                raise ValidationError("Message content is required")

            message.content = content.strip()
            message.edited_at = now

        log_mutation("message.edited", message_id, actor_id=user_id)
        return message

    def delete_message(self, message_id: int, user_id: int) -> Message:
        """
        Tombstone a message. Allowed for its sender and the event organizer.

        Raises:
            NotFoundError, AuthorizationError
        """
        with transaction(self.session):
            message = self._get_message(message_id, for_update=True)
            event = self.session.get(Event, message.event_id)
            can_delete = message.sender_id == user_id or (
                event is not None and event.organizer_id == user_id
            )
            if not can_delete:
                raise AuthorizationError("You are not authorized to delete this message")

            message.is_deleted = True
            message.content = DELETED_MESSAGE_PLACEHOLDER

        log_mutation("message.deleted", message_id, actor_id=user_id)
        return message

    def _ensure_reader(self, event_id: int, viewer_id: Optional[int]) -> Event:
        event = self._get_event(event_id)
        if viewer_id is not None and not any(self.membership(event, viewer_id)):
            raise AuthorizationError("You are not a member of this event")
        return event

    def get_event_messages(self, event_id: int, limit: int = 50,
                           viewer_id: Optional[int] = None) -> List[Message]:
        """Latest non-deleted messages, returned oldest first."""
        self._ensure_reader(event_id, viewer_id)
        messages = (
            self.session.query(Message)
            .filter(Message.event_id == event_id, Message.is_deleted.is_(False))
            .order_by(Message.sent_at.desc(), Message.id.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(messages))

    def get_event_announcements(self, event_id: int, limit: int = 10,
                                viewer_id: Optional[int] = None) -> List[Message]:
        self._ensure_reader(event_id, viewer_id)
        return (
            self.session.query(Message)
            .filter(
                Message.event_id == event_id,
                Message.is_announcement.is_(True),
                Message.is_deleted.is_(False)
            )
            .order_by(Message.sent_at.desc(), Message.id.desc())
            .limit(limit)
            .all()
        )

    def get_unread_count(self, user_id: int, now: Optional[datetime] = None) -> int:
        """
        Count messages from other members posted in the last 24 hours across
        every event the user organizes or has joined. Deleted messages are skipped.
        """
        since = (ensure_utc(now) or utcnow()) - UNREAD_WINDOW
        joined = select(Participant.event_id).where(Participant.user_id == user_id)
        organized = select(Event.id).where(Event.organizer_id == user_id)
        return (
            self.session.query(func.count(Message.id))
            .filter(
                or_(Message.event_id.in_(joined), Message.event_id.in_(organized)),
                Message.sender_id != user_id,
                Message.is_deleted.is_(False),
                Message.sent_at > since
            )
            .scalar()
        )
