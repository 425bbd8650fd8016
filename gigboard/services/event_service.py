"""
Event Service for Gigboard Service.
Handles event publication and the event lifecycle:
published -> in_progress -> completed, or -> cancelled from any non-terminal state.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple
from sqlalchemy import update
from sqlalchemy.orm import Session

from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..core.logging import log_mutation, log_rejected
from ..db.database import transaction
from ..models import (
    Event, EventStatus, Participant, PaymentStatus, User, NotificationType,
    utcnow, ensure_utc
)
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

# Payments still held for participants; these move on completion or cancellation.
OPEN_PAYMENT_STATUSES = [PaymentStatus.PENDING.value, PaymentStatus.LOCKED.value]
SEARCH_LIMIT = 20


def validate_event_details(
    title: Optional[str],
    description: Optional[str],
    location: Optional[str],
    category: Optional[str],
    date_time: Optional[datetime],
    required_people,
    payment_per_person,
    end_date_time: Optional[datetime] = None,
    now: Optional[datetime] = None
) -> List[str]:
    """
    Check every event field and collect all violations.

    Returns:
        List of human-readable errors, empty when the details are valid
    """
    now = ensure_utc(now) or utcnow()
    errors = []

    if not title or not title.strip():
        errors.append("Event title is required")
    if not description or not description.strip():
        errors.append("Event description is required")
    if not location or not location.strip():
        errors.append("Location is required")
    if not category or not category.strip():
        errors.append("Category is required")

    try:
        if required_people is None or int(required_people) != required_people or int(required_people) < 1:
            errors.append("Number of required people must be at least 1")
    except (TypeError, ValueError):
        errors.append("Number of required people must be at least 1")

    try:
        if payment_per_person is None or Decimal(str(payment_per_person)) < 0:
            errors.append("Payment amount must be 0 or greater")
    except (InvalidOperation, ValueError):
        errors.append("Payment amount must be 0 or greater")

    start = ensure_utc(date_time)
    if start is None:
        errors.append("Event date is required")
    elif start <= now:
        errors.append("Event date must be in the future")

    end = ensure_utc(end_date_time)
    if start is not None and end is not None and end <= start:
        errors.append("Event end time must be after the start time")

    return errors


class EventService:
    """
    Service for the event entity store and its lifecycle.
    """

    def __init__(self, session: Session):
        self.session = session
        self.notifications = NotificationService(session)

    def get_event(self, event_id: int) -> Event:
        event = self.session.get(Event, event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    def _get_event_for_update(self, event_id: int) -> Event:
        event = (
            self.session.query(Event)
            .filter(Event.id == event_id)
            .with_for_update()
            .first()
        )
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    def _ensure_organizer(self, event: Event, actor_id: Optional[int], action: str):
        if actor_id is not None and event.organizer_id != actor_id:
            log_rejected(action, "not the organizer", actor_id=actor_id)
            raise AuthorizationError("Only the event organizer can do this")

    def create_event(
        self,
        organizer_id: int,
        title: str,
        description: str,
        location: str,
        category: str,
        date_time: Optional[datetime],
        required_people: Optional[int],
        payment_per_person,
        payment_details: Optional[str] = None,
        skills: Optional[List[str]] = None,
        end_date_time: Optional[datetime] = None,
        extra_notes: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        images: Optional[List[str]] = None,
        now: Optional[datetime] = None
    ) -> Event:
        """
        Publish a new event.

        Returns:
            The created event, status published, counters at zero

        Raises:
            ValidationError: Listing every violated constraint
            NotFoundError: If the organizer does not exist
        """
        errors = validate_event_details(
            title, description, location, category, date_time,
            required_people, payment_per_person, end_date_time, now
        )
        if errors:
            log_rejected("event.created", "; ".join(errors), actor_id=organizer_id)
            raise ValidationError(errors)

        payment = Decimal(str(payment_per_person))
        if not payment_details or not payment_details.strip():
            payment_details = f"₹{payment_per_person} per person"

        with transaction(self.session):
            if self.session.get(User, organizer_id) is None:
                raise NotFoundError("User", organizer_id)

            event = Event(
                organizer_id=organizer_id,
                title=title.strip(),
                description=description.strip(),
                location=location.strip(),
                category=category.strip(),
                latitude=latitude,
                longitude=longitude,
                date_time=ensure_utc(date_time),
                end_date_time=ensure_utc(end_date_time),
                required_people=int(required_people),
                applied_count=0,
                approved_count=0,
                payment_per_person=payment,
                payment_details=payment_details.strip(),
                skills=list(skills or []),
                images=list(images or []),
                extra_notes=extra_notes.strip() if extra_notes else None,
                status=EventStatus.PUBLISHED.value,
                is_highlighted=False
            )
            self.session.add(event)
            self.session.flush()

        log_mutation("event.created", event.id, actor_id=organizer_id)
        return event

    def get_feed(self, category: Optional[str] = None, limit: Optional[int] = None) -> List[Event]:
        """
        Published events, highlighted first, then latest date first.
        """
        query = self.session.query(Event).filter(Event.status == EventStatus.PUBLISHED.value)
        if category:
            query = query.filter(Event.category == category)
        events = query.all()
        events.sort(key=lambda e: ensure_utc(e.date_time), reverse=True)
        events.sort(key=lambda e: not e.is_highlight_active)
        return events[:limit] if limit else events

    def search_events(self, term: str, category: Optional[str] = None, limit: int = SEARCH_LIMIT) -> List[Event]:
        """
        Published events whose title contains `term`, ignoring case.
        A blank term matches nothing.
        """
        term = (term or "").strip()
        if not term:
            return []
        pattern = "%" + term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "%"
        query = (
            self.session.query(Event)
            .filter(
                Event.status == EventStatus.PUBLISHED.value,
                Event.title.ilike(pattern, escape="\\")
            )
        )
        if category:
            query = query.filter(Event.category == category)
        return query.order_by(Event.date_time.desc(), Event.id.desc()).limit(limit).all()

    def get_organizer_events(self, organizer_id: int) -> List[Event]:
        return (
            self.session.query(Event)
            .filter(Event.organizer_id == organizer_id)
            .order_by(Event.created_at.desc(), Event.id.desc())
            .all()
        )

    def start_event(self, event_id: int, actor_id: Optional[int] = None) -> Event:
        """
        Move a published event to in_progress.

        Raises:
            NotFoundError, AuthorizationError, ConflictError
        """
        with transaction(self.session):
            event = self._get_event_for_update(event_id)
            self._ensure_organizer(event, actor_id, "event.started")
            if event.status != EventStatus.PUBLISHED.value:
                raise ConflictError(f"Cannot start an event that is {event.status}")
            event.status = EventStatus.IN_PROGRESS.value

        log_mutation("event.started", event_id, actor_id=actor_id)
        return event

    def complete_event(self, event_id: int, actor_id: Optional[int] = None) -> Tuple[Event, bool]:
        """
        Complete an event and release every participant's payment.
        Completing an already completed event is a no-op.

        Returns:
            The event, and whether this call moved it to completed

        Raises:
            NotFoundError: If the event does not exist
            AuthorizationError: If the actor is not the organizer
            ConflictError: If the event is draft or cancelled
        """
        with transaction(self.session):
            event = self._get_event_for_update(event_id)
            self._ensure_organizer(event, actor_id, "event.completed")

            if event.status == EventStatus.COMPLETED.value:
                logger.info(f"Event {event_id} already completed, nothing to do")
                return event, False
            if event.status not in (EventStatus.PUBLISHED.value, EventStatus.IN_PROGRESS.value):
                raise ConflictError(f"Cannot complete an event that is {event.status}")

            event.status = EventStatus.COMPLETED.value

            participants = (
                self.session.query(Participant)
                .filter(Participant.event_id == event_id)
                .all()
            )
            released = 0
            for participant in participants:
                if participant.payment_status in OPEN_PAYMENT_STATUSES:
                    participant.payment_status = PaymentStatus.RELEASED.value
                    released += 1
                    self.notifications.notify(
                        participant.user_id,
                        NotificationType.PAYMENT_RECEIVED,
                        "Payment released",
                        f"Your payment of {participant.payment_amount} for '{event.title}' has been released",
                        related_event_id=event_id,
                        related_user_id=event.organizer_id
                    )

            attendee_ids = [participant.user_id for participant in participants]
            if attendee_ids:
                self.session.execute(
                    update(User)
                    .where(User.id.in_(attendee_ids))
                    .values(events_attended=User.events_attended + 1)
                )
            self.session.execute(
                update(User)
                .where(User.id == event.organizer_id)
                .values(events_organized=User.events_organized + 1)
            )

        log_mutation("event.completed", event_id, actor_id=actor_id, extra={"payments_released": released})
        return event, True

    def cancel_event(self, event_id: int, actor_id: Optional[int] = None) -> Event:
        """
        Cancel a non-terminal event and refund held payments.

        Raises:
            NotFoundError, AuthorizationError, ConflictError
        """
        with transaction(self.session):
            event = self._get_event_for_update(event_id)
            self._ensure_organizer(event, actor_id, "event.cancelled")
            if event.is_terminal:
                raise ConflictError(f"Cannot cancel an event that is {event.status}")

            event.status = EventStatus.CANCELLED.value
            refunded = self.session.execute(
                update(Participant)
                .where(
                    Participant.event_id == event_id,
                    Participant.payment_status.in_(OPEN_PAYMENT_STATUSES)
                )
                .values(payment_status=PaymentStatus.REFUNDED.value)
            ).rowcount

        log_mutation("event.cancelled", event_id, actor_id=actor_id, extra={"payments_refunded": refunded})
        return event

    def highlight_event(self, event_id: int, actor_id: int, duration_hours: Optional[int] = None) -> Event:
        """
        Boost an event in the feed. Requires an active premium organizer.

        Raises:
            NotFoundError, AuthorizationError, ConflictError, ValidationError
        """
        if duration_hours is not None and duration_hours <= 0:
            raise ValidationError("Highlight duration must be positive")

        with transaction(self.session):
            event = self._get_event_for_update(event_id)
            self._ensure_organizer(event, actor_id, "event.highlighted")
            if event.is_terminal:
                raise ConflictError(f"Cannot highlight an event that is {event.status}")
            if not event.organizer.has_active_premium:
                log_rejected("event.highlighted", "premium required", actor_id=actor_id)
                raise AuthorizationError("Highlighting events requires a premium account")

            event.is_highlighted = True
            event.highlight_expires_at = (
                utcnow() + timedelta(hours=duration_hours) if duration_hours else None
            )

        log_mutation("event.highlighted", event_id, actor_id=actor_id)
        return event
