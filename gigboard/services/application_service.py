"""
Application Service for Gigboard Service.
Implements the pending -> {approved, rejected} workflow and the participant
roster it materializes.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import (
    AuthorizationError, CapacityExceededError, ConflictError, NotFoundError, ValidationError
)
from ..core.logging import log_mutation, log_rejected
from ..db.database import transaction
from ..models import (
    Application, ApplicationStatus, Event, EventStatus, Participant, PaymentStatus,
    User, NotificationType, utcnow
)
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

RESPONSE_STATUSES = (ApplicationStatus.APPROVED.value, ApplicationStatus.REJECTED.value)


class ApplicationService:
    """
    Service for applications and participants.
    Counter increments run as single UPDATE statements inside the same
    transaction as the row they count.
    """

    def __init__(self, session: Session, policy: Optional[Dict[str, Any]] = None):
        self.session = session
        self.policy = policy or {}
        self.notifications = NotificationService(session)

    @property
    def allow_over_capacity(self) -> bool:
        return bool(self.policy.get("allow_over_capacity", False))

    def get_application(self, application_id: int) -> Application:
        application = self.session.get(Application, application_id)
        if application is None:
            raise NotFoundError("Application", application_id)
        return application

    def apply_to_event(self, event_id: int, user_id: int, message: Optional[str] = None) -> Application:
        """
        Apply to work an event.

        Returns:
            The pending application

        Raises:
            NotFoundError: If the event or user does not exist
            ValidationError: If the organizer applies to their own event
            ConflictError: If the event is closed or the user already applied
        """
        with transaction(self.session):
            event = self.session.get(Event, event_id)
            if event is None:
                raise NotFoundError("Event", event_id)
            if self.session.get(User, user_id) is None:
                raise NotFoundError("User", user_id)
            if event.organizer_id == user_id:
                raise ValidationError("Organizers cannot apply to their own event")
            if event.status != EventStatus.PUBLISHED.value:
                raise ConflictError("This event is not accepting applications")

            existing = (
                self.session.query(Application)
                .filter(Application.event_id == event_id, Application.user_id == user_id)
                .first()
            )
            if existing is not None:
                log_rejected("application.created", "duplicate application", actor_id=user_id)
                raise ConflictError("You have already applied to this event")

            application = Application(
                event_id=event_id,
                user_id=user_id,
                status=ApplicationStatus.PENDING.value,
                applied_at=utcnow(),
                message=message
            )
            self.session.add(application)
            try:
                self.session.flush()
            except IntegrityError as e:
                raise ConflictError("You have already applied to this event") from e

            self.session.execute(
                update(Event)
                .where(Event.id == event_id)
                .values(applied_count=Event.applied_count + 1)
            )

            self.notifications.notify(
                event.organizer_id,
                NotificationType.APPLICATION_RECEIVED,
                "New application",
                f"Someone applied to '{event.title}'",
                related_event_id=event_id,
                related_user_id=user_id
            )

        log_mutation("application.created", application.id, actor_id=user_id, extra={"event_id": event_id})
        return application

    def respond_to_application(
        self,
        application_id: int,
        status: str,
        organizer_notes: Optional[str] = None,
        responder_id: Optional[int] = None,
        role: Optional[str] = None
    ) -> Application:
        """
        Approve or reject a pending application.
        Approval inserts the participant, with the optional roster role, and
        bumps approved_count; unless over-capacity approval is enabled, a full
        event refuses it.

        Raises:
            ValidationError: If status is not approved/rejected
            NotFoundError: If the application does not exist
            AuthorizationError: If the responder is not the organizer
            ConflictError: If already responded or the event is closed
            CapacityExceededError: If the event is full
        """
        status = getattr(status, "value", status)
        if status not in RESPONSE_STATUSES:
            raise ValidationError(f"Status must be one of {', '.join(RESPONSE_STATUSES)}")

        with transaction(self.session):
            application = self.get_application(application_id)
            event = self.session.get(Event, application.event_id)
            if event is None:
                raise NotFoundError("Event", application.event_id)
            if responder_id is not None and event.organizer_id != responder_id:
                log_rejected(f"application.{status}", "not the organizer", actor_id=responder_id)
                raise AuthorizationError("Only the event organizer can respond to applications")
            if event.is_terminal:
                raise ConflictError(f"Cannot respond to applications for an event that is {event.status}")

            now = utcnow()
            result = self.session.execute(
                update(Application)
                .where(
                    Application.id == application_id,
                    Application.status == ApplicationStatus.PENDING.value
                )
                .values(status=status, organizer_notes=organizer_notes, responded_at=now)
            )
            if result.rowcount != 1:
                raise ConflictError("This application has already been responded to")

            if status == ApplicationStatus.APPROVED.value:
                self._admit_participant(application, event, now, role)
                notification_type = NotificationType.APPLICATION_APPROVED
                text = f"You're in! Your application to '{event.title}' was approved"
            else:
                notification_type = NotificationType.APPLICATION_REJECTED
                text = f"Your application to '{event.title}' was not accepted"

            self.notifications.notify(
                application.user_id,
                notification_type,
                "Application update",
                text,
                related_event_id=event.id,
                related_user_id=event.organizer_id
            )

        log_mutation(f"application.{status}", application_id, actor_id=responder_id)
        return application

    def _admit_participant(self, application: Application, event: Event, now, role: Optional[str] = None) -> Participant:
        stmt = update(Event).where(Event.id == event.id)
        if not self.allow_over_capacity:
            stmt = stmt.where(Event.approved_count < Event.required_people)
        result = self.session.execute(stmt.values(approved_count=Event.approved_count + 1))
        if result.rowcount != 1:
            log_rejected("application.approved", "event full")
            raise CapacityExceededError(
                f"Event already has {event.required_people} approved participants"
            )

        participant = Participant(
            event_id=event.id,
            user_id=application.user_id,
            application_id=application.id,
            joined_at=now,
            role=role.strip() if role and role.strip() else None,
            payment_amount=event.payment_per_person,
            payment_status=PaymentStatus.PENDING.value,
            attendance_confirmed=False
        )
        self.session.add(participant)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConflictError("User is already a participant of this event") from e
        return participant

    def list_event_applications(
        self,
        event_id: int,
        actor_id: Optional[int] = None,
        status: Optional[str] = None
    ) -> List[Application]:
        """Applications for an event; only the organizer may list them."""
        event = self.session.get(Event, event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        if actor_id is not None and event.organizer_id != actor_id:
            raise AuthorizationError("Only the event organizer can view applications")

        query = self.session.query(Application).filter(Application.event_id == event_id)
        if status:
            query = query.filter(Application.status == getattr(status, "value", status))
        return query.order_by(Application.applied_at, Application.id).all()

    def get_user_applications(self, user_id: int) -> List[Application]:
        return (
            self.session.query(Application)
            .filter(Application.user_id == user_id)
            .order_by(Application.applied_at.desc(), Application.id.desc())
            .all()
        )

    def get_participants(self, event_id: int) -> List[Participant]:
        return (
            self.session.query(Participant)
            .filter(Participant.event_id == event_id)
            .order_by(Participant.joined_at, Participant.id)
            .all()
        )

    def is_participant(self, event_id: int, user_id: int) -> bool:
        return (
            self.session.query(Participant.id)
            .filter(Participant.event_id == event_id, Participant.user_id == user_id)
            .first()
            is not None
        )
