"""
Tests for the application workflow and participant roster.
"""

import pytest

from gigboard.core.exceptions import (
    AuthorizationError, CapacityExceededError, ConflictError, NotFoundError, ValidationError
)
from gigboard.models import (
    ApplicationStatus, Notification, NotificationType, Participant, PaymentStatus
)
from gigboard.services.application_service import ApplicationService
from gigboard.services.event_service import EventService


class TestApplyToEvent:

    def test_apply_creates_pending_application(self, db_session, organizer, worker, make_event):
        event = make_event(organizer)
        application = ApplicationService(db_session).apply_to_event(
            event.id, worker.id, message="I have my own gear"
        )

        assert application.status == ApplicationStatus.PENDING.value
        assert application.message == "I have my own gear"
        assert application.responded_at is None
        assert event.applied_count == 1
        assert event.approved_count == 0

    def test_organizer_is_notified(self, db_session, organizer, worker, make_event):
        event = make_event(organizer)
        ApplicationService(db_session).apply_to_event(event.id, worker.id)

        notification = db_session.query(Notification).filter_by(user_id=organizer.id).one()
        assert notification.type == NotificationType.APPLICATION_RECEIVED.value
        assert notification.related_user_id == worker.id

    def test_duplicate_application_conflicts(self, db_session, organizer, worker, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer)
        service.apply_to_event(event.id, worker.id)

        with pytest.raises(ConflictError) as exc_info:
            service.apply_to_event(event.id, worker.id)

        assert str(exc_info.value) == "You have already applied to this event"
        assert event.applied_count == 1

    def test_organizer_cannot_apply_to_own_event(self, db_session, organizer, make_event):
        event = make_event(organizer)
        with pytest.raises(ValidationError):
            ApplicationService(db_session).apply_to_event(event.id, organizer.id)

    def test_cannot_apply_to_cancelled_event(self, db_session, organizer, worker, make_event):
        event = make_event(organizer)
        EventService(db_session).cancel_event(event.id, actor_id=organizer.id)

        with pytest.raises(ConflictError):
            ApplicationService(db_session).apply_to_event(event.id, worker.id)

    def test_unknown_event_and_user(self, db_session, organizer, worker, make_event):
        service = ApplicationService(db_session)
        with pytest.raises(NotFoundError):
            service.apply_to_event(999, worker.id)

        event = make_event(organizer)
        with pytest.raises(NotFoundError):
            service.apply_to_event(event.id, 999)


class TestRespondToApplication:

    def test_approval_creates_participant(self, db_session, organizer, worker, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer, payment_per_person=800)
        application = service.apply_to_event(event.id, worker.id)

        approved = service.respond_to_application(
            application.id, "approved", organizer_notes="See you at 9", responder_id=organizer.id
        )

        assert approved.status == ApplicationStatus.APPROVED.value
        assert approved.organizer_notes == "See you at 9"
        assert approved.responded_at is not None
        assert event.approved_count == 1

        participant = db_session.query(Participant).filter_by(event_id=event.id).one()
        assert participant.user_id == worker.id
        assert participant.application_id == application.id
        assert participant.payment_status == PaymentStatus.PENDING.value
        assert float(participant.payment_amount) == 800.0
        assert service.is_participant(event.id, worker.id) is True

        notification = (
            db_session.query(Notification)
            .filter_by(user_id=worker.id, type=NotificationType.APPLICATION_APPROVED.value)
            .one()
        )
        assert notification.related_event_id == event.id

    def test_approval_assigns_roster_role(self, db_session, organizer, worker, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer)
        application = service.apply_to_event(event.id, worker.id)

        service.respond_to_application(
            application.id, "approved", responder_id=organizer.id, role=" Lead photographer "
        )

        participant = service.get_participants(event.id)[0]
        assert participant.role == "Lead photographer"

    def test_rejection_creates_no_participant(self, db_session, organizer, worker, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer)
        application = service.apply_to_event(event.id, worker.id)

        rejected = service.respond_to_application(application.id, "rejected", responder_id=organizer.id)

        assert rejected.status == ApplicationStatus.REJECTED.value
        assert event.approved_count == 0
        assert service.get_participants(event.id) == []
        assert (
            db_session.query(Notification)
            .filter_by(user_id=worker.id, type=NotificationType.APPLICATION_REJECTED.value)
            .count()
        ) == 1

    def test_second_response_conflicts(self, db_session, organizer, worker, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer)
        application = service.apply_to_event(event.id, worker.id)
        service.respond_to_application(application.id, "approved", responder_id=organizer.id)

        with pytest.raises(ConflictError) as exc_info:
            service.respond_to_application(application.id, "rejected", responder_id=organizer.id)

        assert str(exc_info.value) == "This application has already been responded to"
        assert event.approved_count == 1
        assert len(service.get_participants(event.id)) == 1

    def test_invalid_status(self, db_session, organizer, worker, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer)
        application = service.apply_to_event(event.id, worker.id)

        with pytest.raises(ValidationError):
            service.respond_to_application(application.id, "pending", responder_id=organizer.id)

    def test_only_organizer_can_respond(self, db_session, organizer, worker, make_user, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer)
        application = service.apply_to_event(event.id, worker.id)
        stranger = make_user("Stranger")

        with pytest.raises(AuthorizationError):
            service.respond_to_application(application.id, "approved", responder_id=stranger.id)

        assert service.get_application(application.id).status == ApplicationStatus.PENDING.value

    def test_capacity_is_enforced(self, db_session, organizer, make_user, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer, required_people=1)
        first = service.apply_to_event(event.id, make_user("First").id)
        second = service.apply_to_event(event.id, make_user("Second").id)
        service.respond_to_application(first.id, "approved", responder_id=organizer.id)

        with pytest.raises(CapacityExceededError):
            service.respond_to_application(second.id, "approved", responder_id=organizer.id)

        assert event.approved_count == 1
        assert service.get_application(second.id).status == ApplicationStatus.PENDING.value
        assert len(service.get_participants(event.id)) == 1

    def test_over_capacity_policy(self, db_session, organizer, make_user, make_event):
        service = ApplicationService(db_session, policy={"allow_over_capacity": True})
        event = make_event(organizer, required_people=1)
        first = service.apply_to_event(event.id, make_user("First").id)
        second = service.apply_to_event(event.id, make_user("Second").id)

        service.respond_to_application(first.id, "approved", responder_id=organizer.id)
        service.respond_to_application(second.id, "approved", responder_id=organizer.id)

        assert event.approved_count == 2
        assert event.spots_left == 0

    def test_cannot_respond_on_cancelled_event(self, db_session, organizer, worker, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer)
        application = service.apply_to_event(event.id, worker.id)
        EventService(db_session).cancel_event(event.id, actor_id=organizer.id)

        with pytest.raises(ConflictError):
            service.respond_to_application(application.id, "approved", responder_id=organizer.id)

    def test_counters_stay_ordered(self, db_session, organizer, make_user, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer, required_people=3)
        applications = [service.apply_to_event(event.id, make_user().id) for _ in range(3)]
        service.respond_to_application(applications[0].id, "approved", responder_id=organizer.id)
        service.respond_to_application(applications[1].id, "rejected", responder_id=organizer.id)

        assert event.applied_count == 3
        assert event.approved_count == 1
        assert 0 <= event.approved_count <= event.applied_count


class TestApplicationQueries:

    def test_list_event_applications_for_organizer(self, db_session, organizer, make_user, make_event):
        service = ApplicationService(db_session)
        event = make_event(organizer)
        first = service.apply_to_event(event.id, make_user().id)
        second = service.apply_to_event(event.id, make_user().id)
        service.respond_to_application(first.id, "rejected", responder_id=organizer.id)

        everything = service.list_event_applications(event.id, actor_id=organizer.id)
        pending = service.list_event_applications(event.id, actor_id=organizer.id, status="pending")

        assert [application.id for application in everything] == [first.id, second.id]
        assert [application.id for application in pending] == [second.id]

    def test_list_event_applications_hidden_from_others(self, db_session, organizer, worker, make_event):
        event = make_event(organizer)
        with pytest.raises(AuthorizationError):
            ApplicationService(db_session).list_event_applications(event.id, actor_id=worker.id)

    def test_user_applications_newest_first(self, db_session, organizer, worker, make_event):
        service = ApplicationService(db_session)
        older = service.apply_to_event(make_event(organizer).id, worker.id)
        newer = service.apply_to_event(make_event(organizer).id, worker.id)

        assert [application.id for application in service.get_user_applications(worker.id)] == [
            newer.id, older.id
        ]
