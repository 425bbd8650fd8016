"""
Application endpoints for Gigboard Service.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from ...schemas.event import (
    ApplicationCreate, ApplicationRespond, ApplicationResponse, ParticipantResponse
)
from ...services.application_service import ApplicationService
from ...services.event_publisher import DomainEventPublisher
from ..dependencies import get_application_service, get_current_user_id, get_event_publisher

router = APIRouter(tags=["Applications"])


@router.post(
    "/events/{event_id}/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED
)
async def apply_to_event(
    event_id: int,
    application_data: ApplicationCreate,
    user_id: int = Depends(get_current_user_id),
    application_service: ApplicationService = Depends(get_application_service),
    publisher: DomainEventPublisher = Depends(get_event_publisher)
):
    """
    Apply to work an event. The organizer is notified.
    """
    application = application_service.apply_to_event(event_id, user_id, message=application_data.message)
    await publisher.publish_application(application)
    return application


@router.get("/events/{event_id}/applications", response_model=List[ApplicationResponse])
async def list_applications(
    event_id: int,
    status_filter: Optional[str] = Query(None, alias="status"),
    actor_id: int = Depends(get_current_user_id),
    application_service: ApplicationService = Depends(get_application_service)
):
    return application_service.list_event_applications(event_id, actor_id=actor_id, status=status_filter)


@router.get("/events/{event_id}/participants", response_model=List[ParticipantResponse])
async def list_participants(
    event_id: int,
    application_service: ApplicationService = Depends(get_application_service)
):
    return application_service.get_participants(event_id)


@router.post("/applications/{application_id}/respond", response_model=ApplicationResponse)
async def respond_to_application(
    application_id: int,
    decision: ApplicationRespond,
    responder_id: int = Depends(get_current_user_id),
    application_service: ApplicationService = Depends(get_application_service),
    publisher: DomainEventPublisher = Depends(get_event_publisher)
):
    """
    Approve or reject a pending application.
    Approval adds the applicant to the roster and holds their payment.
    """
    application = application_service.respond_to_application(
        application_id,
        decision.status.value,
        organizer_notes=decision.organizer_notes,
        responder_id=responder_id,
        role=decision.role
    )
    await publisher.publish_application(application)
    return application
