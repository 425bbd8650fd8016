"""
Event endpoints for Gigboard Service.
Publishing, the public feed, lifecycle transitions and ratings.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from ...schemas.event import (
    EventCreate, EventDetailResponse, EventHighlight, EventResponse, RatingCreate
)
from ...schemas.user import RatingResponse
from ...services.event_publisher import DomainEventPublisher
from ...services.event_service import EventService
from ...services.rating_service import RatingService
from ..dependencies import (
    get_current_user_id, get_event_publisher, get_event_service, get_rating_service
)

router = APIRouter(prefix="/events", tags=["Events"])


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    organizer_id: int = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
    publisher: DomainEventPublisher = Depends(get_event_publisher)
):
    """
    Publish a new event. The caller becomes its organizer.

    Returns:
        The created event with zeroed counters
    """
    event = event_service.create_event(organizer_id=organizer_id, **event_data.model_dump())
    await publisher.publish_event_created(event)
    return event


@router.get("", response_model=List[EventResponse])
async def list_events(
    category: Optional[str] = Query(None, description="Filter by category"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    event_service: EventService = Depends(get_event_service)
):
    """
    Public feed of published events, highlighted ones first.
    """
    return event_service.get_feed(category=category, limit=limit)


@router.get("/search", response_model=List[EventResponse])
async def search_events(
    q: str = Query(..., min_length=1, description="Text to find in event titles"),
    category: Optional[str] = Query(None),
    event_service: EventService = Depends(get_event_service)
):
    return event_service.search_events(q, category=category)


@router.get("/mine", response_model=List[EventResponse])
async def my_events(
    organizer_id: int = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service)
):
    return event_service.get_organizer_events(organizer_id)


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(
    event_id: int,
    event_service: EventService = Depends(get_event_service)
):
    """Event detail with its participant roster."""
    return event_service.get_event(event_id)


@router.post("/{event_id}/start", response_model=EventResponse)
async def start_event(
    event_id: int,
    actor_id: int = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
    publisher: DomainEventPublisher = Depends(get_event_publisher)
):
    event = event_service.start_event(event_id, actor_id=actor_id)
    await publisher.publish_event_status_changed(event)
    return event


@router.post("/{event_id}/complete", response_model=EventResponse)
async def complete_event(
    event_id: int,
    actor_id: int = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
    publisher: DomainEventPublisher = Depends(get_event_publisher)
):
    """
    Complete the event and release every participant's payment.
    Repeating the call returns the completed event unchanged.
    """
    event, transitioned = event_service.complete_event(event_id, actor_id=actor_id)
    if transitioned:
        await publisher.publish_event_status_changed(event)
    return event


@router.post("/{event_id}/cancel", response_model=EventResponse)
async def cancel_event(
    event_id: int,
    actor_id: int = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
    publisher: DomainEventPublisher = Depends(get_event_publisher)
):
    event = event_service.cancel_event(event_id, actor_id=actor_id)
    await publisher.publish_event_status_changed(event)
    return event


@router.post("/{event_id}/highlight", response_model=EventResponse)
async def highlight_event(
    event_id: int,
    highlight: EventHighlight,
    actor_id: int = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service)
):
    return event_service.highlight_event(event_id, actor_id, duration_hours=highlight.duration_hours)


@router.post("/{event_id}/ratings", response_model=RatingResponse, status_code=status.HTTP_201_CREATED)
async def rate_user(
    event_id: int,
    rating_data: RatingCreate,
    rater_id: int = Depends(get_current_user_id),
    rating_service: RatingService = Depends(get_rating_service),
    publisher: DomainEventPublisher = Depends(get_event_publisher)
):
    """
    Rate another user for this event and fold it into their aggregate.
    """
    rating = rating_service.rate_user(
        event_id=event_id,
        rater_id=rater_id,
        rated_user_id=rating_data.rated_user_id,
        rating=rating_data.rating,
        rating_type=rating_data.rating_type.value,
        review=rating_data.review
    )
    await publisher.publish_rating_created(rating)
    return rating
