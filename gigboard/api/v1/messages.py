"""
Messaging endpoints for Gigboard Service.
Event threads, announcements and polls. Members only.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List

from ...schemas.common import IdResponse
from ...schemas.message import MessageCreate, MessageEdit, MessageResponse, PollVote
from ...services.event_publisher import DomainEventPublisher
from ...services.message_service import MessageService
from ..dependencies import get_current_user_id, get_event_publisher, get_message_service

router = APIRouter(tags=["Messages"])


@router.post(
    "/events/{event_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED
)
async def send_message(
    event_id: int,
    message_data: MessageCreate,
    sender_id: int = Depends(get_current_user_id),
    message_service: MessageService = Depends(get_message_service),
    publisher: DomainEventPublisher = Depends(get_event_publisher)
):
    """
    Post to the event thread.
    """
    message = message_service.send_message(
        event_id=event_id,
        sender_id=sender_id,
        content=message_data.content,
        message_type=message_data.message_type,
        is_announcement=getattr(message_data, "is_announcement", False),
        reply_to=message_data.reply_to,
        poll_options=getattr(message_data, "poll_options", None),
        attachments=getattr(message_data, "attachments", None),
        latitude=getattr(message_data, "latitude", None),
        longitude=getattr(message_data, "longitude", None)
    )
    await publisher.publish_message_sent(message)
    return message


@router.get("/events/{event_id}/messages", response_model=List[MessageResponse])
async def get_messages(
    event_id: int,
    limit: int = Query(50, ge=1, le=200),
    viewer_id: int = Depends(get_current_user_id),
    message_service: MessageService = Depends(get_message_service)
):
    return message_service.get_event_messages(event_id, limit=limit, viewer_id=viewer_id)


@router.get("/events/{event_id}/announcements", response_model=List[MessageResponse])
async def get_announcements(
    event_id: int,
    limit: int = Query(10, ge=1, le=100),
    viewer_id: int = Depends(get_current_user_id),
    message_service: MessageService = Depends(get_message_service)
):
    return message_service.get_event_announcements(event_id, limit=limit, viewer_id=viewer_id)


@router.post("/messages/{message_id}/vote", response_model=MessageResponse)
async def vote_in_poll(
    message_id: int,
    vote: PollVote,
    user_id: int = Depends(get_current_user_id),
    message_service: MessageService = Depends(get_message_service)
):
    """Cast a vote; voting again moves the vote to the new option."""
    return message_service.vote_in_poll(message_id, user_id, vote.option)


@router.patch("/messages/{message_id}", response_model=MessageResponse)
async def edit_message(
    message_id: int,
    edit: MessageEdit,
    user_id: int = Depends(get_current_user_id),
    message_service: MessageService = Depends(get_message_service)
):
    return message_service.edit_message(message_id, user_id, edit.content)


@router.delete("/messages/{message_id}", response_model=IdResponse)
async def delete_message(
    message_id: int,
    user_id: int = Depends(get_current_user_id),
    message_service: MessageService = Depends(get_message_service)
):
    message_service.delete_message(message_id, user_id)
    return IdResponse(id=message_id, message="Message deleted")
