"""
User endpoints for Gigboard Service.
Profiles, search, and the caller's applications, notifications and unread messages.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from ...schemas.common import IdResponse
from ...schemas.event import UserApplicationResponse
from ...schemas.message import UnreadCountResponse
from ...schemas.user import (
    NotificationResponse, RatingResponse, UserCreate, UserProfileResponse, UserResponse,
    UserTypeEnum, UserUpdate
)
from ...services.application_service import ApplicationService
from ...services.message_service import MessageService
from ...services.notification_service import NotificationService
from ...services.user_service import UserService
from ..dependencies import (
    get_application_service, get_current_user_id, get_message_service, get_notification_service,
    get_user_service
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    user_service: UserService = Depends(get_user_service)
):
    """
    Register a user, or refresh the profile of an existing email.
    """
    return user_service.register_user(
        name=user_data.name,
        email=user_data.email,
        phone=user_data.phone,
        user_type=user_data.user_type.value,
        skills=user_data.skills,
        bio=user_data.bio,
        location=user_data.location,
        profile_image=user_data.profile_image
    )


@router.get("/top", response_model=List[UserResponse])
async def top_rated_users(
    user_type: Optional[UserTypeEnum] = Query(None),
    limit: int = Query(10, ge=1, le=50),
    user_service: UserService = Depends(get_user_service)
):
    return user_service.get_top_rated_users(
        user_type=user_type.value if user_type else None, limit=limit
    )


@router.get("/search", response_model=List[UserResponse])
async def search_users(
    q: str = Query(..., min_length=1, description="Name, skill or location"),
    user_type: Optional[UserTypeEnum] = Query(None),
    user_service: UserService = Depends(get_user_service)
):
    return user_service.search_users(q, user_type=user_type.value if user_type else None)


@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    updates: UserUpdate,
    user_id: int = Depends(get_current_user_id),
    user_service: UserService = Depends(get_user_service)
):
    return user_service.update_profile(user_id, updates.model_dump(exclude_unset=True))


@router.get("/me/applications", response_model=List[UserApplicationResponse])
async def my_applications(
    user_id: int = Depends(get_current_user_id),
    application_service: ApplicationService = Depends(get_application_service)
):
    """Applications the caller has made, newest first, with their events."""
    return application_service.get_user_applications(user_id)


@router.get("/me/notifications", response_model=List[NotificationResponse])
async def my_notifications(
    unread_only: bool = Query(False),
    user_id: int = Depends(get_current_user_id),
    notification_service: NotificationService = Depends(get_notification_service)
):
    return notification_service.list_notifications(user_id, unread_only=unread_only)


@router.post("/me/notifications/{notification_id}/read", response_model=IdResponse)
async def mark_notification_read(
    notification_id: int,
    user_id: int = Depends(get_current_user_id),
    notification_service: NotificationService = Depends(get_notification_service)
):
    notification_service.mark_read(notification_id, user_id)
    return IdResponse(id=notification_id, message="Notification marked as read")


@router.get("/me/unread-messages", response_model=UnreadCountResponse)
async def my_unread_messages(
    user_id: int = Depends(get_current_user_id),
    message_service: MessageService = Depends(get_message_service)
):
    """Messages from others in the caller's events over the last day."""
    return UnreadCountResponse(unread_count=message_service.get_unread_count(user_id))


@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_user_profile(
    user_id: int,
    user_service: UserService = Depends(get_user_service)
):
    """
    Public profile with the five most recent ratings.
    """
    user = user_service.get_user(user_id)
    profile = UserProfileResponse.model_validate(user)
    profile.recent_ratings = [
        RatingResponse.model_validate(rating) for rating in user_service.get_user_ratings(user_id)
    ]
    return profile
