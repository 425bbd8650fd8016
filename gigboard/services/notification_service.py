"""
Notification Service for Gigboard Service.
Writes in-app notifications inside the caller's transaction.
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..core.exceptions import AuthorizationError, NotFoundError
from ..db.database import transaction
from ..models import Notification, NotificationType

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Notification service backed by the notifications table.
    notify() only stages a row; the surrounding mutation commits it.
    """

    def __init__(self, session: Session):
        self.session = session

    def notify(
        self,
        user_id: int,
        notification_type: NotificationType,
        title: str,
        message: str,
        related_event_id: Optional[int] = None,
        related_user_id: Optional[int] = None
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=notification_type.value,
            title=title,
            message=message,
            related_event_id=related_event_id,
            related_user_id=related_user_id,
            is_read=False
        )
        self.session.add(notification)
        logger.debug(f"Queued {notification_type.value} notification for user {user_id}")
        return notification

    def list_notifications(self, user_id: int, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        query = self.session.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

    def mark_read(self, notification_id: int, user_id: int) -> Notification:
        """
        Mark a notification as read.

        Raises:
            NotFoundError: If the notification does not exist
            AuthorizationError: If it belongs to someone else
        """
        with transaction(self.session):
            notification = self.session.get(Notification, notification_id)
            if notification is None:
                raise NotFoundError("Notification", notification_id)
            if notification.user_id != user_id:
                raise AuthorizationError("You can only update your own notifications")
            notification.is_read = True
        return notification
