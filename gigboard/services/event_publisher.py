"""
Domain Event Publisher for Gigboard Service.
Publishes committed mutations to Redis for inter-service communication.
"""

import json
import logging
from typing import Any, Dict, Optional
from redis.asyncio import Redis

logger = logging.getLogger(__name__)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


class DomainEventPublisher:
    """
    Publishes domain events to Redis channels.
    Publishing never fails the caller; errors are logged.
    """

    def __init__(self, redis_client: Optional[Redis]):
        self.redis = redis_client
        self.channel_prefix = "gigboard"

    async def publish(self, entity: str, action: str, payload: Dict[str, Any]) -> bool:
        """
        Publish one domain event.

        Args:
            entity: Entity name, e.g. "events"
            action: Action name, e.g. "completed"
            payload: JSON-serializable event body

        Returns:
            True if the message was handed to Redis
        """
        if self.redis is None:
            logger.debug(f"Redis unavailable, skipping {entity}:{action}")
            return False

        channel = f"{self.channel_prefix}:{entity}:{action}"
        try:
            message = {"type": f"{entity}.{action}", **payload}
            await self.redis.publish(channel, json.dumps(message, default=str))
            logger.info(f"Published {entity}.{action}")
            return True
        except Exception as e:
            logger.error(f"Failed to publish {entity}.{action}: {e}")
            return False

    async def publish_event_created(self, event):
        await self.publish("events", "created", {
            "event_id": event.id,
            "organizer_id": event.organizer_id,
            "title": event.title,
            "category": event.category,
            "required_people": event.required_people,
            "payment_per_person": float(event.payment_per_person),
            "date_time": _iso(event.date_time),
        })

    async def publish_event_status_changed(self, event):
        await self.publish("events", event.status, {
            "event_id": event.id,
            "status": event.status,
            "applied_count": event.applied_count,
            "approved_count": event.approved_count,
        })

    async def publish_application(self, application):
        await self.publish("applications", application.status, {
            "application_id": application.id,
            "event_id": application.event_id,
            "user_id": application.user_id,
            "responded_at": _iso(application.responded_at),
        })

    async def publish_message_sent(self, message):
        await self.publish("messages", "sent", {
            "message_id": message.id,
            "event_id": message.event_id,
            "sender_id": message.sender_id,
            "message_type": message.message_type,
            "is_announcement": message.is_announcement,
        })

    async def publish_rating_created(self, rating):
        await self.publish("ratings", "created", {
            "rating_id": rating.id,
            "event_id": rating.event_id,
            "rated_user_id": rating.rated_user_id,
            "rating": rating.rating,
        })
