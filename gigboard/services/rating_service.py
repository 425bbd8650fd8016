"""
Rating Service for Gigboard Service.
Stores post-event ratings and maintains each user's running average.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.logging import log_mutation, log_rejected
from ..db.database import transaction
from ..models import DEFAULT_RATING, Event, Rating, RatingType, User, NotificationType, utcnow
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
RATING_TYPES = [rating_type.value for rating_type in RatingType]
RATING_PRECISION = Decimal("0.1")


def round_rating(value) -> float:
    """Round half up to one decimal place."""
    return float(Decimal(str(value)).quantize(RATING_PRECISION, rounding=ROUND_HALF_UP))


def mean_rating(rating_sum: float, count: int) -> float:
    """Rounded mean of `count` ratings adding up to `rating_sum`."""
    if count <= 0:
        return DEFAULT_RATING
    return round_rating(Decimal(str(rating_sum)) / count)


class RatingService:
    """
    Service for mutual ratings.
    """

    def __init__(self, session: Session):
        self.session = session
        self.notifications = NotificationService(session)

    def rate_user(
        self,
        event_id: int,
        rater_id: int,
        rated_user_id: int,
        rating: float,
        rating_type: str,
        review: Optional[str] = None
    ) -> Rating:
        """
        Rate another user for an event and update their aggregate.

        Returns:
            The stored rating

        Raises:
            ValidationError: If rating is outside [1, 5], the type is unknown,
                or a user rates themselves
            NotFoundError: If the event or either user does not exist
            ConflictError: If this rater already rated this user for this event
        """
        rating_type = getattr(rating_type, "value", rating_type)
        errors = []
        if rating is None or not (MIN_RATING <= rating <= MAX_RATING):
            errors.append(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        if rating_type not in RATING_TYPES:
            errors.append(f"Rating type must be one of {', '.join(RATING_TYPES)}")
        if rater_id == rated_user_id:
            errors.append("You cannot rate yourself")
        if errors:
            raise ValidationError(errors)

        with transaction(self.session):
            event = self.session.get(Event, event_id)
            if event is None:
                raise NotFoundError("Event", event_id)
            if self.session.get(User, rater_id) is None:
                raise NotFoundError("User", rater_id)

            existing = (
                self.session.query(Rating.id)
                .filter(
                    Rating.event_id == event_id,
                    Rating.rater_id == rater_id,
                    Rating.rated_user_id == rated_user_id
                )
                .first()
            )
            if existing is not None:
                log_rejected("rating.created", "duplicate rating", actor_id=rater_id)
                raise ConflictError("You have already rated this user for this event")

            rated_user = (
                self.session.query(User)
                .filter(User.id == rated_user_id)
                .with_for_update()
                .first()
            )
            if rated_user is None:
                raise NotFoundError("User", rated_user_id)

            record = Rating(
                event_id=event_id,
                rater_id=rater_id,
                rated_user_id=rated_user_id,
                rating=float(rating),
                review=review,
                rating_type=rating_type,
                created_at=utcnow()
            )
            self.session.add(record)
            try:
                self.session.flush()
            except IntegrityError as e:
                raise ConflictError("You have already rated this user for this event") from e

            rated_user.rating_sum = (rated_user.rating_sum or 0.0) + float(rating)
            rated_user.total_ratings = rated_user.total_ratings + 1
            rated_user.rating = mean_rating(rated_user.rating_sum, rated_user.total_ratings)

            self.notifications.notify(
                rated_user_id,
                NotificationType.RATING_RECEIVED,
                "New rating",
                f"You received a {rating:g}-star rating for '{event.title}'",
                related_event_id=event_id,
                related_user_id=rater_id
            )

        log_mutation("rating.created", record.id, actor_id=rater_id, extra={"rated_user_id": rated_user_id})
        return record
