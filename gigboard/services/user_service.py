"""
User Service for Gigboard Service.
Handles registration, profile updates and profile reads.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.logging import log_mutation
from ..db.database import transaction
from ..models import Rating, User, UserType, DEFAULT_RATING

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "bio", "location", "skills", "profile_image")
USER_TYPES = [user_type.value for user_type in UserType]
SEARCH_LIMIT = 20


def _clean_skills(skills: Optional[List[str]]) -> List[str]:
    """Trim, drop blanks and de-duplicate while keeping order."""
    seen = []
    for skill in skills or []:
        skill = skill.strip()
        if skill and skill not in seen:
            seen.append(skill)
    return seen


class UserService:
    """
    Service for the user entity store.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_user(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def register_user(
        self,
        name: str,
        email: str,
        phone: str,
        user_type: UserType = UserType.BOTH,
        skills: Optional[List[str]] = None,
        bio: Optional[str] = None,
        location: Optional[str] = None,
        profile_image: Optional[str] = None
    ) -> User:
        """
        Create a user, or update the profile of the user owning this email.

        Returns:
            The created or updated user

        Raises:
            ValidationError: If name, email or phone is blank, or the user type is unknown
        """
        errors = []
        if not name or not name.strip():
            errors.append("Name is required")
        if not email or "@" not in email:
            errors.append("A valid email is required")
        if not phone or not phone.strip():
            errors.append("Phone is required")
        user_type = getattr(user_type, "value", user_type)
        if user_type not in USER_TYPES:
            errors.append(f"User type must be one of {', '.join(USER_TYPES)}")
        if errors:
            raise ValidationError(errors)

        email = email.strip().lower()
        profile = {
            "name": name.strip(),
            "phone": phone.strip(),
            "user_type": user_type,
            "skills": _clean_skills(skills),
            "bio": bio,
            "location": location,
            "profile_image": profile_image,
        }

        with transaction(self.session):
            user = self.session.query(User).filter(User.email == email).first()
            if user is not None:
                for key, value in profile.items():
                    setattr(user, key, value)
                action = "user.updated"
            else:
                user = User(
                    email=email,
                    rating=DEFAULT_RATING,
                    total_ratings=0,
                    rating_sum=0.0,
                    events_attended=0,
                    events_organized=0,
                    is_verified=False,
                    is_premium=False,
                    **profile
                )
                self.session.add(user)
                action = "user.registered"
            try:
                self.session.flush()
            except IntegrityError as e:
                raise ConflictError("A user with this email already exists") from e

        log_mutation(action, user.id)
        return user

    def update_profile(self, user_id: int, updates: Dict[str, Any]) -> User:
        """
        Patch profile fields; keys set to None are ignored.

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If an unknown field or a blank name is supplied
        """
        unknown = [key for key in updates if key not in PROFILE_FIELDS]
        if unknown:
            raise ValidationError([f"Field '{key}' cannot be updated" for key in unknown])

        clean = {key: value for key, value in updates.items() if value is not None}
        if "name" in clean and not clean["name"].strip():
            raise ValidationError("Name cannot be blank")
        if "skills" in clean:
            clean["skills"] = _clean_skills(clean["skills"])

        with transaction(self.session):
            user = self.get_user(user_id)
            for key, value in clean.items():
                setattr(user, key, value)

        log_mutation("user.updated", user_id, actor_id=user_id, extra={"fields": sorted(clean)})
        return user

    def get_user_ratings(self, user_id: int, limit: int = 5) -> List[Rating]:
        """Most recent ratings received by a user."""
        self.get_user(user_id)
        return (
            self.session.query(Rating)
            .filter(Rating.rated_user_id == user_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
            .limit(limit)
            .all()
        )

    def get_top_rated_users(self, user_type: Optional[UserType] = None, limit: int = 10) -> List[User]:
        query = self.session.query(User)
        if user_type is not None:
            query = query.filter(User.user_type.in_([UserType(user_type).value, UserType.BOTH.value]))
        return query.order_by(User.rating.desc(), User.total_ratings.desc()).limit(limit).all()

    def search_users(self, term: str, user_type: Optional[UserType] = None, limit: int = SEARCH_LIMIT) -> List[User]:
        """
        Users whose name, location or one of their skills contains `term`,
        ignoring case. Best rated first.

        A `user_type` filter also matches users registered as both.
        """
        term = (term or "").strip().lower()
        if not term:
            return []

        query = self.session.query(User)
        if user_type is not None:
            query = query.filter(User.user_type.in_([UserType(user_type).value, UserType.BOTH.value]))

        matches = [
            user for user in query.all()
            if term in user.name.lower()
            or term in (user.location or "").lower()
            or any(term in skill.lower() for skill in (user.skills or []))
        ]
        matches.sort(key=lambda user: (-user.rating, user.id))
        return matches[:limit]
