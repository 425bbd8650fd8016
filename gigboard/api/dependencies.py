"""
Dependency injection for Gigboard Service.
Provides database sessions, services, publishing and authentication dependencies.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Generator, Dict, Any

from ..core.config import config
from ..db.database import DatabaseConnection
from ..db.redis_client import RedisConnection
from ..services.application_service import ApplicationService
from ..services.event_publisher import DomainEventPublisher
from ..services.event_service import EventService
from ..services.jwt_service import JWTService
from ..services.message_service import MessageService
from ..services.notification_service import NotificationService
from ..services.rating_service import RatingService
from ..services.user_service import UserService

# Security scheme
security = HTTPBearer()

# Global instances
db_connection = DatabaseConnection()
redis_connection = RedisConnection()
jwt_service = JWTService()


def get_database_session() -> Generator[Session, None, None]:
    """
    Get database session dependency.

    Yields:
        SQLAlchemy database session
    """
    yield from db_connection.get_session()


def get_marketplace_policy() -> Dict[str, Any]:
    return config.get_marketplace_config()


def get_user_service(session: Session = Depends(get_database_session)) -> UserService:
    return UserService(session)


def get_event_service(session: Session = Depends(get_database_session)) -> EventService:
    return EventService(session)


def get_application_service(
    session: Session = Depends(get_database_session),
    policy: Dict[str, Any] = Depends(get_marketplace_policy)
) -> ApplicationService:
    return ApplicationService(session, policy)


def get_message_service(
    session: Session = Depends(get_database_session),
    policy: Dict[str, Any] = Depends(get_marketplace_policy)
) -> MessageService:
    return MessageService(session, policy)


def get_rating_service(session: Session = Depends(get_database_session)) -> RatingService:
    return RatingService(session)


def get_notification_service(session: Session = Depends(get_database_session)) -> NotificationService:
    return NotificationService(session)


def get_event_publisher() -> DomainEventPublisher:
    """
    Get domain event publisher dependency.
    Publishing is skipped when Redis was never configured.
    """
    client = redis_connection.redis_client if redis_connection.is_initialized else None
    return DomainEventPublisher(client)


def get_jwt_service() -> JWTService:
    """
    Get JWT service dependency.

    Returns:
        JWT service instance
    """
    if not jwt_service._initialized:
        jwt_service.initialize()
    return jwt_service


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    jwt_svc: JWTService = Depends(get_jwt_service)
) -> Dict[str, Any]:
    """
    Get current authenticated user dependency.

    Raises:
        HTTPException: If authentication fails
    """
    user_data = jwt_svc.verify_token(credentials.credentials)
    if user_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_data


async def get_current_user_id(current_user: Dict[str, Any] = Depends(get_current_user)) -> int:
    """The authenticated actor id every mutation is performed as."""
    return current_user["user_id"]
