"""
Test configuration and fixtures for Gigboard Service.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gigboard.main import app
from gigboard.api.dependencies import get_database_session, get_event_publisher
from gigboard.core.config import config
from gigboard.models import Base, utcnow
from gigboard.services.event_publisher import DomainEventPublisher
from gigboard.services.event_service import EventService
from gigboard.services.user_service import UserService

# Test database URL
SQLALCHEMY_DATABASE_URL = "sqlite://"

# Create test engine
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Create test session
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def tables():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Create a database session for testing."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mock_publisher():
    """Publisher whose Redis calls are recorded instead of sent."""
    return AsyncMock(spec=DomainEventPublisher)


@pytest.fixture
def client(mock_publisher):
    """Create test client."""
    app.dependency_overrides[get_database_session] = override_get_db
    app.dependency_overrides[get_event_publisher] = lambda: mock_publisher

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_token():
    """Build a bearer token the way the auth service would."""
    def _make_token(user_id: int, **claims) -> str:
        payload = {"user_id": user_id, "exp": utcnow() + timedelta(hours=1), **claims}
        return jwt.encode(payload, config.get_jwt_secret(), algorithm=config.get_jwt_algorithm())
    return _make_token


@pytest.fixture
def auth_headers(make_token):
    def _auth_headers(user_id: int) -> dict:
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _auth_headers


@pytest.fixture
def make_user(db_session):
    """Register a user; each call gets a unique email unless one is given."""
    counter = {"n": 0}

    def _make_user(name: str = None, **overrides):
        counter["n"] += 1
        name = name or f"User {counter['n']}"
        data = {
            "name": name,
            "email": f"user{counter['n']}@example.com",
            "phone": f"98765{counter['n']:05d}",
        }
        data.update(overrides)
        return UserService(db_session).register_user(**data)
    return _make_user


@pytest.fixture
def event_details():
    """Valid event fields with a start date one week out."""
    def _event_details(**overrides):
        data = {
            "title": "Wedding Photography",
            "description": "Candid shots for a two day wedding",
            "location": "Jaipur",
            "category": "photography",
            "date_time": utcnow() + timedelta(days=7),
            "required_people": 2,
            "payment_per_person": 800,
        }
        data.update(overrides)
        return data
    return _event_details


@pytest.fixture
def make_event(db_session, event_details):
    def _make_event(organizer, **overrides):
        return EventService(db_session).create_event(
            organizer_id=organizer.id, **event_details(**overrides)
        )
    return _make_event


@pytest.fixture
def organizer(make_user):
    return make_user("Asha Organizer", user_type="organizer")


@pytest.fixture
def worker(make_user):
    return make_user("Ravi Worker", user_type="participant", skills=["photography"])
