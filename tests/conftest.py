import json
import os

# Must be set before any app import: settings skip Secrets Manager when a DB URL is present.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["FRONTEND_URL"] = "https://app.example.com"
os.environ.pop("S3_BUCKET_NAME", None)

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app import model  # noqa: F401
from app.crud import user_crud
from app.session import set_redis_client
from main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def redis_mock():
    """Redis stand-in holding sessions in a dict: key -> JSON string."""
    sessions = {}
    client = MagicMock()
    client.get.side_effect = lambda key: sessions.get(key)
    client.sessions = sessions
    set_redis_client(client)
    yield client
    set_redis_client(None)


@pytest.fixture
def client(db, redis_mock):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="CLIENT", city=None, first_name=None, last_name=None):
        counter["n"] += 1
        return user_crud.create_from_dict(
            db,
            obj_in={
                "email": f"user{counter['n']}@example.com",
                "cognito_username": f"cognito-{counter['n']}",
                "role": role,
                "first_name": first_name or f"User{counter['n']}",
                "last_name": last_name,
                "city": city,
            },
        )

    return _make


@pytest.fixture
def auth_headers(redis_mock):
    """Store a session for the user and return the Authorization header for it."""

    def _headers(user):
        token = f"token-{user.id}"
        redis_mock.sessions[f"session:{token}"] = json.dumps({
            "user_id": str(user.id),
            "email": user.email,
            "role": user.role,
            "is_active": True,
            "access_token": "cognito-access",
        })
        return {"Authorization": f"Bearer {token}"}

    return _headers
