"""Shared test fixtures."""
import os
from datetime import timedelta
from typing import Generator

# Keep the app's own engine off disk during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models so SQLModel.metadata knows about them
from chronos.models.activity import ActivityRecord  # noqa: F401
from chronos.models.user import User

from chronos.api.main import create_app
from chronos.auth.session import get_session_email
from chronos.auth.tokens import issue_collector_token
from chronos.config import get_settings
from chronos.db.engine import get_session


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine. Tables recreated fresh for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="test_session")
def test_session_fixture(engine) -> Generator[Session, None, None]:
    """Provides a DB session connected to in-memory SQLite."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="user")
def user_fixture(engine) -> User:
    """A persisted user, as created by a first Google sign-in."""
    with Session(engine) as s:
        user = User(
            email="ada@example.com",
            name="Ada Lovelace",
            image="https://example.com/ada.png",
            provider="google",
            provider_id="g-123",
        )
        s.add(user)
        s.commit()
        s.refresh(user)
        return user


@pytest.fixture(name="app")
def app_fixture(engine):
    app = create_app()

    def override_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = override_session
    return app


@pytest.fixture(name="client")
def client_fixture(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture(name="signed_in_client")
def signed_in_client_fixture(app, user):
    """Client whose browser session belongs to `user`."""
    app.dependency_overrides[get_session_email] = lambda: user.email
    with TestClient(app) as c:
        yield c


@pytest.fixture(name="token")
def token_fixture(user) -> str:
    return issue_collector_token(user, get_settings().jwt_secret, ttl=timedelta(days=30))


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(token) -> dict:
    return {"Authorization": f"Bearer {token}"}
