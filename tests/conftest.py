"""
Pytest configuration and fixtures for subscription API tests.

Every test gets its own in-memory SQLite database and an app context whose
upstream transport is an httpx.MockTransport, so nothing leaves the process.
"""
import os
import json

# Must be set before subscription_api reads its settings
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["IDENTITY_PROVIDER"] = "stub"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import httpx
import pytest
from sqlalchemy.orm import sessionmaker

from subscription_api.core.config import Settings
from subscription_api.core.context import build_context
from subscription_api.db import Base, build_engine

TEST_DATABASE_URL = "sqlite:///:memory:"

WHITELISTED_ID = "94770000001"


class FakeUpstream:
    """
    Records provider calls and answers from a path -> (status, body) table.

    Unrouted paths answer 200 with the success sentinel.
    """

    def __init__(self):
        self.requests = []
        self.responses = {}
        self.error = None

    def respond(self, path, body, status_code=200):
        self.responses[path] = (status_code, body)

    def fail_with(self, error):
        self.error = error

    def paths(self):
        return [request.url.path for request in self.requests]

    def bodies(self):
        return [json.loads(request.content) for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        status_code, body = self.responses.get(
            request.url.path, (200, {"statusCode": "S1000", "statusDetail": "Success"})
        )
        return httpx.Response(status_code, json=body)

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)


def make_settings(**overrides):
    values = dict(
        ENV="test",
        DATABASE_URL=TEST_DATABASE_URL,
        IDENTITY_PROVIDER="stub",
        MOBITEL_BASE_URL="https://mobitel.test",
        MOBITEL_APP_ID="APP_MOBITEL",
        MOBITEL_APP_PASSWORD="mobitel-pass",
        DIALOG_BASE_URL="https://dialog.test",
        DIALOG_APP_ID="APP_DIALOG",
        DIALOG_APP_PASSWORD="dialog-pass",
        ENABLE_WHITELIST=True,
        WHITELISTED_SUBSCRIBER_IDS=WHITELISTED_ID,
        RATE_LIMIT_ENABLED=False,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(scope="function")
def db():
    """Clean database session per test; the in-memory database dies with the engine."""
    from subscription_api import models  # noqa: F401  register models with Base

    engine = build_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def context(settings, upstream):
    return build_context(settings, transport=upstream.transport)


def override_get_db(db_session):
    """Dependency override yielding the test session."""
    def _override():
        yield db_session
    return _override


@pytest.fixture(scope="function")
def client(db, context):
    """
    TestClient over the real app with the test database and context.

    The lifespan is not entered; the context is installed directly.
    """
    from fastapi.testclient import TestClient
    from subscription_api.main import app
    from subscription_api.db import get_db

    app.dependency_overrides[get_db] = override_get_db(db)
    app.state.context = context
    try:
        # raise_server_exceptions=False so unhandled errors come back as 500 responses
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
        app.state.context = None


def auth_headers(user_id="user-1", device_id=None):
    headers = {"Authorization": f"Bearer {user_id}"}
    if device_id is not None:
        headers["X-Device-Id"] = device_id
    return headers


@pytest.fixture
def headers():
    return auth_headers


@pytest.fixture
def settings_factory():
    return make_settings
