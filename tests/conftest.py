"""Pytest fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("ADMIN_EMAILS", '["admin@civichub.org"]')

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from civichub.core.deps import get_classifier
from civichub.db.base import Base
from civichub.db.session import get_db
from civichub.main import app
from civichub.models import ProblemReport, ReportComment, ReportUpvote, User  # noqa: F401 - register for create_all
from civichub.models.enums import Sentiment

TEST_DATABASE_URL = os.environ["DATABASE_URL"]

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeClassifier:
    """Deterministic stand-in for the AI classifier; records its calls."""

    def __init__(self, label=Sentiment.concerned):
        self.label = label
        self.calls = []

    def __call__(self, title, description):
        self.calls.append((title, description))
        return self.label


@pytest.fixture
def setup_db():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(setup_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def classifier():
    return FakeClassifier()


@pytest.fixture
def client(setup_db, classifier):
    """Test client with overridden DB and classifier."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_classifier] = lambda: classifier
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Register (if needed) and log in; returns Authorization headers."""

    def _login(email, password="pass1234", full_name="Test User"):
        client.post(
            "/auth/register",
            json={"email": email, "password": password, "full_name": full_name},
        )
        token = client.post("/auth/login", json={"email": email, "password": password}).json()["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture
def citizen(login):
    return login("citizen@civichub.org", full_name="Casey Citizen")


@pytest.fixture
def admin(login):
    return login("admin@civichub.org", full_name="Alex Admin")


REPORT_PAYLOAD = {
    "title": "Broken streetlight",
    "description": "Pole #4 dark for a week",
    "category": "street_lights",
    "location": "5th & Elm",
}


@pytest.fixture
def submit(client):
    """POST a report, merging overrides into a valid payload."""

    def _submit(headers, **overrides):
        payload = {**REPORT_PAYLOAD, **overrides}
        return client.post("/reports", headers=headers, json=payload)

    return _submit
