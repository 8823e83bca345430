"""Shared fixtures: in-memory database, API client, registered users."""

import os

# Settings are read at import time, so point the app at a throwaway database first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["AI_API_ENDPOINT"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, SessionLocal, engine
from app.main import app
from app.services.ai.summarizer import get_summarizer


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.pop(get_summarizer, None)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, email: str, password: str = "hunter22") -> dict:
    """Create an account and return bearer headers for it."""
    response = client.post("/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth(client):
    return register(client, "ada@example.com")


@pytest.fixture
def board(client, auth):
    """A user with the classic three columns: todo, in-progress, done."""
    response = client.post(
        "/columns/bootstrap",
        json={"labels": ["Todo", "In Progress", "Done"]},
        headers=auth,
    )
    assert response.status_code == 201, response.text
    return auth
