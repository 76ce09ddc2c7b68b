"""Shared pytest fixtures for the contact app tests."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from database import JsonFileStore
from service import SubmissionService


class StepClock:
    """Returns a strictly later time on every call."""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


VALID_FORM = {
    "name": "Jo Lee",
    "email": "jo@example.com",
    "subject": "Feedback",
    "message": "This is a test message body.",
}


@pytest.fixture
def valid_form() -> dict:
    return dict(VALID_FORM)


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data.json"


@pytest.fixture
def store(data_file: Path) -> JsonFileStore:
    return JsonFileStore(data_file)


@pytest.fixture
def service(store: JsonFileStore) -> SubmissionService:
    return SubmissionService(store, clock=StepClock())


@pytest.fixture
def client(service: SubmissionService):
    from main import app, get_service

    app.dependency_overrides[get_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
