from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from steady.api.deps import get_mail_sender, get_now
from steady.core.config import settings
from steady.db import Base
from steady.db.deps import get_db
from steady.db.models.resolution import Resolution
from steady.db.models.user import User
from steady.db.models.user_preferences import UserPreferences
from steady.main import app
from steady.services.notifications.noop import NoopMailSender

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def client(monkeypatch):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_fk(conn, record):  # pragma: no cover
        cursor = conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_sender] = NoopMailSender
    app.dependency_overrides[get_now] = lambda: NOW
    monkeypatch.setattr(settings, "debug", True)
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal
    app.dependency_overrides.clear()


def _seed_user(session_factory, email="someone@example.com"):
    session = session_factory()
    try:
        user_id = uuid4()
        session.add(User(id=user_id, email=email))
        session.flush()
        session.add(UserPreferences(user_id=user_id))
        session.add(Resolution(user_id=user_id, title="Stretch daily", status="active"))
        session.commit()
        return user_id
    finally:
        session.close()


def test_jobs_config_reports_schedule(client):
    test_client, _ = client

    data = test_client.get("/jobs").json()

    assert data["scheduler_enabled"] is settings.scheduler_enabled
    assert data["schedule"]["checkin_time"] == f"{settings.checkin_job_hour:02d}:{settings.checkin_job_minute:02d}"
    assert data["request_id"]


def test_run_now_requires_debug(client, monkeypatch):
    test_client, _ = client
    monkeypatch.setattr(settings, "debug", False)

    response = test_client.post("/jobs/run-now", json={"job": "checkin"})

    assert response.status_code == 403


def test_run_now_for_single_user(client):
    test_client, session_factory = client
    target = _seed_user(session_factory)
    _seed_user(session_factory, email="other@example.com")

    response = test_client.post("/jobs/run-now", json={"job": "checkin", "user_id": str(target)})

    assert response.status_code == 200
    data = response.json()
    assert data["users_considered"] == 1
    assert data["sent"] == 1
    assert data["outcomes"] == [{"user_id": str(target), "status": "sent", "reason": "delivered"}]


def test_run_now_rejects_unknown_job(client):
    test_client, _ = client
    assert test_client.post("/jobs/run-now", json={"job": "interventions"}).status_code == 422
