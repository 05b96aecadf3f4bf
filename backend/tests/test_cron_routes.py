from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from steady.api.deps import get_mail_sender, get_now, get_text_generator
from steady.core.config import settings
from steady.db import Base
from steady.db.deps import get_db
from steady.db.models.progress_log import ProgressLog
from steady.db.models.resolution import Resolution
from steady.db.models.user import User
from steady.db.models.user_preferences import UserPreferences
from steady.db.models.weekly_summary import WeeklySummary
from steady.main import app
from steady.services.notifications.base import NotificationResult

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)
SECRET = "cron-test-secret"


class _RecordingMailer:
    provider_name = "recording"

    def __init__(self):
        self.sent = []

    def send(self, *, to: str, subject: str, body: str) -> NotificationResult:
        self.sent.append(to)
        return NotificationResult(status="sent", reason="recorded")


class _StaticGenerator:
    def generate(self, prompt: str, *, json_mode: bool = False) -> str:
        return "Solid week."


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
    mailer = _RecordingMailer()

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_sender] = lambda: mailer
    app.dependency_overrides[get_text_generator] = lambda: _StaticGenerator()
    app.dependency_overrides[get_now] = lambda: NOW
    monkeypatch.setattr(settings, "cron_secret", SECRET)
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal, mailer
    app.dependency_overrides.clear()


def _seed_user_with_log(session_factory, log_age: timedelta):
    session = session_factory()
    try:
        user_id = uuid4()
        session.add(User(id=user_id, email=f"{user_id.hex[:6]}@example.com"))
        session.flush()
        session.add(UserPreferences(user_id=user_id, check_in_frequency="daily"))
        res = Resolution(user_id=user_id, title="Meditate", status="active")
        session.add(res)
        session.flush()
        session.add(ProgressLog(user_id=user_id, resolution_id=res.id, note="10 minutes", created_at=NOW - log_age))
        session.commit()
        return user_id
    finally:
        session.close()


def _auth():
    return {"Authorization": f"Bearer {SECRET}"}


def test_cron_requires_bearer_secret(client):
    test_client, _, _ = client

    assert test_client.get("/cron/check-in").status_code == 401
    assert test_client.get("/cron/check-in", headers={"Authorization": "Bearer wrong"}).status_code == 401
    assert test_client.get("/cron/weekly-summary", headers={"Authorization": SECRET}).status_code == 401


def test_cron_disabled_without_secret(client, monkeypatch):
    test_client, _, _ = client
    monkeypatch.setattr(settings, "cron_secret", None)

    assert test_client.get("/cron/check-in", headers=_auth()).status_code == 503


def test_check_in_cron_counts_sent_digests(client):
    test_client, session_factory, mailer = client
    _seed_user_with_log(session_factory, timedelta(days=2))
    _seed_user_with_log(session_factory, timedelta(hours=1))

    response = test_client.get("/cron/check-in", headers=_auth())

    assert response.status_code == 200
    data = response.json()
    assert data["sent"] == 1
    assert data["skipped"] == 1
    assert len(mailer.sent) == 1


def test_weekly_summary_cron_persists_summaries(client):
    test_client, session_factory, mailer = client
    user_id = _seed_user_with_log(session_factory, timedelta(hours=3))

    response = test_client.get("/cron/weekly-summary", headers=_auth())

    assert response.status_code == 200
    assert response.json()["processed"] == 1
    with session_factory() as db:
        assert db.query(WeeklySummary).filter(WeeklySummary.user_id == user_id).count() == 1
    assert len(mailer.sent) == 1
