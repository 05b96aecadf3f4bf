from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from steady.api.deps import get_now, get_text_generator
from steady.db import Base
from steady.db.deps import get_db
from steady.db.models.progress_log import ProgressLog
from steady.db.models.resolution import Resolution
from steady.db.models.user import User
from steady.main import app

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)


class _FakeGenerator:
    def __init__(self):
        self.reply = '{"sentiment":"positive","progress_estimate":140,"feedback":"Strong start."}'
        self.prompts: list[str] = []

    def generate(self, prompt: str, *, json_mode: bool = False) -> str:
        self.prompts.append(prompt)
        return self.reply


@pytest.fixture()
def client():
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
    generator = _FakeGenerator()

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_text_generator] = lambda: generator
    app.dependency_overrides[get_now] = lambda: NOW
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal, generator
    app.dependency_overrides.clear()


def _seed_resolution(session_factory, *, title="Practice piano", description=None):
    session = session_factory()
    try:
        user_id = uuid4()
        session.add(User(id=user_id))
        session.flush()
        res = Resolution(user_id=user_id, title=title, description=description, status="active")
        session.add(res)
        session.commit()
        session.refresh(res)
        return user_id, res.id
    finally:
        session.close()


def test_log_is_enriched_and_clamped(client):
    test_client, session_factory, generator = client
    user_id, res_id = _seed_resolution(session_factory, description="Twenty minutes daily")

    response = test_client.post(f"/resolutions/{res_id}/logs", json={"user_id": str(user_id), "note": "  Full piece!  "})

    assert response.status_code == 201
    log = response.json()["log"]
    assert log["note"] == "Full piece!"
    assert log["ai_sentiment"] == "positive"
    assert log["ai_progress_estimate"] == 100
    assert log["ai_feedback"] == "Strong start."
    assert "Resolution: Practice piano" in generator.prompts[0]
    assert "No previous logs." in generator.prompts[0]


def test_malformed_ai_reply_stores_plain_log(client):
    test_client, session_factory, generator = client
    generator.reply = "Great job, keep going!"
    user_id, res_id = _seed_resolution(session_factory)

    response = test_client.post(f"/resolutions/{res_id}/logs", json={"user_id": str(user_id), "note": "Scales"})

    assert response.status_code == 201
    log = response.json()["log"]
    assert log["ai_sentiment"] is None
    assert log["ai_progress_estimate"] is None
    assert log["ai_feedback"] is None
    with session_factory() as db:
        assert db.query(ProgressLog).count() == 1


def test_odd_ai_field_values_still_store_enriched_log(client):
    test_client, session_factory, generator = client
    generator.reply = '{"sentiment":["positive"],"progress_estimate":1' + "0" * 400 + ',"feedback":"Keep it up."}'
    user_id, res_id = _seed_resolution(session_factory)

    response = test_client.post(f"/resolutions/{res_id}/logs", json={"user_id": str(user_id), "note": "Scales"})

    assert response.status_code == 201
    log = response.json()["log"]
    assert log["ai_sentiment"] == "neutral"
    assert log["ai_progress_estimate"] == 100
    assert log["ai_feedback"] == "Keep it up."


def test_recent_logs_feed_the_prompt(client):
    test_client, session_factory, generator = client
    user_id, res_id = _seed_resolution(session_factory)
    session = session_factory()
    for days in (3, 2):
        session.add(
            ProgressLog(
                user_id=user_id,
                resolution_id=res_id,
                note=f"{days} days ago",
                created_at=NOW - timedelta(days=days),
            )
        )
    session.commit()
    session.close()

    test_client.post(f"/resolutions/{res_id}/logs", json={"user_id": str(user_id), "note": "Today"})

    prompt = generator.prompts[0]
    assert prompt.index("3 days ago") < prompt.index("2 days ago")

    listing = test_client.get(f"/resolutions/{res_id}/logs", params={"user_id": str(user_id)}).json()
    assert [log["note"] for log in listing["logs"]] == ["Today", "2 days ago", "3 days ago"]


def test_log_against_foreign_resolution_is_404(client):
    test_client, session_factory, generator = client
    _, res_id = _seed_resolution(session_factory)

    response = test_client.post(f"/resolutions/{res_id}/logs", json={"user_id": str(uuid4()), "note": "Sneaky"})

    assert response.status_code == 404
    assert generator.prompts == []
    assert test_client.get(f"/resolutions/{res_id}/logs", params={"user_id": str(uuid4())}).status_code == 404


def test_empty_note_rejected(client):
    test_client, session_factory, _ = client
    user_id, res_id = _seed_resolution(session_factory)

    response = test_client.post(f"/resolutions/{res_id}/logs", json={"user_id": str(user_id), "note": ""})

    assert response.status_code == 422
