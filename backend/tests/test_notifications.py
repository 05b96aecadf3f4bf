from __future__ import annotations

import smtplib

import pytest
from fastapi.testclient import TestClient

from steady.api.deps import get_mail_sender
from steady.core.config import settings
from steady.core.errors import DeliveryFailure, MailDeliveryError
from steady.main import app
from steady.services.notifications import smtp as smtp_module
from steady.services.notifications.factory import build_mail_sender
from steady.services.notifications.noop import NoopMailSender
from steady.services.notifications.smtp import SmtpMailSender


class _FakeSMTP:
    instances: list = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in = None
        self.sent = []
        _FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, message):
        self.sent.append(message)


def _smtp_sender(**overrides) -> SmtpMailSender:
    options = dict(
        host="smtp.example.com",
        port=587,
        from_address="Steady <noreply@example.com>",
        username="mailer",
        password="secret",
    )
    options.update(overrides)
    return SmtpMailSender(**options)


def test_factory_builds_configured_provider(monkeypatch) -> None:
    monkeypatch.setattr(settings, "mail_provider", "smtp")
    assert isinstance(build_mail_sender(settings), SmtpMailSender)

    monkeypatch.setattr(settings, "mail_provider", "noop")
    assert isinstance(build_mail_sender(settings), NoopMailSender)


def test_factory_falls_back_to_noop_for_unknown_provider(monkeypatch) -> None:
    monkeypatch.setattr(settings, "mail_provider", "carrier-pigeon")

    assert build_mail_sender(settings).provider_name == "noop"


def test_noop_sender_reports_noop() -> None:
    result = NoopMailSender().send(to="a@example.com", subject="Hi", body="Body")

    assert result.status == "noop"


def test_smtp_sender_builds_and_sends_message(monkeypatch) -> None:
    _FakeSMTP.instances = []
    monkeypatch.setattr(smtp_module.smtplib, "SMTP", _FakeSMTP)

    result = _smtp_sender().send(to="a@example.com", subject="Time for a quick check-in", body="Hello")

    assert result.status == "sent"
    server = _FakeSMTP.instances[0]
    assert server.started_tls
    assert server.logged_in == ("mailer", "secret")
    message = server.sent[0]
    assert message["To"] == "a@example.com"
    assert message["Subject"] == "Time for a quick check-in"
    assert message.get_content().strip() == "Hello"


def test_smtp_sender_skips_login_without_credentials(monkeypatch) -> None:
    _FakeSMTP.instances = []
    monkeypatch.setattr(smtp_module.smtplib, "SMTP", _FakeSMTP)

    _smtp_sender(username=None, password=None, use_tls=False).send(to="a@example.com", subject="s", body="b")

    server = _FakeSMTP.instances[0]
    assert server.logged_in is None
    assert not server.started_tls


@pytest.mark.parametrize("error", [OSError("connection refused"), smtplib.SMTPRecipientsRefused({})])
def test_smtp_transport_errors_become_delivery_failures(monkeypatch, error) -> None:
    def _explode(*args, **kwargs):
        raise error

    monkeypatch.setattr(smtp_module.smtplib, "SMTP", _explode)

    with pytest.raises(MailDeliveryError) as excinfo:
        _smtp_sender().send(to="a@example.com", subject="s", body="b")

    assert isinstance(excinfo.value, DeliveryFailure)


def test_notifications_config_endpoint(monkeypatch) -> None:
    monkeypatch.setattr(settings, "mail_from", "Steady <noreply@example.com>")
    app.dependency_overrides[get_mail_sender] = NoopMailSender
    try:
        response = TestClient(app).get("/notifications/config")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    data = response.json()
    assert data["provider"] == "noop"
    assert data["from"] == "Steady <noreply@example.com>"
    assert data["request_id"]
