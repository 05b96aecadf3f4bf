from __future__ import annotations

from uuid import uuid4

from steady.services.notifications.messages import build_checkin_email, build_summary_email
from steady.services.reminders import OverdueItem


def test_checkin_email_lists_every_overdue_resolution() -> None:
    first, second = uuid4(), uuid4()
    message = build_checkin_email(
        user_name="Alice",
        overdue_items=[
            OverdueItem(id=first, title="Run a 5K", days_since_last_log=5),
            OverdueItem(id=second, title="Read 12 books", days_since_last_log=None),
        ],
        app_url="https://example.com/",
    )

    assert "check in" in message.subject
    assert message.body.startswith("Hi Alice,")
    assert "Run a 5K (5 days since last log)" in message.body
    assert "Read 12 books (never logged)" in message.body
    assert f"https://example.com/resolutions/{first}" in message.body
    assert message.body.rstrip().endswith("https://example.com/dashboard")


def test_checkin_email_is_empty_without_overdue_items() -> None:
    message = build_checkin_email(user_name="Alice", overdue_items=[], app_url="https://example.com")

    assert message.subject == ""
    assert message.body == ""
    assert message.is_empty


def test_summary_email_includes_summary_and_default_name() -> None:
    message = build_summary_email(user_name=None, summary="Great week overall.", app_url="https://example.com")

    assert message.subject
    assert message.body.startswith("Hi there,")
    assert "Great week overall." in message.body
