from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from steady.db.enums import CheckInFrequency
from steady.services.reminders import days_since, find_overdue, needs_reminder

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("frequency", list(CheckInFrequency))
def test_never_logged_is_always_due(frequency) -> None:
    assert needs_reminder(None, frequency, NOW) is True


@pytest.mark.parametrize(
    ("frequency", "just_under", "threshold"),
    [
        ("daily", timedelta(hours=23, minutes=59), timedelta(hours=24)),
        ("every_3_days", timedelta(hours=71), timedelta(hours=72)),
        ("weekly", timedelta(hours=167), timedelta(hours=168)),
    ],
)
def test_threshold_boundary_is_inclusive(frequency, just_under, threshold) -> None:
    assert needs_reminder(NOW - just_under, frequency, NOW) is False
    assert needs_reminder(NOW - threshold, frequency, NOW) is True


def test_naive_timestamps_are_treated_as_utc() -> None:
    naive = (NOW - timedelta(hours=25)).replace(tzinfo=None)
    assert needs_reminder(naive, CheckInFrequency.DAILY, NOW) is True


def test_unknown_frequency_is_rejected() -> None:
    with pytest.raises(ValueError):
        needs_reminder(NOW, "monthly", NOW)


def test_days_since_floors_partial_days() -> None:
    assert days_since(None, NOW) is None
    assert days_since(NOW - timedelta(days=5, hours=23), NOW) == 5
    assert days_since(NOW - timedelta(minutes=30), NOW) == 0


def test_find_overdue_keeps_order_and_skips_recent() -> None:
    stale, fresh, never = uuid4(), uuid4(), uuid4()
    items = [
        (stale, "Run a 5K", NOW - timedelta(days=5)),
        (fresh, "Read 12 books", NOW - timedelta(minutes=30)),
        (never, "Learn Spanish", None),
    ]

    overdue = find_overdue(items, "daily", NOW)

    assert [item.id for item in overdue] == [stale, never]
    assert overdue[0].days_since_last_log == 5
    assert overdue[1].days_since_last_log is None
