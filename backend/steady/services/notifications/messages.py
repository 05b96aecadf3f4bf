"""Plain-text email bodies for digests."""
from __future__ import annotations

from typing import Optional, Sequence

from steady.services.notifications.base import EmailMessage
from steady.services.reminders import OverdueItem

CHECKIN_SUBJECT = "Time to check in on your resolutions"
SUMMARY_SUBJECT = "Your weekly resolution summary"


def build_checkin_email(
    *,
    user_name: Optional[str],
    overdue_items: Sequence[OverdueItem],
    app_url: str,
) -> EmailMessage:
    if not overdue_items:
        return EmailMessage(subject="", body="")

    base_url = app_url.rstrip("/")
    lines = []
    for item in overdue_items:
        if item.days_since_last_log is None:
            when = "never logged"
        else:
            when = f"{item.days_since_last_log} days since last log"
        lines.append(f"• {item.title} ({when})\n  {base_url}/resolutions/{item.id}")

    body = (
        f"Hi {user_name or 'there'},\n\n"
        "You haven't logged progress on these resolutions recently:\n\n"
        + "\n\n".join(lines)
        + "\n\nKeep going: small consistent updates add up.\n\n"
        + f"{base_url}/dashboard"
    )
    return EmailMessage(subject=CHECKIN_SUBJECT, body=body)


def build_summary_email(*, user_name: Optional[str], summary: str, app_url: str) -> EmailMessage:
    body = (
        f"Hi {user_name or 'there'},\n\n"
        "Here's your week in review:\n\n"
        f"{summary}\n\n"
        f"{app_url.rstrip('/')}/dashboard"
    )
    return EmailMessage(subject=SUMMARY_SUBJECT, body=body)
