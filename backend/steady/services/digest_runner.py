"""Batch digest jobs: check-in reminders and weekly summaries.

Both jobs walk opted-in users sequentially. Every user step produces an
explicit ``UserOutcome``; the loop decides to log and continue, so one
user's failure never affects another user's digest or the aggregate counts.
Nothing here retries: a failed user is simply reported as failed for this run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from steady.core.config import settings
from steady.core.errors import DeliveryFailure
from steady.db.models.user_preferences import UserPreferences
from steady.db.models.weekly_summary import WeeklySummary
from steady.observability.metrics import log_metric
from steady.observability.tracing import annotate, trace
from steady.services.activity_service import log_meta_by_resolution, logs_since
from steady.services.ai_client import TextGenerator
from steady.services.ai_coach import WeeklyLogEntry, generate_weekly_summary
from steady.services.identity import DatabaseIdentityResolver, IdentityResolver
from steady.services.notifications.base import MailSender
from steady.services.notifications.messages import build_checkin_email, build_summary_email
from steady.services.reminders import OverdueItem, ensure_aware, find_overdue
from steady.services.resolution_service import active_resolutions


logger = logging.getLogger(__name__)

CHECKIN_JOB = "checkin"
WEEKLY_SUMMARY_JOB = "weekly_summary"


class OutcomeStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class UserOutcome:
    user_id: UUID
    status: OutcomeStatus
    reason: str
    overdue: Tuple[OverdueItem, ...] = ()

    @classmethod
    def sent(cls, user_id: UUID, reason: str = "delivered", **kwargs) -> "UserOutcome":
        return cls(user_id=user_id, status=OutcomeStatus.SENT, reason=reason, **kwargs)

    @classmethod
    def skipped(cls, user_id: UUID, reason: str) -> "UserOutcome":
        return cls(user_id=user_id, status=OutcomeStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, user_id: UUID, reason: str) -> "UserOutcome":
        return cls(user_id=user_id, status=OutcomeStatus.FAILED, reason=reason)


@dataclass
class DigestRunResult:
    job: str
    users_considered: int = 0
    sent: int = 0
    skipped: int = 0
    failed: int = 0
    outcomes: List[UserOutcome] = field(default_factory=list)

    def record(self, outcome: UserOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.status is OutcomeStatus.SENT:
            self.sent += 1
        elif outcome.status is OutcomeStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


def start_of_week(now: datetime) -> datetime:
    """Midnight on the Monday of ``now``'s week, in ``now``'s timezone (UTC when naive)."""
    aware = ensure_aware(now)
    midnight = aware.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=midnight.weekday())


def run_checkin_digest(
    db: Session,
    *,
    mailer: MailSender,
    identity: IdentityResolver,
    now: datetime,
    app_url: str,
    user_ids: Optional[Iterable[UUID]] = None,
) -> DigestRunResult:
    """Email each opted-in user one digest listing their overdue active resolutions."""
    result = DigestRunResult(job=CHECKIN_JOB)
    prefs_rows = _opted_in(db, UserPreferences.email_checkins_enabled, user_ids)
    with trace("digest.checkin", metadata={"users": len(prefs_rows), "provider": mailer.provider_name}) as span:
        for prefs in prefs_rows:
            outcome = _attempt(
                db,
                CHECKIN_JOB,
                prefs.user_id,
                lambda: checkin_for_user(db, prefs, mailer=mailer, identity=identity, now=now, app_url=app_url),
            )
            result.record(outcome)
        result.users_considered = len(prefs_rows)
        annotate(span, sent=result.sent, skipped=result.skipped, failed=result.failed)
    _log_run(result)
    return result


def checkin_for_user(
    db: Session,
    prefs: UserPreferences,
    *,
    mailer: MailSender,
    identity: IdentityResolver,
    now: datetime,
    app_url: str,
) -> UserOutcome:
    user_id = prefs.user_id
    resolutions = active_resolutions(db, user_id)
    if not resolutions:
        return UserOutcome.skipped(user_id, "no active resolutions")

    meta = log_meta_by_resolution(db, [resolution.id for resolution in resolutions])
    overdue = find_overdue(
        ((resolution.id, resolution.title, meta[resolution.id].last_log_at) for resolution in resolutions),
        prefs.check_in_frequency,
        now,
    )
    message = build_checkin_email(user_name=prefs.name, overdue_items=overdue, app_url=app_url)
    if message.is_empty:
        return UserOutcome.skipped(user_id, "nothing overdue")

    email = identity.resolve_email(user_id)
    if not email:
        return UserOutcome.skipped(user_id, "no email address")

    mailer.send(to=email, subject=message.subject, body=message.body)
    logger.info("Check-in digest sent to user %s (%s overdue)", user_id, len(overdue))
    return UserOutcome.sent(user_id, overdue=tuple(overdue))


def run_weekly_summary_digest(
    db: Session,
    *,
    generator: Optional[TextGenerator],
    mailer: MailSender,
    identity: IdentityResolver,
    now: datetime,
    app_url: str,
    user_ids: Optional[Iterable[UUID]] = None,
) -> DigestRunResult:
    """Summarize each opted-in user's week, store the summary and email it."""
    result = DigestRunResult(job=WEEKLY_SUMMARY_JOB)
    if generator is None:
        logger.warning("Weekly summary job skipped: no AI provider configured")
        return result

    week_start = start_of_week(now)
    prefs_rows = _opted_in(db, UserPreferences.email_summary_enabled, user_ids)
    with trace(
        "digest.weekly_summary",
        metadata={"users": len(prefs_rows), "week_start": week_start.isoformat()},
    ) as span:
        for prefs in prefs_rows:
            outcome = _attempt(
                db,
                WEEKLY_SUMMARY_JOB,
                prefs.user_id,
                lambda: weekly_summary_for_user(
                    db,
                    prefs,
                    generator=generator,
                    mailer=mailer,
                    identity=identity,
                    week_start=week_start,
                    now=now,
                    app_url=app_url,
                ),
            )
            result.record(outcome)
        result.users_considered = len(prefs_rows)
        annotate(span, sent=result.sent, skipped=result.skipped, failed=result.failed)
    _log_run(result)
    return result


def weekly_summary_for_user(
    db: Session,
    prefs: UserPreferences,
    *,
    generator: TextGenerator,
    mailer: MailSender,
    identity: IdentityResolver,
    week_start: datetime,
    now: datetime,
    app_url: str,
) -> UserOutcome:
    user_id = prefs.user_id
    rows = logs_since(db, user_id, week_start)
    if not rows:
        return UserOutcome.skipped(user_id, "no logs this week")

    entries = [
        WeeklyLogEntry(
            resolution_title=title or "Unknown",
            note=log.note,
            sentiment=log.ai_sentiment,
            created_at=ensure_aware(log.created_at),
        )
        for log, title in rows
    ]
    summary = generate_weekly_summary(generator, user_name=prefs.name, logs=entries)
    if not summary:
        return UserOutcome.skipped(user_id, "empty summary")

    db.add(WeeklySummary(user_id=user_id, summary=summary, created_at=now))
    db.commit()

    email = identity.resolve_email(user_id)
    if not email:
        logger.info("Weekly summary stored for user %s; no email address on file", user_id)
        return UserOutcome.sent(user_id, reason="stored without email")

    message = build_summary_email(user_name=prefs.name, summary=summary, app_url=app_url)
    mailer.send(to=email, subject=message.subject, body=message.body)
    logger.info("Weekly summary sent to user %s (%s logs)", user_id, len(entries))
    return UserOutcome.sent(user_id)


def run_digest_job(
    db: Session,
    job: str,
    *,
    generator: Optional[TextGenerator],
    mailer: MailSender,
    now: datetime,
    app_url: Optional[str] = None,
    user_ids: Optional[Iterable[UUID]] = None,
) -> DigestRunResult:
    """Dispatch a digest by job name with the database-backed identity resolver."""
    identity = DatabaseIdentityResolver(db)
    base_url = app_url or settings.app_url
    if job == CHECKIN_JOB:
        return run_checkin_digest(db, mailer=mailer, identity=identity, now=now, app_url=base_url, user_ids=user_ids)
    if job == WEEKLY_SUMMARY_JOB:
        return run_weekly_summary_digest(
            db,
            generator=generator,
            mailer=mailer,
            identity=identity,
            now=now,
            app_url=base_url,
            user_ids=user_ids,
        )
    raise ValueError(f"Unknown digest job: {job}")


def _opted_in(db: Session, flag_column, user_ids: Optional[Iterable[UUID]]) -> List[UserPreferences]:
    query = db.query(UserPreferences).filter(flag_column.is_(True))
    if user_ids is not None:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return []
        query = query.filter(UserPreferences.user_id.in_(ids))
    return query.order_by(UserPreferences.created_at.asc()).all()


def _attempt(db: Session, job: str, user_id: UUID, step: Callable[[], UserOutcome]) -> UserOutcome:
    try:
        return step()
    except DeliveryFailure as exc:
        db.rollback()
        logger.error("%s digest delivery failed for user %s: %s", job, user_id, exc)
        return UserOutcome.failed(user_id, str(exc))
    except Exception as exc:  # one user's failure must not abort the batch
        db.rollback()
        logger.exception("%s digest failed for user %s", job, user_id)
        return UserOutcome.failed(user_id, f"{type(exc).__name__}: {exc}")


def _log_run(result: DigestRunResult) -> None:
    logger.info(
        "%s digest complete: users=%s sent=%s skipped=%s failed=%s",
        result.job,
        result.users_considered,
        result.sent,
        result.skipped,
        result.failed,
    )
    metadata = {"job": result.job}
    log_metric(f"digest.{result.job}.sent", result.sent, metadata=metadata)
    log_metric(f"digest.{result.job}.failed", result.failed, metadata=metadata)
