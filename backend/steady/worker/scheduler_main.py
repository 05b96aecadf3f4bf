"""Dedicated APScheduler worker process for digest jobs."""
from __future__ import annotations

import logging
import signal
import threading
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler

from steady.core.config import settings
from steady.core.context import job_run_context
from steady.core.logging import configure_logging
from steady.db.session import SessionLocal
from steady.services.ai_client import build_text_generator
from steady.services.digest_runner import CHECKIN_JOB, WEEKLY_SUMMARY_JOB, run_digest_job
from steady.services.notifications.factory import build_mail_sender


logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging(log_level=settings.log_level)
    logger.info("Scheduler worker starting (enabled=%s)", settings.scheduler_enabled)

    scheduler = BackgroundScheduler(timezone=settings.scheduler_timezone)

    if settings.scheduler_enabled:
        register_jobs(scheduler)
        scheduler.start()
        if settings.jobs_run_on_startup:
            logger.info("Running jobs once on startup")
            run_checkin_job()
            run_weekly_summary_job()
    else:
        logger.warning("Scheduler disabled via config; worker will idle")

    stop_event = threading.Event()

    def shutdown(signum, frame):  # pragma: no cover - signal handler
        logger.info("Scheduler worker shutting down (signal=%s)", signum)
        if scheduler.running:
            scheduler.shutdown(wait=False)
        stop_event.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        stop_event.wait()
    except KeyboardInterrupt:  # pragma: no cover - manual stop
        shutdown(signal.SIGINT, None)


def register_jobs(scheduler: BackgroundScheduler) -> None:
    # max_instances=1: overlapping runs of one digest would double-send emails.
    scheduler.add_job(
        run_checkin_job,
        trigger="cron",
        hour=settings.checkin_job_hour,
        minute=settings.checkin_job_minute,
        id="checkin_digest_job",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        run_weekly_summary_job,
        trigger="cron",
        day_of_week=str(settings.weekly_job_day),
        hour=settings.weekly_job_hour,
        minute=settings.weekly_job_minute,
        id="weekly_summary_job",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    logger.info(
        "Registered scheduler jobs (check-in daily %02d:%02d, weekly day=%s %02d:%02d %s)",
        settings.checkin_job_hour,
        settings.checkin_job_minute,
        settings.weekly_job_day,
        settings.weekly_job_hour,
        settings.weekly_job_minute,
        settings.scheduler_timezone,
    )


def run_checkin_job() -> None:
    _run_job(CHECKIN_JOB)


def run_weekly_summary_job() -> None:
    _run_job(WEEKLY_SUMMARY_JOB)


def _run_job(job: str) -> None:
    with job_run_context(job):
        session = SessionLocal()
        try:
            generator = build_text_generator(settings) if job == WEEKLY_SUMMARY_JOB else None
            result = run_digest_job(
                session,
                job,
                generator=generator,
                mailer=build_mail_sender(settings),
                now=datetime.now(timezone.utc),
            )
            logger.info("%s job finished: sent=%s failed=%s", job, result.sent, result.failed)
        except Exception:  # pragma: no cover - keep the scheduler alive
            logger.exception("%s job failed", job)
        finally:
            session.close()


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
