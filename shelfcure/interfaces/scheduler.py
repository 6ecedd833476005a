"""Periodic notification scans driven by APScheduler."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from anyio import to_thread
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from shelfcure.application.use_cases.notifications import generate_for_active_stores
from shelfcure.infrastructure.database import SessionLocal

logger = logging.getLogger(__name__)

SCAN_JOB_ID = "notification-scan"


async def run_scheduled_notification_scan() -> None:
    """Generate notifications for every active store off the event loop."""

    summaries = await to_thread.run_sync(generate_for_active_stores, SessionLocal)
    logger.info(
        "Scheduled notification scan finished: %s stores, %s generated, %s duplicates",
        len(summaries),
        sum(summary.generated for summary in summaries),
        sum(summary.duplicates for summary in summaries),
    )


def build_notification_scheduler(
    job: Callable[[], Awaitable[None]] = run_scheduled_notification_scan,
    *,
    interval_minutes: int,
) -> AsyncIOScheduler:
    """Return an unstarted scheduler running ``job`` every ``interval_minutes``."""

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        job,
        "interval",
        minutes=interval_minutes,
        id=SCAN_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    return scheduler


__all__ = ["SCAN_JOB_ID", "build_notification_scheduler", "run_scheduled_notification_scan"]
