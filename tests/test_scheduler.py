"""Tests for the periodic notification scan."""

from __future__ import annotations

import pytest

from shelfcure.application.use_cases.notifications import count_unread
from shelfcure.interfaces.scheduler import (
    SCAN_JOB_ID,
    build_notification_scheduler,
    run_scheduled_notification_scan,
)


def test_scheduler_registers_a_single_interval_job() -> None:
    scheduler = build_notification_scheduler(interval_minutes=15)

    jobs = scheduler.get_jobs()

    assert [job.id for job in jobs] == [SCAN_JOB_ID]
    assert jobs[0].trigger.interval.total_seconds() == 15 * 60
    assert jobs[0].max_instances == 1


@pytest.mark.anyio
async def test_scheduled_scan_covers_every_active_store(session, make_store, make_medicine) -> None:
    first = make_store("First")
    second = make_store("Second")
    make_medicine(first.id, "Paracetamol", strip_stock=0)
    make_medicine(second.id, "Amoxicillin", strip_stock=1, strip_min_stock=5)

    await run_scheduled_notification_scan()

    assert count_unread(session, first.id) == 1
    assert count_unread(session, second.id) == 1
