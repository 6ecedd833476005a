"""Tests for the generation coordinator and the read/acknowledge use cases."""

from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from shelfcure.application.use_cases.notifications import (
    count_unread,
    generate_for_active_stores,
    generate_notifications,
    get_notification_settings,
    list_notifications,
    mark_notification_read,
    mark_notifications_read,
    scan_expiring_batches,
    scan_low_stock,
    update_notification_settings,
)
from shelfcure.domain.exceptions import (
    NotificationNotFoundError,
    NotificationValidationError,
    PersistenceError,
    StoreNotFoundError,
)
from shelfcure.infrastructure.database import SessionLocal
from shelfcure.infrastructure.notifications import dispatch_notification
from shelfcure.infrastructure.repositories import NotificationRepository


class RecordingDispatcher:
    def __init__(self) -> None:
        self.notifications = []

    def __call__(self, notification) -> int:
        self.notifications.append(notification)
        return 1


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def stocked_store(make_store, make_medicine, make_batch):
    """A store with one low-stock medicine and one batch about to expire."""

    store = make_store()
    make_medicine(store.id, "Paracetamol", strip_stock=5, strip_min_stock=10)
    insulin = make_medicine(store.id, "Insulin", strip_stock=40, strip_min_stock=10)
    make_batch(insulin, "INS-1", expires_in=timedelta(days=2))
    return store


def test_generation_persists_and_publishes_new_alerts(session, now, stocked_store, dispatcher):
    summary = generate_notifications(session, stocked_store.id, dispatch=dispatcher, now=now)

    assert summary.generated == 2
    assert summary.duplicates == 0
    assert summary.errors == []
    assert [notification.type for notification in summary.notifications] == [
        "low_stock",
        "expiry_alert",
    ]
    assert [notification.priority for notification in summary.notifications] == [
        "medium",
        "high",
    ]
    assert dispatcher.notifications == summary.notifications
    assert all(notification.id is not None for notification in summary.notifications)
    assert count_unread(session, stocked_store.id) == 2


def test_generation_is_idempotent_for_unresolved_alerts(
    session, now, stocked_store, dispatcher
):
    generate_notifications(session, stocked_store.id, dispatch=dispatcher, now=now)
    repeat = generate_notifications(
        session, stocked_store.id, dispatch=dispatcher, now=now + timedelta(minutes=5)
    )

    assert repeat.generated == 0
    assert repeat.duplicates == 2
    assert len(dispatcher.notifications) == 2
    assert count_unread(session, stocked_store.id) == 2


def test_read_alert_does_not_block_a_new_one(session, now, stocked_store, dispatcher):
    first = generate_notifications(session, stocked_store.id, dispatch=dispatcher, now=now)
    mark_notification_read(session, stocked_store.id, first.notifications[0].id)

    second = generate_notifications(
        session, stocked_store.id, dispatch=dispatcher, now=now + timedelta(minutes=5)
    )

    assert second.generated == 1
    assert second.duplicates == 1
    assert second.notifications[0].related_entity == first.notifications[0].related_entity


def test_stale_unread_alert_does_not_block_a_new_one(
    session, now, make_store, make_medicine, dispatcher
):
    store = make_store()
    make_medicine(store.id, "Paracetamol", strip_stock=0)
    scanners = {"low_stock": scan_low_stock}

    generate_notifications(session, store.id, scanners=scanners, dispatch=dispatcher, now=now)
    summary = generate_notifications(
        session, store.id, scanners=scanners, dispatch=dispatcher, now=now + timedelta(hours=25)
    )

    assert summary.generated == 1
    assert count_unread(session, store.id) == 2


def test_failing_scanner_does_not_stop_the_others(session, now, stocked_store, dispatcher):
    def broken_scanner(session, store_id, *, settings, now):
        raise RuntimeError("inventory service down")
        yield  # pragma: no cover

    summary = generate_notifications(
        session,
        stocked_store.id,
        scanners={"low_stock": broken_scanner, "expiry_alert": scan_expiring_batches},
        dispatch=dispatcher,
        now=now,
    )

    assert summary.generated == 1
    assert summary.notifications[0].type == "expiry_alert"
    assert len(summary.errors) == 1
    assert "low_stock scanner failed" in summary.errors[0]


def test_failed_dispatch_keeps_the_notification(session, now, stocked_store):
    def failing_dispatch(notification):
        raise RuntimeError("socket closed")

    summary = generate_notifications(
        session, stocked_store.id, dispatch=failing_dispatch, now=now
    )

    assert summary.generated == 2
    assert len(summary.dispatch_errors) == 2
    assert count_unread(session, stocked_store.id) == 2


def test_disabled_alert_types_are_not_scanned(session, now, stocked_store, dispatcher):
    update_notification_settings(session, stocked_store.id, low_stock=False)

    summary = generate_notifications(session, stocked_store.id, dispatch=dispatcher, now=now)

    assert [notification.type for notification in summary.notifications] == ["expiry_alert"]


def test_missing_store_is_rejected(session, dispatcher):
    with pytest.raises(StoreNotFoundError):
        generate_notifications(session, 999, dispatch=dispatcher)


def test_storage_failure_reports_partial_summary(
    session, now, stocked_store, dispatcher, monkeypatch
):
    real_create_if_absent = NotificationRepository.create_if_absent
    calls = {"count": 0}

    def flaky_create(self, notification, **kwargs):
        calls["count"] += 1
        if calls["count"] == 2:
            raise PersistenceError("database is locked")
        return real_create_if_absent(self, notification, **kwargs)

    monkeypatch.setattr(NotificationRepository, "create_if_absent", flaky_create)

    with pytest.raises(PersistenceError) as exc_info:
        generate_notifications(session, stocked_store.id, dispatch=dispatcher, now=now)

    assert exc_info.value.summary.generated == 1
    assert count_unread(session, stocked_store.id) == 1


def test_concurrent_generation_creates_one_notification_per_condition(
    now, make_store, make_medicine
):
    store = make_store()
    make_medicine(store.id, "Paracetamol", strip_stock=0)
    with SessionLocal() as setup_session:
        get_notification_settings(setup_session, store.id)

    workers = 4
    barrier = threading.Barrier(workers)
    summaries = []
    failures = []

    def run() -> None:
        db = SessionLocal()
        try:
            barrier.wait()
            summaries.append(
                generate_notifications(db, store.id, dispatch=lambda notification: 0, now=now)
            )
        except Exception as exc:  # pragma: no cover
            failures.append(exc)
        finally:
            db.close()

    threads = [threading.Thread(target=run) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert failures == []
    assert sum(summary.generated for summary in summaries) == 1
    assert sum(summary.duplicates for summary in summaries) == workers - 1
    with SessionLocal() as check_session:
        assert count_unread(check_session, store.id) == 1


def test_generate_for_active_stores_runs_each_store(make_store, make_medicine, dispatcher, now):
    first = make_store("First")
    second = make_store("Second")
    make_medicine(first.id, "Paracetamol", strip_stock=0)
    make_medicine(second.id, "Paracetamol", strip_stock=0)

    summaries = generate_for_active_stores(SessionLocal, dispatch=dispatcher, now=now)

    assert [summary.store_id for summary in summaries] == [first.id, second.id]
    assert [summary.generated for summary in summaries] == [1, 1]


def test_dispatch_outside_the_server_is_a_no_op(session, now, stocked_store):
    summary = generate_notifications(
        session, stocked_store.id, dispatch=lambda notification: 0, now=now
    )

    assert dispatch_notification(summary.notifications[0]) == 0


def test_mark_read_is_idempotent_and_scoped_to_the_store(
    session, now, stocked_store, make_store, dispatcher
):
    other_store = make_store("Other")
    summary = generate_notifications(session, stocked_store.id, dispatch=dispatcher, now=now)
    notification_id = summary.notifications[0].id

    first = mark_notification_read(session, stocked_store.id, notification_id)
    second = mark_notification_read(session, stocked_store.id, notification_id)

    assert first.is_read is True
    assert second.is_read is True
    assert second.created_at == first.created_at
    with pytest.raises(NotificationNotFoundError):
        mark_notification_read(session, other_store.id, notification_id)
    with pytest.raises(NotificationNotFoundError):
        mark_notification_read(session, stocked_store.id, 9999)


def test_bulk_mark_read_ignores_foreign_ids(session, now, stocked_store, make_store, dispatcher):
    summary = generate_notifications(session, stocked_store.id, dispatch=dispatcher, now=now)
    ids = [notification.id for notification in summary.notifications]
    other_store = make_store("Other")

    assert mark_notifications_read(session, other_store.id, ids) == 0
    assert mark_notifications_read(session, stocked_store.id, ids + ids) == 2
    assert count_unread(session, stocked_store.id) == 0
    with pytest.raises(NotificationValidationError):
        mark_notifications_read(session, stocked_store.id, [])


def test_list_notifications_filters_and_paginates(session, now, stocked_store, dispatcher):
    generate_notifications(session, stocked_store.id, dispatch=dispatcher, now=now)

    page = list_notifications(session, stocked_store.id, limit=1)
    assert page.total == 2
    assert page.total_pages == 2
    assert len(page.items) == 1

    high = list_notifications(session, stocked_store.id, priority="high")
    assert [item.type for item in high.items] == ["expiry_alert"]

    searched = list_notifications(session, stocked_store.id, search="paracetamol")
    assert [item.type for item in searched.items] == ["low_stock"]

    with pytest.raises(NotificationValidationError):
        list_notifications(session, stocked_store.id, type="birthday")
    with pytest.raises(NotificationValidationError):
        list_notifications(session, stocked_store.id, limit=500)


def test_listing_order_follows_publish_order_across_overlapping_runs(
    now, make_store, make_medicine
):
    store = make_store()
    alpha = make_medicine(store.id, "Alpha", strip_stock=0)
    make_medicine(store.id, "Beta", strip_stock=0)
    with SessionLocal() as setup_session:
        get_notification_settings(setup_session, store.id)

    started = threading.Event()
    release = threading.Event()
    delivered = []
    failures = []

    def record(notification) -> int:
        delivered.append(notification.id)
        return 1

    def only(name):
        def scanner(session, store_id, *, settings, now):
            for candidate in scan_low_stock(session, store_id, settings=settings, now=now):
                if candidate.metadata["medicine_name"] == name:
                    yield candidate

        return scanner

    def gated_alpha(session, store_id, *, settings, now):
        started.set()
        release.wait(timeout=10)
        yield from only("Alpha")(session, store_id, settings=settings, now=now)

    def run(scanner, run_now) -> None:
        db = SessionLocal()
        try:
            generate_notifications(
                db, store.id, scanners={"low_stock": scanner}, dispatch=record, now=run_now
            )
        except Exception as exc:  # pragma: no cover
            failures.append(exc)
        finally:
            db.close()

    slow = threading.Thread(target=run, args=(gated_alpha, now))
    slow.start()
    assert started.wait(timeout=10)
    run(only("Beta"), now + timedelta(seconds=1))
    release.set()
    slow.join()

    assert failures == []
    with SessionLocal() as check_session:
        listed = list_notifications(check_session, store.id)
    assert [item.id for item in listed.items] == list(reversed(delivered))
    assert listed.items[0].related_entity == f"medicine:{alpha.id}"


def test_listing_is_newest_first_while_delivery_is_oldest_first(
    session, now, make_store, make_medicine, dispatcher
):
    store = make_store()
    make_medicine(store.id, "Paracetamol", strip_stock=0)
    scanners = {"low_stock": scan_low_stock}

    generate_notifications(session, store.id, scanners=scanners, dispatch=dispatcher, now=now)
    make_medicine(store.id, "Amoxicillin", strip_stock=1, strip_min_stock=5)
    generate_notifications(
        session, store.id, scanners=scanners, dispatch=dispatcher, now=now + timedelta(hours=1)
    )

    delivered = [notification.id for notification in dispatcher.notifications]
    listed = list_notifications(session, store.id)

    assert len(delivered) == 2
    assert [item.id for item in listed.items] == list(reversed(delivered))
    assert listed.items[0].created_at >= listed.items[1].created_at
