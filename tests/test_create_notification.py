"""Tests for notifications raised directly by other subsystems."""

from __future__ import annotations

import pytest

from shelfcure.application.use_cases.notifications import (
    count_unread,
    create_notification,
    list_notifications,
)
from shelfcure.domain.exceptions import NotificationValidationError, StoreNotFoundError


def test_create_persists_and_publishes(session, make_store):
    store = make_store()
    published = []

    notification = create_notification(
        session,
        store.id,
        type="payment_reminder",
        title="  Payment due  ",
        message="Invoice 42 is due tomorrow",
        priority="high",
        related_entity="invoice:42",
        action_required=True,
        metadata={"invoice_id": 42},
        dispatch=published.append,
    )

    assert notification.id is not None
    assert notification.title == "Payment due"
    assert notification.created_at is not None
    assert published == [notification]
    listed = list_notifications(session, store.id, type="payment_reminder")
    assert [item.id for item in listed.items] == [notification.id]
    assert listed.items[0].metadata == {"invoice_id": 42}


def test_repeated_creates_are_all_kept(session, make_store):
    store = make_store()

    for _ in range(2):
        create_notification(
            session,
            store.id,
            type="system",
            title="Maintenance",
            message="Backup tonight",
            related_entity="backup",
            dispatch=lambda notification: 0,
        )

    assert count_unread(session, store.id) == 2


def test_dispatch_failure_still_returns_the_notification(session, make_store):
    store = make_store()

    def failing_dispatch(notification):
        raise RuntimeError("socket closed")

    notification = create_notification(
        session,
        store.id,
        type="customer_message",
        title="New message",
        message="Is insulin in stock?",
        dispatch=failing_dispatch,
    )

    assert notification.id is not None
    assert count_unread(session, store.id) == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"type": "birthday"},
        {"priority": "urgent"},
        {"title": "   "},
        {"message": ""},
    ],
)
def test_create_rejects_invalid_input(session, make_store, overrides):
    store = make_store()
    fields = {"type": "system", "title": "Title", "message": "Body", **overrides}

    with pytest.raises(NotificationValidationError):
        create_notification(session, store.id, dispatch=lambda notification: 0, **fields)

    assert count_unread(session, store.id) == 0


def test_create_for_unknown_store_is_rejected(session):
    with pytest.raises(StoreNotFoundError):
        create_notification(
            session, 999, type="system", title="Title", message="Body", dispatch=lambda n: 0
        )
