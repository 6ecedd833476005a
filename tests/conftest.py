"""Shared fixtures: a throwaway SQLite database and seed helpers."""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

TEST_DB_PATH = Path(tempfile.gettempdir()) / "shelfcure_notifications_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["NOTIFICATION_SCHEDULER_ENABLED"] = "false"

from shelfcure.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from shelfcure.application.use_cases.users import create_store, create_user  # noqa: E402
from shelfcure.domain.entities import (  # noqa: E402
    ROLE_STORE_MANAGER,
    WHATSAPP_STATUS_PENDING,
    Batch,
    Medicine,
    WhatsAppMessage,
)
from shelfcure.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from shelfcure.infrastructure.repositories import (  # noqa: E402
    InventoryRepository,
    WhatsAppMessageRepository,
)
from shelfcure.utils import now_in_app_timezone  # noqa: E402

DEFAULT_PASSWORD = "StrongPass123"


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure every test starts from an empty schema."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def now() -> datetime:
    return now_in_app_timezone()


@pytest.fixture
def make_store(session):
    def _make_store(name: str = "City Pharmacy"):
        return create_store(session, name=name)

    return _make_store


@pytest.fixture
def make_user(session):
    def _make_user(
        email: str,
        *,
        store_id: int | None,
        role: str = ROLE_STORE_MANAGER,
        password: str = DEFAULT_PASSWORD,
    ):
        return create_user(
            session,
            name=email.split("@")[0].title(),
            email=email,
            password=password,
            role=role,
            store_id=store_id,
        )

    return _make_user


@pytest.fixture
def make_medicine(session):
    def _make_medicine(
        store_id: int,
        name: str,
        *,
        strip_stock: int = 50,
        strip_min_stock: int = 10,
        has_strips: bool = True,
        has_individual: bool = False,
        individual_stock: int = 0,
        individual_min_stock: int = 0,
        is_active: bool = True,
    ) -> Medicine:
        return InventoryRepository(session).add_medicine(
            Medicine(
                id=None,
                store_id=store_id,
                name=name,
                generic_name=None,
                has_strips=has_strips,
                has_individual=has_individual,
                strip_stock=strip_stock,
                strip_min_stock=strip_min_stock,
                individual_stock=individual_stock,
                individual_min_stock=individual_min_stock,
                is_active=is_active,
            )
        )

    return _make_medicine


@pytest.fixture
def make_batch(session, now):
    def _make_batch(
        medicine: Medicine,
        batch_number: str,
        *,
        expires_in: timedelta,
        strip_quantity: int = 10,
        individual_quantity: int = 0,
        is_active: bool = True,
    ) -> Batch:
        return InventoryRepository(session).add_batch(
            Batch(
                id=None,
                medicine_id=medicine.id,
                store_id=medicine.store_id,
                batch_number=batch_number,
                expiry_date=now + expires_in,
                strip_quantity=strip_quantity,
                individual_quantity=individual_quantity,
                is_active=is_active,
            )
        )

    return _make_batch


@pytest.fixture
def make_whatsapp_message(session, now):
    def _make_message(
        store_id: int,
        *,
        status: str = WHATSAPP_STATUS_PENDING,
        age: timedelta = timedelta(0),
        error: str | None = None,
        recipient: str = "+911234567890",
    ) -> WhatsAppMessage:
        return WhatsAppMessageRepository(session).enqueue(
            WhatsAppMessage(
                id=None,
                store_id=store_id,
                recipient=recipient,
                body="Your order is ready",
                status=status,
                error=error,
                created_at=now - age,
            )
        )

    return _make_message
