import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shelfcure.config import get_settings
from shelfcure.infrastructure.database import engine, initialize_database
from shelfcure.interfaces.api.routes import register_routes
from shelfcure.interfaces.scheduler import build_notification_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema, start periodic scans if enabled and release resources on exit."""

    settings = get_settings()
    initialize_database()

    scheduler = None
    if settings.notification_scheduler_enabled:
        scheduler = build_notification_scheduler(
            interval_minutes=settings.notification_scan_interval_minutes
        )
        scheduler.start()
        logger.info(
            "Notification scans scheduled every %s minutes",
            settings.notification_scan_interval_minutes,
        )

    yield

    if scheduler is not None:
        scheduler.shutdown(wait=False)
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="ShelfCure Notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
