import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from notification_engine.config import get_settings
from notification_engine.infrastructure.database import engine, initialize_database
from notification_engine.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables on startup and release the connection pool on shutdown."""

    initialize_database()
    yield
    engine.dispose()


def configure_logging() -> None:
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    configure_logging()
    app = FastAPI(title="Notification Engine", lifespan=lifespan)
    register_routes(app)
    return app


app = create_app()
