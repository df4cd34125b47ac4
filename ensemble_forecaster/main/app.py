"""
ASGI entry point.

Importing this module loads the settings, configures logging, builds the
dependency container and exposes the FastAPI instance as ``app`` for
uvicorn (``ensemble_forecaster.main.app:app``).
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ensemble_forecaster.main.config import AppSettings, get_settings
from ensemble_forecaster.main.container import app_lifespan, init_container
from ensemble_forecaster.presentation.controllers import forecast_router, system_router
from ensemble_forecaster.shared import (
    configure_logging,
    get_logger,
    update_logging_from_settings,
)

# Environment defaults until the settings have been read.
configure_logging()
update_logging_from_settings(get_settings())

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.started_at = datetime.now(timezone.utc)
    logger.info("application.startup", started_at=app.state.started_at.isoformat())

    async with app_lifespan() as container:
        app.state.container = container
        yield

    logger.info("application.shutdown")


def _mount_cors(app: FastAPI) -> None:
    # The forecast endpoints are called from browser dashboards on other origins.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Build the FastAPI application around a freshly initialised container."""
    settings = settings or get_settings()
    init_container(settings)

    service = settings.service
    app = FastAPI(
        title=service.title,
        description=service.description,
        version=service.version,
        lifespan=lifespan,
    )
    _mount_cors(app)

    for router in (system_router, forecast_router):
        app.include_router(router)

    logger.debug("application.created", environment=settings.environment.value)
    return app


app = create_app()
