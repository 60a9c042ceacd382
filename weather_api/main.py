"""FastAPI application setup for the Weather API."""

import logging

from fastapi import FastAPI

from .api import router as api_router
from .config import Settings, settings as default_settings
from .forecast_service import WeatherService
from .random_source import random_source_factory
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="weather_api/main")


def build_weather_service(settings: Settings) -> WeatherService:
    """Build the shared WeatherService from settings."""
    return WeatherService(
        random_source_factory(settings.random_seed),
        simulated_delay_seconds=settings.simulated_delay_ms / 1000,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI app; Swagger is only mounted in development."""
    settings = settings or default_settings
    setup_logging(level=settings.log_level)
    # Applied per app; setup_logging configures handlers only once.
    logging.getLogger().setLevel(settings.log_level)

    docs = settings.docs_enabled
    app = FastAPI(
        title="Weather API",
        version="v1",
        docs_url="/swagger" if docs else None,
        redoc_url=None,
        openapi_url="/swagger/v1/swagger.json" if docs else None,
    )
    app.state.settings = settings
    app.state.weather_service = build_weather_service(settings)

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "UP"}

    app.include_router(api_router, prefix="/api")

    logger.info(
        "Weather API configured",
        extra={"environment": settings.environment, "docs_enabled": docs},
    )
    return app


app = create_app()
