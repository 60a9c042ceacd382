"""HTTP API for the synthetic weather forecast."""

from typing import List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from .forecast_service import WeatherService
from .models import HourlyForecast
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weather_api/api")

FORECAST_ERROR_MESSAGE = "An error occurred while retrieving the weather forecast"

router = APIRouter()


def get_weather_service(request: Request) -> WeatherService:
    """Return the WeatherService wired onto the application at startup."""
    return request.app.state.weather_service


@router.get(
    "/WeatherForecast",
    response_model=List[HourlyForecast],
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "description": "Forecast generation failed",
            "content": {"text/plain": {"example": FORECAST_ERROR_MESSAGE}},
        },
    },
    summary="Get the 24-hour weather forecast",
)
async def get_forecast(service: WeatherService = Depends(get_weather_service)):
    """Return hourly temperature and rainfall for the next 24 hours."""
    logger.info("Weather forecast requested")
    try:
        forecast = await service.get_forecast()
        payload = [hour.model_dump(mode="json", by_alias=True) for hour in forecast]
        return JSONResponse(payload, status_code=status.HTTP_200_OK)
    except Exception:
        logger.exception("Error occurred while retrieving weather forecast")
        return PlainTextResponse(
            FORECAST_ERROR_MESSAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )