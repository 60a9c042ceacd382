"""Specmatic stub definitions plus a builder and the canned stubs used by tests."""

from __future__ import annotations

import json
import random
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from weather_api.api import FORECAST_ERROR_MESSAGE
from weather_api.forecast_service import generate_forecast
from weather_api.models import FORECAST_HOURS, HourlyForecast
from weather_api.random_source import RandomSource

FORECAST_PATH = "/api/WeatherForecast"
JSON_HEADERS = {"Content-Type": "application/json"}


class StubRequest(BaseModel):
    """Request matcher half of a stub."""
    method: str = ""
    path: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    query: Dict[str, str] = Field(default_factory=dict)


class StubResponse(BaseModel):
    """Canned response half of a stub."""
    status: int = 200
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = None


class StubDefinition(BaseModel):
    """A request/response pair in Specmatic's external-example format."""
    model_config = ConfigDict(populate_by_name=True)

    http_request: StubRequest = Field(default_factory=StubRequest, alias="http-request")
    http_response: StubResponse = Field(default_factory=StubResponse, alias="http-response")

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize to the JSON layout Specmatic loads from its data directory."""
        payload = self.model_dump(by_alias=True, exclude_none=True)
        # Specmatic treats empty matcher maps as "match nothing"; drop them.
        for part in ("http-request", "http-response"):
            for key in ("headers", "query"):
                if not payload[part].get(key, True):
                    payload[part].pop(key)
        return json.dumps(payload, indent=indent)


class StubDefinitionBuilder:
    """Fluent builder for StubDefinition."""

    def __init__(self) -> None:
        self._request = StubRequest()
        self._response = StubResponse()

    @classmethod
    def create(cls) -> "StubDefinitionBuilder":
        return cls()

    def with_request(self, method: str, path: str) -> "StubDefinitionBuilder":
        self._request.method = method.upper()
        self._request.path = path
        return self

    def with_request_header(self, name: str, value: str) -> "StubDefinitionBuilder":
        self._request.headers[name] = value
        return self

    def with_request_query_parameter(self, name: str, value: str) -> "StubDefinitionBuilder":
        self._request.query[name] = value
        return self

    def with_response(self, status: int) -> "StubDefinitionBuilder":
        self._response.status = status
        return self

    def with_response_header(self, name: str, value: str) -> "StubDefinitionBuilder":
        self._response.headers[name] = value
        return self

    def with_response_body(self, body: Any) -> "StubDefinitionBuilder":
        self._response.body = body
        return self

    def build(self) -> StubDefinition:
        return StubDefinition(
            http_request=self._request.model_copy(deep=True),
            http_response=self._response.model_copy(deep=True),
        )


# ---------------------------------------------------------------------------
# Canned stubs
# ---------------------------------------------------------------------------


def _json_stub(method: str, path: str, status: int, body: Any) -> StubDefinition:
    builder = StubDefinitionBuilder.create().with_request(method, path).with_response(status)
    for name, value in JSON_HEADERS.items():
        builder.with_response_header(name, value)
    return builder.with_response_body(body).build()


def health_check() -> StubDefinition:
    return _json_stub("GET", "/health", 200, {"status": "UP"})


def weather_forecast_success(rng: Optional[RandomSource] = None) -> StubDefinition:
    """A 200 forecast built by the real generator, so it always fits the contract."""
    forecast = generate_forecast(rng or random.Random())
    body = [hour.model_dump(mode="json", by_alias=True) for hour in forecast]
    return _json_stub("GET", FORECAST_PATH, 200, body)


def extreme_weather() -> StubDefinition:
    """Forecast with out-of-band values, used to prove a registered stub is served."""
    body = [
        HourlyForecast(hour=hour, temperature_c=45, rainfall_mm=50.0).model_dump(mode="json", by_alias=True)
        for hour in range(1, FORECAST_HOURS + 1)
    ]
    return _json_stub("GET", FORECAST_PATH, 200, body)


def not_found(path: str) -> StubDefinition:
    return _json_stub(
        "GET",
        path,
        404,
        {"error": "Not Found", "message": f"The requested resource '{path}' was not found."},
    )


def server_error() -> StubDefinition:
    """The plain-text 500 the service sends when generation fails."""
    return (
        StubDefinitionBuilder.create()
        .with_request("GET", FORECAST_PATH)
        .with_response(500)
        .with_response_header("Content-Type", "text/plain")
        .with_response_body(FORECAST_ERROR_MESSAGE)
        .build()
    )
