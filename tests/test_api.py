import asyncio
import logging
import unittest

import httpx
from fastapi.testclient import TestClient

from weather_api.api import FORECAST_ERROR_MESSAGE, get_weather_service
from weather_api.config import Settings
from weather_api.forecast_service import WeatherService
from weather_api.main import create_app
from weather_api.models import HourlyForecast, celsius_to_fahrenheit


def _settings(**overrides) -> Settings:
    values = {"environment": "production", "simulated_delay_ms": 0}
    values.update(overrides)
    return Settings(**values)


class ThrowingRandom:
    def randrange(self, start, stop):
        raise RuntimeError("secret internal detail")

    def random(self):
        raise RuntimeError("secret internal detail")


class StaticService:
    def __init__(self, forecast):
        self.forecast = forecast

    async def get_forecast(self):
        return self.forecast


class TestForecastEndpoint(unittest.TestCase):
    def setUp(self):
        self.app = create_app(_settings())
        self.client = TestClient(self.app)

    def tearDown(self):
        self.app.dependency_overrides.clear()

    def test_returns_24_hours(self):
        resp = self.client.get("/api/WeatherForecast")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.headers["content-type"].startswith("application/json"))
        data = resp.json()
        self.assertEqual(len(data), 24)
        self.assertEqual([item["hour"] for item in data], list(range(1, 25)))

    def test_record_shape_and_ranges(self):
        data = self.client.get("/api/WeatherForecast").json()
        for item in data:
            self.assertEqual(list(item), ["hour", "temperatureC", "rainfallMm", "temperatureF"])
            self.assertIsInstance(item["temperatureC"], int)
            self.assertIsInstance(item["temperatureF"], int)
            self.assertGreaterEqual(item["temperatureC"], -5)
            self.assertLessEqual(item["temperatureC"], 34)
            self.assertGreaterEqual(item["rainfallMm"], 0.0)
            self.assertLessEqual(item["rainfallMm"], 10.0)
            self.assertEqual(item["rainfallMm"], round(item["rainfallMm"], 1))
            self.assertEqual(item["temperatureF"], celsius_to_fahrenheit(item["temperatureC"]))

    def test_repeated_calls_keep_shape(self):
        for _ in range(3):
            data = self.client.get("/api/WeatherForecast").json()
            self.assertEqual(len(data), 24)

    def test_fixed_seed_repeats_values(self):
        client = TestClient(create_app(_settings(random_seed=5)))
        first = client.get("/api/WeatherForecast").json()
        second = client.get("/api/WeatherForecast").json()
        self.assertEqual(first, second)

    def test_serves_injected_forecast(self):
        forecast = [
            HourlyForecast(hour=1, temperature_c=20, rainfall_mm=2.5),
            HourlyForecast(hour=2, temperature_c=18, rainfall_mm=0.0),
        ]
        self.app.dependency_overrides[get_weather_service] = lambda: StaticService(forecast)

        resp = self.client.get("/api/WeatherForecast")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            [
                {"hour": 1, "temperatureC": 20, "rainfallMm": 2.5, "temperatureF": 67},
                {"hour": 2, "temperatureC": 18, "rainfallMm": 0.0, "temperatureF": 64},
            ],
        )

    def test_generation_failure_returns_500_without_detail(self):
        self.app.dependency_overrides[get_weather_service] = lambda: WeatherService(lambda: ThrowingRandom())

        resp = self.client.get("/api/WeatherForecast")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.text, FORECAST_ERROR_MESSAGE)
        self.assertTrue(resp.headers["content-type"].startswith("text/plain"))
        self.assertNotIn("secret", resp.text)

    def test_logs_request_and_failure(self):
        self.app.dependency_overrides[get_weather_service] = lambda: WeatherService(lambda: ThrowingRandom())

        with self.assertLogs("weather_api.api", level=logging.INFO) as cm:
            self.client.get("/api/WeatherForecast")

        levels = [record.levelno for record in cm.records]
        messages = [record.getMessage() for record in cm.records]
        self.assertIn("Weather forecast requested", messages)
        self.assertIn("Error occurred while retrieving weather forecast", messages)
        self.assertIn(logging.ERROR, levels)
        error_record = next(r for r in cm.records if r.levelno == logging.ERROR)
        self.assertIsNotNone(error_record.exc_info)

    def test_unknown_endpoint_404(self):
        resp = self.client.get("/api/InvalidEndpoint")
        self.assertEqual(resp.status_code, 404)


class TestConcurrentRequests(unittest.IsolatedAsyncioTestCase):
    async def test_concurrent_requests_all_succeed(self):
        app = create_app(_settings(simulated_delay_ms=5))
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            responses = await asyncio.gather(*(client.get("/api/WeatherForecast") for _ in range(5)))

        for resp in responses:
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(len(resp.json()), 24)


if __name__ == "__main__":
    unittest.main()
