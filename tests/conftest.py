"""Pytest configuration and fixtures for skychat tests."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest
from langchain_core.messages import AIMessage

from skychat.config import AppConfig
from skychat.models import WeatherRecord


def make_config(**overrides: Any) -> AppConfig:
    values: dict[str, Any] = dict(
        google_api_key="test-google-key",
        gemini_model="gemini-2.0-flash-lite",
        openweather_api_key="test-owm-key",
        openweather_base_url="https://api.openweathermap.org/data/2.5",
        openweather_geo_url="https://api.openweathermap.org/geo/1.0",
        http_timeout_seconds=None,
        default_location=None,
        enable_ip_geolocation=False,
        ip_geolocation_url="https://ipapi.co/json/",
        langsmith_api_key=None,
        langsmith_project=None,
        langchain_tracing_v2=False,
    )
    values.update(overrides)
    return AppConfig(**values)


def make_record(temperature: int = 72, **overrides: Any) -> WeatherRecord:
    values: dict[str, Any] = dict(
        temperature=temperature,
        feels_like=70,
        condition="Clear",
        humidity=50,
        wind_speed=5,
        icon="01d",
    )
    values.update(overrides)
    return WeatherRecord(**values)


def owm_conditions(
    temp: float = 72,
    feels_like: float = 70,
    condition: str = "Clear",
    humidity: int = 50,
    wind_speed: float = 5,
    icon: str = "01d",
) -> dict[str, Any]:
    """Current-conditions payload in the OpenWeatherMap response shape."""
    return {
        "main": {"temp": temp, "feels_like": feels_like, "humidity": humidity, "pressure": 1012},
        "weather": [{"id": 800, "main": condition, "description": condition.lower(), "icon": icon}],
        "wind": {"speed": wind_speed, "deg": 200},
        "name": "Somewhere",
    }


def owm_transport(
    geocode: Any = None,
    conditions: Any = None,
    status: int = 200,
    calls: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """MockTransport answering the geocode and current-weather endpoints."""
    geocode = [{"name": "Tokyo", "lat": 35.68, "lon": 139.76, "country": "JP"}] if geocode is None else geocode
    conditions = owm_conditions() if conditions is None else conditions

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if status != 200:
            return httpx.Response(status, json={"cod": status, "message": "error"})
        if request.url.path.endswith("/geo/1.0/direct"):
            return httpx.Response(200, json=geocode)
        if request.url.path.endswith("/data/2.5/weather"):
            return httpx.Response(200, json=conditions)
        return httpx.Response(404, json={"message": "not found"})

    return httpx.MockTransport(handler)


class StubLLM:
    """Chat model stand-in exposing ``invoke`` like a LangChain chat model."""

    def __init__(self, content: Any = "It's clear and pleasant there.", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[Any] = []

    def invoke(self, messages: Any) -> AIMessage:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.content)


class FakeWeatherClient:
    """Returns canned records per location; unknown places fail like an empty geocode."""

    def __init__(self, records: dict[str, WeatherRecord] | None = None):
        self.records = records or {}
        self.calls: list[str] = []
        self.on_fetch: Callable[[str], None] | None = None

    def fetch_current_weather(self, location: str) -> WeatherRecord:
        from skychat.weather import LocationNotFoundError

        self.calls.append(location)
        if self.on_fetch is not None:
            self.on_fetch(location)
        if location not in self.records:
            raise LocationNotFoundError(location)
        return self.records[location]


@pytest.fixture
def config() -> AppConfig:
    return make_config()


@pytest.fixture
def record() -> WeatherRecord:
    return make_record()
