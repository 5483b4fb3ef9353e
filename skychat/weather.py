import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import AppConfig
from .models import WeatherRecord

logger = logging.getLogger("skychat.weather")

ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"


class WeatherFetchError(Exception):
    """Any failure to turn a place name into current conditions."""


class LocationNotFoundError(WeatherFetchError):
    def __init__(self, query: str):
        super().__init__(f"No geocoding match for {query!r}")
        self.query = query


class WeatherClient:
    """OpenWeatherMap geocode + current conditions, imperial units, no caching."""

    def __init__(self, config: AppConfig, transport: Optional[httpx.BaseTransport] = None):
        self._config = config
        self._base_url = config.openweather_base_url.rstrip("/")
        self._geo_url = config.openweather_geo_url.rstrip("/")
        # http_timeout_seconds=None disables the timeout entirely
        self._timeout = httpx.Timeout(timeout=config.http_timeout_seconds)
        self._transport = transport

    def _get(self, url: str, params: Dict[str, Any]) -> Any:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            raise WeatherFetchError(f"Weather service request failed: {e}") from e
        except ValueError as e:
            raise WeatherFetchError(f"Weather service returned invalid JSON: {e}") from e

    def _require_key(self) -> str:
        if not self._config.openweather_api_key:
            raise WeatherFetchError("OPENWEATHER_API_KEY missing.")
        return self._config.openweather_api_key

    def geocode(self, place: str, limit: int = 1) -> List[Dict[str, Any]]:
        params = {"q": place, "limit": limit, "appid": self._require_key()}
        data = self._get(f"{self._geo_url}/direct", params)
        if not isinstance(data, list):
            return []
        return data

    def current_conditions(self, lat: float, lon: float) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "lat": lat,
            "lon": lon,
            "units": "imperial",
            "appid": self._require_key(),
        }
        return self._get(f"{self._base_url}/weather", params)

    @staticmethod
    def normalize(data: Dict[str, Any]) -> WeatherRecord:
        try:
            main = data["main"]
            first = (data.get("weather") or [])[0]
            return WeatherRecord(
                temperature=round(main["temp"]),
                feels_like=round(main["feels_like"]),
                condition=first.get("main") or "",
                humidity=round(main.get("humidity", 0)),
                wind_speed=round((data.get("wind") or {}).get("speed", 0)),
                icon=first.get("icon") or "",
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise WeatherFetchError(f"Unexpected current-conditions payload: {e}") from e

    def fetch_current_weather(self, location: str) -> WeatherRecord:
        candidates = self.geocode(location, limit=1)
        if not candidates:
            raise LocationNotFoundError(location)
        try:
            lat = float(candidates[0]["lat"])
            lon = float(candidates[0]["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherFetchError(f"Unexpected geocoding payload for {location!r}") from e
        logger.debug("Geocoded %s -> (%s, %s)", location, lat, lon)
        record = self.normalize(self.current_conditions(lat, lon))
        logger.info("Weather for %s: %s°F %s", location, record.temperature, record.condition)
        return record


def format_weather_summary(location: str, record: WeatherRecord) -> str:
    return (
        f"Current weather in {location}:\n"
        f"Temperature: {record.temperature}°F\n"
        f"Feels like: {record.feels_like}°F\n"
        f"Condition: {record.condition}\n"
        f"Wind Speed: {record.wind_speed} mph"
    )


def icon_url(record: WeatherRecord) -> str:
    return ICON_URL.format(icon=record.icon)
