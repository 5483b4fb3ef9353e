from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class TurnStatus(str, Enum):
    """Stages one submitted utterance moves through."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    LOCATION_RESOLVED = "location_resolved"
    NO_LOCATION = "no_location"
    WEATHER_FETCHED = "weather_fetched"
    WEATHER_SKIPPED = "weather_skipped"
    WEATHER_FAILED = "weather_failed"
    COMPOSING = "composing"
    AWAITING_COMPLETION = "awaiting_completion"
    DONE = "done"
    FAILED = "failed"


class WeatherRecord(BaseModel):
    """Normalized current conditions in imperial units."""

    model_config = ConfigDict(frozen=True)

    temperature: int = Field(..., description="Air temperature in °F, rounded")
    feels_like: int = Field(..., description="Apparent temperature in °F, rounded")
    condition: str = Field(..., description="Short condition label, e.g. 'Clear'")
    humidity: int = Field(..., description="Relative humidity in percent")
    wind_speed: int = Field(..., description="Wind speed in mph, rounded")
    icon: str = Field(..., description="OpenWeatherMap icon id, e.g. '01d'")


class Message(BaseModel):
    """One transcript entry.

    user/assistant messages carry ``text``; weather messages carry ``weather``
    and the ``location`` it was looked up for.
    """

    kind: Literal["user", "assistant", "weather"]
    text: Optional[str] = None
    weather: Optional[WeatherRecord] = None
    location: Optional[str] = None

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(kind="user", text=text)

    @classmethod
    def assistant(cls, text: str) -> "Message":
        return cls(kind="assistant", text=text)

    @classmethod
    def weather_report(cls, location: str, record: WeatherRecord) -> "Message":
        return cls(kind="weather", weather=record, location=location)
