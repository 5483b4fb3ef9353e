import time
from dataclasses import dataclass, field
from typing import List, Optional

from .models import Message, WeatherRecord


@dataclass
class LocationContext:
    """Current and previous resolved location; a 1-deep history, not a stack."""

    current: Optional[str] = None
    previous: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def update(self, new_location: str) -> None:
        self.previous = self.current
        self.current = new_location
        self.timestamp = time.time()


@dataclass
class WeatherContextEntry:
    location: str
    record: WeatherRecord
    timestamp: float = field(default_factory=time.time)


@dataclass
class ConversationContext:
    """Ephemeral per-session memory persisted in the UI session.

    Holds the location pair used to interpret "there"/"that city", the weather
    lookups made so far (one per location string) and the chat transcript.
    """

    location: LocationContext = field(default_factory=LocationContext)
    weather: List[WeatherContextEntry] = field(default_factory=list)
    transcript: List[Message] = field(default_factory=list)

    def update_location(self, new_location: str) -> None:
        self.location.update(new_location)

    def record_weather(self, location: str, record: WeatherRecord) -> None:
        # Exact, case-sensitive key match
        self.weather = [w for w in self.weather if w.location != location]
        self.weather.append(WeatherContextEntry(location=location, record=record))

    def append(self, message: Message) -> None:
        self.transcript.append(message)

    def recent_locations(self, n: int = 3) -> List[str]:
        return [w.location for w in self.weather[-n:]]

    def reset(self) -> None:
        self.location = LocationContext()
        self.weather = []
        self.transcript = []
