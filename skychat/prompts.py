from typing import List, Optional, Sequence

from langchain_core.prompts import PromptTemplate

from .memory import LocationContext, WeatherContextEntry
from .models import Message


WEATHER_PROMPT = PromptTemplate(
    template=(
        "You are a helpful weather assistant. Here's the detailed context:\n\n"
        "Location Context:\n"
        "- Current Location: {current_location}\n"
        "- Previous Location: {previous_location}\n"
        "- Recent Locations: {recent_locations}\n\n"
        "Conversation History:\n{history}\n\n"
        "Current Weather Data: {weather_summary}\n\n"
        "User Question: {question}\n\n"
        "Instructions:\n"
        "1. Be specific about which location you're discussing\n"
        "2. Compare with previous location when relevant\n"
        "3. Keep responses conversational but brief (1-2 sentences)\n"
        "4. Acknowledge location changes when they occur\n"
        "5. Use the most recent weather data available"
    ),
    input_variables=[
        "current_location",
        "previous_location",
        "recent_locations",
        "history",
        "weather_summary",
        "question",
    ],
)


def format_message(message: Message) -> str:
    if message.kind == "weather":
        w = message.weather
        if w is None:
            return f"Location: {message.location}"
        return (
            f"Location: {message.location}\n"
            f"Weather: {w.temperature}°F (feels like {w.feels_like}°F), {w.condition}, Wind: {w.wind_speed} mph"
        )
    speaker = "Human" if message.kind == "user" else "Assistant"
    return f"{speaker}: {message.text or ''}"


def format_history(transcript: Sequence[Message], max_messages: int = 4) -> str:
    """Render the last few transcript entries, oldest first."""
    recent: List[Message] = list(transcript)[-max_messages:]
    return "\n".join(format_message(m) for m in recent)


def compose(
    context: LocationContext,
    weather_entries: Sequence[WeatherContextEntry],
    transcript: Sequence[Message],
    weather_summary: Optional[str],
    question: str,
) -> str:
    return WEATHER_PROMPT.format(
        current_location=context.current or "Unknown",
        previous_location=context.previous or "None",
        recent_locations=", ".join(w.location for w in list(weather_entries)[-3:]),
        history=format_history(transcript),
        weather_summary=weather_summary or "",
        question=question,
    )
