"""Tests for prompt composition."""

from __future__ import annotations

from conftest import make_record
from skychat.memory import ConversationContext, LocationContext
from skychat.models import Message
from skychat.prompts import compose, format_history, format_message


def test_placeholders_when_context_empty() -> None:
    prompt = compose(LocationContext(), [], [], "", "hello?")

    assert "- Current Location: Unknown" in prompt
    assert "- Previous Location: None" in prompt
    assert "Current Weather Data: \n" in prompt
    assert "User Question: hello?" in prompt


def test_includes_locations_and_recent_entries() -> None:
    ctx = ConversationContext()
    ctx.update_location("Tokyo")
    ctx.update_location("Paris")
    for place in ["Oslo", "Tokyo", "Paris", "Lima"]:
        ctx.record_weather(place, make_record())

    prompt = compose(ctx.location, ctx.weather, ctx.transcript, "summary text", "and Paris?")

    assert "- Current Location: Paris" in prompt
    assert "- Previous Location: Tokyo" in prompt
    assert "- Recent Locations: Tokyo, Paris, Lima" in prompt
    assert "Current Weather Data: summary text" in prompt


def test_weather_message_rendering() -> None:
    msg = Message.weather_report("Tokyo", make_record(72, feels_like=70, condition="Clear", wind_speed=5))
    assert format_message(msg) == (
        "Location: Tokyo\nWeather: 72°F (feels like 70°F), Clear, Wind: 5 mph"
    )


def test_history_uses_last_four_messages() -> None:
    transcript = [
        Message.user("one"),
        Message.assistant("two"),
        Message.user("three"),
        Message.assistant("four"),
        Message.user("five"),
    ]

    history = format_history(transcript)

    assert history.splitlines() == ["Assistant: two", "Human: three", "Assistant: four", "Human: five"]


def test_fixed_instructions_present() -> None:
    prompt = compose(LocationContext(), [], [], "", "q")

    for line in [
        "1. Be specific about which location you're discussing",
        "2. Compare with previous location when relevant",
        "3. Keep responses conversational but brief (1-2 sentences)",
        "4. Acknowledge location changes when they occur",
        "5. Use the most recent weather data available",
    ]:
        assert line in prompt
