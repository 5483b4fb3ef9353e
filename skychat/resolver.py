"""Decide which place an utterance is about.

The cascade below is tried in order and the first branch that yields a place
wins. Only explicit mentions (and the relative-reference fallback to the last
weather card) move the location context; the other branches read it.
"""

import logging
import re
from typing import Optional, Sequence

from .memory import LocationContext
from .models import Message

logger = logging.getLogger("skychat.resolver")

# Location text runs until the next sentence punctuation
_PLACE = r"([^?.,!]+)"
_APOS = r"[’']?"

EXPLICIT_PATTERNS = [
    re.compile(r"\bweather\s+(?:in|at|for)\s+" + _PLACE, re.IGNORECASE),
    re.compile(
        r"\b(?:how|what)" + _APOS + r"s\s+(?:it|the weather)\s+(?:in|at|like in|like at)\s+" + _PLACE,
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?:what is|tell me|show me)\s+(?:the weather|temperature|the temperature)\s+(?:in|at|for)\s+" + _PLACE,
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:how about|what about)\s+" + _PLACE, re.IGNORECASE),
    re.compile(r"\bin\s+" + _PLACE, re.IGNORECASE),
]

RELATIVE_PATTERNS = [
    re.compile(r"\b(?:over|out) there\b", re.IGNORECASE),
    re.compile(r"\bthat location\b", re.IGNORECASE),
    re.compile(r"\bthat place\b", re.IGNORECASE),
    re.compile(r"\bthere now\b", re.IGNORECASE),
    re.compile(r"\bthe same place\b", re.IGNORECASE),
    re.compile(r"\bthat city\b", re.IGNORECASE),
]

WEATHER_KEYWORDS = re.compile(
    r"\b(?:weather|temperature|rain|sunny|cloudy|cold|hot|warm|cool)",
    re.IGNORECASE,
)

# Captures that point back at an earlier place instead of naming one
_DEICTIC_CAPTURE = re.compile(
    r"^(?:(?:over|out|in|up|down)\s+)?(?:there|here)(?:\s+now)?$"
    r"|^(?:that|this|the same)\s+(?:location|place|city|town|spot)$"
    r"|^(?:it|that|this)$",
    re.IGNORECASE,
)


def match_explicit(utterance: str) -> Optional[str]:
    """Return the first explicitly named place, trimmed, or None."""
    for pattern in EXPLICIT_PATTERNS:
        match = pattern.search(utterance)
        if not match:
            continue
        place = match.group(1).strip()
        if not place or _DEICTIC_CAPTURE.match(place):
            continue
        return place
    return None


def has_relative_reference(utterance: str) -> bool:
    return any(p.search(utterance) for p in RELATIVE_PATTERNS)


def mentions_weather(utterance: str) -> bool:
    return WEATHER_KEYWORDS.search(utterance) is not None


def _last_weather_location(transcript: Sequence[Message]) -> Optional[str]:
    for m in reversed(transcript):
        if m.kind == "weather" and m.location:
            return m.location
    return None


def resolve(
    utterance: str,
    context: LocationContext,
    transcript: Sequence[Message],
    fallback_location: Optional[str] = None,
) -> Optional[str]:
    text = utterance or ""
    last_weather_location = _last_weather_location(transcript)

    place = match_explicit(text)
    if place:
        logger.debug("Explicit location: %s", place)
        context.update(place)
        return place

    if has_relative_reference(text):
        # Reusing the current location leaves the context as it is
        if context.current:
            logger.debug("Relative reference -> current context %s", context.current)
            return context.current
        if last_weather_location:
            logger.debug("Relative reference -> last weather card %s", last_weather_location)
            context.update(last_weather_location)
            return last_weather_location

    if "weather" in text.lower() and fallback_location:
        logger.debug("General weather question -> client location %s", fallback_location)
        return fallback_location

    if last_weather_location and mentions_weather(text):
        logger.debug("Implicit continuation -> %s", last_weather_location)
        return last_weather_location

    logger.debug("No location resolved")
    return None
