import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from a .env if present
load_dotenv()


class ConfigurationError(Exception):
    """A required credential or setting is missing; not recoverable per request."""


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    return float(raw) if raw else None


@dataclass
class AppConfig:
    # LLM
    google_api_key: Optional[str]
    gemini_model: str

    # Weather / OWM
    openweather_api_key: Optional[str]
    openweather_base_url: str
    openweather_geo_url: str
    # None means wait indefinitely
    http_timeout_seconds: Optional[float]

    # Client location fallback
    default_location: Optional[str]
    enable_ip_geolocation: bool
    ip_geolocation_url: str

    # LangSmith
    langsmith_api_key: Optional[str]
    langsmith_project: Optional[str]
    langchain_tracing_v2: bool

    # LLM tuning (defaults)
    llm_temperature: float = 0.7
    llm_top_p: float = 0.7
    llm_top_k: int = 50
    llm_max_output_tokens: Optional[int] = 1000
    llm_timeout_seconds: Optional[float] = None


def load_config() -> AppConfig:
    return AppConfig(
        google_api_key=os.getenv("GOOGLE_API_KEY"),
        gemini_model=os.getenv("DEFAULT_GEMINI_MODEL", "gemini-2.0-flash-lite"),
        llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
        llm_top_p=float(os.getenv("LLM_TOP_P", "0.7")),
        llm_top_k=int(os.getenv("LLM_TOP_K", "50")),
        llm_max_output_tokens=(
            int(os.getenv("LLM_MAX_OUTPUT_TOKENS")) if os.getenv("LLM_MAX_OUTPUT_TOKENS") else 1000
        ),
        llm_timeout_seconds=_optional_float("LLM_TIMEOUT_SECONDS"),
        openweather_api_key=os.getenv("OPENWEATHER_API_KEY"),
        openweather_base_url=os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5"),
        openweather_geo_url=os.getenv("OPENWEATHER_GEO_URL", "https://api.openweathermap.org/geo/1.0"),
        http_timeout_seconds=_optional_float("HTTP_TIMEOUT_SECONDS"),
        default_location=os.getenv("DEFAULT_LOCATION") or None,
        enable_ip_geolocation=os.getenv("ENABLE_IP_GEOLOCATION", "false").lower() == "true",
        ip_geolocation_url=os.getenv("IP_GEOLOCATION_URL", "https://ipapi.co/json/"),
        langsmith_api_key=os.getenv("LANGSMITH_API_KEY"),
        langsmith_project=os.getenv("LANGSMITH_PROJECT", "SkyChat"),
        langchain_tracing_v2=os.getenv("LANGCHAIN_TRACING_V2", "false").lower() == "true",
    )


def validate_config(config: AppConfig) -> AppConfig:
    """Fail fast when the completion provider key is absent.

    The weather key is checked per lookup instead, so a missing one only costs
    the weather card for that turn.
    """
    if not config.google_api_key:
        raise ConfigurationError("GOOGLE_API_KEY is required to reach the completion model.")
    return config
