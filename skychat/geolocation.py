import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from .config import AppConfig

logger = logging.getLogger("skychat.geolocation")


class GeoLocation(BaseModel):
    """Approximate client position from an IP lookup service (ipapi.co shape)."""

    city: str
    region: str = ""
    country: str = Field("", alias="country_name")
    lat: Optional[float] = Field(None, alias="latitude")
    lon: Optional[float] = Field(None, alias="longitude")

    def label(self) -> str:
        return ", ".join(p for p in [self.city, self.region] if p)


def lookup_client_location(
    config: AppConfig, transport: Optional[httpx.BaseTransport] = None
) -> Optional[GeoLocation]:
    if not config.enable_ip_geolocation:
        return None
    try:
        with httpx.Client(timeout=httpx.Timeout(timeout=config.http_timeout_seconds), transport=transport) as client:
            resp = client.get(config.ip_geolocation_url)
            resp.raise_for_status()
            data: Dict[str, Any] = resp.json()
        return GeoLocation.model_validate(data)
    except (httpx.HTTPError, ValueError, ValidationError) as e:
        # No fallback location; the resolver simply skips that branch
        logger.warning("IP geolocation failed: %s", e)
        return None


def fallback_location(config: AppConfig, transport: Optional[httpx.BaseTransport] = None) -> Optional[str]:
    """DEFAULT_LOCATION wins; otherwise the IP lookup when enabled."""
    if config.default_location:
        return config.default_location
    geo = lookup_client_location(config, transport=transport)
    return geo.label() if geo else None
