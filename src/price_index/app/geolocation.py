"""Best-effort, one-shot location lookup.

A failed lookup is never an error: the caller just searches without a
location bias and distances in the answer become approximate.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from src.price_index.types.search import Coordinate
from src.price_index.utils.logging import setup_logger

if TYPE_CHECKING:
    from src.price_index.config import Settings

logger = setup_logger(__name__)

Locator = Callable[[], Coordinate | None]


def locate_by_ip(url: str, timeout: int = 5) -> Coordinate | None:
    """Look up the caller's approximate position from an IP geolocation endpoint.

    Accepts `latitude`/`longitude` or `lat`/`lon` keys in the JSON body.

    Returns:
        The coordinate, or None on any network, HTTP or parsing failure.
    """
    try:
        with httpx.Client(timeout=timeout) as client:
            response = client.get(url)
            response.raise_for_status()
            data = response.json()
    except httpx.TimeoutException:
        logger.warning(f"Geolocation timed out for URL: {url}")
        return None
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(
            "Geolocation unavailable. Distance estimates might be inaccurate.",
            extra={"url": url, "error": str(e)},
        )
        return None

    return _parse_coordinate(data)


def _parse_coordinate(data: Any) -> Coordinate | None:
    if not isinstance(data, dict):
        logger.warning("Geolocation response is not a JSON object")
        return None

    latitude = data.get("latitude", data.get("lat"))
    longitude = data.get("longitude", data.get("lon"))
    if latitude is None or longitude is None:
        logger.warning("Geolocation response has no coordinates", extra={"keys": sorted(data)})
        return None

    try:
        return Coordinate(latitude=latitude, longitude=longitude)
    except ValidationError as e:
        logger.warning("Geolocation returned invalid coordinates", extra={"error": str(e)})
        return None


def build_locator(settings: Settings) -> Locator:
    """Pick the locator for the configured environment.

    A fixed coordinate in settings wins over the network lookup; with
    geolocation disabled the locator always returns None.
    """
    if settings.default_latitude is not None and settings.default_longitude is not None:
        fixed = Coordinate(latitude=settings.default_latitude, longitude=settings.default_longitude)
        return lambda: fixed

    if not settings.geolocation_enabled:
        return lambda: None

    return lambda: locate_by_ip(
        settings.geolocation_url,
        timeout=settings.geolocation_timeout_seconds,
    )
