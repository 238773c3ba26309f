"""Forward geocoding of free-text search phrases."""

import logging
from typing import Protocol

import httpx

from .core import get_settings
from .errors import GeocodingError
from .geo import Coordinate

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    def geocode(self, text: str) -> Coordinate | None:
        """Resolve ``text`` to a coordinate, or ``None`` if nothing matches."""
        ...


class NominatimGeocoder:
    """Geocoder backed by a Nominatim-compatible ``/search`` endpoint."""

    def __init__(
        self,
        url: str,
        user_agent: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout
        self.transport = transport

    def geocode(self, text: str) -> Coordinate | None:
        """Return the best match for ``text``.

        Args:
            text: Free-text search phrase (street, city, landmark...).

        Returns:
            The first result's coordinate, or ``None`` when the service
            finds nothing.

        Raises:
            GeocodingError: If the service is unreachable, answers with an
                error status or returns an unexpected payload.
        """
        try:
            with httpx.Client(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
                transport=self.transport,
            ) as client:
                response = client.get(
                    self.url, params={"q": text, "format": "json", "limit": 1}
                )
                response.raise_for_status()
                results = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Geocoding request for %r failed: %s", text, exc)
            raise GeocodingError(str(exc)) from exc

        if not results:
            logger.info("No geocoding match for %r", text)
            return None

        try:
            first = results[0]
            return Coordinate(lat=float(first["lat"]), lng=float(first["lon"]))
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise GeocodingError("Unexpected geocoding response") from exc


def get_geocoder() -> Geocoder:
    """FastAPI dependency returning the configured geocoder."""
    settings = get_settings()
    return NominatimGeocoder(
        url=settings.GEOCODER_URL,
        user_agent=settings.GEOCODER_USER_AGENT,
        timeout=settings.GEOCODER_TIMEOUT,
    )
