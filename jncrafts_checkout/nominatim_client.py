"""OpenStreetMap Nominatim client for resolving shipping addresses."""

import logging
import os

import requests
from dotenv import load_dotenv

from jncrafts_checkout.base_client import GeocoderClient
from jncrafts_checkout.exceptions import GeocodeNotFound, GeocodeUnavailable
from jncrafts_checkout.models import Coordinate, geocode_query

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_USER_AGENT = "JnCraftsApp/1.0 (contact@jncrafts.com)"
DEFAULT_TIMEOUT = 10.0


class NominatimClient(GeocoderClient):
    """Client for the Nominatim address search API."""

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
    ):
        self.base_url = base_url or os.getenv("GEOCODER_URL", DEFAULT_URL)
        self.user_agent = user_agent or os.getenv("GEOCODER_USER_AGENT", DEFAULT_USER_AGENT)
        self.timeout = float(timeout or os.getenv("GEOCODER_TIMEOUT", DEFAULT_TIMEOUT))
        if not self.base_url:
            raise ValueError(
                "GEOCODER_URL must be set either as an argument or in a .env file."
            )

        self.session = requests.Session()
        # Nominatim's usage policy requires an identifying User-Agent.
        self.session.headers.update({"User-Agent": self.user_agent})

    def _get(self, params: dict) -> list[dict]:
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Geocoding request failed: %s", exc)
            raise GeocodeUnavailable(f"Geocoding service unavailable: {exc}") from exc

        if not isinstance(data, list):
            raise GeocodeUnavailable("Geocoding service returned an unexpected response")
        return data

    def search(self, query: str, limit: int = 1) -> list[dict]:
        """Run a raw address search.

        Args:
            query: Free-text search string.
            limit: Maximum number of candidates to return.

        Returns:
            List of candidate dicts from the Nominatim API.
        """
        params = {
            "format": "json",
            "q": query,
            "limit": limit,
            "countrycodes": "ke",
        }
        return self._get(params)

    def geocode(self, address: str, city: str | None = None) -> Coordinate:
        """Resolve an address to coordinates.

        Args:
            address: Street address or landmark.
            city: Optional city appended to the query.

        Returns:
            Coordinate of the first candidate.

        Raises:
            ValueError: If *address* is blank.
            GeocodeNotFound: No candidates matched.
            GeocodeUnavailable: The request failed or the response could
                not be parsed.
        """
        if not address or not address.strip():
            raise ValueError("address must not be blank")

        query = geocode_query(address, city)
        candidates = self.search(query)
        if not candidates:
            logger.info("No geocoding candidates for %r", query)
            raise GeocodeNotFound(f"No location found for {query!r}")

        first = candidates[0]
        try:
            return Coordinate(
                latitude=float(first["lat"]),
                longitude=float(first["lon"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodeUnavailable(f"Malformed geocoding candidate: {first!r}") from exc
