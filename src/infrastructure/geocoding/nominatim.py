import logging
from typing import Optional

import requests
from pydantic import ValidationError

from src.application.ports import GeocoderPort
from src.domain.models import Coordinate
from src.infrastructure.config import Settings


logger = logging.getLogger(__name__)


class NominatimGeocoder(GeocoderPort):
    """Resolves a free-text place name through the OpenStreetMap Nominatim search API."""

    def __init__(self, settings: Settings | None = None, timeout: float = 10):
        self.settings = settings or Settings()
        self.url = self.settings.nominatim_url
        self.timeout = timeout

    def locate(self, query: str) -> Optional[Coordinate]:
        query = (query or "").strip()
        if not query:
            return None

        params = {"q": query, "format": "json", "limit": 1}
        headers = {"User-Agent": self.settings.nominatim_user_agent}
        try:
            resp = requests.get(self.url, params=params, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            results = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.exception("Nominatim search failed for %r: %s", query, e)
            return None

        if not results:
            logger.info("No geocoding result for %r", query)
            return None

        top = results[0]
        try:
            return Coordinate(lat=float(top["lat"]), lng=float(top["lon"]))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.warning("Unexpected Nominatim result for %r: %s", query, e)
            return None
