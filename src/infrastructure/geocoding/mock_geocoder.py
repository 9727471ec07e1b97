from typing import Optional

from src.application.ports import GeocoderPort
from src.domain.models import Coordinate


KNOWN_PLACES = {
    "udupi": Coordinate(lat=13.3409, lng=74.7421),
    "manipal": Coordinate(lat=13.3525, lng=74.7928),
    "kundapura": Coordinate(lat=13.6269, lng=74.6900),
    "mangaluru": Coordinate(lat=12.9141, lng=74.8560),
    "mangalore": Coordinate(lat=12.9141, lng=74.8560),
}


class MockGeocoder(GeocoderPort):
    def locate(self, query: str) -> Optional[Coordinate]:
        return KNOWN_PLACES.get((query or "").strip().lower())
