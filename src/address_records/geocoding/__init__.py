from __future__ import annotations

from address_records.geocoding.client import GoogleGeocoder, get_geocoder
from address_records.geocoding.results import GeocodeResult, GeocodeStatus

__all__ = [
    "GeocodeResult",
    "GeocodeStatus",
    "GoogleGeocoder",
    "get_geocoder",
]
