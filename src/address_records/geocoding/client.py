from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

import httpx

from address_records.config import AddressConfig, get_config
from address_records.core.address_formatter import AddressFormatter
from address_records.geocoding.results import GeocodeResult, GeocodeStatus

if TYPE_CHECKING:
    from address_records.models.address import AddressRecord

logger = logging.getLogger(__name__)


class GoogleGeocoder:
    """Best-effort client for the Google geocoding JSON endpoint.

    Every lookup is a single GET; nothing is retried or cached and no error
    escapes to the caller. The outcome is reported as a GeocodeResult.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        config: Optional[AddressConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        config = config or get_config()
        self.base_url = base_url or config.geocode_url
        self.api_key = api_key if api_key is not None else config.geocode_api_key
        self._client = httpx.Client(transport=transport, follow_redirects=True)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> GoogleGeocoder:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def build_url(self, query: str) -> str:
        """Request URL for an already-built query string.

        The query is inserted as-is: spaces must already be ``+``.
        """
        url = f"{self.base_url}?address={query}&sensor=false"
        if self.api_key:
            url += f"&key={self.api_key}"
        return url

    def _request(self, query: str) -> dict[str, Any]:
        response = self._client.get(self.build_url(query))
        if response.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"{response.status_code}: {response.text[:200]}",
                request=response.request,
                response=response,
            )
        if not response.content:
            raise ValueError("Geocoder returned an empty body")
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("Geocoder returned a non-object payload")
        return payload

    def lookup(self, query: str) -> GeocodeResult:
        """Geocode a query string.

        Args:
            query: Query built by AddressFormatter.build_geocode_query().

        Returns:
            GeocodeResult with coordinates on success, or the failure status.
        """
        if not query:
            return GeocodeResult(status=GeocodeStatus.EMPTY_QUERY)

        try:
            payload = self._request(query)
        except httpx.HTTPStatusError as exc:
            logger.warning("Geocoding %r failed: %s", query, exc)
            return GeocodeResult(status=GeocodeStatus.HTTP_ERROR, query=query, error=str(exc))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Geocoding request for %r failed: %s", query, exc)
            return GeocodeResult(
                status=GeocodeStatus.REQUEST_FAILED, query=query, error=str(exc)
            )
        except ValueError as exc:
            logger.warning("Geocoder response for %r is unusable: %s", query, exc)
            return GeocodeResult(
                status=GeocodeStatus.INVALID_RESPONSE, query=query, error=str(exc)
            )

        results = payload.get("results")
        if not isinstance(results, list) or not results:
            logger.debug("Geocoder found nothing for %r", query)
            return GeocodeResult(
                status=GeocodeStatus.NO_RESULTS,
                query=query,
                error=payload.get("status") if isinstance(payload.get("status"), str) else None,
            )

        try:
            location = results[0]["geometry"]["location"]
            lat = float(location["lat"])
            lng = float(location["lng"])
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Geocoder result for %r has no usable location: %s", query, exc)
            return GeocodeResult(
                status=GeocodeStatus.INVALID_RESPONSE, query=query, error=str(exc)
            )

        return GeocodeResult(status=GeocodeStatus.OK, query=query, lat=lat, lng=lng)

    def geocode_record(self, record: AddressRecord) -> GeocodeResult:
        """Look up a record and copy the coordinates onto it when found.

        ``lat``/``lng`` are left untouched on any failure.
        """
        result = self.lookup(AddressFormatter.record_geocode_query(record))
        if result.is_found:
            record.lat = result.lat
            record.lng = result.lng
        return result


_default_geocoder: Optional[GoogleGeocoder] = None


def get_geocoder(*, config: Optional[AddressConfig] = None) -> GoogleGeocoder:
    """Get the shared geocoder, creating it on first use.

    Passing a config replaces the shared instance.
    """
    global _default_geocoder

    if _default_geocoder is None or config is not None:
        if _default_geocoder is not None:
            _default_geocoder.close()
        _default_geocoder = GoogleGeocoder(config=config)
    return _default_geocoder
