from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from address_records.geocoding.results import GeocodeResult
    from address_records.models.address import AddressRecord


@runtime_checkable
class GeocoderProtocol(Protocol):
    """Protocol for geocoding backends.

    Implementations turn an address into coordinates and must never raise:
    failures are reported through the returned GeocodeResult.
    """

    def lookup(self, query: str) -> GeocodeResult:
        """Geocode a prepared query string.

        Args:
            query: Comma-separated address components, spaces as ``+``.

        Returns:
            GeocodeResult describing the outcome.
        """
        ...

    def geocode_record(self, record: AddressRecord) -> GeocodeResult:
        """Geocode a record, setting ``lat``/``lng`` only on success.

        Args:
            record: Address to look up.

        Returns:
            GeocodeResult describing the outcome.
        """
        ...


@runtime_checkable
class OwnerResolverProtocol(Protocol):
    """Callable that loads an address owner by id."""

    def __call__(self, session: Session, owner_id: Any) -> Any:
        """Return the owner with ``owner_id`` or None."""
        ...
