"""Persistence facade for address records.

AddressStore runs the save pipeline explicitly: the caller (or create() /
update()) validates, the store geocodes when configured, then writes.

Example:
    >>> with SessionManager("sqlite://") as session:
    ...     store = AddressStore(session)
    ...     record = store.create(
    ...         {"line_1": "1 Main St", "city": "Springfield", "post_code": "62701",
    ...          "country_id": 840, "is_primary": True},
    ...         owner=person,
    ...     )
    ...     store.delete(record)        # soft delete
    ...     store.force_delete(record)  # removes the row
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from address_records.config import AddressConfig, get_config
from address_records.core.errors import AddressRecordsValidationError
from address_records.core.registry import OwnerRegistry, get_owner_registry
from address_records.models import AddressRecord
from address_records.validation.validators import AddressLike, create_default_validators

if TYPE_CHECKING:
    from abstract_validation_base import ValidationResult
    from sqlalchemy import Select

    from address_records.geocoding.results import GeocodeResult
    from address_records.protocols import GeocoderProtocol

logger = logging.getLogger(__name__)


class AddressStore:
    """CRUD and soft delete for AddressRecord over a SQLAlchemy session.

    The store flushes but never commits; transaction boundaries belong to
    the caller (see SessionManager).
    """

    def __init__(
        self,
        session: Session,
        config: AddressConfig | None = None,
        geocoder: GeocoderProtocol | None = None,
        registry: OwnerRegistry | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            session: Session used for every read and write.
            config: Configuration; defaults to get_config() at call time.
            geocoder: Geocoder used when geocoding is enabled. A GoogleGeocoder
                is created on first use if omitted.
            registry: Owner registry; defaults to the process-wide one.
        """
        self.session = session
        self._config = config
        self._geocoder = geocoder
        self.registry = registry or get_owner_registry()

    @property
    def config(self) -> AddressConfig:
        """Active configuration."""
        return self._config or get_config()

    @property
    def geocoder(self) -> GeocoderProtocol:
        """Geocoder used by maybe_geocode()."""
        if self._geocoder is None:
            from address_records.geocoding.client import GoogleGeocoder

            self._geocoder = GoogleGeocoder(config=self.config)
        return self._geocoder

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _select(self, with_trashed: bool = False, only_trashed: bool = False) -> Select:
        stmt = select(AddressRecord)
        if only_trashed:
            stmt = stmt.where(AddressRecord.deleted_at.is_not(None))
        elif not with_trashed:
            stmt = stmt.where(AddressRecord.deleted_at.is_(None))
        return stmt.order_by(AddressRecord.id)

    def get(self, address_id: int, with_trashed: bool = False) -> Optional[AddressRecord]:
        """Fetch a record by id; soft-deleted records only with ``with_trashed``."""
        record = self.session.get(AddressRecord, address_id)
        if record is not None and record.trashed and not with_trashed:
            return None
        return record

    def query(self, with_trashed: bool = False, only_trashed: bool = False) -> list[AddressRecord]:
        """List records, hiding soft-deleted ones unless asked for."""
        return list(self.session.scalars(self._select(with_trashed, only_trashed)))

    def for_owner(self, owner: Any, with_trashed: bool = False) -> list[AddressRecord]:
        """List the addresses belonging to ``owner``."""
        stmt = self._select(with_trashed).where(
            AddressRecord.owner_type == self.registry.owner_type_for(owner),
            AddressRecord.owner_id == owner.id,
        )
        return list(self.session.scalars(stmt))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, item: AddressLike) -> ValidationResult:
        """Apply the configured rule set to a record or payload."""
        return create_default_validators(self.config.flags).validate(item)

    def _ensure_valid(self, item: AddressLike) -> None:
        result = self.validate(item)
        if not result.is_valid:
            logger.debug("Address rejected: %s", [(e.field, e.message) for e in result.errors])
            raise AddressRecordsValidationError(result)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(
        self,
        data: Mapping[str, Any],
        owner: Any = None,
        validate: bool = True,
    ) -> AddressRecord:
        """Mass-assign, optionally validate, and save a new record.

        Args:
            data: Fillable attributes and ``is_<flag>`` values.
            owner: Registered owner entity to attach the address to.
            validate: Reject invalid data before anything is written.

        Raises:
            AddressRecordsValidationError: If ``validate`` and the data fails
                its rules.
        """
        if validate:
            self._ensure_valid(data)

        record = AddressRecord().fill(data, config=self.config)
        if owner is not None:
            if getattr(owner, "id", None) is None:
                self.session.add(owner)
                self.session.flush()
            record.set_owner(owner, registry=self.registry)
        return self.save(record)

    def update(
        self,
        record: AddressRecord,
        data: Mapping[str, Any],
        validate: bool = True,
    ) -> AddressRecord:
        """Mass-assign ``data`` onto an existing record and save it.

        Validation runs against the record's current values merged with
        ``data``, before the record is touched.
        """
        if validate:
            self._ensure_valid({**record.to_dict(), **data})
        record.fill(data, config=self.config)
        return self.save(record)

    def save(self, record: AddressRecord) -> AddressRecord:
        """Write a record, geocoding it first when enabled."""
        self.session.add(record)
        with self.session.no_autoflush:
            self.maybe_geocode(record)
        self.session.flush()
        logger.debug("Saved address %s", record.id)
        return record

    def maybe_geocode(self, record: AddressRecord) -> Optional[GeocodeResult]:
        """Geocode ``record`` if geocoding is enabled.

        Never raises; a failed lookup leaves ``lat``/``lng`` unchanged.

        Returns:
            The lookup outcome, or None when geocoding is disabled or the
            geocoder itself broke.
        """
        if not self.config.geocode_enabled:
            return None
        try:
            result = self.geocoder.geocode_record(record)
        except Exception:
            logger.exception("Geocoder raised for address %s; saving without it", record.id)
            return None
        logger.debug("Geocoded address %s: %s", record.id, result.status.value)
        return result

    def delete(self, record: AddressRecord) -> AddressRecord:
        """Soft-delete a record."""
        record.soft_delete()
        self.session.flush()
        logger.debug("Soft-deleted address %s", record.id)
        return record

    def restore(self, record: AddressRecord) -> AddressRecord:
        """Bring a soft-deleted record back."""
        record.restore()
        self.session.flush()
        return record

    def force_delete(self, record: AddressRecord) -> None:
        """Permanently remove a record."""
        address_id = record.id
        self.session.delete(record)
        self.session.flush()
        logger.debug("Removed address %s", address_id)
