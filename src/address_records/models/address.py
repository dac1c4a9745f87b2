"""The polymorphic address record.

An AddressRecord belongs to exactly one owner identified by
``(owner_type, owner_id)``, points at a Country through ``country_id`` and
carries a configurable set of boolean flags (``is_primary``, ...). Records
are soft-deleted through ``deleted_at``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import Mapped, mapped_column, object_session, relationship

from address_records.config import AddressConfig, get_config
from address_records.core.address_formatter import AddressFormatter
from address_records.core.errors import AddressRecordsError
from address_records.core.registry import OwnerRegistry, get_owner_registry
from address_records.models.base import Base, TimestampMixin, utcnow
from address_records.models.country import Country
from address_records.validation.rules import FieldRule, get_validation_rules

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from address_records.protocols import GeocoderProtocol

logger = logging.getLogger(__name__)

# Attributes accepted by mass assignment, besides the configured is_<flag> fields
FILLABLE: tuple[str, ...] = (
    "line_1",
    "line_2",
    "line_3",
    "city",
    "state",
    "post_code",
    "country_id",
    "lat",
    "lng",
    "owner_type",
    "owner_id",
)

_TRUE_VALUES = (True, 1, "1", "true", "True")


class AddressRecord(TimestampMixin, Base):
    """Address attached to an owner entity."""

    __tablename__ = "addresses"
    __table_args__ = (Index("ix_addresses_owner", "owner_type", "owner_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    line_1: Mapped[Optional[str]] = mapped_column(String(60))
    line_2: Mapped[Optional[str]] = mapped_column(String(60))
    line_3: Mapped[Optional[str]] = mapped_column(String(60))
    city: Mapped[Optional[str]] = mapped_column(String(60))
    state: Mapped[Optional[str]] = mapped_column(String(60))
    post_code: Mapped[Optional[str]] = mapped_column(String(20))
    country_id: Mapped[Optional[int]] = mapped_column(ForeignKey("countries.id"))
    lat: Mapped[Optional[float]] = mapped_column(Float)
    lng: Mapped[Optional[float]] = mapped_column(Float)

    # Polymorphic owner; intentionally no foreign key
    owner_type: Mapped[Optional[str]] = mapped_column(String(255))
    owner_id: Mapped[Optional[int]] = mapped_column(Integer)

    flags: Mapped[dict[str, bool]] = mapped_column(
        MutableDict.as_mutable(JSON), default=dict, nullable=False
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    country: Mapped[Optional[Country]] = relationship(Country)

    def __init__(self, attributes: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        """Create a record through mass assignment.

        Accepts the FILLABLE attributes and configured ``is_<flag>`` values
        either as a mapping or as keyword arguments; anything else is ignored.
        """
        super().__init__()
        self.flags = {}
        self.fill({**(attributes or {}), **kwargs})

    def __repr__(self) -> str:
        return (
            f"<AddressRecord(id={self.id!r}, line_1={self.line_1!r}, city={self.city!r}, "
            f"owner={self.owner_type!r}:{self.owner_id!r})>"
        )

    # ------------------------------------------------------------------
    # Mass assignment and flags
    # ------------------------------------------------------------------

    def fill(
        self, attributes: Mapping[str, Any], config: AddressConfig | None = None
    ) -> AddressRecord:
        """Assign the fillable attributes found in ``attributes``.

        ``is_<flag>`` keys set configured flags. Other keys are skipped.
        """
        flag_names = (config or get_config()).flags
        for key, value in attributes.items():
            if key in FILLABLE:
                setattr(self, key, value)
            elif key.startswith("is_") and key[3:] in flag_names:
                self.set_flag(key[3:], value, flags=flag_names)
            else:
                logger.debug("Ignoring non-fillable address attribute %s", key)
        return self

    def is_flag(self, name: str) -> bool:
        """True when the named flag is set."""
        return bool((self.flags or {}).get(name, False))

    def set_flag(self, name: str, value: Any = True, flags: Iterable[str] | None = None) -> None:
        """Set a configured flag.

        Raises:
            AddressRecordsError: If ``name`` is not a configured flag.
        """
        allowed = tuple(get_config().flags if flags is None else flags)
        if name not in allowed:
            raise AddressRecordsError(
                "unknown_flag",
                "{flag!r} is not a configured address flag",
                {"flag": name, "flags": list(allowed)},
            )
        if self.flags is None:
            self.flags = {}
        self.flags[name] = value in _TRUE_VALUES

    def get_attribute(self, name: str) -> Any:
        """Read an attribute by name, including ``is_<flag>`` pseudo-attributes."""
        if name.startswith("is_") and not hasattr(type(self), name):
            return (self.flags or {}).get(name[3:])
        return getattr(self, name, None)

    @staticmethod
    def get_validation_rules(flags: Iterable[str] | None = None) -> dict[str, FieldRule]:
        """Rule set for addresses, with one boolean rule per flag.

        Args:
            flags: Flag names; defaults to the configured flags.
        """
        return get_validation_rules(get_config().flags if flags is None else flags)

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    def owner(
        self, session: Session | None = None, registry: OwnerRegistry | None = None
    ) -> Any:
        """Resolve the owning entity from (owner_type, owner_id).

        Returns:
            The owner, or None when it cannot be resolved.
        """
        registry = registry or get_owner_registry()
        return registry.resolve(session or object_session(self), self.owner_type, self.owner_id)

    def set_owner(self, owner: Any, registry: OwnerRegistry | None = None) -> None:
        """Point this address at ``owner``, a registered owner entity."""
        registry = registry or get_owner_registry()
        self.owner_type = registry.owner_type_for(owner)
        self.owner_id = owner.id

    def get_country(self) -> str | None:
        """Name of the country ``country_id`` points at, or None if it does not resolve."""
        country = self.country
        # A loaded relationship goes stale when country_id is reassigned
        if self.country_id is not None and (country is None or country.id != self.country_id):
            session = object_session(self)
            country = session.get(Country, self.country_id) if session is not None else None
        if country is not None and country.name:
            return country.name
        return None

    # ------------------------------------------------------------------
    # Soft delete
    # ------------------------------------------------------------------

    @property
    def trashed(self) -> bool:
        """True while the record is soft-deleted."""
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        """Mark the record deleted without removing the row."""
        self.deleted_at = utcnow()

    def restore(self) -> None:
        """Undo a soft delete."""
        self.deleted_at = None

    # ------------------------------------------------------------------
    # Geocoding
    # ------------------------------------------------------------------

    def geocode(self, geocoder: GeocoderProtocol | None = None) -> AddressRecord:
        """Try to fetch coordinates for this address.

        Sets ``lat``/``lng`` when the provider finds the address and leaves
        them unchanged otherwise. Never raises.
        """
        if geocoder is None:
            from address_records.geocoding.client import get_geocoder

            geocoder = get_geocoder()
        geocoder.geocode_record(self)
        return self

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def get_array(self) -> list[str] | None:
        """Address as its non-empty lines, or None."""
        return AddressFormatter.record_lines(self)

    def get_html(self) -> str | None:
        """Address as an ``<address>`` block, or None."""
        return AddressFormatter.to_html(self.get_array())

    def get_line(self) -> str | None:
        """Address as a single comma-separated line, or None."""
        return AddressFormatter.to_line(self.get_array())

    def to_dict(self) -> dict[str, Any]:
        """Plain representation of the record."""
        data: dict[str, Any] = {"id": self.id}
        data.update({name: getattr(self, name) for name in FILLABLE})
        data.update({f"is_{name}": bool(value) for name, value in (self.flags or {}).items()})
        data["deleted_at"] = self.deleted_at
        data["line"] = self.get_line()
        return data
