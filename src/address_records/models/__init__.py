"""Mapped classes for addresses, countries and address owners."""

from __future__ import annotations

# Import order matters: AddressRecord must exist before Addressable
from address_records.models.base import Base, TimestampMixin, utcnow
from address_records.models.country import Country
from address_records.models.address import FILLABLE, AddressRecord
from address_records.models.addressable import Addressable

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "Country",
    "FILLABLE",
    "AddressRecord",
    "Addressable",
]
