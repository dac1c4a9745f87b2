"""Domain-agnostic helpers shared by the models, validators and store.

Usage:
    from address_records.core import (
        AddressFormatter,
        AddressRecordsError,
        AddressRecordsValidationError,
        OwnerRegistry,
        get_owner_registry,
    )
"""

from __future__ import annotations

from address_records.core.address_formatter import (
    AddressFormatter,
    build_geocode_query,
    get_formatter,
)
from address_records.core.errors import (
    PACKAGE_NAME,
    AddressRecordsError,
    AddressRecordsValidationError,
)
from address_records.core.registry import OwnerRegistry, OwnerResolver, get_owner_registry

__all__ = [
    # Errors
    "PACKAGE_NAME",
    "AddressRecordsError",
    "AddressRecordsValidationError",
    # Formatting
    "AddressFormatter",
    "build_geocode_query",
    "get_formatter",
    # Owners
    "OwnerRegistry",
    "OwnerResolver",
    "get_owner_registry",
]
