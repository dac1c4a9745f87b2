"""address-records: polymorphic address records for SQLAlchemy applications.

This package provides:
- An AddressRecord model attachable to any owner entity via (owner_type, owner_id)
- Configurable boolean flags (is_primary, is_billing, is_shipping, ...)
- Rule-based validation built on abstract-validation-base
- Best-effort geocoding through the Google geocoding API
- Formatting as lines, an HTML <address> block or a single line
- Soft delete with restore and hard delete

Quick Start:
    >>> from address_records import AddressStore, SessionManager
    >>> manager = SessionManager("sqlite://")
    >>> manager.create_all()
    >>> with manager as session:
    ...     store = AddressStore(session)
    ...     record = store.create(
    ...         {"line_1": "221B Baker St", "city": "London", "post_code": "NW16XE",
    ...          "country_id": 826}
    ...     )
    ...     print(record.get_line())

    # Owners
    >>> from address_records import Addressable, Base
    >>> class Person(Addressable, Base):
    ...     __tablename__ = "people"
    ...     id: Mapped[int] = mapped_column(primary_key=True)
"""

from __future__ import annotations  # noqa: I001

# Import order is intentional to avoid circular imports - do not auto-fix
from address_records.config import (
    DEFAULT_FLAGS,
    AddressConfig,
    get_config,
    reset_config,
    set_config,
)
from address_records.core import (
    PACKAGE_NAME,
    AddressFormatter,
    AddressRecordsError,
    AddressRecordsValidationError,
    OwnerRegistry,
    get_owner_registry,
)
from address_records.models import (
    FILLABLE,
    AddressRecord,
    Addressable,
    Base,
    Country,
)
from address_records.validation import (
    FieldRule,
    FieldRulesValidator,
    FlagRulesValidator,
    create_default_validators,
    get_validation_rules,
    validate_address,
)
from address_records.geocoding import (
    GeocodeResult,
    GeocodeStatus,
    GoogleGeocoder,
    get_geocoder,
)
from address_records.protocols import GeocoderProtocol, OwnerResolverProtocol
from address_records.db import SessionManager
from address_records.store import AddressStore

__version__ = "0.1.0"
__package_name__ = "address-records"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "AddressConfig",
    "DEFAULT_FLAGS",
    "get_config",
    "set_config",
    "reset_config",
    # Models
    "AddressRecord",
    "Addressable",
    "Base",
    "Country",
    "FILLABLE",
    # Persistence
    "AddressStore",
    "SessionManager",
    # Owners
    "OwnerRegistry",
    "get_owner_registry",
    # Validation
    "FieldRule",
    "FieldRulesValidator",
    "FlagRulesValidator",
    "create_default_validators",
    "get_validation_rules",
    "validate_address",
    # Geocoding
    "GeocodeResult",
    "GeocodeStatus",
    "GoogleGeocoder",
    "get_geocoder",
    # Formatting
    "AddressFormatter",
    # Errors
    "PACKAGE_NAME",
    "AddressRecordsError",
    "AddressRecordsValidationError",
    # Protocols
    "GeocoderProtocol",
    "OwnerResolverProtocol",
]
