"""Runtime configuration for address records.

Configuration comes from environment variables by default::

    ADDRESS_RECORDS_GEOCODE=1
    ADDRESS_RECORDS_FLAGS=primary,billing,shipping
    ADDRESS_RECORDS_GEOCODE_URL=https://maps.google.com/maps/api/geocode/json
    ADDRESS_RECORDS_GEOCODE_KEY=...

Host applications can also build an AddressConfig explicitly and install it
with set_config().
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from address_records.core.errors import AddressRecordsError

DEFAULT_FLAGS: tuple[str, ...] = ("primary", "billing", "shipping")
DEFAULT_GEOCODE_URL = "https://maps.google.com/maps/api/geocode/json"

_ENV_PREFIX = "ADDRESS_RECORDS_"


def _env_flag(name: str, default: str = "0") -> bool:
    value = os.getenv(name, default)
    return value.strip().lower() not in {"", "0", "false", "no"}


def normalize_flags(flags: Iterable[str]) -> tuple[str, ...]:
    """Clean a list of flag names.

    Names are stripped (case is kept), empty names dropped and duplicates
    removed while keeping the first occurrence.

    Raises:
        AddressRecordsError: If a name is not a valid identifier.
    """
    cleaned: list[str] = []
    for raw in flags:
        name = str(raw).strip()
        if not name:
            continue
        if not name.isidentifier():
            raise AddressRecordsError(
                "invalid_flag",
                "Flag name {flag!r} is not a valid identifier",
                {"flag": name},
            )
        if name not in cleaned:
            cleaned.append(name)
    return tuple(cleaned)


class AddressConfig(BaseModel):
    """Settings consumed by the record, the store and the geocoder."""

    model_config = ConfigDict(frozen=True)

    geocode_enabled: bool = Field(
        default=False,
        description="Geocode addresses before they are saved",
    )
    flags: tuple[str, ...] = Field(
        default=DEFAULT_FLAGS,
        description="Names of the boolean flags an address carries (is_<name>)",
    )
    geocode_url: str = Field(
        default=DEFAULT_GEOCODE_URL,
        description="Geocoding endpoint queried with ?address=...&sensor=false",
    )
    geocode_api_key: Optional[str] = Field(
        default=None,
        description="Optional API key appended to geocoding requests",
    )

    @field_validator("flags", mode="before")
    @classmethod
    def _clean_flags(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            value = value.split(",")
        return normalize_flags(value)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls) -> AddressConfig:
        """Build a config from ADDRESS_RECORDS_* environment variables."""
        flags = os.getenv(f"{_ENV_PREFIX}FLAGS")
        return cls(
            geocode_enabled=_env_flag(f"{_ENV_PREFIX}GEOCODE"),
            flags=flags.split(",") if flags is not None else DEFAULT_FLAGS,
            geocode_url=os.getenv(f"{_ENV_PREFIX}GEOCODE_URL", DEFAULT_GEOCODE_URL),
            geocode_api_key=os.getenv(f"{_ENV_PREFIX}GEOCODE_KEY") or None,
        )

    def flag_fields(self) -> list[str]:
        """Attribute names of the configured flags (``is_<name>``)."""
        return [f"is_{flag}" for flag in self.flags]


_config_override: AddressConfig | None = None


@lru_cache
def _config_from_env() -> AddressConfig:
    return AddressConfig.from_env()


def get_config() -> AddressConfig:
    """Return the active configuration.

    An instance installed with set_config() wins; otherwise the config is
    read from the environment once and cached.
    """
    if _config_override is not None:
        return _config_override
    return _config_from_env()


def set_config(config: AddressConfig) -> None:
    """Install an explicit configuration for the whole process."""
    global _config_override
    _config_override = config


def reset_config() -> None:
    """Drop any installed config and re-read the environment on next use."""
    global _config_override
    _config_override = None
    _config_from_env.cache_clear()
