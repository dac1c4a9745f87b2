"""Outcome of a geocoding lookup."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GeocodeStatus(str, Enum):
    """Why a lookup did or did not produce coordinates."""

    OK = "ok"
    EMPTY_QUERY = "empty_query"
    NO_RESULTS = "no_results"
    REQUEST_FAILED = "request_failed"
    HTTP_ERROR = "http_error"
    INVALID_RESPONSE = "invalid_response"


class GeocodeResult(BaseModel):
    """Result of one geocoding request.

    Only ``status == OK`` carries coordinates. Failures are reported here
    rather than raised.
    """

    model_config = ConfigDict(frozen=True)

    status: GeocodeStatus
    query: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    error: Optional[str] = Field(default=None, description="Failure detail, if any")

    @property
    def is_found(self) -> bool:
        """True when the provider returned a location."""
        return self.status is GeocodeStatus.OK and self.lat is not None and self.lng is not None
