"""Error classes with package identification.

Errors raised by address_records carry a ``package`` entry in their context
so callers that mix several libraries can tell where a failure came from.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic_core import PydanticCustomError

if TYPE_CHECKING:
    from abstract_validation_base import ValidationResult

# Package identifier for error context
PACKAGE_NAME = "address_records"


class AddressRecordsError(PydanticCustomError):
    """Pydantic-compatible error raised by address_records.

    Inherits from PydanticCustomError so it can be raised from inside
    pydantic validators and still be reported with its own type.
    """

    def __new__(
        cls,
        error_type: str,
        message_template: str,
        context: dict[str, Any] | None = None,
    ) -> AddressRecordsError:
        ctx = {"package": PACKAGE_NAME, **(context or {})}
        return super().__new__(cls, error_type, message_template, ctx)

    @classmethod
    def from_pydantic_error(cls, error: PydanticCustomError) -> AddressRecordsError:
        """Wrap a PydanticCustomError as AddressRecordsError."""
        return cls(error.type, error.message_template, error.context)

    @classmethod
    def from_validation_error(
        cls, error: Exception, context: dict[str, Any] | None = None
    ) -> AddressRecordsError:
        """Wrap a pydantic.ValidationError (or any exception).

        Args:
            error: The error to wrap.
            context: Additional context to include in the error.

        Returns:
            AddressRecordsError with the first custom error's details when one
            is present, otherwise a generic ``validation_error``.
        """
        from pydantic import ValidationError

        if isinstance(error, ValidationError):
            for err_dict in error.errors():
                if err_dict.get("ctx", {}).get("package") == PACKAGE_NAME:
                    return cls(
                        err_dict.get("type", "validation_error"),
                        err_dict.get("msg", str(error)),
                        err_dict.get("ctx", {}),
                    )

            error_messages = "; ".join(e.get("msg", str(e)) for e in error.errors())
            return cls("validation_error", error_messages, context)

        return cls("validation_error", str(error), context)


class AddressRecordsValidationError(Exception):
    """Raised when an address fails its field rules before being saved.

    Wraps the ValidationResult produced by the rule validators so callers get
    the structured set of failures (field -> violated rule).
    """

    def __init__(self, result: ValidationResult, context: dict[str, Any] | None = None):
        self.result = result
        self.context = {"package": PACKAGE_NAME, **(context or {})}
        self.errors_list = [
            {"field": e.field, "message": e.message, "value": e.value} for e in result.errors
        ]
        message = "; ".join(f"{e['field']}: {e['message']}" for e in self.errors_list)
        super().__init__(message or "address validation failed")

    def errors(self) -> list[dict[str, Any]]:
        """Get the list of validation errors."""
        return self.errors_list

    def failures(self) -> dict[str, str]:
        """Map each failing field to the first rule it violated."""
        failed: dict[str, str] = {}
        for error in self.errors_list:
            failed.setdefault(error["field"], error["message"])
        return failed

    def __repr__(self) -> str:
        return f"AddressRecordsValidationError({self.errors_list!r}, context={self.context})"
