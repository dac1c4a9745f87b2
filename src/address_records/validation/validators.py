from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Union

from abstract_validation_base import (
    BaseValidator,
    CompositeValidator,
    ValidationResult,
    ValidatorPipelineBuilder,
)

from address_records.config import get_config, normalize_flags
from address_records.validation.rules import BOOLEAN_RULE, STATIC_RULES, FieldRule

# Validators accept a mapped record or the raw mass-assignment payload
AddressLike = Union[Mapping[str, Any], Any]


def field_value(item: AddressLike, name: str) -> Any:
    """Read a field from a mapping or from a record."""
    if isinstance(item, Mapping):
        return item.get(name)
    getter = getattr(item, "get_attribute", None)
    if getter is not None:
        return getter(name)
    return getattr(item, name, None)


def _apply_rules(item: AddressLike, rules: Mapping[str, FieldRule]) -> ValidationResult:
    result = ValidationResult(is_valid=True)
    for name, rule in rules.items():
        value = field_value(item, name)
        violated = rule.check(value)
        if violated is not None:
            result.add_error(name, violated, value)
    return result


class FieldRulesValidator(BaseValidator[AddressLike]):
    """Checks the address fields against their static rules.

    Reports one error per failing field; the error message is the name of
    the violated rule (``required``, ``min:2``, ``alpha_dash``...).
    """

    def __init__(self, rules: Mapping[str, FieldRule] | None = None) -> None:
        self._rules = dict(rules if rules is not None else STATIC_RULES)

    @property
    def name(self) -> str:
        """Name of this validator."""
        return "field_rules"

    def validate(self, item: AddressLike) -> ValidationResult:
        """Validate the static fields of an address.

        Args:
            item: Record or mapping to validate.

        Returns:
            ValidationResult with one error per failing field.
        """
        return _apply_rules(item, self._rules)


class FlagRulesValidator(BaseValidator[AddressLike]):
    """Checks that every configured ``is_<flag>`` value is a boolean."""

    def __init__(self, flags: Iterable[str]) -> None:
        self._rules = {f"is_{flag}": BOOLEAN_RULE for flag in normalize_flags(flags)}

    @property
    def name(self) -> str:
        """Name of this validator."""
        return "flag_rules"

    def validate(self, item: AddressLike) -> ValidationResult:
        """Validate the flag fields of an address."""
        return _apply_rules(item, self._rules)


def create_default_validators(
    flags: Iterable[str] | None = None,
) -> CompositeValidator[AddressLike]:
    """Create the address validation pipeline.

    Args:
        flags: Flag names to validate. Defaults to the configured flags.

    Returns:
        CompositeValidator running the field and flag validators.
    """
    flag_names = list(get_config().flags if flags is None else flags)

    builder: ValidatorPipelineBuilder[AddressLike] = ValidatorPipelineBuilder(
        "address_validation"
    )
    builder.add(FieldRulesValidator())
    if flag_names:
        builder.add(FlagRulesValidator(flag_names))
    return builder.build()


def validate_address(item: AddressLike, flags: Iterable[str] | None = None) -> ValidationResult:
    """Validate a record or mass-assignment payload.

    Args:
        item: AddressRecord or mapping of field name -> value.
        flags: Flag names to validate. Defaults to the configured flags.

    Returns:
        ValidationResult; ``errors`` carry field, violated rule and value.
    """
    return create_default_validators(flags).validate(item)
