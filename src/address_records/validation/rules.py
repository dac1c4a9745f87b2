"""Field rules for address records.

Rules are described by FieldRule objects. Their string form is the familiar
pipe-separated expression (``required|string|min:2|max:60``), and
``check()`` evaluates a single value against them.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from address_records.config import normalize_flags

RuleKind = Literal["string", "integer", "boolean", "any"]

ALPHA_DASH = re.compile(r"^[A-Za-z0-9-]+$")

_BOOLEAN_VALUES = (True, False, 0, 1, "0", "1")


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class FieldRule(BaseModel):
    """Constraints on one field of an address."""

    model_config = ConfigDict(frozen=True)

    required: bool = False
    kind: RuleKind = "any"
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    alpha_dash: bool = False

    def __str__(self) -> str:
        parts: list[str] = []
        if self.required:
            parts.append("required")
        if self.kind != "any":
            parts.append(self.kind)
        if self.min_length is not None:
            parts.append(f"min:{self.min_length}")
        if self.max_length is not None:
            parts.append(f"max:{self.max_length}")
        if self.alpha_dash:
            parts.append("alpha_dash")
        return "|".join(parts)

    def check(self, value: Any) -> str | None:
        """Return the name of the first rule ``value`` violates, or None.

        Empty values (None or "") only fail ``required``; every other rule
        applies to present values.
        """
        if _is_empty(value):
            return "required" if self.required else None

        if self.kind == "string" and not isinstance(value, str):
            return "string"
        if self.kind == "integer" and not _is_integer(value):
            return "integer"
        if self.kind == "boolean" and not _is_boolean(value):
            return "boolean"

        if self.min_length is not None or self.max_length is not None or self.alpha_dash:
            text = str(value)
            if self.min_length is not None and len(text) < self.min_length:
                return f"min:{self.min_length}"
            if self.max_length is not None and len(text) > self.max_length:
                return f"max:{self.max_length}"
            if self.alpha_dash and not ALPHA_DASH.match(text):
                return "alpha_dash"
        return None


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and re.fullmatch(r"[+-]?\d+", value.strip()) is not None


def _is_boolean(value: Any) -> bool:
    return any(type(value) is type(ok) and value == ok for ok in _BOOLEAN_VALUES)


def _text(min_length: int, required: bool = False) -> FieldRule:
    return FieldRule(required=required, kind="string", min_length=min_length, max_length=60)


# Rules that do not depend on configuration
STATIC_RULES: dict[str, FieldRule] = {
    "line_1": _text(2, required=True),
    "line_2": _text(2),
    "line_3": _text(2),
    "city": _text(3, required=True),
    "state": _text(3),
    "post_code": FieldRule(required=True, min_length=4, max_length=20, alpha_dash=True),
    "country_id": FieldRule(required=True, kind="integer"),
}

BOOLEAN_RULE = FieldRule(kind="boolean")


def get_validation_rules(flags: Iterable[str]) -> dict[str, FieldRule]:
    """Build the complete rule set for an address.

    Args:
        flags: Configured flag names; each adds an ``is_<name>`` boolean rule.

    Returns:
        A new dict of field name -> FieldRule, static fields first, flags in
        the order given.
    """
    rules = dict(STATIC_RULES)
    for flag in normalize_flags(flags):
        rules[f"is_{flag}"] = BOOLEAN_RULE
    return rules


def rule_expressions(rules: dict[str, FieldRule]) -> dict[str, str]:
    """Render a rule set as field -> ``required|string|...`` strings."""
    return {name: str(rule) for name, rule in rules.items()}
