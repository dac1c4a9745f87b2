"""Address validation.

Rule sets are assembled from static field rules plus one boolean rule per
configured flag; validators apply them to records or raw payloads.
"""

from address_records.validation.rules import (
    BOOLEAN_RULE,
    STATIC_RULES,
    FieldRule,
    get_validation_rules,
    rule_expressions,
)
from address_records.validation.validators import (
    FieldRulesValidator,
    FlagRulesValidator,
    create_default_validators,
    validate_address,
)

__all__ = [
    "BOOLEAN_RULE",
    "STATIC_RULES",
    "FieldRule",
    "FieldRulesValidator",
    "FlagRulesValidator",
    "create_default_validators",
    "get_validation_rules",
    "rule_expressions",
    "validate_address",
]
