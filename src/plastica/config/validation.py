"""
Declarative validation for Plastica configs.

A config class lists, per field, the names of the rules its value must
satisfy. Rules are looked up in :class:`ValidatorRegistry`; every violation
is collected and reported in a single :class:`ConfigValidationError`, so a
bad override set is diagnosed in one pass rather than one field at a time.

Rule names:
===========

.. code-block:: none

    positive               value > 0
    non_negative           value >= 0
    finite                 not inf / nan
    probability            0 <= value <= 1
    positive_integer       int, value > 0
    non_negative_integer   int, value >= 0
    range(a, b)            a <= value <= b

A field whose value is None is not checked: optional features use None for
"disabled" and still carry rules for the enabled case.

Author: Plastica Project
Date: February 2026
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Dict, List, Sequence, Tuple

from plastica.errors import ConfigurationError

Validator = Callable[[Any, str], None]

_RANGE_RULE = re.compile(r"^range\(\s*([^,]+?)\s*,\s*([^,]+?)\s*\)$")


class ConfigValidationError(ConfigurationError):
    """One or more declarative rules were violated."""


# =============================================================================
# RULES
# =============================================================================


def _check_type(value: Any, name: str, integer: bool) -> None:
    if isinstance(value, bool):
        raise ConfigValidationError(f"{name} must be {'an integer' if integer else 'numeric'}, got bool")
    expected = (int,) if integer else (int, float)
    if not isinstance(value, expected):
        kind = "an integer" if integer else "numeric"
        raise ConfigValidationError(f"{name} must be {kind}, got {type(value).__name__}")


def _numeric_rule(
    predicate: Callable[[float], bool],
    requirement: str,
    integer: bool = False,
) -> Validator:
    """Validator that type-checks ``value`` and then applies ``predicate``."""

    def validator(value: Any, name: str) -> None:
        _check_type(value, name, integer)
        if not predicate(value):
            raise ConfigValidationError(f"{name}={value} {requirement}")

    return validator


class ValidatorRegistry:
    """Name → validator lookup, with ``range(a, b)`` parsed on demand.

    Example:
        >>> check = ValidatorRegistry.get_validator("probability")
        >>> check(0.3, "weight_decay")
        >>> check(1.3, "weight_decay")  # raises ConfigValidationError
    """

    _validators: Dict[str, Validator] = {}

    @classmethod
    def register(cls, name: str, validator: Validator) -> None:
        cls._validators[name] = validator

    @classmethod
    def get_validator(cls, rule: str) -> Validator:
        """Resolve ``rule`` to a validator.

        Raises:
            ValueError: If the rule is neither registered nor a range rule
        """
        if rule in cls._validators:
            return cls._validators[rule]

        match = _RANGE_RULE.match(rule)
        if match is not None:
            low, high = float(match.group(1)), float(match.group(2))
            return _numeric_rule(lambda v: low <= v <= high, f"outside valid range [{low}, {high}]")

        raise ValueError(f"Unknown validation rule: {rule}")


ValidatorRegistry.register("positive", _numeric_rule(lambda v: v > 0, "must be positive"))
ValidatorRegistry.register("non_negative", _numeric_rule(lambda v: v >= 0, "must be non-negative"))
ValidatorRegistry.register("finite", _numeric_rule(math.isfinite, "must be finite (not inf/nan)"))
ValidatorRegistry.register(
    "probability", _numeric_rule(lambda v: 0.0 <= v <= 1.0, "must be a probability in [0, 1]")
)
ValidatorRegistry.register(
    "positive_integer", _numeric_rule(lambda v: v > 0, "must be a positive integer", integer=True)
)
ValidatorRegistry.register(
    "non_negative_integer",
    _numeric_rule(lambda v: v >= 0, "must be a non-negative integer", integer=True),
)


# =============================================================================
# MIXIN
# =============================================================================


class ValidatedConfig:
    """Mixin that checks ``_validation_rules`` on demand.

    Usage:
        @dataclass
        class ChemicalConfig(BaseConfig, ValidatedConfig):
            decay_rate: float = 0.5
            radius_min: Optional[float] = None

            _validation_rules = {
                'decay_rate': ('probability',),
                'radius_min': ('non_negative',),
            }

            def __post_init__(self):
                self.validate_config()
    """

    _validation_rules: Dict[str, Tuple[str, ...]] = {}

    def collect_validation_errors(self) -> List[str]:
        """Messages for every rule violation, in declaration order."""
        errors: List[str] = []
        for field_name, rules in self._validation_rules.items():
            if not hasattr(self, field_name):
                errors.append(f"Validation rule for non-existent field: {field_name}")
                continue

            value = getattr(self, field_name)
            if value is None:
                continue

            for rule in rules:
                try:
                    ValidatorRegistry.get_validator(rule)(value, field_name)
                except ConfigValidationError as e:
                    errors.append(str(e))
                    break
        return errors

    def validate_config(self, extra_errors: Sequence[str] = ()) -> None:
        """Raise one error listing every rule violation plus ``extra_errors``.

        Raises:
            ConfigValidationError: If anything is wrong
        """
        errors = self.collect_validation_errors() + list(extra_errors)
        if errors:
            details = "\n".join(f"  • {e}" for e in errors)
            raise ConfigValidationError(f"{type(self).__name__} validation failed:\n{details}")
