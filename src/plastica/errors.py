"""
Exceptions and argument checks for Plastica.

Every error the package raises derives from :class:`PlasticaError`; the
helpers at the bottom raise the matching subclass with a uniform message.

Exception Hierarchy:
====================
PlasticaError (base)
├── ConfigurationError - Bad or mutually inconsistent parameters
│   └── ConfigValidationError - Declarative rule violations (config.validation)
├── PatternError - Input/target vectors that do not fit the network
└── ComponentError - Errors inside a network component (synapses, neurons)

Usage Examples:
===============
    # Raise component error
    raise ComponentError("SynapseState", "mean weight requested for empty synapse list")

    # Validate a pattern before clamping it onto the input neurons
    validate_pattern_length(pattern, expected=config.input_size, name="input")

Design Philosophy:
==================
- The simulation core has no recoverable error paths: everything raised here
  is a programmer error and should fail fast
- Numeric edge cases (zero cycle counts, zero distances) are guarded inline
  and never raise

Author: Plastica Project
Date: February 2026
"""

from __future__ import annotations

from typing import Sized


# =============================================================================
# Exception Hierarchy
# =============================================================================

class PlasticaError(Exception):
    """Base exception for all Plastica-specific errors.

    All custom exceptions in Plastica inherit from this class, enabling
    code to catch Plastica errors specifically:

        try:
            step(network, training_state, pattern.input, pattern.target)
        except PlasticaError as e:
            logger.error(f"Plastica error: {e}")
    """


class ConfigurationError(PlasticaError):
    """A parameter is out of range, or parameters contradict each other.

    Example:
        raise ConfigurationError("input_size=9 exceeds the 8 regular neurons of cluster 0")
    """


class PatternError(PlasticaError):
    """Input or target vector is not binary or does not fit the network.

    Example:
        raise PatternError("input pattern has 4 bits, network expects 5")
    """


class ComponentError(PlasticaError):
    """Error in a network component (neuron table, synapse list).

    The message is prefixed with the component name, e.g.
    ``ComponentError("SynapseState", "empty")`` reads ``[SynapseState] empty``.
    """

    def __init__(self, component: str, message: str):
        super().__init__(f"[{component}] {message}")
        self.component_name = component


# =============================================================================
# Validation Utilities
# =============================================================================

def validate_pattern_length(
    pattern: Sized,
    expected: int,
    name: str = "pattern",
) -> None:
    """Validate that a binary pattern has exactly ``expected`` entries.

    Args:
        pattern: Sequence or 1D tensor of 0/1 values
        expected: Number of input (or output) neurons in the network
        name: Name for error messages ("input", "target")

    Raises:
        PatternError: If the lengths differ

    Example:
        >>> validate_pattern_length([1, 0, 1], expected=3, name="input")
    """
    length = len(pattern)
    if length != expected:
        raise PatternError(
            f"{name} pattern has {length} entries, network expects {expected}"
        )


def validate_binary_pattern(pattern: Sized, name: str = "pattern") -> None:
    """Validate that every entry of a pattern is 0 or 1.

    Accepts ``0``/``1``, ``0.0``/``1.0`` and booleans. Fractional values are
    rejected, never rounded.

    Raises:
        PatternError: On the first non-binary entry
    """
    values = pattern.tolist() if hasattr(pattern, "tolist") else list(pattern)
    for value in values:
        if value not in (0, 1):
            raise PatternError(f"{name} pattern must be binary, got {value!r} in {values}")


def validate_positive(value: float, name: str, allow_zero: bool = False) -> None:
    """Require ``value > 0`` (or ``>= 0`` with ``allow_zero``).

    Raises:
        ConfigurationError: On a value below the bound
    """
    too_small = value < 0 if allow_zero else value <= 0
    if too_small:
        bound = "non-negative" if allow_zero else "positive"
        raise ConfigurationError(f"{name} must be {bound}, got {value}")


def validate_probability(value: float, name: str) -> None:
    """Require ``0 <= value <= 1``.

    Raises:
        ConfigurationError: Outside the unit interval
    """
    if not 0 <= value <= 1:
        raise ConfigurationError(f"{name} must lie in [0, 1], got {value}")


__all__ = [
    # Exception classes
    "PlasticaError",
    "ConfigurationError",
    "PatternError",
    "ComponentError",
    # Validation utilities
    "validate_pattern_length",
    "validate_binary_pattern",
    "validate_positive",
    "validate_probability",
]
