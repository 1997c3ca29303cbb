"""
Plastica Configuration System.

Usage:
======

    from plastica.config import NetworkConfig, PlasticityMode

    config = NetworkConfig(
        seed=42,
        plasticity_mode=PlasticityMode.CONSISTENT_FLAG,
        flag_strength_threshold=0.5,
    )

Author: Plastica Project
Date: February 2026
"""

from plastica.config.base import BaseConfig
from plastica.config.network_config import (
    ChemicalFalloff,
    ModulatoryFiring,
    NetworkConfig,
    NeuronRole,
    PlasticityMode,
    RewardBroadcast,
)
from plastica.config.validation import (
    ConfigValidationError,
    ValidatedConfig,
    ValidatorRegistry,
)

__all__ = [
    "BaseConfig",
    "NetworkConfig",
    "NeuronRole",
    "PlasticityMode",
    "RewardBroadcast",
    "ModulatoryFiring",
    "ChemicalFalloff",
    "ConfigValidationError",
    "ValidatedConfig",
    "ValidatorRegistry",
]
