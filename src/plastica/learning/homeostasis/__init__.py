"""Homeostatic Plasticity.

Per-neuron threshold regulation toward a target fire rate.
"""

from plastica.learning.homeostasis.intrinsic_plasticity import regulate_threshold

__all__ = [
    "regulate_threshold",
]
