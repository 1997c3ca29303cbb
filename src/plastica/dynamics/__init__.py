"""
Network dynamics that are neither learning nor neuromodulation.
"""

from plastica.dynamics.ambient import (
    ambient_fields,
    ambient_weights,
    compute_ambient_fields,
    neighbour_mask,
)

__all__ = [
    "ambient_fields",
    "ambient_weights",
    "compute_ambient_fields",
    "neighbour_mask",
]
