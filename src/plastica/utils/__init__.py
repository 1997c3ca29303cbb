"""Utility Functions.

General utility functions for the Plastica engine.
"""

from plastica.utils.core_utils import clamp_weights, safe_ratio
from plastica.utils.rng import make_generator, random_in_range, shuffled
from plastica.utils.spatial import IdGenerator, distance3d, pairwise_distances

__all__ = [
    "clamp_weights",
    "safe_ratio",
    "make_generator",
    "random_in_range",
    "shuffled",
    "IdGenerator",
    "distance3d",
    "pairwise_distances",
]
