"""
Neuromodulation: spatial diffusion of the reward chemical.
"""

from plastica.neuromodulation.chemical import (
    annealed_radius,
    diffuse_chemical,
    diffuse_chemical_per_bit,
    falloff,
    fire_modulatory_neurons,
    release_chemical,
    reward_strength,
)

__all__ = [
    "annealed_radius",
    "diffuse_chemical",
    "diffuse_chemical_per_bit",
    "falloff",
    "fire_modulatory_neurons",
    "release_chemical",
    "reward_strength",
]
