"""
Ambient Field - Local Activity Around Each Neuron.

A neuron's ambient field is the inverse-distance weighted sum of its
neighbours' outputs:

.. code-block:: none

    ambient_i = Σ_{j ∈ N(i)} output_j / d_ij

where ``N(i)`` is the fixed set of other neurons within ``ambient_radius``.
Coincident neighbours (d = 0) contribute nothing.

The neighbour sets never change after the build, so the ``1 / d`` weights are
precomputed once as a dense ``[n_neurons, n_neurons]`` matrix with zeros
outside the neighbourhood.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import torch

if TYPE_CHECKING:
    from plastica.core.network import Network


def neighbour_mask(distances: torch.Tensor, radius: float) -> torch.Tensor:
    """Neighbour relation [n_neurons, n_neurons] (bool): other neurons within ``radius``."""
    n = distances.shape[0]
    eye = torch.eye(n, dtype=torch.bool, device=distances.device)
    return (distances <= radius) & ~eye


def ambient_weights(distances: torch.Tensor, radius: float) -> torch.Tensor:
    """Precomputed ``1 / d`` weight of neighbour ``j`` in neuron ``i``'s field."""
    contributes = neighbour_mask(distances, radius) & (distances > 0)
    safe = torch.where(contributes, distances, torch.ones_like(distances))
    return torch.where(contributes, 1.0 / safe, torch.zeros_like(distances))


def ambient_fields(weights: torch.Tensor, output: torch.Tensor) -> torch.Tensor:
    """Field value for every neuron given the current outputs [n_neurons]."""
    return (weights * output.unsqueeze(0)).sum(dim=1)


def compute_ambient_fields(network: "Network") -> torch.Tensor:
    """Recompute and store ``network.state.ambient_field``."""
    state = network.state
    state.ambient_field = ambient_fields(network.ambient_weights, state.output)
    return state.ambient_field
