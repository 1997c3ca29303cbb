"""
Core Utilities for Plastica.

Small tensor helpers shared by the neuron and synapse update rules.

Author: Plastica Project
Date: February 2026
"""

from __future__ import annotations

import torch


def clamp_weights(
    weights: torch.Tensor,
    bound: float,
    inplace: bool = True,
) -> torch.Tensor:
    """Clamp a tensor to the symmetric range ``[-bound, +bound]``.

    Standard pattern for enforcing weight (and delta) bounds after a
    learning update. Operates in-place by default.

    Args:
        weights: Tensor to clamp
        bound: Non-negative magnitude limit
        inplace: If True, modify ``weights`` in place (default: True)

    Returns:
        Clamped tensor

    Example:
        >>> clamp_weights(synapses.weight, config.max_weight_magnitude)
        >>> delta = clamp_weights(raw_delta, config.max_weight_delta, inplace=False)
    """
    if inplace:
        return weights.clamp_(-bound, bound)
    return weights.clamp(-bound, bound)


def safe_ratio(numerator: torch.Tensor, denominator: torch.Tensor) -> torch.Tensor:
    """Elementwise ``numerator / denominator`` that is 0 where the denominator is 0.

    Used for fire rates (fire count over cycle count) before a neuron has
    been evaluated.
    """
    zero = denominator == 0
    ratio = numerator.to(torch.float64) / denominator.masked_fill(zero, 1).to(torch.float64)
    return ratio.masked_fill(zero, 0.0)
