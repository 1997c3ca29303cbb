"""
Scalar reward from output/target agreement.

The network is scored by the fraction of output bits that match the
target. That accuracy is mapped linearly to [-1, 1]:

.. code-block:: none

    linear = (accuracy − 0.5) × 2

and optionally shaped:

- **Annealed** (``reward_anneal_start``/``end`` set): blend from ``linear``
  to ``sign(linear)·|linear|²`` as the episode moves through the window.
  Before the window the reward is purely linear (bootstrap), after it purely
  squared (refinement).
- **Fixed exponent**: ``sign(linear)·|linear|^reward_exponent``, with an
  unset exponent meaning 1 (linear).
"""

from __future__ import annotations

import math
from typing import Sequence, Union

import torch

from plastica.config.network_config import NetworkConfig

Bits = Union[Sequence[int], torch.Tensor]


def compute_accuracy(outputs: Bits, targets: Bits) -> float:
    """Fraction of positions where ``outputs`` equals ``targets``."""
    outputs = torch.as_tensor(outputs, dtype=torch.float64)
    targets = torch.as_tensor(targets, dtype=torch.float64)
    if outputs.numel() == 0:
        return 0.0
    return float((outputs == targets).to(torch.float64).mean().item())


def compute_loss(outputs: Bits, targets: Bits) -> float:
    """Sum of squared output/target differences."""
    outputs = torch.as_tensor(outputs, dtype=torch.float64)
    targets = torch.as_tensor(targets, dtype=torch.float64)
    return float((outputs - targets).pow(2).sum().item())


def _signed_power(value: float, exponent: float) -> float:
    if value == 0:
        return 0.0
    return math.copysign(abs(value) ** exponent, value)


def compute_reward_signal(accuracy: float, config: NetworkConfig, episode: int = 0) -> float:
    """Map accuracy to a shaped reward in [-1, 1].

    Example:
        >>> compute_reward_signal(0.8, NetworkConfig(seed=0))
        0.6000000000000001
    """
    linear = (accuracy - 0.5) * 2

    if config.reward_annealing:
        span = config.reward_anneal_end - config.reward_anneal_start
        blend = min(1.0, max(0.0, (episode - config.reward_anneal_start) / span))
        squared = _signed_power(linear, 2.0)
        return (1 - blend) * linear + blend * squared

    exponent = config.reward_exponent if config.reward_exponent is not None else 1.0
    return _signed_power(linear, exponent)
