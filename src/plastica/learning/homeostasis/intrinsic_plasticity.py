"""Intrinsic Plasticity - Fixed-Step Threshold Regulation for Homeostasis.

**Scope**: Neuron excitability adaptation (firing rate homeostasis)
**Focus**: Threshold moves to push each neuron's fire rate toward a target

Neurons that fire too much raise their threshold; neurons that fire too
little lower it. Unlike a proportional controller, every regulation event
moves the threshold by the same fixed step, so this is a discrete integral
controller:

.. code-block:: none

    θ_i ← θ_i + η   if rate_i > target
    θ_i ← θ_i - η   if rate_i < target
    θ_i ← θ_i       if rate_i = target

**Where**:
- θ_i: firing threshold of neuron i (no hard bound)
- rate_i: fire_count / cycle_count since the network was built
- η: ``threshold_adjust_rate``

Regulation runs once per training step after firing has been resolved,
for every non-input neuron. Output neurons can be exempted
(``fixed_output_threshold``) so that per-bit reward, not homeostasis,
decides how often they fire.

Usage:
======
    regulate_threshold(
        state.threshold,
        state.fire_rate,
        target_fire_rate=config.target_fire_rate,
        adjust_rate=config.threshold_adjust_rate,
        mask=network.homeostatic_mask,
    )
"""

from __future__ import annotations

from typing import Optional

import torch


def regulate_threshold(
    threshold: torch.Tensor,
    fire_rate: torch.Tensor,
    target_fire_rate: float,
    adjust_rate: float,
    mask: Optional[torch.Tensor] = None,
) -> torch.Tensor:
    """Apply one fixed-step homeostatic update to ``threshold`` in place.

    Args:
        threshold: Per-neuron thresholds [n_neurons], modified in place
        fire_rate: Per-neuron fire rates [n_neurons]
        target_fire_rate: Homeostatic set point
        adjust_rate: Fixed step size
        mask: Neurons subject to regulation [n_neurons] (bool). None = all.

    Returns:
        The step applied to each neuron (+adjust_rate, -adjust_rate or 0)
    """
    direction = torch.sign(fire_rate - target_fire_rate)
    if mask is not None:
        direction = direction * mask.to(direction.dtype)
    step = direction * adjust_rate
    threshold.add_(step)
    return step
