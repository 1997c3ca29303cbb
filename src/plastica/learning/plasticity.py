"""
Chemically-gated weight update, frustration flips and provisional commits.

**Weight Update** (per synapse, every step):

.. code-block:: none

    w     ← w · (1 − weight_decay)                                  # always first
    Δw    = clamp(trace_eff · chemical · learning_rate, ±max_weight_delta)
    w     ← clamp(w + Δw, ±max_weight_magnitude)

The clamped Δw is returned for frustration bookkeeping.

**Frustration** (``frustration_window`` set): a synapse that keeps moving in
one direction while the chemical it sees stays low is probably pushing the
wrong way. After ``frustration_window`` consecutive same-direction deltas
with the chemical EMA (0.95 / 0.05) below ``frustration_threshold`` the
weight is partially reflected, ``w ← −frustration_flip_strength · w``, and
all frustration and flag state starts over.

**Provisional Commit** (``provisional_weights``): the weights before a
step's update are kept together with that step's accuracy. On the next step
the update is kept if accuracy did not drop, otherwise every weight is
restored from the snapshot.

Author: Plastica Project
Date: February 2026
"""

from __future__ import annotations

from dataclasses import dataclass

import torch

from plastica.config.network_config import NetworkConfig
from plastica.components.synapses.synapse import SynapseState
from plastica.learning.eligibility.flagging import effective_trace
from plastica.utils.core_utils import clamp_weights

# Chemical EMA while a synapse keeps moving in one direction
FRUSTRATION_EMA_KEEP = 0.95
FRUSTRATION_EMA_NEW = 0.05


def update_weights(
    synapses: SynapseState,
    config: NetworkConfig,
    episode: int = 0,
) -> torch.Tensor:
    """Decay-then-delta weight update for every synapse.

    Returns:
        The clamped delta applied to each synapse [n_synapses]
    """
    synapses.weight.mul_(1 - config.weight_decay)

    trace = effective_trace(synapses, config, episode)
    raw_delta = trace * synapses.chemical_level * config.learning_rate
    delta = clamp_weights(raw_delta, config.max_weight_delta, inplace=False)

    synapses.weight.add_(delta)
    clamp_weights(synapses.weight, config.max_weight_magnitude)
    return delta


def update_frustration(
    synapses: SynapseState,
    config: NetworkConfig,
    weight_delta: torch.Tensor,
) -> torch.Tensor:
    """Track directional movement and flip frustrated synapses.

    Args:
        synapses: Synapse state, modified in place
        config: Supplies the frustration window, threshold and flip strength
        weight_delta: Delta returned by :func:`update_weights` this step

    Returns:
        Mask of synapses flipped this step [n_synapses] (bool). All False
        when frustration is disabled.
    """
    if not config.frustration_enabled:
        return torch.zeros_like(weight_delta, dtype=torch.bool)

    moving = weight_delta != 0
    direction = torch.sign(weight_delta)
    same = moving & (direction == synapses.adjustment_direction)
    changed = moving & ~same
    chemical = synapses.chemical_level

    synapses.same_direction_count = torch.where(
        same,
        synapses.same_direction_count + 1,
        synapses.same_direction_count.masked_fill(changed, 1),
    )
    ema = FRUSTRATION_EMA_KEEP * synapses.reward_while_adjusting + FRUSTRATION_EMA_NEW * chemical
    synapses.reward_while_adjusting = torch.where(
        same, ema, torch.where(changed, chemical, synapses.reward_while_adjusting)
    )
    synapses.adjustment_direction = torch.where(changed, direction, synapses.adjustment_direction)

    frustrated = (
        moving
        & (synapses.same_direction_count >= config.frustration_window)
        & (synapses.reward_while_adjusting < config.frustration_threshold)
    )
    if not frustrated.any():
        return frustrated

    synapses.weight = torch.where(
        frustrated, synapses.weight * -config.frustration_flip_strength, synapses.weight
    )
    synapses.adjustment_direction = synapses.adjustment_direction.masked_fill(frustrated, 0.0)
    synapses.same_direction_count = synapses.same_direction_count.masked_fill(frustrated, 0)
    synapses.reward_while_adjusting = synapses.reward_while_adjusting.masked_fill(frustrated, 0.0)
    # Re-earn the flag latch in the new direction
    synapses.flag_strength = synapses.flag_strength.masked_fill(frustrated, 0.0)
    synapses.last_trace_sign = synapses.last_trace_sign.masked_fill(frustrated, 0.0)
    synapses.consecutive_consistent = synapses.consecutive_consistent.masked_fill(frustrated, 0)
    synapses.frustration_flip_count += frustrated.to(torch.int64)
    return frustrated


def decay_chemical(synapses: SynapseState, config: NetworkConfig) -> None:
    """Geometric decay of every synapse's chemical level."""
    synapses.chemical_level.mul_(config.chemical_decay_rate)


# =============================================================================
# Provisional commit
# =============================================================================


@dataclass
class ProvisionalUpdate:
    """Weights before a speculative update and the accuracy it was made at."""

    pre_weights: torch.Tensor
    accuracy: float


def resolve_provisional(
    synapses: SynapseState,
    pending: ProvisionalUpdate,
    accuracy: float,
) -> bool:
    """Keep or roll back a speculative update given this step's accuracy.

    Returns:
        True if the snapshot was restored
    """
    if accuracy >= pending.accuracy:
        return False
    synapses.weight.copy_(pending.pre_weights)
    return True
