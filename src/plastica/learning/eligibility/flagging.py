"""
Four-quadrant eligibility flagging and the flag-strength persistence gate.

**Eligibility trace** (memoryless, recomputed every step from local state):

.. code-block:: none

    pre fired   post fired   post ambient        trace
    ---------   ----------   ----------------    ----------------------
    yes         yes          any                 +co_activation_strength
    no          no           > ambient_threshold +co_silence_strength
    no          no           ≤ ambient_threshold 0
    yes / no    no / yes     any                 mismatch_strength

Co-silence only counts in an active neighbourhood: the boundary case
(ambient field equal to the threshold) gives no bonus.

**Flag strength** turns the per-step trace into a slower, hysteretic signal
in [-1, 1]:

- SIMPLE_FLAG: any nonzero trace moves flag strength by
  ``sign(trace) · flag_strength_gain``; a zero trace decays it by
  ``flag_decay_rate``.
- CONSISTENT_FLAG: flag strength only grows after ``consistency_threshold``
  consecutive same-sign traces; a sign flip resets the streak and applies
  ``flag_decay_on_flip``; a zero trace decays it without touching the streak.

**Effective trace**: in a flag mode the weight update uses the flag strength
when ``|flag| ≥ flag_strength_threshold`` and zero otherwise, except during
the first ``flag_gate_warmup`` episodes, when the raw trace passes through.

Author: Plastica Project
Date: February 2026
"""

from __future__ import annotations

import torch

from plastica.config.network_config import NetworkConfig, PlasticityMode
from plastica.components.synapses.synapse import SynapseState


def compute_eligibility(
    pre_fired: torch.Tensor,
    post_fired: torch.Tensor,
    post_ambient: torch.Tensor,
    config: NetworkConfig,
) -> torch.Tensor:
    """Raw (undampened) eligibility trace for each (pre, post) pair.

    Args:
        pre_fired: Pre-synaptic fired flags (bool)
        post_fired: Post-synaptic fired flags (bool)
        post_ambient: Post-synaptic ambient field values
        config: Supplies the four quadrant strengths and ``ambient_threshold``

    Returns:
        Trace tensor, same shape and dtype as ``post_ambient``
    """
    both = pre_fired & post_fired
    neither = ~pre_fired & ~post_fired
    active_neighbourhood = post_ambient > config.ambient_threshold

    trace = torch.full_like(post_ambient, config.mismatch_strength)
    trace.masked_fill_(neither, 0.0)
    trace.masked_fill_(neither & active_neighbourhood, config.co_silence_strength)
    trace.masked_fill_(both, config.co_activation_strength)
    return trace


def update_flag_strength(synapses: SynapseState, config: NetworkConfig) -> None:
    """Advance every synapse's flag strength from its current eligibility trace.

    No-op in RAW mode.
    """
    mode = config.plasticity_mode
    if mode is PlasticityMode.RAW:
        return

    trace = synapses.eligibility_trace
    nonzero = trace != 0
    sign = torch.sign(trace)
    flag = synapses.flag_strength

    if mode is PlasticityMode.SIMPLE_FLAG:
        grown = (flag + sign * config.flag_strength_gain).clamp(-1.0, 1.0)
        synapses.flag_strength = torch.where(nonzero, grown, flag * config.flag_decay_rate)
        return

    # CONSISTENT_FLAG
    continues_streak = nonzero & (sign == synapses.last_trace_sign)
    flipped = nonzero & ~continues_streak

    synapses.consecutive_consistent = torch.where(
        continues_streak,
        synapses.consecutive_consistent + 1,
        synapses.consecutive_consistent.masked_fill(flipped, 0),
    )
    flag = torch.where(flipped, flag * config.flag_decay_on_flip, flag)
    synapses.last_trace_sign = torch.where(nonzero, sign, synapses.last_trace_sign)

    grows = nonzero & (synapses.consecutive_consistent >= config.consistency_threshold)
    flag = torch.where(grows, (flag + sign * config.flag_strength_gain).clamp(-1.0, 1.0), flag)
    synapses.flag_strength = torch.where(nonzero, flag, flag * config.flag_decay_rate)


def effective_trace(
    synapses: SynapseState,
    config: NetworkConfig,
    episode: int = 0,
) -> torch.Tensor:
    """Trace that actually drives the weight update this step."""
    if not config.flag_gated:
        return synapses.eligibility_trace

    if config.flag_gate_warmup is not None and episode < config.flag_gate_warmup:
        return synapses.eligibility_trace

    flag = synapses.flag_strength
    return torch.where(flag.abs() >= config.flag_strength_threshold, flag, torch.zeros_like(flag))
