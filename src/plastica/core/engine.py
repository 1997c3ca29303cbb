"""
Step/Evaluate Engine - the per-pattern training pipeline.

:func:`step` runs one training step on one (input, target) pair:

.. code-block:: none

    1.  clamp inputs
    2.  propagate (× propagation_cycles), then count the cycle and run
        homeostasis exactly once
    3.  ambient field
    4.  eligibility (raw)
    5.  activity history (from the raw trace)
    6.  dampening (unless skip_dampening)
    7.  flag strength
    8.  reward, then resolve last step's provisional update
    9.  modulatory firing
    10. chemical diffusion (global or per-bit, radius annealed)
    11. weight update + frustration
    12. chemical decay
    13. metrics

:func:`evaluate` runs stages 1-2 (firing only) on a snapshot of the neuron
state and restores it afterwards, so scoring the network never disturbs
training.

Transient bookkeeping that belongs to the training loop rather than to the
network (modulatory cursor, pending provisional update, the radius at which
annealing started) lives in :class:`TrainingState`.

Usage:
======
    network = build_network(NetworkConfig(seed=42))
    training = TrainingState()
    for episode in range(1, 1001):
        pattern = patterns.cycle(episode)
        metrics = step(network, training, pattern.input, pattern.target, episode)

    result = evaluate(network, pattern.input, pattern.target)

Author: Plastica Project
Date: February 2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import torch

from plastica.config.network_config import NetworkConfig, RewardBroadcast
from plastica.core.network import Network
from plastica.dynamics.ambient import compute_ambient_fields
from plastica.errors import validate_binary_pattern, validate_pattern_length
from plastica.learning.dampening import combined_dampening, update_activity_history
from plastica.learning.eligibility.flagging import compute_eligibility, update_flag_strength
from plastica.learning.homeostasis.intrinsic_plasticity import regulate_threshold
from plastica.learning.plasticity import (
    ProvisionalUpdate,
    decay_chemical,
    resolve_provisional,
    update_frustration,
    update_weights,
)
from plastica.learning.reward import compute_accuracy, compute_loss, compute_reward_signal
from plastica.neuromodulation.chemical import (
    annealed_radius,
    diffuse_chemical,
    diffuse_chemical_per_bit,
    fire_modulatory_neurons,
)

logger = logging.getLogger(__name__)

Bits = Union[Sequence[int], torch.Tensor]


@dataclass
class TrainingState:
    """Training-loop bookkeeping that is not part of the network structure.

    Attributes:
        modulatory_cursor: Next modulatory neuron to fire in CYCLING mode
        provisional: Update awaiting next step's accuracy (provisional mode)
        chemical_radius_start: Diffusion radius captured when annealing began
    """

    modulatory_cursor: int = 0
    provisional: Optional[ProvisionalUpdate] = None
    chemical_radius_start: Optional[float] = None

    def diffusion_radius(self, config: NetworkConfig, episode: int) -> float:
        """Chemical diffusion radius for ``episode``; captures the start radius on first use."""
        if not config.radius_annealing:
            return config.chemical_diffusion_radius
        if self.chemical_radius_start is None:
            self.chemical_radius_start = config.chemical_diffusion_radius
        return annealed_radius(config, episode, self.chemical_radius_start)


@dataclass
class StepMetrics:
    """Summary of one training step."""

    outputs: List[int]
    accuracy: float
    loss: float
    reward: float
    mean_weight: float
    mean_fire_rate: float
    mean_threshold: float
    active_synapse_fraction: float
    frustration_flips: int = 0
    provisional_reverted: bool = False


@dataclass
class EvaluationResult:
    """Frozen forward-pass score of one pattern."""

    outputs: List[int]
    accuracy: float
    loss: float


def _check_pattern(network: Network, input_pattern: Bits, target_pattern: Bits) -> None:
    validate_pattern_length(input_pattern, network.config.input_size, name="input")
    validate_pattern_length(target_pattern, network.config.output_size, name="target")
    validate_binary_pattern(input_pattern, name="input")
    validate_binary_pattern(target_pattern, name="target")


def _forward(network: Network, input_pattern: Bits) -> None:
    network.clamp_inputs(input_pattern)
    network.propagate(network.config.propagation_cycles)


def step(
    network: Network,
    training_state: TrainingState,
    input_pattern: Bits,
    target_pattern: Bits,
    episode: int = 0,
) -> StepMetrics:
    """Run one training step on ``network`` in place.

    Args:
        network: Network to train
        training_state: Bookkeeping carried from step to step
        input_pattern: Binary input vector, length ``input_size``
        target_pattern: Binary target vector, length ``output_size``
        episode: 1-based training episode (drives warmup and annealing)

    Returns:
        Metrics of this step

    Raises:
        PatternError: If a pattern length does not match the network, or an entry is not 0/1
        ComponentError: If the network has no synapses
    """
    _check_pattern(network, input_pattern, target_pattern)
    config = network.config
    state = network.state
    synapses = network.synapses

    # 1-2. Forward pass; statistics and homeostasis once per step
    _forward(network, input_pattern)
    state.record_cycle(torch.ones_like(state.fired))
    regulate_threshold(
        state.threshold,
        state.fire_rate,
        config.target_fire_rate,
        config.threshold_adjust_rate,
        mask=network.homeostatic_mask,
    )

    # 3. Ambient field
    compute_ambient_fields(network)

    # 4. Eligibility
    synapses.eligibility_trace = compute_eligibility(
        state.fired[synapses.pre],
        state.fired[synapses.post],
        state.ambient_field[synapses.post],
        config,
    )

    # 5. Activity history reads the raw trace
    update_activity_history(synapses, config)

    # 6. Dampening
    if not config.skip_dampening:
        synapses.eligibility_trace = synapses.eligibility_trace * combined_dampening(
            synapses, state, config
        )

    # 7. Flag strength
    update_flag_strength(synapses, config)

    # 8. Reward
    outputs = network.read_outputs()
    targets = torch.as_tensor(target_pattern, dtype=outputs.dtype, device=outputs.device)
    accuracy = compute_accuracy(outputs, targets)
    reward = compute_reward_signal(accuracy, config, episode)

    reverted = False
    if config.provisional_weights and training_state.provisional is not None:
        reverted = resolve_provisional(synapses, training_state.provisional, accuracy)
        if reverted:
            logger.debug(
                "Episode %d: accuracy %.3f < %.3f, provisional update reverted",
                episode,
                accuracy,
                training_state.provisional.accuracy,
            )
        training_state.provisional = None

    # 9. Modulatory firing
    training_state.modulatory_cursor = fire_modulatory_neurons(
        network, reward, training_state.modulatory_cursor
    )

    # 10. Chemical diffusion
    radius = training_state.diffusion_radius(config, episode)
    if config.radius_annealing:
        logger.debug("Episode %d: chemical diffusion radius %.4f", episode, radius)
    if config.reward_broadcast is RewardBroadcast.PER_BIT:
        diffuse_chemical_per_bit(network, targets, radius)
    else:
        diffuse_chemical(network, reward, radius)

    # 11. Weight update
    pre_weights = synapses.weight.clone() if config.provisional_weights else None
    delta = update_weights(synapses, config, episode)
    flipped = update_frustration(synapses, config, delta)
    n_flipped = int(flipped.sum().item())
    if n_flipped:
        logger.debug("Episode %d: %d frustration flips", episode, n_flipped)
    if pre_weights is not None:
        training_state.provisional = ProvisionalUpdate(pre_weights=pre_weights, accuracy=accuracy)

    # 12. Chemical decay
    decay_chemical(synapses, config)

    # 13. Metrics
    return StepMetrics(
        outputs=[int(v) for v in outputs.tolist()],
        accuracy=accuracy,
        loss=compute_loss(outputs, targets),
        reward=reward,
        mean_weight=synapses.mean_abs_weight(),
        mean_fire_rate=network.mean_fire_rate(),
        mean_threshold=network.mean_threshold(),
        active_synapse_fraction=synapses.active_fraction(),
        frustration_flips=n_flipped,
        provisional_reverted=reverted,
    )


def evaluate(network: Network, input_pattern: Bits, target_pattern: Bits) -> EvaluationResult:
    """Score the current weights on one pattern without side effects.

    Neuron state is snapshotted before the forward pass and restored after
    it; synapses are only read.
    """
    _check_pattern(network, input_pattern, target_pattern)
    saved = network.state.snapshot()
    try:
        _forward(network, input_pattern)
        outputs = network.read_outputs()
    finally:
        network.state.restore(saved)

    targets = torch.as_tensor(target_pattern, dtype=outputs.dtype, device=outputs.device)
    return EvaluationResult(
        outputs=[int(v) for v in outputs.tolist()],
        accuracy=compute_accuracy(outputs, targets),
        loss=compute_loss(outputs, targets),
    )
