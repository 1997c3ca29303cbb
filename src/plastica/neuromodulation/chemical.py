"""Chemical Diffusion - Spatial Broadcast of the Reward Signal.

The reward is not delivered to synapses directly. It is released as a
"chemical" from point sources and reaches every synapse within
``chemical_diffusion_radius`` of the source, attenuated by distance. A
synapse is located at its post-synaptic neuron.

**Sources**:
============
- **Global broadcast**: every modulatory neuron that fired this step
  releases the scalar reward, scaled by ``positive_reward_strength`` (reward
  > 0) or ``|negative_reward_strength|`` (reward ≤ 0). Modulatory neurons
  fire whenever the reward is nonzero, either all together or one per step
  in round-robin order.
- **Per-bit broadcast**: each output neuron releases its own correctness
  signal (``positive_reward_strength`` on a match,
  ``negative_reward_strength`` on a mismatch) from its own position.

**Falloff Laws** (value 1 at distance 0 for every law):
=======================================================

.. code-block:: none

    inverse         1 / d
    inverseSquare   1 / d²
    linear          max(0, 1 − d / radius)
    constant        1

Contributions from all sources in a step add up in ``chemical_level``; the
level decays geometrically once per step after the weight update.

**Radius Annealing**:
=====================
With ``chemical_diffusion_radius_min`` set, the radius moves linearly from
the value captured at first use to the minimum over ``training_episodes``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence, Union

import torch

from plastica.config.network_config import ChemicalFalloff, ModulatoryFiring, NetworkConfig

if TYPE_CHECKING:
    from plastica.core.network import Network


def falloff(
    distance: torch.Tensor,
    mode: ChemicalFalloff,
    radius: float,
) -> torch.Tensor:
    """Distance attenuation factor for each entry of ``distance``."""
    ones = torch.ones_like(distance)
    if mode is ChemicalFalloff.CONSTANT:
        return ones
    if mode is ChemicalFalloff.INVERSE_SQUARE:
        values = 1.0 / (distance * distance)
    elif mode is ChemicalFalloff.LINEAR:
        if radius <= 0:
            values = torch.zeros_like(distance)
        else:
            values = (1.0 - distance / radius).clamp(min=0.0)
    else:
        values = 1.0 / distance
    return torch.where(distance > 0, values, ones)


def release_chemical(
    chemical_level: torch.Tensor,
    distances: torch.Tensor,
    strength: float,
    radius: float,
    mode: ChemicalFalloff,
) -> None:
    """Add one source's contribution to every synapse within ``radius``.

    Args:
        chemical_level: Per-synapse chemical level [n_synapses], modified in place
        distances: Source-to-synapse distances [n_synapses]
        strength: Signed amount released at the source
        radius: Diffusion radius (inclusive)
        mode: Falloff law
    """
    within = distances <= radius
    contribution = strength * falloff(distances, mode, radius)
    chemical_level.add_(torch.where(within, contribution, torch.zeros_like(contribution)))


def reward_strength(reward_signal: float, config: NetworkConfig) -> float:
    """Amount a firing modulatory neuron releases for ``reward_signal``."""
    if reward_signal > 0:
        return reward_signal * config.positive_reward_strength
    return reward_signal * abs(config.negative_reward_strength)


def diffuse_chemical(network: "Network", reward_signal: float, radius: float) -> None:
    """Global broadcast from every modulatory neuron that fired this step."""
    config = network.config
    strength = reward_strength(reward_signal, config)
    fired = network.state.fired

    for index in network.modulatory_indices.tolist():
        if not bool(fired[index]):
            continue
        release_chemical(
            network.synapses.chemical_level,
            network.synapse_distances_from(index),
            strength,
            radius,
            config.chemical_falloff,
        )


def diffuse_chemical_per_bit(
    network: "Network",
    targets: Union[Sequence[int], torch.Tensor],
    radius: float,
) -> None:
    """Per-bit broadcast: each output neuron releases its own correctness signal."""
    config = network.config
    outputs = network.read_outputs()
    targets = torch.as_tensor(targets, dtype=outputs.dtype)

    for bit, index in enumerate(network.output_indices.tolist()):
        matched = bool(outputs[bit] == targets[bit])
        signal = config.positive_reward_strength if matched else config.negative_reward_strength
        release_chemical(
            network.synapses.chemical_level,
            network.synapse_distances_from(index),
            signal,
            radius,
            config.chemical_falloff,
        )


def fire_modulatory_neurons(
    network: "Network",
    reward_signal: float,
    cursor: int = 0,
) -> int:
    """Set modulatory neuron outputs for this step's reward.

    In SYNCHRONOUS mode all modulatory neurons fire whenever the reward is
    nonzero. In CYCLING mode only the neuron at ``cursor`` (mod the count)
    may fire.

    Returns:
        The cursor for the next step (unchanged in SYNCHRONOUS mode)
    """
    indices = network.modulatory_indices
    n_modulatory = indices.numel()
    if n_modulatory == 0:
        return cursor

    state = network.state
    fires = torch.full((n_modulatory,), reward_signal != 0, dtype=torch.bool, device=indices.device)

    if network.config.modulatory_firing is ModulatoryFiring.CYCLING:
        active = cursor % n_modulatory
        only_active = torch.zeros_like(fires)
        only_active[active] = True
        fires = fires & only_active
        cursor += 1

    state.fired[indices] = fires
    state.output[indices] = fires.to(state.output.dtype)
    return cursor


def annealed_radius(
    config: NetworkConfig,
    episode: int,
    start_radius: Optional[float] = None,
) -> float:
    """Diffusion radius for ``episode``.

    Interpolates from ``start_radius`` (default: the configured radius) to
    ``chemical_diffusion_radius_min`` as the episode fraction goes from 0 to 1.
    Without a minimum the configured radius is returned unchanged.
    """
    start = config.chemical_diffusion_radius if start_radius is None else start_radius
    if not config.radius_annealing:
        return start

    t = (episode - 1) / max(1, config.training_episodes - 1)
    t = min(1.0, max(0.0, t))
    return start + (config.chemical_diffusion_radius_min - start) * t
