"""
Eligibility dampening: three independent multiplicative attenuators.

Every function returns a multiplier in [0, 1] computed from local
information only. The combined multiplier is the product of all three and
is applied to the raw eligibility trace (never to weight decay).

1. **Activity-history floor**: synapses that rarely participate contribute
   noise. Below ``activity_history_minimum`` the multiplier falls linearly
   to 0; at or above it the synapse keeps full strength.
2. **Information content**: an inverted U on the post neuron's fire rate,
   ``4·r·(1 − r)``. Always-on and always-off neurons carry no information.
3. **Ambient relevance**: a firing post neuron keeps full strength in an
   active neighbourhood and half strength in a quiet one; a silent post
   neuron is only relevant near activity (multiplier 0 in a quiet one).
"""

from __future__ import annotations

from typing import Union

import torch

from plastica.config.network_config import NetworkConfig
from plastica.components.neurons.neuron import NeuronState
from plastica.components.synapses.synapse import SynapseState

Rate = Union[float, torch.Tensor]


def activity_history_dampening(activity_history: torch.Tensor, minimum: float) -> torch.Tensor:
    """Scale proportionally down to 0 below ``minimum``, 1 otherwise."""
    return torch.where(
        activity_history < minimum,
        activity_history / minimum,
        torch.ones_like(activity_history),
    )


def information_dampening(fire_rate: Rate) -> Rate:
    """Inverted U on fire rate: 1 at r = 0.5, 0 at r = 0 and r = 1."""
    return 4 * fire_rate * (1 - fire_rate)


def ambient_relevance_dampening(
    ambient_field: torch.Tensor,
    output: torch.Tensor,
    ambient_threshold: float,
) -> torch.Tensor:
    """Relevance of a neuron's state given how active its neighbourhood is."""
    active = ambient_field > ambient_threshold
    ones = torch.ones_like(ambient_field)
    quiet_value = torch.where(output == 1, 0.5 * ones, torch.zeros_like(ambient_field))
    return torch.where(active, ones, quiet_value)


def combined_dampening(
    synapses: SynapseState,
    neuron_state: NeuronState,
    config: NetworkConfig,
) -> torch.Tensor:
    """Product of the three multipliers for every synapse [n_synapses]."""
    post = synapses.post
    history = activity_history_dampening(synapses.activity_history, config.activity_history_minimum)
    info = information_dampening(neuron_state.fire_rate[post])
    ambient = ambient_relevance_dampening(
        neuron_state.ambient_field[post],
        neuron_state.output[post],
        config.ambient_threshold,
    )
    return history * info * ambient


def update_activity_history(synapses: SynapseState, config: NetworkConfig) -> None:
    """Running average of participation (nonzero raw trace) per synapse.

    Must run on the raw trace, before dampening, since dampening reads the
    history it produces.
    """
    participated = (synapses.eligibility_trace.abs() > 0).to(synapses.activity_history.dtype)
    decay = config.activity_history_decay
    synapses.activity_history = decay * synapses.activity_history + (1 - decay) * participated
