"""
Network - the aggregate that owns every neuron and synapse of one run.

A ``Network`` is created by :func:`plastica.core.network_builder.build_network`
and then mutated in place by :func:`plastica.core.engine.step`. Structure
(neuron table, positions, role indices, distances) is fixed at build time;
only ``state`` (per-neuron) and ``synapses`` (per-synapse) change.

Neurons are addressed by index. ``neurons[i]`` describes the neuron whose
state lives at position ``i`` of every ``NeuronState`` tensor, and synapse
``k`` connects ``synapses.pre[k]`` to ``synapses.post[k]``.

Forward Pass:
=============
One propagation cycle accumulates ``weight × pre-output`` onto each post
neuron (``index_add_`` over the synapse list), then every non-input neuron
applies the threshold rule. With ``propagation_cycles > 1`` the cycle
repeats on the new outputs; counting and homeostasis stay with the caller
so they run exactly once per step.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Sequence, Union

import torch

from plastica.components.neurons.neuron import Neuron, NeuronState, threshold_fire
from plastica.components.synapses.synapse import SynapseState
from plastica.config.network_config import NetworkConfig, NeuronRole

Bits = Union[Sequence[int], torch.Tensor]


@dataclass(eq=False)
class Network:
    """Neuron table, neuron state, synapse list and configuration of one run.

    Attributes:
        config: Configuration the network was built from
        neurons: Static neuron descriptions, ordered by index
        state: Mutable per-neuron state
        synapses: Mutable per-synapse state
        positions: Neuron coordinates [n_neurons, 3]
        distances: Pairwise neuron distances [n_neurons, n_neurons]
        ambient_weights: Precomputed ``1 / d`` neighbour weights [n_neurons, n_neurons]
        input_indices: Input neurons in ascending index order
        output_indices: Output neurons in ascending index order
        modulatory_indices: Modulatory neurons in ascending index order
    """

    config: NetworkConfig
    neurons: List[Neuron]
    state: NeuronState
    synapses: SynapseState
    positions: torch.Tensor
    distances: torch.Tensor
    ambient_weights: torch.Tensor
    input_indices: torch.Tensor
    output_indices: torch.Tensor
    modulatory_indices: torch.Tensor

    def __post_init__(self) -> None:
        n = len(self.neurons)
        device = self.positions.device
        self.input_mask = torch.zeros(n, dtype=torch.bool, device=device)
        self.input_mask[self.input_indices] = True
        self.output_mask = torch.zeros(n, dtype=torch.bool, device=device)
        self.output_mask[self.output_indices] = True
        self.non_input_mask = ~self.input_mask

        # Neurons whose thresholds homeostasis may move
        self.homeostatic_mask = self.non_input_mask.clone()
        if self.config.fixed_output_threshold:
            self.homeostatic_mask &= ~self.output_mask

    # =========================================================================
    # STRUCTURE
    # =========================================================================

    @property
    def n_neurons(self) -> int:
        return len(self.neurons)

    @property
    def n_synapses(self) -> int:
        return len(self.synapses)

    def role_counts(self) -> Dict[NeuronRole, int]:
        """Number of neurons per role."""
        return dict(Counter(neuron.role for neuron in self.neurons))

    def synapse_distances_from(self, source: int) -> torch.Tensor:
        """Distance from neuron ``source`` to every synapse's location [n_synapses].

        A synapse is located at its post-synaptic neuron.
        """
        return self.distances[source, self.synapses.post]

    # =========================================================================
    # FORWARD PASS
    # =========================================================================

    def clamp_inputs(self, pattern: Bits) -> None:
        """Drive the input neurons with ``pattern`` (no statistics recorded)."""
        values = torch.as_tensor(pattern, device=self.state.output.device)
        self.state.clamp(self.input_indices, values)

    def accumulate(self) -> torch.Tensor:
        """Summed ``weight × pre-output`` arriving at each neuron [n_neurons]."""
        synapses = self.synapses
        contributions = synapses.weight * self.state.output[synapses.pre]
        totals = torch.zeros_like(self.state.output)
        return totals.index_add_(0, synapses.post, contributions)

    def propagate(self, cycles: int = 1) -> None:
        """Run ``cycles`` accumulate-and-fire passes over the non-input neurons."""
        for _ in range(cycles):
            fired = threshold_fire(self.accumulate(), self.state.threshold)
            self.state.set_firing(self.non_input_mask, fired)

    def read_outputs(self) -> torch.Tensor:
        """Binary outputs of the output neurons, output ``i`` first [output_size]."""
        return self.state.output[self.output_indices]

    # =========================================================================
    # SUMMARY STATISTICS
    # =========================================================================

    def mean_fire_rate(self) -> float:
        return float(self.state.fire_rate.mean().item())

    def mean_threshold(self) -> float:
        return float(self.state.threshold.mean().item())

    def total_frustration_flips(self) -> int:
        return int(self.synapses.frustration_flip_count.sum().item())

    def __repr__(self) -> str:
        return (
            f"Network(n_neurons={self.n_neurons}, n_synapses={self.n_synapses}, "
            f"clusters={self.config.clusters_count})"
        )
