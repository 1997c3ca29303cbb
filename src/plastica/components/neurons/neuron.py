"""Binary Threshold Neurons.

Each neuron is split into two tiers:

1. **Neuron** (immutable, one per neuron): identity, 3D position, role,
   cluster and the precomputed ambient neighbour set. Created once when the
   network is built.
2. **NeuronState** (mutable, tensors over all neurons): binary output, fired
   flag, fire/cycle counts, fire rate, threshold and ambient field. Mutated
   in place by every training step.

**Firing Rule**:
================
A non-input neuron fires iff its summed weighted input meets the threshold:

.. code-block:: none

    fired_i = Σ_j w_ji · output_j  ≥  θ_i

Input neurons are clamped from outside and never evaluate the rule.

**Fire Rate**:
==============
``fire_rate = fire_count / cycle_count``, recomputed whenever the counts
change, and 0 while ``cycle_count`` is 0.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import FrozenSet, Tuple, Union

import torch

from plastica.config.network_config import NeuronRole
from plastica.utils.core_utils import safe_ratio


@dataclass(frozen=True)
class Neuron:
    """Static description of one neuron."""

    id: str
    index: int
    position: Tuple[float, float, float]
    role: NeuronRole
    cluster: int
    neighbour_ids: FrozenSet[str] = frozenset()


def threshold_fire(synaptic_input: torch.Tensor, threshold: torch.Tensor) -> torch.Tensor:
    """Binary step: True where the weighted input is ≥ threshold (strict ≥)."""
    return synaptic_input >= threshold


@dataclass
class NeuronState:
    """Mutable per-neuron state, one entry per neuron index.

    Attributes:
        output: Binary output (0.0 / 1.0) [n_neurons]
        fired: Fired-this-cycle flag [n_neurons] (bool)
        fire_count: Cumulative number of steps the neuron fired [n_neurons] (int64)
        cycle_count: Cumulative number of steps evaluated [n_neurons] (int64)
        fire_rate: fire_count / cycle_count [n_neurons]
        threshold: Firing threshold, moved by homeostasis [n_neurons]
        ambient_field: Inverse-distance weighted neighbour activity [n_neurons]
    """

    output: torch.Tensor
    fired: torch.Tensor
    fire_count: torch.Tensor
    cycle_count: torch.Tensor
    fire_rate: torch.Tensor
    threshold: torch.Tensor
    ambient_field: torch.Tensor

    @classmethod
    def create(
        cls,
        n_neurons: int,
        initial_threshold: float,
        dtype: torch.dtype = torch.float64,
        device: Union[str, torch.device] = "cpu",
    ) -> "NeuronState":
        """Fresh state: silent, never evaluated, uniform threshold."""
        return cls(
            output=torch.zeros(n_neurons, dtype=dtype, device=device),
            fired=torch.zeros(n_neurons, dtype=torch.bool, device=device),
            fire_count=torch.zeros(n_neurons, dtype=torch.int64, device=device),
            cycle_count=torch.zeros(n_neurons, dtype=torch.int64, device=device),
            fire_rate=torch.zeros(n_neurons, dtype=dtype, device=device),
            threshold=torch.full((n_neurons,), initial_threshold, dtype=dtype, device=device),
            ambient_field=torch.zeros(n_neurons, dtype=dtype, device=device),
        )

    @property
    def n_neurons(self) -> int:
        return self.output.shape[0]

    # =========================================================================
    # STATE TRANSITIONS
    # =========================================================================

    def set_firing(self, mask: torch.Tensor, fired: torch.Tensor) -> None:
        """Write firing results for the neurons selected by ``mask``.

        Args:
            mask: Which neurons to update [n_neurons] (bool)
            fired: New fired flags [n_neurons] (bool); ignored outside ``mask``
        """
        self.fired = torch.where(mask, fired, self.fired)
        self.output = self.fired.to(self.output.dtype)

    def clamp(self, indices: torch.Tensor, pattern: torch.Tensor) -> None:
        """Force the neurons at ``indices`` to the binary ``pattern``."""
        values = pattern.to(device=self.output.device, dtype=self.output.dtype)
        self.output[indices] = values
        self.fired[indices] = values == 1

    def record_cycle(self, mask: torch.Tensor) -> None:
        """Count one evaluated cycle for the neurons in ``mask`` and refresh fire rates."""
        self.cycle_count += mask.to(torch.int64)
        self.fire_count += (mask & self.fired).to(torch.int64)
        self.update_fire_rate()

    def update_fire_rate(self) -> None:
        self.fire_rate = safe_ratio(self.fire_count, self.cycle_count).to(self.fire_rate.dtype)

    # =========================================================================
    # SNAPSHOTS
    # =========================================================================

    def snapshot(self) -> "NeuronState":
        """Deep copy of every field."""
        return NeuronState(**{f.name: getattr(self, f.name).clone() for f in fields(self)})

    def restore(self, snapshot: "NeuronState") -> None:
        """Copy every field of ``snapshot`` back into this state."""
        for f in fields(self):
            setattr(self, f.name, getattr(snapshot, f.name).clone())
