"""
Neuron models.

Binary threshold neurons: static description plus mutable per-step state.
"""

from plastica.components.neurons.neuron import Neuron, NeuronState, threshold_fire

__all__ = [
    "Neuron",
    "NeuronState",
    "threshold_fire",
]
