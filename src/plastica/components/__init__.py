"""
Network components: neurons and synapses.
"""

from plastica.components.neurons import Neuron, NeuronState, threshold_fire
from plastica.components.synapses import SynapseState

__all__ = [
    "Neuron",
    "NeuronState",
    "threshold_fire",
    "SynapseState",
]
