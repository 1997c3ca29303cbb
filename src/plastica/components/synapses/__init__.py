"""
Synapse components.

Column-wise synapse state for the whole network.
"""

from plastica.components.synapses.synapse import SynapseState

__all__ = [
    "SynapseState",
]
