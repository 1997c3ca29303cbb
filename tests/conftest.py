"""Shared test fixtures and configuration."""

import pytest
import torch

from plastica.components.neurons import Neuron, NeuronState
from plastica.components.synapses.synapse import SynapseState
from plastica.config import NetworkConfig, NeuronRole
from plastica.core import Network, TrainingState, build_network
from plastica.dynamics import ambient_weights
from plastica.utils import pairwise_distances


@pytest.fixture(autouse=True)
def set_random_seed():
    """Seed the global torch RNG.

    Library code never draws from it; this only keeps tests that build
    random inputs themselves deterministic.
    """
    torch.manual_seed(42)


@pytest.fixture
def small_config():
    """Two 10-neuron clusters, 3 inputs, 3 outputs."""
    return NetworkConfig(
        seed=7,
        neurons_per_cluster=10,
        modulatory_per_cluster=2,
        input_size=3,
        output_size=3,
    )


@pytest.fixture
def small_network(small_config):
    return build_network(small_config)


@pytest.fixture
def training_state():
    return TrainingState()


@pytest.fixture
def make_synapses():
    """Factory for hand-built synapse lists: ``make_synapses([0.1, -0.2])``."""

    def _make(weights, pre=None, post=None):
        n = len(weights)
        pre = torch.tensor(pre if pre is not None else list(range(n)))
        post = torch.tensor(post if post is not None else [i + 1 for i in range(n)])
        return SynapseState.create(pre, post, torch.tensor(weights, dtype=torch.float64))

    return _make


@pytest.fixture
def make_line_network():
    """Factory for a 4-neuron network laid out on the x axis at 0, 1, 2 and 4.

    Default roles are (modulatory, input, output, regular) with synapses
    1→2, 1→3 and 2→3.
    """
    default_roles = (
        NeuronRole.MODULATORY,
        NeuronRole.INPUT,
        NeuronRole.OUTPUT,
        NeuronRole.REGULAR,
    )

    def _make(config, roles=default_roles, weights=(0.1, 0.1, 0.1)):
        positions = torch.tensor(
            [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [2.0, 0.0, 0.0], [4.0, 0.0, 0.0]],
            dtype=torch.float64,
        )
        distances = pairwise_distances(positions)
        neurons = [
            Neuron(
                id=f"n_0_{i + 1}",
                index=i,
                position=tuple(positions[i].tolist()),
                role=roles[i],
                cluster=0,
            )
            for i in range(4)
        ]

        def indices(role):
            return torch.tensor([i for i, r in enumerate(roles) if r is role], dtype=torch.int64)

        return Network(
            config=config,
            neurons=neurons,
            state=NeuronState.create(4, config.initial_threshold),
            synapses=SynapseState.create(
                torch.tensor([1, 1, 2]),
                torch.tensor([2, 3, 3]),
                torch.tensor(weights, dtype=torch.float64),
            ),
            positions=positions,
            distances=distances,
            ambient_weights=ambient_weights(distances, config.ambient_radius),
            input_indices=indices(NeuronRole.INPUT),
            output_indices=indices(NeuronRole.OUTPUT),
            modulatory_indices=indices(NeuronRole.MODULATORY),
        )

    return _make
