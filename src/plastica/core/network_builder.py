"""
Network Builder - Spatial Clusters and Probabilistic Wiring.

Builds a fresh :class:`~plastica.core.network.Network` from a
:class:`~plastica.config.NetworkConfig` and one explicit random generator.

Layout:
=======
- Cluster ``c`` is centred at ``(c · cluster_spacing, 0, 0)``; each of its
  neurons is placed uniformly within ``±neuron_spread`` of the centre on
  every axis. Clusters 0 and 1 hold ``neurons_per_cluster`` neurons, later
  ("hidden") clusters ``hidden_neurons_per_cluster`` when set.
- The first ``modulatory_per_cluster`` neurons of every cluster are
  modulatory, the rest regular.
- The first ``input_size`` regular neurons of cluster 0 become inputs, the
  last ``output_size`` regular neurons of cluster 1 become outputs.

Wiring:
=======
Every ordered pair (pre, post) gets a directed synapse with probability
``intra_cluster_connection_prob`` (same cluster) or
``inter_cluster_connection_prob`` (different clusters), except:

- self pairs,
- pairs with a modulatory endpoint,
- pairs targeting an input neuron.

Initial weights are uniform in ``initial_weight_range``. Synapses are
ordered by (pre, post).

Usage:
======
    config = NetworkConfig(seed=42)
    network = build_network(config)

    # or with a generator shared with pattern sampling
    generator = make_generator(7)
    network = build_network(config, generator)
"""

from __future__ import annotations

import logging
from typing import List, Optional

import torch

from plastica.components.neurons.neuron import Neuron, NeuronState
from plastica.components.synapses.synapse import SynapseState
from plastica.config.network_config import NetworkConfig, NeuronRole
from plastica.core.network import Network
from plastica.dynamics.ambient import ambient_weights, neighbour_mask
from plastica.errors import ConfigurationError
from plastica.utils.rng import make_generator, random_in_range
from plastica.utils.spatial import IdGenerator, pairwise_distances

logger = logging.getLogger(__name__)


def _layout(config: NetworkConfig, generator: torch.Generator):
    """Positions, cluster ids and initial roles (modulatory / regular) of every neuron."""
    positions: List[torch.Tensor] = []
    clusters: List[int] = []
    roles: List[NeuronRole] = []

    spread = config.neuron_spread
    for cluster in range(config.clusters_count):
        size = config.cluster_size(cluster)
        center = torch.tensor([cluster * config.cluster_spacing, 0.0, 0.0], dtype=torch.float64)
        offsets = random_in_range(-spread, spread, (size, 3), generator)
        positions.append(center + offsets)
        clusters.extend([cluster] * size)
        roles.extend(
            NeuronRole.MODULATORY if i < config.modulatory_per_cluster else NeuronRole.REGULAR
            for i in range(size)
        )

    return torch.cat(positions, dim=0), clusters, roles


def _assign_inputs_outputs(
    config: NetworkConfig,
    clusters: List[int],
    roles: List[NeuronRole],
) -> None:
    regular_0 = [i for i, r in enumerate(roles) if r is NeuronRole.REGULAR and clusters[i] == 0]
    regular_1 = [i for i, r in enumerate(roles) if r is NeuronRole.REGULAR and clusters[i] == 1]

    for index in regular_0[: config.input_size]:
        roles[index] = NeuronRole.INPUT
    for index in regular_1[len(regular_1) - config.output_size:]:
        roles[index] = NeuronRole.OUTPUT


def _wire(
    config: NetworkConfig,
    clusters: torch.Tensor,
    roles: List[NeuronRole],
    generator: torch.Generator,
    dtype: torch.dtype,
    device: torch.device,
) -> SynapseState:
    n = clusters.shape[0]
    modulatory = torch.tensor([r is NeuronRole.MODULATORY for r in roles], dtype=torch.bool)
    is_input = torch.tensor([r is NeuronRole.INPUT for r in roles], dtype=torch.bool)

    same_cluster = clusters.unsqueeze(1) == clusters.unsqueeze(0)
    probability = torch.where(
        same_cluster,
        torch.full((n, n), config.intra_cluster_connection_prob, dtype=torch.float64),
        torch.full((n, n), config.inter_cluster_connection_prob, dtype=torch.float64),
    )
    draws = torch.rand((n, n), generator=generator, dtype=torch.float64)

    allowed = ~torch.eye(n, dtype=torch.bool)
    allowed &= ~modulatory.unsqueeze(1) & ~modulatory.unsqueeze(0)
    allowed &= ~is_input.unsqueeze(0)

    pre, post = torch.nonzero(allowed & (draws < probability), as_tuple=True)
    low, high = config.initial_weight_range
    weight = random_in_range(low, high, pre.shape[0], generator)
    return SynapseState.create(pre.to(device), post.to(device), weight.to(device=device, dtype=dtype))


def build_network(
    config: NetworkConfig,
    generator: Optional[torch.Generator] = None,
) -> Network:
    """Build a network ready for stepping.

    Args:
        config: Network configuration
        generator: Source of all randomness. Defaults to a generator seeded
            with ``config.seed``.

    Returns:
        A freshly built network with silent neurons and untrained synapses

    Raises:
        ConfigurationError: If neither ``generator`` nor ``config.seed`` is given
    """
    if generator is None:
        if config.seed is None:
            raise ConfigurationError(
                "build_network needs an explicit generator or config.seed for a reproducible build"
            )
        generator = make_generator(config.seed)

    device = config.get_torch_device()
    dtype = config.get_torch_dtype()

    positions, cluster_list, roles = _layout(config, generator)
    _assign_inputs_outputs(config, cluster_list, roles)
    clusters = torch.tensor(cluster_list, dtype=torch.int64)

    synapses = _wire(config, clusters, roles, generator, dtype, device)

    distances = pairwise_distances(positions)
    neighbours = neighbour_mask(distances, config.ambient_radius)

    ids = IdGenerator()
    neuron_ids = [ids.next(f"n_{cluster}") for cluster in cluster_list]
    neurons = [
        Neuron(
            id=neuron_ids[i],
            index=i,
            position=tuple(positions[i].tolist()),
            role=roles[i],
            cluster=cluster_list[i],
            neighbour_ids=frozenset(neuron_ids[j] for j in neighbours[i].nonzero().flatten().tolist()),
        )
        for i in range(len(roles))
    ]

    def indices_of(role: NeuronRole) -> torch.Tensor:
        return torch.tensor(
            [i for i, r in enumerate(roles) if r is role], dtype=torch.int64, device=device
        )

    network = Network(
        config=config,
        neurons=neurons,
        state=NeuronState.create(len(neurons), config.initial_threshold, dtype=dtype, device=device),
        synapses=synapses,
        positions=positions.to(device=device, dtype=dtype),
        distances=distances.to(device=device, dtype=dtype),
        ambient_weights=ambient_weights(distances, config.ambient_radius).to(device=device, dtype=dtype),
        input_indices=indices_of(NeuronRole.INPUT),
        output_indices=indices_of(NeuronRole.OUTPUT),
        modulatory_indices=indices_of(NeuronRole.MODULATORY),
    )

    if network.n_synapses == 0:
        logger.warning("Built a network with no synapses (%d neurons)", network.n_neurons)
    logger.debug(
        "Built network: %d neurons %s, %d synapses",
        network.n_neurons,
        {role.value: count for role, count in network.role_counts().items()},
        network.n_synapses,
    )
    return network

