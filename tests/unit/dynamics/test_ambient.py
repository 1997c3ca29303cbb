"""
Tests for ambient field weights and values.
"""

import pytest
import torch

from plastica.config import NetworkConfig
from plastica.dynamics import ambient_fields, ambient_weights, compute_ambient_fields, neighbour_mask
from plastica.utils import pairwise_distances


def _positions(*xs):
    return torch.tensor([[x, 0.0, 0.0] for x in xs], dtype=torch.float64)


@pytest.mark.unit
class TestAmbientWeights:

    def test_neighbours_exclude_self_and_far(self):
        distances = pairwise_distances(_positions(0.0, 1.0, 5.0))
        mask = neighbour_mask(distances, radius=3.0)
        assert mask.tolist() == [
            [False, True, False],
            [True, False, False],
            [False, False, False],
        ]

    def test_inverse_distance(self):
        distances = pairwise_distances(_positions(0.0, 2.0, 3.0))
        weights = ambient_weights(distances, radius=3.0)
        assert weights[0].tolist() == [0.0, 0.5, pytest.approx(1 / 3)]
        assert weights[1].tolist() == [0.5, 0.0, 1.0]

    def test_coincident_neighbour_contributes_nothing(self):
        distances = pairwise_distances(_positions(1.0, 1.0))
        weights = ambient_weights(distances, radius=3.0)
        assert torch.all(weights == 0)

    def test_zero_radius_has_no_neighbours(self):
        distances = pairwise_distances(_positions(0.0, 0.5, 1.0))
        assert torch.all(ambient_weights(distances, radius=0.0) == 0)


@pytest.mark.unit
class TestAmbientFields:

    def test_weighted_sum_of_outputs(self):
        distances = pairwise_distances(_positions(0.0, 2.0, 3.0))
        weights = ambient_weights(distances, radius=3.0)
        fields = ambient_fields(weights, torch.tensor([0.0, 1.0, 1.0], dtype=torch.float64))
        assert fields.tolist() == pytest.approx([0.5 + 1 / 3, 1.0, 1.0])

    def test_silent_neighbourhood(self):
        distances = pairwise_distances(_positions(0.0, 1.0))
        weights = ambient_weights(distances, radius=3.0)
        assert torch.all(ambient_fields(weights, torch.zeros(2, dtype=torch.float64)) == 0)

    def test_compute_updates_state(self, make_line_network):
        network = make_line_network(NetworkConfig(ambient_radius=1.5))
        network.state.output = torch.tensor([1.0, 0.0, 1.0, 1.0], dtype=torch.float64)

        fields = compute_ambient_fields(network)

        # Neighbours: 0↔1, 1↔2 (x = 0, 1, 2, 4)
        assert fields.tolist() == [0.0, 2.0, 0.0, 0.0]
        assert network.state.ambient_field is fields
