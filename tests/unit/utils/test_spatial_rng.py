"""
Tests for spatial helpers and generator-driven randomness.
"""

import math

import pytest
import torch

from plastica.utils import (
    IdGenerator,
    clamp_weights,
    distance3d,
    make_generator,
    pairwise_distances,
    random_in_range,
    safe_ratio,
    shuffled,
)


@pytest.mark.unit
class TestSpatial:

    def test_distance3d(self):
        assert distance3d((0.0, 0.0, 0.0), (3.0, 4.0, 0.0)) == 5.0
        assert distance3d((1.0, 1.0, 1.0), (1.0, 1.0, 1.0)) == 0.0
        assert math.isclose(distance3d((0, 0, 0), (1, 1, 1)), math.sqrt(3))

    def test_pairwise_distances_matches_distance3d(self):
        positions = torch.tensor(
            [[0.0, 0.0, 0.0], [3.0, 4.0, 0.0], [1.0, 2.0, 2.0]], dtype=torch.float64
        )
        distances = pairwise_distances(positions)

        assert distances.shape == (3, 3)
        assert torch.equal(distances, distances.T)
        assert torch.all(distances.diagonal() == 0)
        for i in range(3):
            for j in range(3):
                assert math.isclose(
                    distances[i, j].item(),
                    distance3d(positions[i].tolist(), positions[j].tolist()),
                    rel_tol=1e-12,
                )

    def test_id_generator_counts_across_prefixes(self):
        ids = IdGenerator()
        assert ids.next("n_0") == "n_0_1"
        assert ids.next("n_0") == "n_0_2"
        assert ids.next("n_1") == "n_1_3"

    def test_id_generators_are_independent(self):
        assert IdGenerator().next("n") == IdGenerator().next("n") == "n_1"


@pytest.mark.unit
class TestRandomness:

    def test_same_seed_same_draws(self):
        a = random_in_range(-2.0, 2.0, (10, 3), make_generator(5))
        b = random_in_range(-2.0, 2.0, (10, 3), make_generator(5))
        assert torch.equal(a, b)

    def test_different_seed_different_draws(self):
        a = random_in_range(0.0, 1.0, 20, make_generator(1))
        b = random_in_range(0.0, 1.0, 20, make_generator(2))
        assert not torch.equal(a, b)

    def test_random_in_range_bounds(self):
        values = random_in_range(-0.1, 0.1, 1000, make_generator(0))
        assert values.shape == (1000,)
        assert values.dtype == torch.float64
        assert torch.all(values >= -0.1)
        assert torch.all(values < 0.1)

    def test_global_rng_untouched(self):
        torch.manual_seed(123)
        expected = torch.rand(3)
        torch.manual_seed(123)
        random_in_range(0.0, 1.0, 50, make_generator(9))
        assert torch.equal(torch.rand(3), expected)

    def test_shuffled_is_permutation(self):
        items = list("abcdefgh")
        result = shuffled(items, make_generator(3))
        assert sorted(result) == items
        assert items == list("abcdefgh")
        assert result == shuffled(items, make_generator(3))


@pytest.mark.unit
class TestCoreUtils:

    def test_clamp_weights_in_place(self):
        weights = torch.tensor([-3.0, -0.5, 0.5, 3.0], dtype=torch.float64)
        result = clamp_weights(weights, 2.0)
        assert result is weights
        assert weights.tolist() == [-2.0, -0.5, 0.5, 2.0]

    def test_clamp_weights_copy(self):
        weights = torch.tensor([5.0], dtype=torch.float64)
        result = clamp_weights(weights, 1.0, inplace=False)
        assert result.item() == 1.0
        assert weights.item() == 5.0

    def test_safe_ratio_zero_denominator(self):
        result = safe_ratio(torch.tensor([1, 0, 3]), torch.tensor([2, 0, 4]))
        assert result.tolist() == [0.5, 0.0, 0.75]
