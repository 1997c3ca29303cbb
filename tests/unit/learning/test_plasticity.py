"""
Tests for the weight update, frustration flips and provisional commits.
"""

import pytest
import torch

from plastica.config import NetworkConfig
from plastica.learning.plasticity import (
    ProvisionalUpdate,
    decay_chemical,
    resolve_provisional,
    update_frustration,
    update_weights,
)


def _f(*values):
    return torch.tensor(values, dtype=torch.float64)


@pytest.mark.unit
class TestUpdateWeights:

    def test_decay_then_delta(self, make_synapses):
        config = NetworkConfig(weight_decay=0.1, learning_rate=0.5, max_weight_delta=1.0)
        synapses = make_synapses([1.0])
        synapses.eligibility_trace = _f(0.5)
        synapses.chemical_level = _f(0.4)

        delta = update_weights(synapses, config)

        assert delta.item() == pytest.approx(0.1)
        assert synapses.weight.item() == pytest.approx(1.0 * 0.9 + 0.1)

    def test_delta_clamped(self, make_synapses):
        config = NetworkConfig(weight_decay=0.0, learning_rate=10.0, max_weight_delta=0.1)
        synapses = make_synapses([0.0, 0.0])
        synapses.eligibility_trace = _f(1.0, -1.0)
        synapses.chemical_level = _f(50.0, 50.0)

        delta = update_weights(synapses, config)

        assert delta.tolist() == [0.1, -0.1]
        assert synapses.weight.tolist() == [0.1, -0.1]

    def test_weight_clamped(self, make_synapses):
        config = NetworkConfig(weight_decay=0.0, max_weight_delta=0.5, max_weight_magnitude=2.0, learning_rate=1.0)
        synapses = make_synapses([1.9, -1.9])
        synapses.eligibility_trace = _f(1.0, 1.0)
        synapses.chemical_level = _f(1.0, -1.0)

        update_weights(synapses, config)

        assert synapses.weight.tolist() == [2.0, -2.0]

    def test_decay_applies_without_chemical(self, make_synapses):
        config = NetworkConfig(weight_decay=0.5)
        synapses = make_synapses([0.8])
        synapses.eligibility_trace = _f(1.0)
        update_weights(synapses, config)
        assert synapses.weight.item() == pytest.approx(0.4)


@pytest.mark.unit
class TestFrustration:

    @pytest.fixture
    def config(self):
        return NetworkConfig(
            frustration_window=3,
            frustration_threshold=0.0,
            frustration_flip_strength=0.5,
        )

    def test_disabled_returns_no_flips(self, make_synapses):
        synapses = make_synapses([0.5])
        flipped = update_frustration(synapses, NetworkConfig(), _f(0.1))
        assert not flipped.any()
        assert synapses.same_direction_count.item() == 0

    def test_flip_after_sustained_unrewarded_movement(self, config, make_synapses):
        synapses = make_synapses([0.8])
        synapses.chemical_level = _f(-1.0)

        flips = [update_frustration(synapses, config, _f(0.01)).item() for _ in range(3)]

        assert flips == [False, False, True]
        assert synapses.weight.item() == pytest.approx(-0.4)
        assert synapses.frustration_flip_count.item() == 1
        assert synapses.same_direction_count.item() == 0
        assert synapses.adjustment_direction.item() == 0.0
        assert synapses.reward_while_adjusting.item() == 0.0

    def test_flip_resets_flag_state(self, config, make_synapses):
        synapses = make_synapses([0.8])
        synapses.chemical_level = _f(-1.0)
        synapses.flag_strength = _f(0.7)
        synapses.last_trace_sign = _f(1.0)
        synapses.consecutive_consistent = torch.tensor([5])

        for _ in range(3):
            update_frustration(synapses, config, _f(0.01))

        assert synapses.flag_strength.item() == 0.0
        assert synapses.last_trace_sign.item() == 0.0
        assert synapses.consecutive_consistent.item() == 0

    def test_rewarded_movement_never_flips(self, config, make_synapses):
        synapses = make_synapses([0.8])
        synapses.chemical_level = _f(1.0)
        for _ in range(10):
            assert not update_frustration(synapses, config, _f(0.01)).any()
        assert synapses.same_direction_count.item() == 10
        assert synapses.reward_while_adjusting.item() > 0

    def test_direction_change_restarts_count(self, config, make_synapses):
        synapses = make_synapses([0.8])
        synapses.chemical_level = _f(-1.0)
        update_frustration(synapses, config, _f(0.01))
        update_frustration(synapses, config, _f(0.01))
        update_frustration(synapses, config, _f(-0.01))

        assert synapses.same_direction_count.item() == 1
        assert synapses.adjustment_direction.item() == -1.0
        assert synapses.reward_while_adjusting.item() == -1.0

    def test_zero_delta_leaves_tracking(self, config, make_synapses):
        synapses = make_synapses([0.8])
        synapses.chemical_level = _f(-1.0)
        update_frustration(synapses, config, _f(0.01))
        update_frustration(synapses, config, _f(0.0))
        assert synapses.same_direction_count.item() == 1

    def test_ema(self, config, make_synapses):
        synapses = make_synapses([0.8])
        synapses.chemical_level = _f(0.2)
        update_frustration(synapses, config, _f(0.01))
        synapses.chemical_level = _f(1.0)
        update_frustration(synapses, config, _f(0.01))
        assert synapses.reward_while_adjusting.item() == pytest.approx(0.95 * 0.2 + 0.05 * 1.0)


@pytest.mark.unit
class TestChemicalDecay:

    def test_one_step(self, make_synapses):
        synapses = make_synapses([0.0, 0.0])
        synapses.chemical_level = _f(2.0, -1.0)
        decay_chemical(synapses, NetworkConfig(chemical_decay_rate=0.5))
        assert synapses.chemical_level.tolist() == [1.0, -0.5]


@pytest.mark.unit
class TestProvisional:

    def test_revert_on_accuracy_drop(self, make_synapses):
        synapses = make_synapses([0.3, -0.2])
        pending = ProvisionalUpdate(pre_weights=_f(0.1, 0.1), accuracy=0.8)

        assert resolve_provisional(synapses, pending, accuracy=0.6)
        assert synapses.weight.tolist() == [0.1, 0.1]

    def test_keep_when_not_worse(self, make_synapses):
        synapses = make_synapses([0.3, -0.2])
        pending = ProvisionalUpdate(pre_weights=_f(0.1, 0.1), accuracy=0.8)

        assert not resolve_provisional(synapses, pending, accuracy=0.8)
        assert synapses.weight.tolist() == [0.3, -0.2]
