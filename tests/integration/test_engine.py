"""
Integration tests for the step/evaluate pipeline on built networks.
"""

import pytest
import torch

from plastica.config import NetworkConfig
from plastica.core import TrainingState, build_network, evaluate, step
from plastica.errors import ComponentError, PatternError
from plastica.learning.plasticity import ProvisionalUpdate
from plastica.training import FOUR_PATTERN_TASK

BASELINE = dict(
    ambient_radius=0.0,
    skip_dampening=True,
    chemical_diffusion_radius=1000.0,
    chemical_falloff="constant",
)


def _state_tensors(network):
    state = network.state
    return {
        name: getattr(state, name).clone()
        for name in ("output", "fired", "fire_count", "cycle_count", "fire_rate", "threshold", "ambient_field")
    }


@pytest.mark.integration
class TestStep:

    def test_metrics(self, small_network, training_state):
        metrics = step(small_network, training_state, [1, 0, 1], [0, 1, 0], episode=1)

        assert len(metrics.outputs) == 3
        assert set(metrics.outputs) <= {0, 1}
        assert 0.0 <= metrics.accuracy <= 1.0
        assert metrics.loss == pytest.approx(3 * (1 - metrics.accuracy))
        assert -1.0 <= metrics.reward <= 1.0
        assert 0.0 <= metrics.active_synapse_fraction <= 1.0
        assert metrics.mean_weight > 0
        assert not metrics.provisional_reverted

    def test_every_neuron_counts_one_cycle(self, small_network, training_state):
        for episode in range(1, 4):
            step(small_network, training_state, [1, 1, 0], [1, 0, 1], episode)
        assert torch.all(small_network.state.cycle_count == 3)

    def test_inputs_follow_the_pattern(self, small_network, training_state):
        step(small_network, training_state, [1, 0, 1], [0, 0, 0], episode=1)
        inputs = small_network.input_indices
        assert small_network.state.output[inputs].tolist() == [1.0, 0.0, 1.0]
        assert small_network.state.threshold[inputs].tolist() == [0.5, 0.5, 0.5]

    @pytest.mark.parametrize("input_pattern, target", [([1, 0], [0, 1, 0]), ([1, 0, 1], [0, 1])])
    def test_pattern_length_mismatch(self, small_network, training_state, input_pattern, target):
        with pytest.raises(PatternError):
            step(small_network, training_state, input_pattern, target)

    @pytest.mark.parametrize("input_pattern, target", [([1, 0.5, 0], [0, 1, 0]), ([1, 0, 1], [0, 2, 0])])
    def test_non_binary_pattern_rejected(self, small_network, training_state, input_pattern, target):
        with pytest.raises(PatternError, match="binary"):
            step(small_network, training_state, input_pattern, target)
        assert torch.all(small_network.state.cycle_count == 0)

    def test_network_without_synapses(self, training_state):
        config = NetworkConfig(
            seed=1,
            neurons_per_cluster=4,
            modulatory_per_cluster=1,
            input_size=1,
            output_size=1,
            intra_cluster_connection_prob=0.0,
            inter_cluster_connection_prob=0.0,
        )
        network = build_network(config)
        with pytest.raises(ComponentError):
            step(network, training_state, [1], [1])

    def test_fixed_output_threshold(self, small_network, training_state):
        for episode in range(1, 11):
            step(small_network, training_state, [1, 0, 1], [0, 1, 0], episode)
        outputs = small_network.output_indices
        assert torch.all(small_network.state.threshold[outputs] == 0.5)

    def test_output_threshold_regulated_when_not_fixed(self, small_config, training_state):
        network = build_network(small_config.with_overrides(fixed_output_threshold=False))
        step(network, training_state, [1, 0, 1], [0, 1, 0], episode=1)
        # A first-step fire rate is 0 or 1, never the 0.2 target
        assert torch.all(network.state.threshold[network.output_indices] != 0.5)

    def test_cycling_cursor_advances_every_step(self, small_config, training_state):
        config = small_config.with_overrides(reward_broadcast="global", modulatory_firing="cycling")
        network = build_network(config)
        for episode in range(1, 6):
            step(network, training_state, [1, 0, 1], [0, 1, 0], episode)
        assert training_state.modulatory_cursor == 5

    def test_radius_anneal_start_is_captured(self, small_config, training_state):
        config = small_config.with_overrides(chemical_diffusion_radius_min=1.0, training_episodes=10)
        network = build_network(config)
        step(network, training_state, [1, 0, 1], [0, 1, 0], episode=1)
        assert training_state.chemical_radius_start == config.chemical_diffusion_radius


@pytest.mark.integration
class TestPropagationCycles:

    @pytest.fixture
    def chain_config(self):
        return NetworkConfig(input_size=1, output_size=1, learning_rate=0.0, weight_decay=0.0)

    def test_signal_needs_two_cycles_to_cross_the_chain(self, chain_config, make_line_network):
        # 1 → 2 → 3 with no direct 1 → 3 drive
        network = make_line_network(chain_config, weights=(1.0, 0.0, 1.0))
        step(network, TrainingState(), [1], [1], episode=1)
        assert network.state.fire_count.tolist() == [0, 1, 1, 0]

        network = make_line_network(
            chain_config.with_overrides(propagation_cycles=2), weights=(1.0, 0.0, 1.0)
        )
        step(network, TrainingState(), [1], [1], episode=1)
        assert network.state.fire_count.tolist() == [0, 1, 1, 1]
        # Counted once per step regardless of cycles
        assert torch.all(network.state.cycle_count == 1)


@pytest.mark.integration
class TestProvisionalWeights:

    @pytest.fixture
    def config(self):
        return NetworkConfig(
            input_size=1,
            output_size=1,
            provisional_weights=True,
            learning_rate=0.0,
            weight_decay=0.0,
        )

    def test_revert_restores_exact_weights(self, config, make_line_network):
        network = make_line_network(config)
        training = TrainingState()
        snapshot = torch.tensor([0.3, 0.2, 0.1], dtype=torch.float64)
        training.provisional = ProvisionalUpdate(pre_weights=snapshot.clone(), accuracy=2.0)

        metrics = step(network, training, [1], [1], episode=1)

        assert metrics.provisional_reverted
        assert torch.equal(network.synapses.weight, snapshot)
        assert training.provisional.accuracy == metrics.accuracy
        assert torch.equal(training.provisional.pre_weights, snapshot)

    def test_kept_when_accuracy_holds(self, config, make_line_network):
        network = make_line_network(config)
        training = TrainingState()
        training.provisional = ProvisionalUpdate(
            pre_weights=torch.zeros(3, dtype=torch.float64), accuracy=0.0
        )

        metrics = step(network, training, [1], [1], episode=1)

        assert not metrics.provisional_reverted
        assert network.synapses.weight.tolist() == [0.1, 0.1, 0.1]

    def test_pending_update_ignored_when_disabled(self, make_line_network):
        config = NetworkConfig(input_size=1, output_size=1, learning_rate=0.0, weight_decay=0.0)
        network = make_line_network(config)
        training = TrainingState()
        training.provisional = ProvisionalUpdate(
            pre_weights=torch.zeros(3, dtype=torch.float64), accuracy=2.0
        )

        metrics = step(network, training, [1], [1], episode=1)

        assert not metrics.provisional_reverted
        assert network.synapses.weight.tolist() == [0.1, 0.1, 0.1]


@pytest.mark.integration
class TestEvaluate:

    def test_leaves_network_untouched(self, small_network, training_state):
        for episode in range(1, 6):
            step(small_network, training_state, [1, 0, 1], [0, 1, 0], episode)
        before = _state_tensors(small_network)
        weights = small_network.synapses.weight.clone()

        evaluate(small_network, [0, 1, 1], [1, 1, 1])

        after = _state_tensors(small_network)
        for name, tensor in before.items():
            assert torch.equal(tensor, after[name]), name
        assert torch.equal(weights, small_network.synapses.weight)

    def test_idempotent(self, small_network, training_state):
        for episode in range(1, 6):
            step(small_network, training_state, [1, 1, 0], [0, 1, 0], episode)
        first = evaluate(small_network, [1, 1, 0], [0, 1, 0])
        second = evaluate(small_network, [1, 1, 0], [0, 1, 0])
        assert first == second

    def test_pattern_length_mismatch(self, small_network):
        with pytest.raises(PatternError):
            evaluate(small_network, [1, 0, 1, 1], [0, 1, 0])

    def test_non_binary_pattern_rejected(self, small_network):
        with pytest.raises(PatternError, match="input"):
            evaluate(small_network, [1, 0.5, 0], [0, 1, 0])
        with pytest.raises(PatternError, match="target"):
            evaluate(small_network, torch.tensor([1.0, 0.0, 1.0]), torch.tensor([0.0, 0.3, 0.0]))


@pytest.mark.integration
class TestReproducibility:

    def test_global_rng_untouched(self, small_config):
        state = torch.get_rng_state()
        network = build_network(small_config)
        step(network, TrainingState(), [1, 0, 1], [0, 1, 0], episode=1)
        assert torch.equal(torch.get_rng_state(), state)

    @pytest.mark.slow
    def test_seeded_runs_match_bit_for_bit(self, small_config):
        config = small_config.with_overrides(weight_decay=0.0, reward_broadcast="global", **BASELINE)
        patterns = [([1, 0, 1], [0, 1, 0]), ([0, 1, 1], [1, 0, 0]), ([1, 1, 0], [0, 0, 1])]

        def run():
            network = build_network(config)
            training = TrainingState()
            history = []
            for episode in range(1, 1001):
                inp, tgt = patterns[(episode - 1) % len(patterns)]
                history.append(step(network, training, inp, tgt, episode))
            return network, history

        a, history_a = run()
        b, history_b = run()

        assert history_a == history_b
        assert torch.equal(a.synapses.weight, b.synapses.weight)
        assert torch.equal(a.state.threshold, b.state.threshold)

    @pytest.mark.slow
    def test_four_pattern_accuracy_reproduces(self):
        config = NetworkConfig(seed=42, weight_decay=0.0, reward_broadcast="global", **BASELINE)

        def run():
            network = build_network(config)
            training = TrainingState()
            for episode in range(1, 1001):
                pattern = FOUR_PATTERN_TASK.cycle(episode)
                step(network, training, pattern.input, pattern.target, episode)
            accuracies = [evaluate(network, p.input, p.target).accuracy for p in FOUR_PATTERN_TASK]
            return network, sum(accuracies) / len(accuracies)

        a, accuracy_a = run()
        b, accuracy_b = run()

        assert accuracy_a == accuracy_b
        assert torch.equal(a.synapses.weight, b.synapses.weight)
