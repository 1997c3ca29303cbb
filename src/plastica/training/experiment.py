"""
Multi-Seed Experiment Harness - Ablation Conditions and Paired Statistics.

An experiment trains one fresh network per (condition, seed) pair on a fixed
pattern set, then scores it with frozen weights (:func:`plastica.core.evaluate`).
Conditions differ only in configuration overrides, and every condition is
run on the same seeds, so conditions can be compared with a paired t-test.

Workflow:
=========
    base = NetworkConfig(training_episodes=10000)
    results = [
        run_condition(base, condition, FOUR_PATTERN_TASK, ABLATION_SEEDS)
        for condition in ABLATION_CONDITIONS
    ]
    baseline = results[0]
    for result in results[1:]:
        print(compare_conditions(result, baseline))

Statistics:
===========
- Per seed: mean frozen accuracy over the pattern set, per-pattern accuracy,
  output bit strings, whether every pattern collapsed to the same output,
  number of exactly reproduced targets, mean |weight|, frustration flips,
  optional snapshots at chosen episodes.
- Per condition: mean, sample standard deviation (ddof=1), min and max of
  the per-seed means (numpy).
- Between conditions: ``scipy.stats.ttest_rel`` on the per-seed means.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import numpy as np
from scipy import stats

from plastica.config.network_config import NetworkConfig
from plastica.core.engine import EvaluationResult, TrainingState, evaluate, step
from plastica.core.network import Network
from plastica.core.network_builder import build_network
from plastica.errors import ConfigurationError, validate_positive, validate_probability
from plastica.training.patterns import PatternSet
from plastica.utils.rng import make_generator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Condition:
    """A labelled set of configuration overrides."""

    label: str
    overrides: Mapping[str, Any] = field(default_factory=dict)

    def apply(self, base: NetworkConfig) -> NetworkConfig:
        return base.with_overrides(**dict(self.overrides))


@dataclass
class Snapshot:
    """Frozen-weight score taken partway through training."""

    episode: int
    mean: float
    output_vectors: List[str]


@dataclass
class SeedResult:
    """Outcome of training one network with one seed."""

    seed: int
    mean: float
    per_pattern: List[float]
    output_vectors: List[str]
    all_same: bool
    exact_matches: int
    mean_abs_weight: float
    frustration_flips: int
    snapshots: Dict[int, Snapshot] = field(default_factory=dict)


@dataclass
class ConditionResult:
    """Per-seed results of one condition and their summary statistics."""

    condition: Condition
    seeds: List[SeedResult]

    @property
    def label(self) -> str:
        return self.condition.label

    @property
    def values(self) -> np.ndarray:
        """Per-seed mean accuracies, in seed order."""
        return np.array([r.mean for r in self.seeds], dtype=np.float64)

    @property
    def mean(self) -> float:
        return float(np.mean(self.values))

    @property
    def std(self) -> float:
        """Sample standard deviation (0 for a single seed)."""
        if len(self.seeds) < 2:
            return 0.0
        return float(np.std(self.values, ddof=1))

    @property
    def min(self) -> float:
        return float(np.min(self.values))

    @property
    def max(self) -> float:
        return float(np.max(self.values))

    def per_pattern_mean(self) -> np.ndarray:
        """Mean accuracy of each pattern across seeds."""
        return np.mean(np.array([r.per_pattern for r in self.seeds], dtype=np.float64), axis=0)


@dataclass
class PairedComparison:
    """Paired t-test of one condition against a reference condition."""

    label: str
    mean_diff: float
    t: float
    p: float

    def significant(self, alpha: float = 0.05) -> bool:
        validate_probability(alpha, "alpha")
        return bool(self.p < alpha)


def _bits(outputs: Sequence[int]) -> str:
    return "".join(str(v) for v in outputs)


def evaluate_patterns(network: Network, patterns: PatternSet) -> List[EvaluationResult]:
    """Frozen-weight evaluation of every pattern, in order."""
    return [evaluate(network, p.input, p.target) for p in patterns]


def run_seed(
    config: NetworkConfig,
    patterns: PatternSet,
    seed: int,
    snapshot_episodes: Sequence[int] = (),
) -> SeedResult:
    """Train a fresh network for ``config.training_episodes`` episodes and score it.

    Patterns are presented in order, one per episode. The network is built
    from a generator seeded with ``seed``.
    """
    patterns.validate(config.input_size, config.output_size)
    for episode in snapshot_episodes:
        validate_positive(episode, "snapshot episode")
    config = config.with_overrides(seed=seed)
    network = build_network(config, make_generator(seed))
    training = TrainingState()
    wanted = set(snapshot_episodes)
    snapshots: Dict[int, Snapshot] = {}

    for episode in range(1, config.training_episodes + 1):
        pattern = patterns.cycle(episode)
        step(network, training, pattern.input, pattern.target, episode)

        if episode in wanted:
            results = evaluate_patterns(network, patterns)
            snapshots[episode] = Snapshot(
                episode=episode,
                mean=float(np.mean([r.accuracy for r in results])),
                output_vectors=[_bits(r.outputs) for r in results],
            )

    results = evaluate_patterns(network, patterns)
    per_pattern = [r.accuracy for r in results]
    output_vectors = [_bits(r.outputs) for r in results]

    return SeedResult(
        seed=seed,
        mean=float(np.mean(per_pattern)),
        per_pattern=per_pattern,
        output_vectors=output_vectors,
        all_same=len(set(output_vectors)) == 1,
        exact_matches=sum(v == p.target_string for v, p in zip(output_vectors, patterns)),
        mean_abs_weight=network.synapses.mean_abs_weight(),
        frustration_flips=network.total_frustration_flips(),
        snapshots=snapshots,
    )


def run_condition(
    base_config: NetworkConfig,
    condition: Condition,
    patterns: PatternSet,
    seeds: Sequence[int],
    snapshot_episodes: Sequence[int] = (),
) -> ConditionResult:
    """Run ``condition`` once per seed."""
    if not seeds:
        raise ConfigurationError("run_condition needs at least one seed")

    config = condition.apply(base_config)
    results = []
    for seed in seeds:
        result = run_seed(config, patterns, seed, snapshot_episodes)
        logger.info("%s seed=%d: mean accuracy %.1f%%", condition.label, seed, result.mean * 100)
        results.append(result)

    summary = ConditionResult(condition=condition, seeds=results)
    logger.info(
        "%s: mean %.1f%% std %.1f%% over %d seeds",
        condition.label,
        summary.mean * 100,
        summary.std * 100,
        len(results),
    )
    return summary


def compare_conditions(result: ConditionResult, reference: ConditionResult) -> PairedComparison:
    """Paired t-test of ``result`` against ``reference`` on matching seeds.

    Raises:
        ConfigurationError: If the two results were not run on the same seeds
    """
    seeds_a = [r.seed for r in result.seeds]
    seeds_b = [r.seed for r in reference.seeds]
    if seeds_a != seeds_b:
        raise ConfigurationError(
            f"paired comparison needs the same seeds, got {seeds_a} and {seeds_b}"
        )
    if len(seeds_a) < 2:
        raise ConfigurationError("paired comparison needs at least two seeds")

    diffs = result.values - reference.values
    test = stats.ttest_rel(result.values, reference.values)
    return PairedComparison(
        label=f"{result.label} vs {reference.label}",
        mean_diff=float(np.mean(diffs)),
        t=float(test.statistic),
        p=float(test.pvalue),
    )


def format_summary(
    results: Sequence[ConditionResult],
    comparisons: Sequence[PairedComparison] = (),
) -> str:
    """Plain-text distribution table followed by the paired comparisons."""
    lines = [f"{'Condition':<18}{'Mean':>8}{'Std':>8}{'Min':>8}{'Max':>8}  All values"]
    lines.append("-" * 80)
    for r in results:
        values = " ".join(f"{v * 100:.0f}%" for v in r.values)
        lines.append(
            f"{r.label:<18}{r.mean * 100:>7.1f}%{r.std * 100:>7.1f}%"
            f"{r.min * 100:>7.0f}%{r.max * 100:>7.0f}%  {values}"
        )

    if comparisons:
        lines.append("")
        lines.append(f"{'Comparison':<36}{'Mean diff':>10}{'t':>10}{'p':>10}  Significant?")
        lines.append("-" * 80)
        for c in comparisons:
            if c.significant(0.01):
                marker = "** (p<0.01)"
            elif c.significant(0.05):
                marker = "* (p<0.05)"
            else:
                marker = "ns"
            lines.append(
                f"{c.label:<36}{c.mean_diff * 100:>+9.1f}%{c.t:>10.4f}{c.p:>10.4f}  {marker}"
            )
    return "\n".join(lines)


# Seeds and conditions of the ablation study
ABLATION_SEEDS: Tuple[int, ...] = (42, 137, 271, 314, 500, 618, 777, 888, 999, 1234)

ABLATION_CONDITIONS: Tuple[Condition, ...] = (
    Condition(
        "Baseline",
        {
            "ambient_radius": 0.0,
            "skip_dampening": True,
            "chemical_diffusion_radius": 1000.0,
            "chemical_falloff": "constant",
        },
    ),
    Condition(
        "Ambient only",
        {
            "skip_dampening": True,
            "chemical_diffusion_radius": 1000.0,
            "chemical_falloff": "constant",
        },
    ),
    Condition(
        "Dampening only",
        {
            "ambient_radius": 0.0,
            "chemical_diffusion_radius": 1000.0,
            "chemical_falloff": "constant",
        },
    ),
    Condition("Full model", {"chemical_diffusion_radius": 15.0}),
)
