"""
Network configuration for the local-plasticity engine.

One dataclass holds every parameter the engine reads: network shape, neuron
dynamics, eligibility constants, dampening, chemical diffusion, learning
constants and feature selection. Defaults reproduce the two-cluster,
per-bit-reward setup used by the ablation experiments.

Feature selection is explicit rather than inferred from which numbers happen
to be non-zero:

.. code-block:: none

    plasticity_mode     RAW | SIMPLE_FLAG | CONSISTENT_FLAG
    reward_broadcast    GLOBAL | PER_BIT
    modulatory_firing   SYNCHRONOUS | CYCLING
    chemical_falloff    INVERSE | INVERSE_SQUARE | LINEAR | CONSTANT

Optional windows (``frustration_window``, ``flag_gate_warmup``,
``chemical_diffusion_radius_min``, ``reward_anneal_start``/``end``,
``reward_exponent``) are disabled when left at None.

Usage:
======
    config = NetworkConfig(seed=42, reward_broadcast="per_bit")
    baseline = config.with_overrides(
        skip_dampening=True,
        chemical_diffusion_radius=1000.0,
        chemical_falloff=ChemicalFalloff.CONSTANT,
    )

Author: Plastica Project
Date: February 2026
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

from plastica.config.base import BaseConfig
from plastica.config.validation import ValidatedConfig


class NeuronRole(Enum):
    """Functional role of a neuron, fixed at build time."""
    INPUT = "input"
    OUTPUT = "output"
    MODULATORY = "modulatory"
    REGULAR = "regular"


class PlasticityMode(Enum):
    """Which trace drives the weight update.

    RAW: the dampened eligibility trace, no persistence gate
    SIMPLE_FLAG: flag strength moves with every nonzero trace
    CONSISTENT_FLAG: flag strength grows only after a same-sign streak
    """
    RAW = "raw"
    SIMPLE_FLAG = "simple_flag"
    CONSISTENT_FLAG = "consistent_flag"


class RewardBroadcast(Enum):
    """Where the reward chemical is released from."""
    GLOBAL = "global"  # Modulatory neurons broadcast the scalar reward
    PER_BIT = "per_bit"  # Each output neuron broadcasts its own correctness


class ModulatoryFiring(Enum):
    """How modulatory neurons fire in response to a nonzero reward."""
    SYNCHRONOUS = "synchronous"
    CYCLING = "cycling"  # Exactly one per step, round-robin


class ChemicalFalloff(Enum):
    """Distance falloff law for chemical diffusion."""
    INVERSE = "inverse"
    INVERSE_SQUARE = "inverseSquare"
    LINEAR = "linear"
    CONSTANT = "constant"


@dataclass
class NetworkConfig(BaseConfig, ValidatedConfig):
    """Configuration for network construction and the per-step learning pipeline.

    Inherits device, dtype, seed from BaseConfig. The dtype defaults to
    float64 so that a seeded run reproduces bit-for-bit and the exact
    arithmetic properties of the update rules hold.
    """

    dtype: str = "float64"

    # =========================================================================
    # NETWORK SHAPE
    # =========================================================================
    clusters_count: int = 2
    """Number of spatial clusters. Cluster 0 holds inputs, cluster 1 outputs."""

    neurons_per_cluster: int = 30
    """Neurons in each of the first two clusters (including modulatory)."""

    hidden_neurons_per_cluster: Optional[int] = None
    """Neurons in clusters beyond the first two. None = neurons_per_cluster."""

    modulatory_per_cluster: int = 2
    """The first N neurons of every cluster are modulatory."""

    intra_cluster_connection_prob: float = 0.6
    inter_cluster_connection_prob: float = 0.5

    cluster_spacing: float = 10.0
    """Distance between consecutive cluster centers along the x axis."""

    neuron_spread: float = 2.0
    """Neurons are scattered uniformly within ±spread of their center on each axis."""

    input_size: int = 5
    output_size: int = 5

    initial_weight_range: Tuple[float, float] = (-0.1, 0.1)

    # =========================================================================
    # NEURON DYNAMICS
    # =========================================================================
    initial_threshold: float = 0.5
    target_fire_rate: float = 0.2

    threshold_adjust_rate: float = 0.01
    """Fixed homeostatic step applied once per step (not proportional to error)."""

    fixed_output_threshold: bool = True
    """Output neurons skip homeostatic threshold regulation."""

    propagation_cycles: int = 1
    """Accumulate-and-fire repetitions per step. Statistics update once."""

    # =========================================================================
    # ELIGIBILITY
    # =========================================================================
    co_activation_strength: float = 1.0
    co_silence_strength: float = 0.5
    mismatch_strength: float = -0.5

    ambient_threshold: float = 0.3
    """Ambient field must be strictly greater than this to count as active."""

    ambient_radius: float = 3.0
    """Neighbour radius for the ambient field (3D Euclidean)."""

    # =========================================================================
    # FLAG STRENGTH (persistence gate)
    # =========================================================================
    plasticity_mode: PlasticityMode = PlasticityMode.RAW

    flag_strength_gain: float = 0.3
    flag_decay_rate: float = 0.7
    """Multiplicative decay of flag strength on a zero trace."""

    flag_strength_threshold: float = 0.0
    """|flag strength| needed before the flag is used as the effective trace."""

    consistency_threshold: int = 3
    """Consecutive same-sign traces required in CONSISTENT_FLAG mode."""

    flag_decay_on_flip: float = 0.5

    flag_gate_warmup: Optional[int] = None
    """Episodes during which the raw trace bypasses the flag gate."""

    # =========================================================================
    # DAMPENING
    # =========================================================================
    activity_history_decay: float = 0.95
    activity_history_minimum: float = 0.1

    skip_dampening: bool = False
    """Bypass all dampening (eligibility-only experimental condition)."""

    # =========================================================================
    # CHEMICAL / REWARD
    # =========================================================================
    reward_broadcast: RewardBroadcast = RewardBroadcast.PER_BIT
    modulatory_firing: ModulatoryFiring = ModulatoryFiring.SYNCHRONOUS

    chemical_diffusion_radius: float = 15.0
    chemical_diffusion_radius_min: Optional[float] = None
    """Anneal the diffusion radius linearly toward this value over training."""

    chemical_falloff: ChemicalFalloff = ChemicalFalloff.INVERSE
    chemical_decay_rate: float = 0.5
    positive_reward_strength: float = 1.0
    negative_reward_strength: float = -1.0

    reward_exponent: Optional[float] = None
    """Fixed shaping exponent. None = linear (exponent 1)."""

    reward_anneal_start: Optional[int] = None
    reward_anneal_end: Optional[int] = None
    """Blend reward shaping from linear to squared between these episodes."""

    training_episodes: int = 1000
    """Episode count used to interpolate the diffusion radius anneal."""

    # =========================================================================
    # LEARNING
    # =========================================================================
    learning_rate: float = 0.01
    max_weight_delta: float = 0.1
    max_weight_magnitude: float = 2.0

    weight_decay: float = 0.0005
    """Fraction of every weight removed each step before the delta is applied."""

    # =========================================================================
    # FRUSTRATION / PROVISIONAL COMMIT
    # =========================================================================
    frustration_window: Optional[int] = None
    """Consecutive same-direction deltas before a flip is considered. None = off."""

    frustration_threshold: float = 0.0
    """Flip when the chemical EMA while moving stays below this."""

    frustration_flip_strength: float = 0.5

    provisional_weights: bool = False
    """Keep a step's weight update only if the next step's accuracy is no worse."""

    _validation_rules = {
        'clusters_count': ('positive_integer',),
        'neurons_per_cluster': ('positive_integer',),
        'hidden_neurons_per_cluster': ('positive_integer',),
        'modulatory_per_cluster': ('non_negative_integer',),
        'intra_cluster_connection_prob': ('probability',),
        'inter_cluster_connection_prob': ('probability',),
        'cluster_spacing': ('non_negative', 'finite'),
        'neuron_spread': ('non_negative', 'finite'),
        'input_size': ('positive_integer',),
        'output_size': ('positive_integer',),
        'target_fire_rate': ('probability',),
        'threshold_adjust_rate': ('non_negative', 'finite'),
        'propagation_cycles': ('positive_integer',),
        'ambient_radius': ('non_negative',),
        'flag_strength_gain': ('range(0.0, 1.0)',),
        'flag_decay_rate': ('probability',),
        'flag_strength_threshold': ('range(0.0, 1.0)',),
        'consistency_threshold': ('positive_integer',),
        'flag_decay_on_flip': ('probability',),
        'flag_gate_warmup': ('non_negative_integer',),
        'activity_history_decay': ('probability',),
        'activity_history_minimum': ('positive',),
        'chemical_diffusion_radius': ('non_negative',),
        'chemical_diffusion_radius_min': ('non_negative',),
        'chemical_decay_rate': ('probability',),
        'reward_exponent': ('positive', 'finite'),
        'reward_anneal_start': ('non_negative_integer',),
        'reward_anneal_end': ('non_negative_integer',),
        'training_episodes': ('positive_integer',),
        'learning_rate': ('non_negative', 'finite'),
        'max_weight_delta': ('non_negative', 'finite'),
        'max_weight_magnitude': ('positive', 'finite'),
        'weight_decay': ('probability',),
        'frustration_window': ('positive_integer',),
        'frustration_flip_strength': ('probability',),
    }

    def __post_init__(self) -> None:
        # Accept plain strings so condition overrides can be written as dicts
        self.plasticity_mode = PlasticityMode(self.plasticity_mode)
        self.reward_broadcast = RewardBroadcast(self.reward_broadcast)
        self.modulatory_firing = ModulatoryFiring(self.modulatory_firing)
        self.chemical_falloff = ChemicalFalloff(self.chemical_falloff)
        self.initial_weight_range = tuple(self.initial_weight_range)

        self.validate_config(self._cross_field_errors())

    def _cross_field_errors(self) -> List[str]:
        errors: List[str] = []

        if self.clusters_count < 2:
            errors.append(
                f"clusters_count must be >= 2 (cluster 0 holds inputs, cluster 1 outputs), "
                f"got {self.clusters_count}"
            )

        regular = self.neurons_per_cluster - self.modulatory_per_cluster
        if self.input_size > regular:
            errors.append(
                f"input_size={self.input_size} exceeds the {regular} regular neurons of cluster 0"
            )
        if self.output_size > regular:
            errors.append(
                f"output_size={self.output_size} exceeds the {regular} regular neurons of cluster 1"
            )

        if len(self.initial_weight_range) != 2:
            errors.append(f"initial_weight_range must be (low, high), got {self.initial_weight_range}")
        elif self.initial_weight_range[0] > self.initial_weight_range[1]:
            errors.append(f"initial_weight_range {self.initial_weight_range} is not ordered")

        if (self.reward_anneal_start is None) != (self.reward_anneal_end is None):
            errors.append("reward_anneal_start and reward_anneal_end must be set together")
        elif self.reward_annealing and self.reward_anneal_end <= self.reward_anneal_start:
            errors.append(
                f"reward_anneal_end={self.reward_anneal_end} must be after "
                f"reward_anneal_start={self.reward_anneal_start}"
            )

        if (
            self.chemical_diffusion_radius_min is not None
            and self.chemical_diffusion_radius_min > self.chemical_diffusion_radius
        ):
            errors.append(
                f"chemical_diffusion_radius_min={self.chemical_diffusion_radius_min} exceeds "
                f"chemical_diffusion_radius={self.chemical_diffusion_radius}"
            )

        if self.positive_reward_strength < 0:
            errors.append(
                f"positive_reward_strength={self.positive_reward_strength} must be non-negative"
            )

        return errors

    # =========================================================================
    # DERIVED PROPERTIES
    # =========================================================================

    @property
    def flag_gated(self) -> bool:
        """Whether flag strength is tracked and gates the weight update."""
        return self.plasticity_mode is not PlasticityMode.RAW

    @property
    def frustration_enabled(self) -> bool:
        return self.frustration_window is not None

    @property
    def radius_annealing(self) -> bool:
        return self.chemical_diffusion_radius_min is not None

    @property
    def reward_annealing(self) -> bool:
        return self.reward_anneal_start is not None and self.reward_anneal_end is not None

    def cluster_size(self, cluster: int) -> int:
        """Number of neurons placed in ``cluster``."""
        if cluster >= 2 and self.hidden_neurons_per_cluster is not None:
            return self.hidden_neurons_per_cluster
        return self.neurons_per_cluster

    def with_overrides(self, **overrides: Any) -> "NetworkConfig":
        """Return a validated copy with ``overrides`` applied."""
        return dataclasses.replace(self, **overrides)
