"""
PLASTICA - Local Plasticity in Small Recurrent Threshold Networks

A simulation engine for networks of binary threshold neurons that learn
without backpropagation: each synapse adjusts its weight from a local
eligibility trace, gated by a spatially diffused reward chemical, filtered
by dampening heuristics and regulated by per-neuron homeostasis.

Quick Start:
============

    from plastica import NetworkConfig, TrainingState, build_network, step, evaluate
    from plastica.training import FOUR_PATTERN_TASK

    network = build_network(NetworkConfig(seed=42))
    training = TrainingState()
    for episode in range(1, 1001):
        pattern = FOUR_PATTERN_TASK.cycle(episode)
        step(network, training, pattern.input, pattern.target, episode)

    print(evaluate(network, pattern.input, pattern.target).accuracy)

Internal Development:
=====================

Internal code should use explicit imports for clarity:

    from plastica.learning.eligibility.flagging import compute_eligibility
    from plastica.neuromodulation.chemical import diffuse_chemical
"""

__version__ = "0.1.0"

# ============================================================================
# PUBLIC API
# ============================================================================

# Configuration
from plastica.config import (
    ChemicalFalloff,
    ModulatoryFiring,
    NetworkConfig,
    NeuronRole,
    PlasticityMode,
    RewardBroadcast,
)

# Network and engine
from plastica.core import (
    EvaluationResult,
    Network,
    StepMetrics,
    TrainingState,
    build_network,
    evaluate,
    step,
)

# Errors
from plastica.errors import (
    ComponentError,
    ConfigurationError,
    PatternError,
    PlasticaError,
)

# Randomness
from plastica.utils.rng import make_generator

__all__ = [
    "__version__",
    # Configuration
    "NetworkConfig",
    "NeuronRole",
    "PlasticityMode",
    "RewardBroadcast",
    "ModulatoryFiring",
    "ChemicalFalloff",
    # Network and engine
    "Network",
    "build_network",
    "TrainingState",
    "StepMetrics",
    "EvaluationResult",
    "step",
    "evaluate",
    # Errors
    "PlasticaError",
    "ConfigurationError",
    "PatternError",
    "ComponentError",
    # Randomness
    "make_generator",
]
