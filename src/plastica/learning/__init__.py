"""
Local learning rules.

Everything here reads only per-synapse and per-neuron state plus the
configuration: no gradients, no global error signal beyond the diffused
reward chemical.
"""

from plastica.learning.dampening import (
    activity_history_dampening,
    ambient_relevance_dampening,
    combined_dampening,
    information_dampening,
    update_activity_history,
)
from plastica.learning.eligibility import (
    compute_eligibility,
    effective_trace,
    update_flag_strength,
)
from plastica.learning.homeostasis import regulate_threshold
from plastica.learning.plasticity import (
    ProvisionalUpdate,
    decay_chemical,
    resolve_provisional,
    update_frustration,
    update_weights,
)
from plastica.learning.reward import compute_accuracy, compute_loss, compute_reward_signal

__all__ = [
    # Eligibility
    "compute_eligibility",
    "effective_trace",
    "update_flag_strength",
    # Dampening
    "activity_history_dampening",
    "ambient_relevance_dampening",
    "combined_dampening",
    "information_dampening",
    "update_activity_history",
    # Homeostasis
    "regulate_threshold",
    # Weights
    "ProvisionalUpdate",
    "decay_chemical",
    "resolve_provisional",
    "update_frustration",
    "update_weights",
    # Reward
    "compute_accuracy",
    "compute_loss",
    "compute_reward_signal",
]
