"""
Core: network aggregate, topology builder and the step/evaluate engine.
"""

from plastica.core.engine import EvaluationResult, StepMetrics, TrainingState, evaluate, step
from plastica.core.network import Network
from plastica.core.network_builder import build_network

__all__ = [
    "Network",
    "build_network",
    "TrainingState",
    "StepMetrics",
    "EvaluationResult",
    "step",
    "evaluate",
]
