"""
Training: pattern sets and the multi-seed experiment harness.
"""

from plastica.training.experiment import (
    ABLATION_CONDITIONS,
    ABLATION_SEEDS,
    Condition,
    ConditionResult,
    PairedComparison,
    SeedResult,
    Snapshot,
    compare_conditions,
    evaluate_patterns,
    format_summary,
    run_condition,
    run_seed,
)
from plastica.training.patterns import FOUR_PATTERN_TASK, Pattern, PatternSet

__all__ = [
    # Patterns
    "Pattern",
    "PatternSet",
    "FOUR_PATTERN_TASK",
    # Experiments
    "Condition",
    "Snapshot",
    "SeedResult",
    "ConditionResult",
    "PairedComparison",
    "evaluate_patterns",
    "run_seed",
    "run_condition",
    "compare_conditions",
    "format_summary",
    "ABLATION_CONDITIONS",
    "ABLATION_SEEDS",
]
