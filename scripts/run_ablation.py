"""
Ablation study driver: trains every ablation condition on every seed and
prints the distribution table, paired t-tests against the baseline and the
per-pattern breakdown.

Usage::

    python scripts/run_ablation.py
    python scripts/run_ablation.py --episodes 2000 --seeds 42 137 271
    python scripts/run_ablation.py --snapshots 2000 5000 --verbose
"""

from __future__ import annotations

import argparse
import logging
import sys

from plastica import NetworkConfig
from plastica.training import (
    ABLATION_CONDITIONS,
    ABLATION_SEEDS,
    FOUR_PATTERN_TASK,
    compare_conditions,
    format_summary,
    run_condition,
)

sys.stdout.reconfigure(line_buffering=True)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Plastica ablation study (ambient field / dampening).",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--episodes", type=int, default=10000,
        help="Training episodes per run (one pattern per episode).",
    )
    parser.add_argument(
        "--seeds", type=int, nargs="+", default=list(ABLATION_SEEDS),
        help="Seeds shared by every condition (paired design).",
    )
    parser.add_argument(
        "--snapshots", type=int, nargs="*", default=[],
        help="Episodes at which to record a frozen-weight score.",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Log per-seed progress.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    base = NetworkConfig(training_episodes=args.episodes)

    print("\n" + "═" * 80)
    print("PLASTICA  ·  ABLATION STUDY")
    print("═" * 80)
    print(f"  episodes : {args.episodes}")
    print(f"  seeds    : {', '.join(str(s) for s in args.seeds)}")
    print(f"  patterns : {len(FOUR_PATTERN_TASK)}")

    results = [
        run_condition(base, condition, FOUR_PATTERN_TASK, args.seeds, args.snapshots)
        for condition in ABLATION_CONDITIONS
    ]

    baseline = results[0]
    comparisons = []
    if len(args.seeds) >= 2:
        comparisons = [compare_conditions(result, baseline) for result in results[1:]]

    print(f"\n{'═' * 80}")
    print("FROZEN-WEIGHT ACCURACY")
    print(f"{'═' * 80}")
    print(format_summary(results, comparisons))

    print(f"\n{'═' * 80}")
    print("PER-PATTERN MEAN ACCURACY")
    print(f"{'═' * 80}")
    header = f"{'Condition':<18}" + "".join(f"P{i + 1:<7}" for i in range(len(FOUR_PATTERN_TASK)))
    print(header)
    for result in results:
        row = "".join(f"{v * 100:<8.0f}" for v in result.per_pattern_mean())
        print(f"{result.label:<18}{row}")

    for episode in args.snapshots:
        print(f"\n  Snapshot at episode {episode}:")
        for result in results:
            means = [r.snapshots[episode].mean for r in result.seeds if episode in r.snapshots]
            if means:
                print(f"    {result.label:<18}{sum(means) / len(means) * 100:6.1f}%")


if __name__ == "__main__":
    main()
