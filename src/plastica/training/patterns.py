"""
Binary input/target pattern sets.

A :class:`PatternSet` is the fixed task a network is trained on. Training
usually presents the patterns in order, one per episode
(:meth:`PatternSet.cycle`); :meth:`PatternSet.sample` draws one at random
from an explicit generator instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

import torch

from plastica.errors import PatternError, validate_binary_pattern, validate_pattern_length


@dataclass(frozen=True)
class Pattern:
    """One binary input vector and the target the outputs should produce."""

    input: Tuple[int, ...]
    target: Tuple[int, ...]

    def __post_init__(self) -> None:
        # Check before coercing so fractional bits are rejected, not truncated
        validate_binary_pattern(self.input, name="input")
        validate_binary_pattern(self.target, name="target")
        object.__setattr__(self, "input", tuple(int(v) for v in self.input))
        object.__setattr__(self, "target", tuple(int(v) for v in self.target))

    @property
    def target_string(self) -> str:
        """Target as a bit string, e.g. ``"01010"``."""
        return "".join(str(v) for v in self.target)


class PatternSet:
    """Ordered, non-empty collection of patterns of uniform length."""

    def __init__(self, patterns: Sequence[Pattern]):
        if not patterns:
            raise PatternError("pattern set is empty")
        self._patterns: List[Pattern] = list(patterns)

        input_size = len(self._patterns[0].input)
        output_size = len(self._patterns[0].target)
        for pattern in self._patterns:
            validate_pattern_length(pattern.input, input_size, name="input")
            validate_pattern_length(pattern.target, output_size, name="target")

    @classmethod
    def from_lists(cls, pairs: Sequence[Tuple[Sequence[int], Sequence[int]]]) -> "PatternSet":
        """Build from ``[(input, target), ...]``."""
        return cls([Pattern(tuple(inp), tuple(tgt)) for inp, tgt in pairs])

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns)

    def __getitem__(self, index: int) -> Pattern:
        return self._patterns[index]

    @property
    def input_size(self) -> int:
        return len(self._patterns[0].input)

    @property
    def output_size(self) -> int:
        return len(self._patterns[0].target)

    def cycle(self, episode: int) -> Pattern:
        """Pattern presented at 1-based ``episode``: 1 → first, wrapping around."""
        return self._patterns[(episode - 1) % len(self._patterns)]

    def sample(self, generator: torch.Generator) -> Pattern:
        """Uniformly random pattern drawn from ``generator``."""
        index = int(torch.randint(len(self._patterns), (1,), generator=generator).item())
        return self._patterns[index]

    def validate(self, input_size: int, output_size: int) -> None:
        """Check that every pattern fits a network with the given sizes.

        Raises:
            PatternError: On the first pattern that does not fit
        """
        for pattern in self._patterns:
            validate_pattern_length(pattern.input, input_size, name="input")
            validate_pattern_length(pattern.target, output_size, name="target")

    def __repr__(self) -> str:
        return f"PatternSet(n={len(self)}, input_size={self.input_size}, output_size={self.output_size})"


# Four 5-bit patterns used by the ablation experiments
FOUR_PATTERN_TASK = PatternSet.from_lists(
    [
        ((1, 0, 1, 0, 1), (0, 1, 0, 1, 0)),
        ((1, 1, 0, 0, 0), (0, 0, 1, 1, 1)),
        ((1, 0, 0, 0, 1), (0, 1, 1, 1, 0)),
        ((0, 1, 0, 1, 0), (1, 0, 1, 0, 1)),
    ]
)
