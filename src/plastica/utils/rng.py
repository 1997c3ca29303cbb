"""Random number generation utilities for Plastica.

All randomness in a run (cluster layout, wiring, initial weights, pattern
sampling) is drawn from one explicitly seeded ``torch.Generator`` that is
passed down as an argument. Nothing here touches the global torch RNG.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple, TypeVar, Union

import torch

T = TypeVar("T")


def make_generator(seed: int, device: Union[str, torch.device] = "cpu") -> torch.Generator:
    """Create a CPU/CUDA generator seeded with ``seed``."""
    return torch.Generator(device=device).manual_seed(seed)


def random_in_range(
    low: float,
    high: float,
    size: Union[int, Tuple[int, ...]],
    generator: torch.Generator,
    dtype: torch.dtype = torch.float64,
) -> torch.Tensor:
    """Uniform samples in ``[low, high)``.

    Example:
        >>> gen = make_generator(0)
        >>> offsets = random_in_range(-2.0, 2.0, (10, 3), gen)
    """
    if isinstance(size, int):
        size = (size,)
    return low + torch.rand(size, generator=generator, dtype=dtype) * (high - low)


def shuffled(items: Sequence[T], generator: torch.Generator) -> List[T]:
    """Return a new list with ``items`` in a generator-driven random order."""
    order = torch.randperm(len(items), generator=generator)
    return [items[i] for i in order.tolist()]
