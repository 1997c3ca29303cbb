"""
Spatial utilities: 3D distances and neuron id generation.

Neuron positions are stored as an ``[n_neurons, 3]`` tensor. Distances are
computed from explicit coordinate differences (not ``torch.cdist``, whose
matrix-multiply shortcut trades exactness for speed on larger inputs).

Author: Plastica Project
Date: February 2026
"""

from __future__ import annotations

import itertools
import math
from typing import Sequence, Union

import torch

Point = Union[Sequence[float], torch.Tensor]


def distance3d(a: Point, b: Point) -> float:
    """Euclidean distance between two 3D points.

    Example:
        >>> distance3d((0.0, 0.0, 0.0), (3.0, 4.0, 0.0))
        5.0
    """
    dx = float(a[0]) - float(b[0])
    dy = float(a[1]) - float(b[1])
    dz = float(a[2]) - float(b[2])
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def pairwise_distances(positions: torch.Tensor) -> torch.Tensor:
    """All-pairs Euclidean distance matrix.

    Args:
        positions: Neuron coordinates [n_neurons, 3]

    Returns:
        Symmetric distance matrix [n_neurons, n_neurons] with a zero diagonal
    """
    diff = positions.unsqueeze(1) - positions.unsqueeze(0)
    return diff.pow(2).sum(dim=-1).sqrt()


class IdGenerator:
    """Sequential id source scoped to one network build.

    Ids are ``{prefix}_{n}`` with ``n`` counting from 1 across all prefixes,
    so a rebuilt network gets the same ids as the original.

    Example:
        >>> ids = IdGenerator()
        >>> ids.next("n_0"), ids.next("n_1")
        ('n_0_1', 'n_1_2')
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def next(self, prefix: str = "id") -> str:
        return f"{prefix}_{next(self._counter)}"
