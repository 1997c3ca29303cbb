"""
Base Configuration.

Fields shared by every Plastica config: where state tensors live, which
floating point type they use, and the seed that reproduces a run.

Author: Plastica Project
Date: February 2026
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import torch

_DTYPES: Dict[str, torch.dtype] = {
    "float16": torch.float16,
    "bfloat16": torch.bfloat16,
    "float32": torch.float32,
    "float64": torch.float64,
}


@dataclass
class BaseConfig:
    """Device, dtype and seed."""

    device: str = "cpu"
    """Torch device string: 'cpu', 'cuda', 'cuda:1', ..."""

    dtype: str = "float32"
    """Floating point type of state tensors, one of the keys of ``_DTYPES``."""

    seed: Optional[int] = None
    """Seed for the run's generator. None = the caller supplies a generator."""

    def get_torch_device(self) -> torch.device:
        return torch.device(self.device)

    def get_torch_dtype(self) -> torch.dtype:
        """Resolve ``dtype``.

        Raises:
            ValueError: For an unsupported dtype name
        """
        try:
            return _DTYPES[self.dtype]
        except KeyError:
            raise ValueError(f"Unknown dtype '{self.dtype}', expected one of {sorted(_DTYPES)}") from None
