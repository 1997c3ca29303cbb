"""
Directed synapse state, stored column-wise over the whole synapse list.

Every field is a tensor of length ``n_synapses``; synapse ``k`` connects
neuron ``pre[k]`` to neuron ``post[k]``. The update rules in
``plastica.learning`` operate on all synapses at once.

Fields fall into four groups:

- **Structure**: ``pre``, ``post`` (never change after build)
- **Learning signal**: ``weight``, ``eligibility_trace`` (recomputed fresh
  each step), ``activity_history`` (participation running average),
  ``chemical_level`` (accumulates reward, decays geometrically)
- **Flag gate**: ``flag_strength`` in [-1, 1], ``last_trace_sign``,
  ``consecutive_consistent``
- **Frustration**: ``adjustment_direction``, ``same_direction_count``,
  ``reward_while_adjusting`` (EMA of chemical level while moving),
  ``frustration_flip_count``

Author: Plastica Project
Date: February 2026
"""

from __future__ import annotations

from dataclasses import dataclass

import torch

from plastica.errors import ComponentError


@dataclass
class SynapseState:
    """Column-wise state of every synapse in a network."""

    pre: torch.Tensor
    post: torch.Tensor
    weight: torch.Tensor
    eligibility_trace: torch.Tensor
    activity_history: torch.Tensor
    chemical_level: torch.Tensor
    flag_strength: torch.Tensor
    last_trace_sign: torch.Tensor
    consecutive_consistent: torch.Tensor
    adjustment_direction: torch.Tensor
    same_direction_count: torch.Tensor
    reward_while_adjusting: torch.Tensor
    frustration_flip_count: torch.Tensor

    @classmethod
    def create(
        cls,
        pre: torch.Tensor,
        post: torch.Tensor,
        weight: torch.Tensor,
    ) -> "SynapseState":
        """Create synapses with the given endpoints and initial weights.

        All learning state starts at zero.

        Example:
            >>> synapses = SynapseState.create(
            ...     pre=torch.tensor([0, 1]),
            ...     post=torch.tensor([1, 2]),
            ...     weight=torch.tensor([0.05, -0.02], dtype=torch.float64),
            ... )
        """
        n = weight.shape[0]
        zeros = torch.zeros(n, dtype=weight.dtype, device=weight.device)
        counts = torch.zeros(n, dtype=torch.int64, device=weight.device)
        return cls(
            pre=pre.to(torch.int64),
            post=post.to(torch.int64),
            weight=weight.clone(),
            eligibility_trace=zeros.clone(),
            activity_history=zeros.clone(),
            chemical_level=zeros.clone(),
            flag_strength=zeros.clone(),
            last_trace_sign=zeros.clone(),
            consecutive_consistent=counts.clone(),
            adjustment_direction=zeros.clone(),
            same_direction_count=counts.clone(),
            reward_while_adjusting=zeros.clone(),
            frustration_flip_count=counts.clone(),
        )

    def __len__(self) -> int:
        return self.weight.shape[0]

    @property
    def n_synapses(self) -> int:
        return len(self)

    def mean_abs_weight(self) -> float:
        """Mean |weight| over all synapses.

        Raises:
            ComponentError: If the synapse list is empty
        """
        if len(self) == 0:
            raise ComponentError("SynapseState", "mean weight requested for an empty synapse list")
        return float(self.weight.abs().mean().item())

    def active_fraction(self, tolerance: float = 1e-6) -> float:
        """Fraction of synapses whose eligibility trace is nonzero."""
        if len(self) == 0:
            raise ComponentError("SynapseState", "active fraction requested for an empty synapse list")
        return float((self.eligibility_trace.abs() > tolerance).to(torch.float64).mean().item())
