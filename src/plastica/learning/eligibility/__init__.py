"""Eligibility Flagging.

Memoryless four-quadrant eligibility traces and the flag-strength gate that
turns them into a persistent learning signal.
"""

from plastica.learning.eligibility.flagging import (
    compute_eligibility,
    effective_trace,
    update_flag_strength,
)

__all__ = [
    "compute_eligibility",
    "effective_trace",
    "update_flag_strength",
]
