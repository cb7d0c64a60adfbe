"""
Active state component - Active-State Inference Engine.
"""

from ._impl import STATELESS_KINDS, compute_active_states, synthetic_states
from .component import capture_snapshot, run_compute
from .models import ComputeActiveStatesInput

__all__ = [
    # Entry points
    "run_compute",
    "capture_snapshot",
    # Input models
    "ComputeActiveStatesInput",
    # Core
    "compute_active_states",
    "synthetic_states",
    "STATELESS_KINDS",
]
