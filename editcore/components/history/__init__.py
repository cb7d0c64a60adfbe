"""
History component - Undo/redo availability gate.
"""

from .component import refresh, run_redo, run_undo
from .ports import HistoryHostPort

__all__ = [
    # Entry points
    "refresh",
    "run_undo",
    "run_redo",
    # Ports
    "HistoryHostPort",
]
