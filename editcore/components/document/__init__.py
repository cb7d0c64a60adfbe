"""
Document component - Document reset.
"""

from .component import run_reset
from .models import ResetDocumentInput

__all__ = [
    # Entry points
    "run_reset",
    # Input models
    "ResetDocumentInput",
]
