"""
Selection component - Selection Context Provider.
"""

from ._impl import BLOCK_KINDS, build_context, find_image, normalize_block_tag
from .component import run_capture
from .ports import SelectionSourcePort

__all__ = [
    # Entry points
    "run_capture",
    # Pure helpers
    "build_context",
    "find_image",
    "normalize_block_tag",
    "BLOCK_KINDS",
    # Ports
    "SelectionSourcePort",
]
