"""
Dispatch component - Command Dispatcher.
"""

from ._impl import (
    ALIGN_DIRECTIONS,
    INDENT_DIRECTIONS,
    MARGIN_PROPERTY,
    align_image,
    check_value,
    parse_length,
    shift_indent,
)
from .component import run_dispatch
from .models import DispatchBranch, DispatchInput, DispatchOutput

__all__ = [
    # Entry points
    "run_dispatch",
    # Input models
    "DispatchInput",
    # Output models
    "DispatchOutput",
    "DispatchBranch",
    # Transforms
    "align_image",
    "shift_indent",
    "check_value",
    "parse_length",
    "ALIGN_DIRECTIONS",
    "INDENT_DIRECTIONS",
    "MARGIN_PROPERTY",
]
