"""
Selection component - Selection Context Provider.

Shell Layer - reads the host once per call and returns a fresh snapshot.
"""

from __future__ import annotations

from editcore.domain.entities import SelectionContext

from ._impl import build_context
from .ports import SelectionSourcePort


def run_capture(source: SelectionSourcePort) -> SelectionContext:
    """
    Snapshot the current selection as a SelectionContext.

    Called on every selection change and after every dispatch; the result
    is never cached.
    """
    return build_context(
        source.get_selection(),
        source.query_block_tag(),
        source.find_descendants,
    )
