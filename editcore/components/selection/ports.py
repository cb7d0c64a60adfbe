"""
Selection component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from editcore.core.ports.surface import NodeRef, RawSelection


class SelectionSourcePort(Protocol):
    """The read-only slice of the host surface the provider needs."""

    def get_selection(self) -> RawSelection:
        """Snapshot of the current selection."""
        ...

    def query_block_tag(self) -> str:
        """Tag of the current block container, or ""."""
        ...

    def find_descendants(self, node_id: str, kind: str) -> tuple[NodeRef, ...]:
        """Descendants of a node with the given kind."""
        ...
