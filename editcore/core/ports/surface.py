"""
Host Surface Port.

Protocol-based interface for the editable surface the core issues mutation
and query calls against. A browser bridge, a Qt text document or the bundled
InMemorySurface can all stand behind it.

Invariants:
- The host exclusively owns the live document tree; callers hold node ids,
  never nodes, and re-derive them from a fresh RawSelection on every call.
- Undo/redo history belongs to the host; the core only asks whether it is
  possible and requests it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

TEXT_KIND = "#text"
IMAGE_KIND = "img"
LINK_KIND = "a"


@dataclass(frozen=True)
class NodeRef:
    """Weak reference to a node on the host surface."""

    node_id: str
    kind: str  # lowercase tag name, or "#text"


@dataclass(frozen=True)
class RawSelection:
    """
    Raw selection handle as reported by the host.

    Attributes:
        anchor: Node the selection starts in (None when nothing is focused).
        ancestors: Anchor's ancestors, nearest first, root excluded.
        intersecting: Leaf nodes (text runs, images) covered by the range.
        collapsed: True for a plain caret.
    """

    anchor: NodeRef | None = None
    ancestors: tuple[NodeRef, ...] = ()
    intersecting: tuple[NodeRef, ...] = ()
    collapsed: bool = True


# --- Errors ---


class SurfaceError(Exception):
    """Base exception for host surface errors."""

    pass


class NodeNotFoundError(SurfaceError):
    """Raised when a node id does not resolve on the surface."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


# --- Port ---


class HostSurfacePort(Protocol):
    """
    Editable surface interface.

    Mirrors the classic execCommand/queryCommandState contract, plus the
    handful of direct style and metadata primitives the custom transforms
    need.
    """

    def exec_command(self, name: str, value: str | None = None) -> bool:
        """
        Apply a native formatting command to the current selection.

        Returns:
            True if the surface accepted the command.
        """
        ...

    def query_command_state(self, name: str) -> bool:
        """Whether the command's style is active at the current selection."""
        ...

    def query_block_tag(self) -> str:
        """Tag of the current block container, or "" when there is none."""
        ...

    def can_undo(self) -> bool:
        """Whether an undo can be performed."""
        ...

    def can_redo(self) -> bool:
        """Whether a redo can be performed."""
        ...

    def undo(self) -> None:
        """Perform one undo step."""
        ...

    def redo(self) -> None:
        """Perform one redo step."""
        ...

    def get_selection(self) -> RawSelection:
        """Snapshot of the current selection."""
        ...

    def replace_content(self, markup: str) -> None:
        """Replace the entire editable content with markup."""
        ...

    def get_content(self) -> str:
        """Serialize the editable content as markup."""
        ...

    def focus(self) -> None:
        """Move input focus back to the editable surface."""
        ...

    def get_style(self, node_id: str, prop: str) -> str | None:
        """
        Read an inline style property from a node.

        Raises:
            NodeNotFoundError: If the node id does not resolve.
        """
        ...

    def set_styles(self, node_id: str, styles: Mapping[str, str | None]) -> None:
        """
        Set inline style properties on a node as one undoable step.

        A None value removes the property.

        Raises:
            NodeNotFoundError: If the node id does not resolve.
        """
        ...

    def find_descendants(self, node_id: str, kind: str) -> tuple[NodeRef, ...]:
        """Descendants of a node with the given kind, in document order."""
        ...

    def set_metadata(self, node_id: str, key: str, value: Mapping[str, Any]) -> None:
        """Attach an inspectable property to a node (not rendered)."""
        ...

    def get_metadata(self, node_id: str, key: str) -> Mapping[str, Any] | None:
        """Read a property attached with set_metadata."""
        ...
