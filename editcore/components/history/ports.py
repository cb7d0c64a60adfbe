"""
History component port definitions.

The host owns the undo stack; this port only exposes the capability.
A browser host answers from queryCommandEnabled, the in-memory host from
its command-log snapshot stack.
"""

from __future__ import annotations

from typing import Protocol


class HistoryHostPort(Protocol):
    """Undo/redo capability of the host surface."""

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
