"""
Dispatch component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from editcore.domain.entities import EditorSnapshot, SelectionContext


class DispatchBranch(str, Enum):
    """Which mutation path a dispatch took."""

    NATIVE = "native"
    IMAGE_ALIGNMENT = "image_alignment"
    INDENTATION = "indentation"
    LINK = "link"
    IMAGE = "image"
    HISTORY = "history"
    CANCELLED = "cancelled"


# --- Input Models ---


@dataclass(frozen=True)
class DispatchInput:
    """
    Input for dispatching a catalog command.

    context: the selection the command targets; captured from the host
    when omitted.
    """

    command: str
    value: str | None = None
    context: SelectionContext | None = None


# --- Output Models ---


@dataclass(frozen=True)
class DispatchOutput:
    """Result of a dispatch plus the state to re-render."""

    command: str
    branch: DispatchBranch
    applied: bool
    snapshot: EditorSnapshot
