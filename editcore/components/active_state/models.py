"""
Active state component input models.
"""

from __future__ import annotations

from dataclasses import dataclass

from editcore.domain.entities import SelectionContext


@dataclass(frozen=True)
class ComputeActiveStatesInput:
    """Input for computing the active set; None means capture a new context."""

    context: SelectionContext | None = None
