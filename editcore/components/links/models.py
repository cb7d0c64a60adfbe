"""
Links component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass

# --- Input Models ---


@dataclass(frozen=True)
class InsertLinkInput:
    """Input for creating a link at the selection. Empty value cancels."""

    value: str | None


@dataclass(frozen=True)
class InsertImageInput:
    """Input for inserting an image at the selection. Empty value cancels."""

    value: str | None


# --- Output Models ---


@dataclass(frozen=True)
class LinkOperationOutput:
    """Result of a link or image insertion."""

    inserted: bool
    url: str | None = None
    node_id: str | None = None
    metadata_attached: bool = False
