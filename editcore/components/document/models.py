"""
Document component input models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ResetDocumentInput:
    """Input for resetting the document; None uses the configured template."""

    template: str | None = None
