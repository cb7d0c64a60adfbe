"""
Editor domain value objects.

Everything here is a snapshot: created fresh for each event, never mutated
in place and never holding a live document node (node references are ids).
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

HEADING_TAGS: frozenset[str] = frozenset(f"h{level}" for level in range(1, 7))
BLOCKQUOTE = "blockquote"


# --- Selection ---


class SelectionContext(BaseModel):
    """What the cursor (or highlighted range) currently sits in or over."""

    model_config = ConfigDict(frozen=True)

    contains_image: bool = False
    nearest_link_node: str | None = None
    nearest_block_quote: bool = False
    current_block_tag: str | None = None

    # Targets re-derived on every event; ids only, never nodes.
    image_node: str | None = None
    block_node: str | None = None
    collapsed: bool = True

    @property
    def in_heading(self) -> bool:
        return self.current_block_tag in HEADING_TAGS


EMPTY_CONTEXT = SelectionContext()


# --- Active State ---


class ActiveStateSet(BaseModel):
    """Command names and pseudo-names that are "on" at the cursor."""

    model_config = ConfigDict(frozen=True)

    names: frozenset[str] = Field(default_factory=frozenset)

    @classmethod
    def of(cls, names: Iterable[str]) -> ActiveStateSet:
        return cls(names=frozenset(names))

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def as_list(self) -> list[str]:
        return sorted(self.names)


# --- History ---


class HistoryAvailability(BaseModel):
    """Whether the host can currently undo or redo."""

    model_config = ConfigDict(frozen=True)

    can_undo: bool = False
    can_redo: bool = False


# --- Links ---

LINK_METADATA_KEY = "link"


class LinkMetadata(BaseModel):
    """The URL a link was created with, stored apart from its rendered href."""

    model_config = ConfigDict(frozen=True)

    url: str


# --- Snapshot ---


class EditorSnapshot(BaseModel):
    """Everything the UI layer needs to re-render after one event."""

    model_config = ConfigDict(frozen=True)

    context: SelectionContext = EMPTY_CONTEXT
    active: ActiveStateSet = Field(default_factory=ActiveStateSet)
    history: HistoryAvailability = Field(default_factory=HistoryAvailability)
