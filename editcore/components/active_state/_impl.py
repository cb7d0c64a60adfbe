"""
Active-State Inference Engine.

Functional Core - recomputes the whole active set from the cursor every
time. There is no cached copy to patch: the cursor can move without any
dispatch, so the host is always the source of truth.

Rules:
- Each queryable catalog entry contributes its name when its predicate holds
- "blockquote" when the cursor is inside a block quote
- "h1".."h6" when the current block is that heading
- History and Clear commands never appear
"""

from __future__ import annotations

from editcore.components.catalog import CommandCatalog, CommandKind
from editcore.core.ports.surface import HostSurfacePort
from editcore.domain.entities import BLOCKQUOTE, ActiveStateSet, SelectionContext

STATELESS_KINDS: frozenset[CommandKind] = frozenset({CommandKind.HISTORY, CommandKind.CLEAR})


def synthetic_states(context: SelectionContext) -> set[str]:
    """Pseudo-names derived from the selection alone."""
    names: set[str] = set()
    if context.nearest_block_quote:
        names.add(BLOCKQUOTE)
    if context.in_heading:
        assert context.current_block_tag is not None
        names.add(context.current_block_tag)
    return names


def compute_active_states(
    context: SelectionContext,
    surface: HostSurfacePort,
    catalog: CommandCatalog,
) -> ActiveStateSet:
    names = synthetic_states(context)
    for command in catalog.queryable():
        if command.kind in STATELESS_KINDS:
            continue
        assert command.active_when is not None
        if command.active_when(context, surface, command.name):
            names.add(command.name)
    return ActiveStateSet.of(names)
