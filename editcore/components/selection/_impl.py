"""
Selection Context Provider - turns a raw host selection into a tagged
SelectionContext.

Functional Core - pure; the host is only reached through the lookup
callable passed in.

Key behaviors:
- contains_image when the anchor is an image, the range covers one, or the
  anchor's nearest element contains one
- nearest link / blockquote / block found by walking anchor then ancestors
- current_block_tag normalized to lowercase, "" becomes None
"""

from __future__ import annotations

from collections.abc import Callable

from editcore.core.ports.surface import IMAGE_KIND, LINK_KIND, TEXT_KIND, NodeRef, RawSelection
from editcore.domain.entities import BLOCKQUOTE, EMPTY_CONTEXT, HEADING_TAGS, SelectionContext

BLOCK_KINDS: frozenset[str] = HEADING_TAGS | {"p", "li", "div", "pre", BLOCKQUOTE}

DescendantLookup = Callable[[str, str], tuple[NodeRef, ...]]


def normalize_block_tag(raw: str | None) -> str | None:
    """'<H1>' -> 'h1'; empty -> None."""
    if not raw:
        return None
    tag = raw.strip().strip("<>").strip().lower()
    return tag or None


def _chain(raw: RawSelection) -> tuple[NodeRef, ...]:
    assert raw.anchor is not None
    return (raw.anchor, *raw.ancestors)


def find_image(raw: RawSelection, descendants: DescendantLookup) -> NodeRef | None:
    """The image an alignment command should act on, if any."""
    anchor = raw.anchor
    if anchor is None:
        return None
    if anchor.kind == IMAGE_KIND:
        return anchor

    covered = next((n for n in raw.intersecting if n.kind == IMAGE_KIND), None)
    if covered is not None:
        return covered

    element = anchor if anchor.kind != TEXT_KIND else (raw.ancestors[0] if raw.ancestors else None)
    if element is None:
        return None
    found = descendants(element.node_id, IMAGE_KIND)
    return found[0] if found else None


def build_context(
    raw: RawSelection,
    block_tag: str | None,
    descendants: DescendantLookup,
) -> SelectionContext:
    """Build a SelectionContext from one raw selection snapshot."""
    if raw.anchor is None:
        return EMPTY_CONTEXT

    chain = _chain(raw)
    image = find_image(raw, descendants)
    link = next((n for n in chain if n.kind == LINK_KIND), None)
    block = next((n for n in chain if n.kind in BLOCK_KINDS), None)

    return SelectionContext(
        contains_image=image is not None,
        nearest_link_node=link.node_id if link else None,
        nearest_block_quote=any(n.kind == BLOCKQUOTE for n in chain),
        current_block_tag=normalize_block_tag(block_tag),
        image_node=image.node_id if image else None,
        block_node=block.node_id if block else None,
        collapsed=raw.collapsed,
    )
