"""
Selection component unit tests.
"""

from __future__ import annotations

import pytest

from editcore.adapters.memory_surface import InMemorySurface
from editcore.components.selection import (
    build_context,
    find_image,
    normalize_block_tag,
    run_capture,
)
from editcore.core.ports.surface import NodeRef, RawSelection
from editcore.domain.entities import EMPTY_CONTEXT

TEXT = NodeRef("t1", "#text")
PARA = NodeRef("p1", "p")
LINK = NodeRef("a1", "a")
QUOTE = NodeRef("q1", "blockquote")
IMAGE = NodeRef("img1", "img")


class MockDescendants:
    """Descendant lookup backed by a dict, recording calls."""

    def __init__(self, found: dict[str, tuple[NodeRef, ...]] | None = None) -> None:
        self._found = found or {}
        self.calls: list[tuple[str, str]] = []

    def __call__(self, node_id: str, kind: str) -> tuple[NodeRef, ...]:
        self.calls.append((node_id, kind))
        return self._found.get(node_id, ())


# --- Block Tag Normalization ---


class TestNormalizeBlockTag:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("h1", "h1"),
            ("H2", "h2"),
            ("<P>", "p"),
            ("", None),
            (None, None),
            ("  ", None),
        ],
    )
    def test_normalize(self, raw: str | None, expected: str | None) -> None:
        assert normalize_block_tag(raw) == expected


# --- Context Building ---


class TestBuildContext:
    """Test building SelectionContext from raw selections."""

    def test_no_anchor_gives_empty_context(self) -> None:
        """An unfocused surface yields the empty context."""
        assert build_context(RawSelection(), "", MockDescendants()) == EMPTY_CONTEXT

    def test_plain_text_in_paragraph(self) -> None:
        """Caret in text inside a paragraph."""
        raw = RawSelection(anchor=TEXT, ancestors=(PARA,))
        context = build_context(raw, "p", MockDescendants())

        assert context.contains_image is False
        assert context.nearest_link_node is None
        assert context.nearest_block_quote is False
        assert context.current_block_tag == "p"
        assert context.block_node == "p1"
        assert context.collapsed is True

    def test_nearest_link_found_through_ancestors(self) -> None:
        """Text nested in an anchor reports the anchor id."""
        raw = RawSelection(anchor=TEXT, ancestors=(LINK, PARA))
        context = build_context(raw, "p", MockDescendants())

        assert context.nearest_link_node == "a1"

    def test_blockquote_flag(self) -> None:
        """Any blockquote ancestor sets the flag."""
        raw = RawSelection(anchor=TEXT, ancestors=(PARA, QUOTE))
        context = build_context(raw, "p", MockDescendants())

        assert context.nearest_block_quote is True
        assert context.block_node == "p1"

    def test_empty_block_tag_is_none(self) -> None:
        """Host reporting no block tag means None."""
        raw = RawSelection(anchor=TEXT, ancestors=(PARA,))

        assert build_context(raw, "", MockDescendants()).current_block_tag is None

    def test_heading_tag(self) -> None:
        """Heading tags are lowercased and flagged as headings."""
        raw = RawSelection(anchor=TEXT, ancestors=(NodeRef("h", "h3"),))
        context = build_context(raw, "H3", MockDescendants())

        assert context.current_block_tag == "h3"
        assert context.in_heading is True

    def test_range_flag(self) -> None:
        """Ranges are not collapsed."""
        raw = RawSelection(anchor=TEXT, ancestors=(PARA,), intersecting=(TEXT,), collapsed=False)

        assert build_context(raw, "p", MockDescendants()).collapsed is False


# --- Image Detection ---


class TestFindImage:
    """Test which image an alignment command targets."""

    def test_anchor_is_image(self) -> None:
        """A selected image is its own target."""
        raw = RawSelection(anchor=IMAGE, ancestors=(PARA,), collapsed=False)
        lookup = MockDescendants()

        assert find_image(raw, lookup) == IMAGE
        assert lookup.calls == []

    def test_range_covers_image(self) -> None:
        """An image covered by the range is found without a lookup."""
        raw = RawSelection(
            anchor=TEXT, ancestors=(PARA,), intersecting=(TEXT, IMAGE), collapsed=False
        )
        lookup = MockDescendants()

        assert find_image(raw, lookup) == IMAGE
        assert lookup.calls == []

    def test_image_in_anchor_element(self) -> None:
        """Text anchors search their parent element."""
        raw = RawSelection(anchor=TEXT, ancestors=(PARA,))
        lookup = MockDescendants({"p1": (IMAGE,)})

        assert find_image(raw, lookup) == IMAGE
        assert lookup.calls == [("p1", "img")]

    def test_no_image(self) -> None:
        raw = RawSelection(anchor=TEXT, ancestors=(PARA,))

        assert find_image(raw, MockDescendants()) is None

    def test_context_carries_image_target(self) -> None:
        raw = RawSelection(anchor=TEXT, ancestors=(PARA,))
        context = build_context(raw, "p", MockDescendants({"p1": (IMAGE,)}))

        assert context.contains_image is True
        assert context.image_node == "img1"


# --- Capture From Surface ---


class TestRunCapture:
    """Test capturing context from the in-memory host."""

    def test_capture_in_link(self) -> None:
        """Caret inside an anchor."""
        surface = InMemorySurface('<p>Read <a href="https://x.com">this</a> now</p>')
        surface.cursor_in("this")
        context = run_capture(surface)

        assert context.nearest_link_node is not None
        assert surface.node_kind(context.nearest_link_node) == "a"
        assert context.current_block_tag == "p"

    def test_capture_in_blockquote(self) -> None:
        surface = InMemorySurface("<blockquote><p>Quoted</p></blockquote>")
        surface.cursor_in("Quoted")
        context = run_capture(surface)

        assert context.nearest_block_quote is True
        assert context.current_block_tag == "p"

    def test_capture_in_list_item(self) -> None:
        """List items have a block target but no block tag."""
        surface = InMemorySurface("<ul><li>Item</li></ul>")
        surface.cursor_in("Item")
        context = run_capture(surface)

        assert context.current_block_tag is None
        assert context.block_node is not None
        assert surface.node_kind(context.block_node) == "li"

    def test_capture_selected_image(self) -> None:
        surface = InMemorySurface('<p>Pic <img src="a.png"></p>')
        image_id = surface.find_descendants(surface.get_selection().ancestors[-1].node_id, "img")[
            0
        ].node_id
        surface.select_node(image_id)
        context = run_capture(surface)

        assert context.contains_image is True
        assert context.image_node == image_id
        assert context.collapsed is False

    def test_capture_is_fresh_after_cursor_move(self) -> None:
        """Moving the cursor changes the next capture; nothing is cached."""
        surface = InMemorySurface("<h1>Title</h1><p>Body</p>")
        surface.cursor_in("Title")
        first = run_capture(surface)
        surface.cursor_in("Body")
        second = run_capture(surface)

        assert first.current_block_tag == "h1"
        assert second.current_block_tag == "p"
