"""
Links component unit tests.

Tests for URL normalization, link insertion with metadata and image
insertion.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from editcore.adapters.memory_surface import InMemorySurface
from editcore.components.links import (
    InsertImageInput,
    InsertLinkInput,
    normalize_url,
    read_link_metadata,
    run_insert_image,
    run_insert_link,
)
from editcore.core.ports.surface import NodeRef, RawSelection
from editcore.domain.entities import LINK_METADATA_KEY
from editcore.rules.models import EditorRules, LinkRules

# --- Mock Surface ---


class MockLinkSurface:
    """Records commands; reports a configurable selection afterwards."""

    def __init__(self, selection: RawSelection | None = None, accept: bool = True) -> None:
        self.selection = selection or RawSelection()
        self.accept = accept
        self.commands: list[tuple[str, str | None]] = []
        self.metadata: dict[str, dict[str, Mapping[str, Any]]] = {}

    def exec_command(self, name: str, value: str | None = None) -> bool:
        self.commands.append((name, value))
        return self.accept

    def get_selection(self) -> RawSelection:
        return self.selection

    def query_block_tag(self) -> str:
        return "p"

    def find_descendants(self, node_id: str, kind: str) -> tuple[NodeRef, ...]:
        return ()

    def set_metadata(self, node_id: str, key: str, value: Mapping[str, Any]) -> None:
        self.metadata.setdefault(node_id, {})[key] = dict(value)

    def get_metadata(self, node_id: str, key: str) -> Mapping[str, Any] | None:
        return self.metadata.get(node_id, {}).get(key)


IN_LINK = RawSelection(
    anchor=NodeRef("t1", "#text"),
    ancestors=(NodeRef("a1", "a"), NodeRef("p1", "p")),
    intersecting=(NodeRef("t1", "#text"),),
    collapsed=False,
)


# --- Normalization Tests ---


class TestNormalizeUrl:
    """Test URL normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("example.com", "https://example.com"),
            ("http://x.com", "http://x.com"),
            ("https://x.com/path?q=1", "https://x.com/path?q=1"),
            ("HTTP://X.COM", "HTTP://X.COM"),
            ("HttpS://x.com", "HttpS://x.com"),
            ("  example.com  ", "https://example.com"),
            ("www.example.com/page", "https://www.example.com/page"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize("raw", ["", None, "   "])
    def test_empty_is_cancelled(self, raw: str | None) -> None:
        """Empty input means the prompt was cancelled."""
        assert normalize_url(raw) is None

    def test_other_schemes_are_prefixed(self) -> None:
        """Only http and https count as absolute by default."""
        assert normalize_url("ftp://files.example.com") == "https://ftp://files.example.com"

    def test_custom_rules(self) -> None:
        rules = LinkRules(default_scheme="http://", accepted_schemes=["http://", "mailto://"])

        assert normalize_url("example.com", rules) == "http://example.com"
        assert normalize_url("mailto://me", rules) == "mailto://me"


# --- Link Insertion Tests ---


class TestInsertLink:
    """Test link insertion against a mock host."""

    def test_insert_attaches_metadata(self) -> None:
        """Metadata lands on the anchor found from the fresh selection."""
        surface = MockLinkSurface(selection=IN_LINK)
        result = run_insert_link(InsertLinkInput("example.com"), surface)

        assert surface.commands == [("createLink", "https://example.com")]
        assert result.inserted is True
        assert result.node_id == "a1"
        assert result.metadata_attached is True
        assert surface.metadata["a1"][LINK_METADATA_KEY] == {"url": "https://example.com"}

    def test_empty_value_is_noop(self) -> None:
        """Cancelled prompt: nothing reaches the host."""
        surface = MockLinkSurface(selection=IN_LINK)
        result = run_insert_link(InsertLinkInput(""), surface)

        assert result.inserted is False
        assert surface.commands == []
        assert surface.metadata == {}

    def test_no_anchor_found_skips_metadata(self) -> None:
        """The link still counts as inserted."""
        surface = MockLinkSurface(
            selection=RawSelection(anchor=NodeRef("t1", "#text"), ancestors=(NodeRef("p1", "p"),))
        )
        result = run_insert_link(InsertLinkInput("example.com"), surface)

        assert result.inserted is True
        assert result.metadata_attached is False
        assert surface.metadata == {}

    def test_host_rejection(self) -> None:
        surface = MockLinkSurface(selection=IN_LINK, accept=False)
        result = run_insert_link(InsertLinkInput("example.com"), surface)

        assert result.inserted is False
        assert surface.metadata == {}

    def test_rules_scheme_used(self) -> None:
        surface = MockLinkSurface(selection=IN_LINK)
        rules = EditorRules(links=LinkRules(default_scheme="http://"))
        run_insert_link(InsertLinkInput("example.com"), surface, rules)

        assert surface.commands == [("createLink", "http://example.com")]


class TestInsertLinkInMemory:
    """Test link insertion on the in-memory host."""

    def test_wraps_selection_and_records_url(self) -> None:
        surface = InMemorySurface("<p>Visit our site today</p>")
        surface.select_matching("our site")
        result = run_insert_link(InsertLinkInput("example.com"), surface)

        assert '<a href="https://example.com">our site</a>' in surface.get_content()
        assert result.node_id is not None
        metadata = read_link_metadata(surface, result.node_id)
        assert metadata is not None
        assert metadata.url == "https://example.com"

    def test_collapsed_caret_inserts_url_text(self) -> None:
        """With no selection the URL becomes the link text."""
        surface = InMemorySurface("<p>Go </p>")
        surface.place_cursor(surface.find_text("Go")[0], 3)
        result = run_insert_link(InsertLinkInput("x.com"), surface)

        assert surface.get_content() == '<p>Go <a href="https://x.com">https://x.com</a></p>'
        assert result.metadata_attached is True

    def test_metadata_is_not_rendered(self) -> None:
        """Metadata is a property of the node, separate from the href."""
        surface = InMemorySurface("<p>text</p>")
        surface.select_matching("text")
        run_insert_link(InsertLinkInput("x.com"), surface)

        assert "url" not in surface.get_content().replace('href="https://x.com"', "")

    def test_plain_anchor_has_no_metadata(self) -> None:
        """Anchors not created through insertion carry none."""
        surface = InMemorySurface('<p><a href="https://x.com">old</a></p>')
        anchor = surface.get_selection().ancestors[0]

        assert anchor.kind == "a"
        assert read_link_metadata(surface, anchor.node_id) is None


# --- Image Insertion Tests ---


class TestInsertImage:
    """Test image insertion."""

    def test_value_used_verbatim(self) -> None:
        """No scheme is added to image sources."""
        surface = MockLinkSurface()
        result = run_insert_image(InsertImageInput("images/cat.png"), surface)

        assert surface.commands == [("insertImage", "images/cat.png")]
        assert result.inserted is True
        assert result.url == "images/cat.png"

    @pytest.mark.parametrize("value", ["", None])
    def test_empty_value_is_noop(self, value: str | None) -> None:
        surface = MockLinkSurface()
        result = run_insert_image(InsertImageInput(value), surface)

        assert result.inserted is False
        assert surface.commands == []

    def test_in_memory_insert(self) -> None:
        surface = InMemorySurface("<p>Logo: </p>")
        surface.place_cursor(surface.find_text("Logo")[0], 6)
        run_insert_image(InsertImageInput("logo.png"), surface)

        assert surface.get_content() == '<p>Logo: <img src="logo.png"></p>'
