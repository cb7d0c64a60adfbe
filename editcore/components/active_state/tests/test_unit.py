"""
Active state component unit tests.

Tests for active-set inference against a mock host and the in-memory host.
"""

from __future__ import annotations

from typing import Any

import pytest

from editcore.adapters.memory_surface import InMemorySurface
from editcore.components.active_state import (
    ComputeActiveStatesInput,
    capture_snapshot,
    compute_active_states,
    run_compute,
    synthetic_states,
)
from editcore.components.catalog import DEFAULT_CATALOG, Command, CommandCatalog, CommandKind
from editcore.domain.entities import EMPTY_CONTEXT, SelectionContext

# --- Mock Host ---


class MockStateSurface:
    """Answers query_command_state from a fixed set of names."""

    def __init__(self, on: set[str] | None = None) -> None:
        self.on = on or set()
        self.queries: list[str] = []

    def query_command_state(self, name: str) -> bool:
        self.queries.append(name)
        return name in self.on

    def __getattr__(self, name: str) -> Any:
        raise AssertionError(f"unexpected host call: {name}")


# --- Synthetic States ---


class TestSyntheticStates:
    """Test pseudo-names derived from the context alone."""

    def test_heading_and_quote(self) -> None:
        context = SelectionContext(current_block_tag="h4", nearest_block_quote=True)

        assert synthetic_states(context) == {"h4", "blockquote"}

    def test_paragraph_adds_nothing(self) -> None:
        """Only headings become pseudo-names."""
        assert synthetic_states(SelectionContext(current_block_tag="p")) == set()

    def test_empty_context(self) -> None:
        assert synthetic_states(EMPTY_CONTEXT) == set()


# --- Inference Against Mock Host ---


class TestComputeActiveStates:
    """Test the inference engine with a mock host."""

    def test_host_states_become_names(self) -> None:
        """Commands the host reports as on are active."""
        surface = MockStateSurface({"bold", "justifyCenter"})
        active = compute_active_states(EMPTY_CONTEXT, surface, DEFAULT_CATALOG)

        assert "bold" in active
        assert "justifyCenter" in active
        assert "italic" not in active

    def test_only_queryable_commands_queried(self) -> None:
        """Stateless commands never reach the host."""
        surface = MockStateSurface()
        compute_active_states(EMPTY_CONTEXT, surface, DEFAULT_CATALOG)

        assert "undo" not in surface.queries
        assert "clearFormat" not in surface.queries
        assert "indent" not in surface.queries
        assert "bold" in surface.queries

    def test_create_link_from_context(self) -> None:
        """createLink follows the context, not the host."""
        surface = MockStateSurface({"createLink"})

        assert "createLink" not in compute_active_states(EMPTY_CONTEXT, surface, DEFAULT_CATALOG)
        in_link = SelectionContext(nearest_link_node="n9")
        assert "createLink" in compute_active_states(in_link, surface, DEFAULT_CATALOG)

    def test_history_and_clear_never_active(self) -> None:
        """Even with a predicate that always holds."""

        def always(*_args: Any) -> bool:
            return True

        catalog = CommandCatalog(
            [
                Command("undo", CommandKind.HISTORY, active_when=always),
                Command("clearFormat", CommandKind.CLEAR, active_when=always),
                Command("bold", CommandKind.INLINE_STYLE, active_when=always),
            ]
        )
        active = compute_active_states(EMPTY_CONTEXT, MockStateSurface(), catalog)

        assert active.as_list() == ["bold"]

    def test_custom_command_with_predicate(self) -> None:
        """New commands join the set by registering a predicate."""

        def in_heading(context: SelectionContext, surface: Any, name: str) -> bool:
            return context.in_heading

        catalog = DEFAULT_CATALOG.extend(
            [Command("headingStyle", CommandKind.BLOCK_FORMAT, active_when=in_heading)]
        )
        context = SelectionContext(current_block_tag="h2")
        active = compute_active_states(context, MockStateSurface(), catalog)

        assert "headingStyle" in active
        assert "h2" in active


# --- Inference Against In-Memory Host ---


class TestWithInMemorySurface:
    """Test active states reflect the cursor on a real host."""

    def test_bold_follows_cursor(self) -> None:
        """Moving the caret out of bold text clears bold."""
        surface = InMemorySurface("<p><b>Bold</b> plain</p>")
        surface.cursor_in("Bold")
        assert "bold" in run_compute(ComputeActiveStatesInput(), surface)

        surface.cursor_in("plain")
        assert "bold" not in run_compute(ComputeActiveStatesInput(), surface)

    def test_mixed_range_is_not_bold(self) -> None:
        """A range is bold only when every run is."""
        surface = InMemorySurface("<p><b>Bold</b> plain</p>")
        surface.select_all()

        assert "bold" not in run_compute(ComputeActiveStatesInput(), surface)

    def test_heading_pseudo_name(self) -> None:
        surface = InMemorySurface("<h2>Heading</h2>")
        active = run_compute(ComputeActiveStatesInput(), surface)

        assert "h2" in active
        assert "h1" not in active

    def test_blockquote_pseudo_name(self) -> None:
        surface = InMemorySurface("<blockquote><p>Quoted</p></blockquote>")

        assert "blockquote" in run_compute(ComputeActiveStatesInput(), surface)

    def test_ordered_list(self) -> None:
        surface = InMemorySurface("<ol><li>One</li></ol>")
        active = run_compute(ComputeActiveStatesInput(), surface)

        assert "insertOrderedList" in active
        assert "insertUnorderedList" not in active

    @pytest.mark.parametrize(
        "align,expected",
        [
            ("left", "justifyLeft"),
            ("center", "justifyCenter"),
            ("right", "justifyRight"),
        ],
    )
    def test_alignment(self, align: str, expected: str) -> None:
        surface = InMemorySurface(f'<p style="text-align: {align}">Text</p>')
        active = run_compute(ComputeActiveStatesInput(), surface)

        assert expected in active
        others = {"justifyLeft", "justifyCenter", "justifyRight"} - {expected}
        assert not any(name in active for name in others)

    def test_unaligned_block_is_left(self) -> None:
        """No explicit alignment reads as left."""
        surface = InMemorySurface("<p>Text</p>")

        assert "justifyLeft" in run_compute(ComputeActiveStatesInput(), surface)

    def test_explicit_context_is_used(self) -> None:
        """A supplied context drives the synthetic names."""
        surface = InMemorySurface("<p>Text</p>")
        active = run_compute(
            ComputeActiveStatesInput(context=SelectionContext(current_block_tag="h5")), surface
        )

        assert "h5" in active


# --- Snapshot Tests ---


class TestCaptureSnapshot:
    """Test the combined snapshot."""

    def test_fresh_surface_snapshot(self) -> None:
        """A freshly loaded document has no history."""
        surface = InMemorySurface("<h1>Title</h1>")
        snapshot = capture_snapshot(surface)

        assert snapshot.context.current_block_tag == "h1"
        assert "h1" in snapshot.active
        assert snapshot.history.can_undo is False
        assert snapshot.history.can_redo is False

    def test_snapshot_after_mutation(self) -> None:
        surface = InMemorySurface("<p>Some text</p>")
        surface.select_matching("Some")
        surface.exec_command("bold")
        snapshot = capture_snapshot(surface)

        assert "bold" in snapshot.active
        assert snapshot.history.can_undo is True
