"""
In-memory host surface (HostSurfacePort implementation).

A complete editable surface without a renderer: a DocNode tree, a
selection, native formatting commands in the execCommand tradition and a
command-log snapshot stack for undo/redo.

Used by the API and CLI shells and by tests. A browser or toolkit host
would implement the same port against its own document.

Key behaviors:
- Inline styles toggle as marks on text runs; a collapsed caret toggles
  a pending typing state applied by type_text instead
- Every mutating call records exactly one undo entry; no-ops record none
- replace_content discards history (like assigning innerHTML)
- Selections hold node ids and offsets only
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from editcore.core.ports.surface import (
    NodeNotFoundError,
    NodeRef,
    RawSelection,
    SurfaceError,
)
from editcore.domain.document import (
    BLOCKQUOTE,
    CONTAINER_KINDS,
    HEADINGS,
    IMAGE,
    LINK,
    LIST_ITEM,
    LIST_KINDS,
    PARAGRAPH,
    TEXTBLOCK_KINDS,
    DocNode,
    Document,
    parse_markup,
    render_markup,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 200

INLINE_MARKS: dict[str, str] = {
    "bold": "b",
    "italic": "i",
    "underline": "u",
    "strikeThrough": "s",
    "superscript": "sup",
    "subscript": "sub",
}

EXCLUSIVE_MARKS: dict[str, str] = {"sup": "sub", "sub": "sup"}

ALIGNMENTS: dict[str, str] = {
    "justifyLeft": "left",
    "justifyCenter": "center",
    "justifyRight": "right",
    "justifyFull": "justify",
}

LIST_COMMANDS: dict[str, str] = {
    "insertOrderedList": "ol",
    "insertUnorderedList": "ul",
}

COLOR_MARKS: dict[str, str] = {
    "foreColor": "color",
    "hiliteColor": "background",
    "backColor": "background",
}

FORMAT_BLOCK_TAGS: frozenset[str] = HEADINGS | {PARAGRAPH, BLOCKQUOTE}


class TextNotFoundError(SurfaceError):
    """Raised when a text search over the document finds nothing."""

    def __init__(self, needle: str) -> None:
        self.needle = needle
        super().__init__(f"Text not found: {needle!r}")


@dataclass
class _Selection:
    """Caret, text range or whole-node selection, by id and offset."""

    start_id: str
    start_offset: int = 0
    end_id: str | None = None
    end_offset: int = 0
    whole_node: bool = False

    @property
    def collapsed(self) -> bool:
        return self.end_id is None and not self.whole_node


_Snapshot = tuple[DocNode, _Selection]


class InMemorySurface:
    """
    Editable surface backed by a DocNode tree.

    Implements HostSurfacePort.
    """

    def __init__(self, markup: str = "", *, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._doc = Document()
        self._selection = _Selection(self._doc.root.node_id)
        self._pending: dict[str, str | None] = {}
        self._undo: list[_Snapshot] = []
        self._redo: list[_Snapshot] = []
        self._history_limit = history_limit
        self.focus_count = 0

        self._commands: dict[str, Callable[[str | None], bool]] = {
            "formatBlock": self._format_block,
            "createLink": self._create_link,
            "unlink": lambda _value: self._unlink(),
            "insertImage": self._insert_image,
            "removeFormat": lambda _value: self._remove_format(),
        }
        for name, mark in INLINE_MARKS.items():
            self._commands[name] = lambda _value, mark=mark: self._toggle_mark(mark)
        for name, align in ALIGNMENTS.items():
            self._commands[name] = lambda _value, align=align: self._justify(align)
        for name, kind in LIST_COMMANDS.items():
            self._commands[name] = lambda _value, kind=kind: self._toggle_list(kind)
        for name, mark in COLOR_MARKS.items():
            self._commands[name] = lambda value, mark=mark: self._set_color(mark, value)

        self.replace_content(markup)

    # --- HostSurfacePort: commands ---

    def exec_command(self, name: str, value: str | None = None) -> bool:
        handler = self._commands.get(name)
        if handler is None:
            logger.debug("Unsupported native command: %s", name)
            return False
        accepted = handler(value)
        logger.debug("exec_command %s(%r) -> %s", name, value, accepted)
        return accepted

    def query_command_state(self, name: str) -> bool:
        if name in INLINE_MARKS:
            return self._mark_active(INLINE_MARKS[name])

        if name in ALIGNMENTS:
            blocks = self._touched_textblocks()
            if not blocks:
                return False
            align = blocks[0].style.get("text-align")
            if name == "justifyLeft":
                return align in (None, "left", "start")
            return align == ALIGNMENTS[name]

        if name in LIST_COMMANDS:
            blocks = self._touched_textblocks()
            if not blocks or blocks[0].kind != LIST_ITEM:
                return False
            parent = blocks[0].parent
            return parent is not None and parent.kind == LIST_COMMANDS[name]

        return False

    def query_block_tag(self) -> str:
        blocks = self._touched_textblocks()
        if blocks and blocks[0].kind in HEADINGS | {PARAGRAPH}:
            return blocks[0].kind
        return ""

    # --- HostSurfacePort: history ---

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> None:
        if not self._undo:
            return
        self._redo.append(self._capture())
        self._restore(self._undo.pop())

    def redo(self) -> None:
        if not self._redo:
            return
        self._undo.append(self._capture())
        self._restore(self._redo.pop())

    # --- HostSurfacePort: selection and content ---

    def get_selection(self) -> RawSelection:
        anchor = self._doc.find(self._selection.start_id)
        if anchor is None or anchor is self._doc.root:
            return RawSelection()

        if self._selection.whole_node:
            intersecting = [anchor, *anchor.leaves()]
        else:
            intersecting = self._range_leaves()

        return RawSelection(
            anchor=_ref(anchor),
            ancestors=tuple(_ref(a) for a in anchor.ancestors()),
            intersecting=tuple(_ref(n) for n in intersecting),
            collapsed=self._selection.collapsed,
        )

    def replace_content(self, markup: str) -> None:
        root = parse_markup(markup, self._doc)
        if not any(n.kind in TEXTBLOCK_KINDS for n in root.walk()):
            root.append(self._doc.new_node(PARAGRAPH))
        self._doc.root = root
        self._undo.clear()
        self._redo.clear()
        self._pending.clear()
        self._caret_at_start()

    def get_content(self) -> str:
        return render_markup(self._doc.root)

    def focus(self) -> None:
        self.focus_count += 1

    # --- HostSurfacePort: direct styles and metadata ---

    def get_style(self, node_id: str, prop: str) -> str | None:
        return self._node(node_id).style.get(prop)

    def set_styles(self, node_id: str, styles: Mapping[str, str | None]) -> None:
        node = self._node(node_id)
        changes = {k: v for k, v in styles.items() if node.style.get(k) != v}
        if not changes:
            return
        before = self._capture()
        for prop, value in changes.items():
            if value is None:
                node.style.pop(prop, None)
            else:
                node.style[prop] = value
        self._commit(before)

    def find_descendants(self, node_id: str, kind: str) -> tuple[NodeRef, ...]:
        return tuple(_ref(n) for n in self._node(node_id).walk() if n.kind == kind)

    def set_metadata(self, node_id: str, key: str, value: Mapping[str, Any]) -> None:
        self._node(node_id).metadata[key] = dict(value)

    def get_metadata(self, node_id: str, key: str) -> Mapping[str, Any] | None:
        value = self._node(node_id).metadata.get(key)
        return dict(value) if value is not None else None

    # --- Selection API (UI / test side) ---

    def place_cursor(self, node_id: str, offset: int = 0) -> None:
        node = self._node(node_id)
        if node.is_text:
            offset = max(0, min(offset, len(node.text)))
        self._select(_Selection(node_id, offset))

    def select_text(
        self,
        node_id: str,
        start: int,
        end: int,
        end_node_id: str | None = None,
    ) -> None:
        first = self._text_node(node_id)
        last = self._text_node(end_node_id or node_id)
        start = max(0, min(start, len(first.text)))
        end = max(0, min(end, len(last.text)))

        if first is last:
            if start == end:
                self._select(_Selection(first.node_id, start))
                return
            start, end = min(start, end), max(start, end)
        elif self._leaf_index(first) > self._leaf_index(last):
            first, last, start, end = last, first, end, start

        self._select(_Selection(first.node_id, start, last.node_id, end))

    def select_node(self, node_id: str) -> None:
        self._node(node_id)
        self._select(_Selection(node_id, whole_node=True))

    def select_all(self) -> None:
        texts = self._doc.text_nodes()
        if not texts:
            self._caret_at_start()
            return
        self.select_text(texts[0].node_id, 0, len(texts[-1].text), texts[-1].node_id)

    def find_text(self, needle: str) -> tuple[str, int]:
        """
        Locate the first text run containing needle.

        Returns:
            Tuple of (node_id, offset).

        Raises:
            TextNotFoundError: If no run contains needle.
        """
        for node in self._doc.text_nodes():
            offset = node.text.find(needle)
            if needle and offset >= 0:
                return node.node_id, offset
        raise TextNotFoundError(needle)

    def select_matching(self, needle: str) -> None:
        node_id, offset = self.find_text(needle)
        self.select_text(node_id, offset, offset + len(needle))

    def cursor_in(self, needle: str) -> None:
        node_id, offset = self.find_text(needle)
        self.place_cursor(node_id, offset)

    def type_text(self, text: str) -> None:
        """Insert text at the selection with the current typing state."""
        if not text:
            return
        before = self._capture()

        runs = [] if self._selection.collapsed else self._selected_runs()
        if runs:
            typed = self._doc.new_text(text, runs[0].marks)
            assert runs[0].parent is not None
            runs[0].parent.insert(runs[0].index(), typed)
            for run in runs:
                run.detach()
        else:
            marks = self._effective_marks()
            anchor = self._anchor()
            if anchor.is_text and not self._pending:
                offset = self._selection.start_offset
                anchor.text = anchor.text[:offset] + text + anchor.text[offset:]
                self._selection = _Selection(anchor.node_id, offset + len(text))
                self._commit(before)
                return
            typed = self._doc.new_text(text, marks)
            self._insert_at_caret(typed)

        self._selection = _Selection(typed.node_id, len(text))
        self._pending.clear()
        self._commit(before)

    def node_text(self, node_id: str) -> str:
        return self._node(node_id).text_content()

    def node_kind(self, node_id: str) -> str:
        return self._node(node_id).kind

    # --- Native command handlers ---

    def _toggle_mark(self, mark: str) -> bool:
        if self._selection.collapsed:
            if mark in self._effective_marks():
                self._pending[mark] = None
            else:
                self._pending[mark] = ""
                if mark in EXCLUSIVE_MARKS:
                    self._pending[EXCLUSIVE_MARKS[mark]] = None
            return True

        before = self._capture()
        runs = self._selected_runs()
        if not runs:
            self._restore(before)
            return False
        active = all(mark in run.marks for run in runs)
        for run in runs:
            if active:
                run.marks.pop(mark, None)
            else:
                run.marks[mark] = ""
                if mark in EXCLUSIVE_MARKS:
                    run.marks.pop(EXCLUSIVE_MARKS[mark], None)
        self._commit(before)
        return True

    def _set_color(self, mark: str, value: str | None) -> bool:
        if not value:
            return False
        if self._selection.collapsed:
            self._pending[mark] = value
            return True

        before = self._capture()
        runs = self._selected_runs()
        if not runs:
            self._restore(before)
            return False
        for run in runs:
            run.marks[mark] = value
        self._commit(before)
        return True

    def _remove_format(self) -> bool:
        if self._selection.collapsed:
            self._pending = {mark: None for mark in self._effective_marks()}
            return True

        before = self._capture()
        runs = self._selected_runs()
        if not any(run.marks for run in runs):
            self._restore(before)
            return False
        for run in runs:
            run.marks.clear()
        self._commit(before)
        return True

    def _format_block(self, value: str | None) -> bool:
        tag = (value or "").strip().strip("<>").lower()
        if tag not in FORMAT_BLOCK_TAGS:
            return False
        blocks = self._touched_textblocks()
        if not blocks:
            return False

        before = self._capture()
        if tag == BLOCKQUOTE:
            changed = self._wrap_in_blockquote(blocks)
        else:
            changed = False
            for block in blocks:
                if block.kind == LIST_ITEM:
                    self._lift_list_item(block)
                if block.kind != tag:
                    block.kind = tag
                    changed = True
        if changed:
            self._commit(before)
        return changed

    def _justify(self, align: str) -> bool:
        blocks = self._touched_textblocks()
        if not blocks:
            return False
        if all(b.style.get("text-align") == align for b in blocks):
            return True
        before = self._capture()
        for block in blocks:
            block.style["text-align"] = align
        self._commit(before)
        return True

    def _toggle_list(self, kind: str) -> bool:
        blocks = self._touched_textblocks()
        if not blocks:
            return False

        before = self._capture()
        items = [b for b in blocks if b.kind == LIST_ITEM]
        if len(items) == len(blocks):
            parents = _unique(b.parent for b in items if b.parent is not None)
            if all(p.kind == kind for p in parents):
                for item in items:
                    self._lift_list_item(item)
            else:
                for parent in parents:
                    parent.kind = kind
            self._commit(before)
            return True

        for block in blocks:
            if block.kind == LIST_ITEM:
                continue
            assert block.parent is not None
            position = block.index()
            previous = block.parent.children[position - 1] if position > 0 else None
            if previous is not None and previous.kind == kind:
                previous.append(block)
            else:
                wrapper = self._doc.new_node(kind)
                block.parent.insert(position, wrapper)
                wrapper.append(block)
            block.kind = LIST_ITEM
        self._commit(before)
        return True

    def _create_link(self, url: str | None) -> bool:
        if not url:
            return False
        before = self._capture()

        if self._selection.collapsed:
            link = self._doc.new_node(LINK, attrs={"href": url})
            label = self._doc.new_text(url, self._effective_marks())
            link.append(label)
            self._insert_at_caret(link)
            self._selection = _Selection(label.node_id, 0, label.node_id, len(url))
            self._pending.clear()
            self._commit(before)
            return True

        anchor = self._anchor()
        if self._selection.whole_node and anchor.kind == IMAGE:
            existing = anchor.closest({LINK})
            if existing is not None:
                existing.attrs["href"] = url
            else:
                self._wrap([anchor], LINK, {"href": url})
            self._commit(before)
            return True

        runs = self._selected_runs()
        if not runs:
            return False
        loose: list[DocNode] = []
        for run in runs:
            existing = run.closest({LINK})
            if existing is not None:
                existing.attrs["href"] = url
            else:
                loose.append(run)
        for group in _sibling_groups(loose):
            self._wrap(group, LINK, {"href": url})
        self._commit(before)
        return True

    def _unlink(self) -> bool:
        anchor = self._anchor()
        if self._selection.collapsed:
            candidates = [anchor]
        elif self._selection.whole_node:
            candidates = [anchor, *anchor.walk()]
        else:
            candidates = self._range_leaves()

        links = _unique(n.closest({LINK}) for n in candidates)
        if not links:
            return False
        before = self._capture()
        for link in links:
            moved = link.unwrap()
            if self._selection.start_id == link.node_id and moved:
                self._selection = _Selection(moved[0].node_id)
        self._commit(before)
        return True

    def _insert_image(self, src: str | None) -> bool:
        if not src:
            return False
        before = self._capture()
        image = self._doc.new_node(IMAGE, attrs={"src": src})

        runs = [] if self._selection.collapsed else self._selected_runs()
        if runs:
            assert runs[0].parent is not None
            runs[0].parent.insert(runs[0].index(), image)
            for run in runs:
                run.detach()
        elif self._selection.whole_node:
            anchor = self._anchor()
            if anchor.kind in TEXTBLOCK_KINDS:
                anchor.append(image)
            else:
                anchor.insert_after(image)
        else:
            self._insert_at_caret(image)

        self._selection = _Selection(image.node_id)
        self._commit(before)
        return True

    # --- Tree helpers ---

    def _wrap(self, nodes: list[DocNode], kind: str, attrs: dict[str, str]) -> DocNode:
        first = nodes[0]
        assert first.parent is not None
        wrapper = self._doc.new_node(kind, attrs=dict(attrs))
        first.parent.insert(first.index(), wrapper)
        for node in nodes:
            wrapper.append(node)
        return wrapper

    def _wrap_in_blockquote(self, blocks: list[DocNode]) -> bool:
        tops: list[DocNode] = []
        for block in blocks:
            if block.closest({BLOCKQUOTE}) is not None:
                continue
            top = block
            while top.parent is not None and top.parent.kind in LIST_KINDS | {LIST_ITEM}:
                top = top.parent
            if not any(t is top for t in tops):
                tops.append(top)
        for group in _sibling_groups(tops):
            self._wrap(group, BLOCKQUOTE, {})
        return bool(tops)

    def _lift_list_item(self, item: DocNode) -> DocNode:
        """Move a list item out of its list as a paragraph, splitting the list."""
        owner = item.parent
        assert owner is not None
        tail = owner.children[item.index() + 1 :]

        item.detach()
        item.kind = PARAGRAPH
        owner.insert_after(item)
        if tail:
            rest = self._doc.new_node(owner.kind, style=dict(owner.style))
            for node in tail:
                rest.append(node)
            item.insert_after(rest)
        if not owner.children:
            owner.detach()
        return item

    def _split_at(self, node: DocNode, offset: int) -> DocNode | None:
        """Split a text run; returns the new right-hand run, if any."""
        if offset <= 0 or offset >= len(node.text):
            return None
        right = self._doc.new_text(node.text[offset:], node.marks)
        node.text = node.text[:offset]
        node.insert_after(right)
        return right

    def _insert_at_caret(self, node: DocNode) -> None:
        anchor = self._anchor()
        offset = self._selection.start_offset

        if anchor.is_text:
            assert anchor.parent is not None
            if offset <= 0:
                anchor.parent.insert(anchor.index(), node)
            else:
                self._split_at(anchor, offset)
                anchor.insert_after(node)
            return

        if anchor.kind == IMAGE:
            anchor.insert_after(node)
            return

        target = anchor if anchor.kind in TEXTBLOCK_KINDS | {LINK} else None
        if target is None:
            target = next((n for n in anchor.walk() if n.kind in TEXTBLOCK_KINDS), None)
        if target is None:
            target = self._doc.new_node(PARAGRAPH)
            anchor.append(target)
        target.insert(min(offset, len(target.children)), node)

    # --- Selection helpers ---

    def _select(self, selection: _Selection) -> None:
        self._selection = selection
        self._pending.clear()

    def _caret_at_start(self) -> None:
        texts = self._doc.text_nodes()
        if texts:
            self._selection = _Selection(texts[0].node_id)
            return
        blocks = self._doc.textblocks()
        target = blocks[0] if blocks else self._doc.root
        self._selection = _Selection(target.node_id)

    def _anchor(self) -> DocNode:
        node = self._doc.find(self._selection.start_id)
        if node is None:
            self._caret_at_start()
            node = self._node(self._selection.start_id)
        return node

    def _node(self, node_id: str) -> DocNode:
        node = self._doc.find(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def _text_node(self, node_id: str) -> DocNode:
        node = self._node(node_id)
        if not node.is_text:
            raise SurfaceError(f"Node {node_id} is not a text run")
        return node

    def _leaf_index(self, node: DocNode) -> int:
        for i, leaf in enumerate(self._doc.leaves()):
            if leaf is node:
                return i
        return -1

    def _range_leaves(self) -> list[DocNode]:
        """Leaves covered by a text range, without splitting."""
        sel = self._selection
        if sel.end_id is None:
            return []
        leaves = self._doc.leaves()
        ids = [leaf.node_id for leaf in leaves]
        if sel.start_id not in ids or sel.end_id not in ids:
            return []
        first, last = ids.index(sel.start_id), ids.index(sel.end_id)
        covered = leaves[first : last + 1]
        if covered and covered[0].is_text and sel.start_offset >= len(covered[0].text):
            covered = covered[1:] if len(covered) > 1 else []
        if len(covered) > 1 and covered[-1].is_text and sel.end_offset <= 0:
            covered = covered[:-1]
        return covered

    def _selected_runs(self) -> list[DocNode]:
        """
        Text runs covered by the selection, split at the range boundaries.

        Narrows the selection to exactly the returned runs.
        """
        sel = self._selection
        if sel.whole_node:
            anchor = self._anchor()
            return [anchor] if anchor.is_text else [n for n in anchor.walk() if n.is_text]
        if sel.end_id is None:
            return []

        first = self._doc.find(sel.start_id)
        last = self._doc.find(sel.end_id)
        if first is None or last is None:
            return []

        if first is last:
            self._split_at(first, sel.end_offset)
            middle = self._split_at(first, sel.start_offset)
            runs = [middle or first]
        else:
            self._split_at(last, sel.end_offset)
            if sel.start_offset <= 0:
                head: DocNode | None = first
            elif sel.start_offset >= len(first.text):
                head = None
            else:
                head = self._split_at(first, sel.start_offset)
            leaves = self._doc.leaves()
            begin = _position(leaves, head) if head is not None else _position(leaves, first) + 1
            finish = _position(leaves, last)
            if sel.end_offset <= 0:
                finish -= 1
            runs = [leaf for leaf in leaves[begin : finish + 1] if leaf.is_text]

        runs = [run for run in runs if run.text]
        if runs:
            self._selection = _Selection(runs[0].node_id, 0, runs[-1].node_id, len(runs[-1].text))
        return runs

    def _touched_textblocks(self) -> list[DocNode]:
        sel = self._selection
        anchor = self._doc.find(sel.start_id)
        if anchor is None:
            return []

        if sel.whole_node and anchor.kind in CONTAINER_KINDS:
            nodes = [n for n in anchor.walk() if n.kind in TEXTBLOCK_KINDS]
        elif sel.end_id is not None:
            nodes = [leaf.closest(TEXTBLOCK_KINDS) for leaf in self._range_leaves()] or [
                anchor.closest(TEXTBLOCK_KINDS)
            ]
        else:
            block = anchor.closest(TEXTBLOCK_KINDS)
            if block is None:
                block = next((n for n in anchor.walk() if n.kind in TEXTBLOCK_KINDS), None)
            nodes = [block]
        return _unique(nodes)

    def _effective_marks(self) -> dict[str, str]:
        anchor = self._doc.find(self._selection.start_id)
        marks = dict(anchor.marks) if anchor is not None and anchor.is_text else {}
        for mark, value in self._pending.items():
            if value is None:
                marks.pop(mark, None)
            else:
                marks[mark] = value
        return marks

    def _mark_active(self, mark: str) -> bool:
        if self._selection.collapsed:
            return mark in self._effective_marks()
        if self._selection.whole_node:
            anchor = self._anchor()
            runs = [anchor] if anchor.is_text else [n for n in anchor.walk() if n.is_text]
        else:
            runs = [leaf for leaf in self._range_leaves() if leaf.is_text]
        return bool(runs) and all(mark in run.marks for run in runs)

    # --- History helpers ---

    def _capture(self) -> _Snapshot:
        return copy.deepcopy(self._doc.root), replace(self._selection)

    def _restore(self, snapshot: _Snapshot) -> None:
        root, selection = snapshot
        self._doc.root = root
        self._selection = selection
        self._pending.clear()

    def _commit(self, before: _Snapshot) -> None:
        self._undo.append(before)
        if len(self._undo) > self._history_limit:
            del self._undo[0]
        self._redo.clear()


# --- Module helpers ---


def _ref(node: DocNode) -> NodeRef:
    return NodeRef(node_id=node.node_id, kind=node.kind)


def _position(nodes: list[DocNode], node: DocNode) -> int:
    for i, candidate in enumerate(nodes):
        if candidate is node:
            return i
    raise ValueError(f"{node.node_id} not in sequence")


def _unique(nodes: Any) -> list[DocNode]:
    seen: list[DocNode] = []
    for node in nodes:
        if node is not None and not any(node is s for s in seen):
            seen.append(node)
    return seen


def _sibling_groups(nodes: list[DocNode]) -> list[list[DocNode]]:
    """Split nodes into runs of adjacent siblings."""
    groups: list[list[DocNode]] = []
    for node in nodes:
        if groups:
            previous = groups[-1][-1]
            if previous.parent is node.parent and previous.index() + 1 == node.index():
                groups[-1].append(node)
                continue
        groups.append([node])
    return groups
