"""
Document tree for the in-memory host surface.

Block containers hold text runs, anchors and images. Inline formatting is
kept as marks on text runs (ProseMirror style) rather than as nested
wrapper elements, so toggling a style never has to split elements. Anchors
stay real nodes because link metadata is attached to them.

Markup is parsed with BeautifulSoup and rendered back to plain HTML.
"""

from __future__ import annotations

import html
import itertools
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

# --- Node Kinds ---

ROOT_KIND = "body"
TEXT = "#text"
IMAGE = "img"
LINK = "a"
PARAGRAPH = "p"
HEADINGS: frozenset[str] = frozenset(f"h{level}" for level in range(1, 7))
LIST_ITEM = "li"
LIST_KINDS: frozenset[str] = frozenset({"ul", "ol"})
BLOCKQUOTE = "blockquote"

TEXTBLOCK_KINDS: frozenset[str] = HEADINGS | {PARAGRAPH, LIST_ITEM}
CONTAINER_KINDS: frozenset[str] = LIST_KINDS | {BLOCKQUOTE}
BLOCK_KINDS: frozenset[str] = TEXTBLOCK_KINDS | CONTAINER_KINDS

# --- Marks ---

# Render order, outermost first.
MARK_ORDER: tuple[str, ...] = ("b", "i", "u", "s", "sup", "sub", "color", "background")

# Marks rendered as a styled span instead of their own tag.
STYLE_MARKS: dict[str, str] = {
    "color": "color",
    "background": "background-color",
}

TAG_TO_MARK: dict[str, str] = {
    "b": "b",
    "strong": "b",
    "i": "i",
    "em": "i",
    "u": "u",
    "ins": "u",
    "s": "s",
    "strike": "s",
    "del": "s",
    "sup": "sup",
    "sub": "sub",
}

_WHITESPACE = re.compile(r"\s+")


# --- Style Helpers ---


def parse_style(value: str | None) -> dict[str, str]:
    """Parse an inline CSS declaration list into a dict."""
    styles: dict[str, str] = {}
    if not value:
        return styles
    for declaration in value.split(";"):
        prop, sep, raw = declaration.partition(":")
        if not sep:
            continue
        prop = prop.strip().lower()
        raw = raw.strip()
        if prop and raw:
            styles[prop] = raw
    return styles


def render_style(styles: dict[str, str]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in styles.items())


# --- Node ---


@dataclass(eq=False)
class DocNode:
    """
    A node in the editable document tree.

    Identity matters (eq=False): two runs with equal text are still
    different nodes, and selections refer to them by node_id.
    """

    kind: str
    node_id: str
    text: str = ""
    marks: dict[str, str] = field(default_factory=dict)
    attrs: dict[str, str] = field(default_factory=dict)
    style: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, dict[str, Any]] = field(default_factory=dict)
    children: list[DocNode] = field(default_factory=list)
    parent: DocNode | None = field(default=None, repr=False)

    @property
    def is_text(self) -> bool:
        return self.kind == TEXT

    @property
    def is_leaf(self) -> bool:
        return self.kind in (TEXT, IMAGE)

    def index(self) -> int:
        """Position among the parent's children."""
        if self.parent is None:
            return 0
        for i, child in enumerate(self.parent.children):
            if child is self:
                return i
        raise ValueError(f"{self.node_id} is not a child of its parent")

    def append(self, child: DocNode) -> None:
        child.detach()
        child.parent = self
        self.children.append(child)

    def insert(self, index: int, child: DocNode) -> None:
        child.detach()
        child.parent = self
        self.children.insert(index, child)

    def insert_after(self, child: DocNode) -> None:
        assert self.parent is not None
        self.parent.insert(self.index() + 1, child)

    def detach(self) -> None:
        if self.parent is not None:
            del self.parent.children[self.index()]
            self.parent = None

    def unwrap(self) -> list[DocNode]:
        """Replace this node with its children; returns the moved children."""
        assert self.parent is not None
        parent, position = self.parent, self.index()
        moved = list(self.children)
        self.detach()
        for offset, child in enumerate(moved):
            parent.insert(position + offset, child)
        return moved

    def ancestors(self) -> Iterator[DocNode]:
        """Ancestors, nearest first, stopping before the root."""
        node = self.parent
        while node is not None and node.kind != ROOT_KIND:
            yield node
            node = node.parent

    def closest(self, kinds: Iterable[str]) -> DocNode | None:
        """This node or its nearest ancestor whose kind is in kinds."""
        wanted = frozenset(kinds)
        if self.kind in wanted:
            return self
        return next((a for a in self.ancestors() if a.kind in wanted), None)

    def walk(self) -> Iterator[DocNode]:
        """Descendants in document order (pre-order), self excluded."""
        for child in self.children:
            yield child
            yield from child.walk()

    def leaves(self) -> list[DocNode]:
        return [node for node in self.walk() if node.is_leaf]

    def text_content(self) -> str:
        if self.is_text:
            return self.text
        return "".join(node.text for node in self.walk() if node.is_text)


class Document:
    """Owns the root node and hands out unique node ids."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.root = self.new_node(ROOT_KIND)

    def new_id(self) -> str:
        return f"n{next(self._ids)}"

    def new_node(self, kind: str, **fields: Any) -> DocNode:
        return DocNode(kind=kind, node_id=self.new_id(), **fields)

    def new_text(self, text: str, marks: dict[str, str] | None = None) -> DocNode:
        return self.new_node(TEXT, text=text, marks=dict(marks or {}))

    def find(self, node_id: str) -> DocNode | None:
        if self.root.node_id == node_id:
            return self.root
        return next((n for n in self.root.walk() if n.node_id == node_id), None)

    def leaves(self) -> list[DocNode]:
        return self.root.leaves()

    def text_nodes(self) -> list[DocNode]:
        return [n for n in self.root.walk() if n.is_text]

    def textblocks(self) -> list[DocNode]:
        return [n for n in self.root.walk() if n.kind in TEXTBLOCK_KINDS]


# --- Parsing ---


class _TreeBuilder:
    """Builds DocNodes from a BeautifulSoup tree."""

    def __init__(self, doc: Document) -> None:
        self._doc = doc

    def build(self, markup: str) -> DocNode:
        soup = BeautifulSoup(markup or "", "html.parser")
        root = self._doc.new_node(ROOT_KIND)
        self._fill_container(soup.contents, root)
        return root

    def _fill_container(self, contents: Iterable[Any], container: DocNode) -> None:
        implicit: DocNode | None = None
        implicit_kind = LIST_ITEM if container.kind in LIST_KINDS else PARAGRAPH

        for item in contents:
            if isinstance(item, Comment):
                continue
            if isinstance(item, Tag) and self._is_block(item):
                implicit = None
                self._add_block(item, container)
                continue
            if isinstance(item, NavigableString) and not str(item).strip():
                continue
            if implicit is None:
                implicit = self._doc.new_node(implicit_kind)
                container.append(implicit)
            self._fill_inline([item], implicit, {})

    def _is_block(self, tag: Tag) -> bool:
        return tag.name in BLOCK_KINDS or tag.name == "div"

    def _add_block(self, tag: Tag, container: DocNode) -> None:
        name = tag.name
        if name == "div":
            if any(isinstance(c, Tag) and self._is_block(c) for c in tag.children):
                self._fill_container(tag.contents, container)
                return
            name = PARAGRAPH

        if name in TEXTBLOCK_KINDS:
            if container.kind in LIST_KINDS and name != LIST_ITEM:
                name = LIST_ITEM
            block = self._doc.new_node(name, style=parse_style(tag.get("style")))
            container.append(block)
            self._fill_inline(tag.contents, block, {})
            return

        block = self._doc.new_node(name, style=parse_style(tag.get("style")))
        container.append(block)
        self._fill_container(tag.contents, block)

    def _fill_inline(
        self,
        contents: Iterable[Any],
        parent: DocNode,
        marks: dict[str, str],
    ) -> None:
        for item in contents:
            if isinstance(item, Comment):
                continue
            if isinstance(item, NavigableString):
                text = _WHITESPACE.sub(" ", str(item))
                if text.strip() or (text and parent.children):
                    parent.append(self._doc.new_text(text, marks))
                continue
            if not isinstance(item, Tag):
                continue

            name = item.name
            if name in TAG_TO_MARK:
                self._fill_inline(item.contents, parent, {**marks, TAG_TO_MARK[name]: ""})
            elif name == IMAGE:
                attrs = {k: str(item.get(k)) for k in ("src", "alt") if item.get(k) is not None}
                image = self._doc.new_node(IMAGE, attrs=attrs, style=parse_style(item.get("style")))
                parent.append(image)
            elif name == LINK:
                attrs = {"href": str(item.get("href", ""))}
                link = self._doc.new_node(LINK, attrs=attrs)
                parent.append(link)
                self._fill_inline(item.contents, link, marks)
            elif name in ("span", "font"):
                self._fill_inline(item.contents, parent, {**marks, **_style_marks(item)})
            elif name == "br":
                continue
            else:
                # Unknown inline or nested block tag: keep its content only.
                self._fill_inline(item.contents, parent, marks)


def _style_marks(tag: Tag) -> dict[str, str]:
    marks: dict[str, str] = {}
    styles = parse_style(tag.get("style"))
    for mark, prop in STYLE_MARKS.items():
        if prop in styles:
            marks[mark] = styles[prop]
    if tag.name == "font" and tag.get("color"):
        marks["color"] = str(tag.get("color"))
    return marks


def parse_markup(markup: str, doc: Document) -> DocNode:
    """Parse markup into a new root node whose ids come from doc."""
    return _TreeBuilder(doc).build(markup)


# --- Rendering ---


def _attr(name: str, value: str) -> str:
    return f' {name}="{html.escape(value, quote=True)}"'


def _render_marked(text: str, marks: dict[str, str]) -> str:
    out = html.escape(text, quote=False)
    for mark in reversed(MARK_ORDER):
        if mark not in marks:
            continue
        if mark in STYLE_MARKS:
            style = f"{STYLE_MARKS[mark]}: {marks[mark]}"
            out = f"<span{_attr('style', style)}>{out}</span>"
        else:
            out = f"<{mark}>{out}</{mark}>"
    return out


def _render_children(children: list[DocNode]) -> str:
    parts: list[str] = []
    run_text = ""
    run_marks: dict[str, str] | None = None

    for child in children:
        if child.is_text:
            if run_marks is not None and child.marks == run_marks:
                run_text += child.text
                continue
            if run_marks is not None:
                parts.append(_render_marked(run_text, run_marks))
            run_text, run_marks = child.text, child.marks
            continue
        if run_marks is not None:
            parts.append(_render_marked(run_text, run_marks))
            run_text, run_marks = "", None
        parts.append(render_node(child))

    if run_marks is not None:
        parts.append(_render_marked(run_text, run_marks))
    return "".join(parts)


def render_node(node: DocNode) -> str:
    if node.is_text:
        return _render_marked(node.text, node.marks)

    attrs = "".join(_attr(k, v) for k, v in node.attrs.items())
    if node.style:
        attrs += _attr("style", render_style(node.style))

    if node.kind == IMAGE:
        return f"<img{attrs}>"
    return f"<{node.kind}{attrs}>{_render_children(node.children)}</{node.kind}>"


def render_markup(root: DocNode) -> str:
    """Serialize the children of a root node as HTML."""
    return _render_children(root.children)
