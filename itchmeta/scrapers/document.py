"""Minimal document-query layer over BeautifulSoup.

Field parsers only talk to :class:`Node`, so the HTML backend can change
without touching the extraction heuristics.
"""

from __future__ import annotations

from typing import Callable, Iterator

from bs4 import BeautifulSoup, NavigableString, Tag

NodePredicate = Callable[["Node"], bool]


class Node:
    """A single element of a parsed HTML document."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Node) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        return f"<Node {self.kind}>"

    @property
    def kind(self) -> str:
        """Lower-case tag name, e.g. ``"a"`` or ``"meta"``."""
        return (self._tag.name or "").lower()

    def attr(self, name: str, default: str | None = None) -> str | None:
        """Attribute value as a string; multi-valued attributes are space-joined."""
        value = self._tag.get(name)
        if value is None:
            return default
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        return value

    @property
    def text(self) -> str:
        """Decoded text of the node and its descendants, trimmed."""
        return self._tag.get_text().strip()

    @property
    def own_text(self) -> str:
        """Text of the node's direct text children only."""
        return "".join(
            str(child) for child in self._tag.children if isinstance(child, NavigableString)
        ).strip()

    @property
    def inner_html(self) -> str:
        return self._tag.decode_contents()

    def select_one(self, selector: str) -> Node | None:
        """First descendant matching a CSS selector, in document order."""
        found = self._tag.select_one(selector)
        return Node(found) if found is not None else None

    def select(self, selector: str) -> list[Node]:
        """All descendants matching a CSS selector, in document order."""
        return [Node(t) for t in self._tag.select(selector)]

    def children(self, kind: str | None = None) -> list[Node]:
        """Direct element children, optionally filtered by tag name."""
        return [
            Node(c)
            for c in self._tag.children
            if isinstance(c, Tag) and (kind is None or c.name == kind)
        ]

    def descendants(self, kind: str | None = None) -> Iterator[Node]:
        for tag in self._tag.find_all(kind or True):
            yield Node(tag)

    def find(self, predicate: NodePredicate, kind: str | None = None) -> Node | None:
        """First descendant for which *predicate* holds."""
        for node in self.descendants(kind):
            if predicate(node):
                return node
        return None


class Document(Node):
    """Root of a parsed HTML document."""

    __slots__ = ()

    @classmethod
    def parse(cls, html: str) -> Document:
        return cls(BeautifulSoup(html, "lxml"))

    @property
    def kind(self) -> str:
        return "#document"
