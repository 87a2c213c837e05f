"""Ordered selector strategies.

A field is recovered by trying strategies in order and keeping the first
non-empty result. Strategies are plain callables taking the node to search.
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

from itchmeta.scrapers.document import Node
from itchmeta.utils import ITCHIO_BASE_URL, absolute_url, collapse_whitespace

T = TypeVar("T")


def first_match(strategies: Iterable[Callable[[Node], T | None]], root: Node) -> T | None:
    """Return the first truthy strategy result, or ``None`` when all miss."""
    for strategy in strategies:
        value = strategy(root)
        if value:
            return value
    return None


def css_node(selector: str) -> Callable[[Node], Node | None]:
    return lambda root: root.select_one(selector)


def css_nodes(selector: str) -> Callable[[Node], list[Node]]:
    return lambda root: root.select(selector)


def css_text(selector: str) -> Callable[[Node], str | None]:
    """Whitespace-collapsed text of the first node matching *selector*."""

    def strategy(root: Node) -> str | None:
        node = root.select_one(selector)
        return collapse_whitespace(node.text) if node is not None else None

    return strategy


def css_attr(selector: str, *names: str) -> Callable[[Node], str | None]:
    """First non-empty attribute among *names* on the first node matching *selector*."""

    def strategy(root: Node) -> str | None:
        node = root.select_one(selector)
        return node_attr(node, *names) if node is not None else None

    return strategy


def node_attr(node: Node, *names: str) -> str | None:
    for name in names:
        value = (node.attr(name) or "").strip()
        if value:
            return value
    return None


def css_url(selector: str, *names: str, base: str = ITCHIO_BASE_URL) -> Callable[[Node], str | None]:
    """First attribute among *names* that makes a usable absolute URL.

    Placeholders such as ``data:`` sources count as a miss, so the cascade
    moves on to the next strategy.
    """

    def strategy(root: Node) -> str | None:
        node = root.select_one(selector)
        if node is None:
            return None
        for name in names:
            url = absolute_url(node.attr(name), base)
            if url:
                return url
        return None

    return strategy
