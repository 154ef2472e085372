"""Compile the sanitizer's extra-allow selector into a node predicate.

Supported syntax is the structural subset of CSS selectors:

- type selectors with ``*`` and ``?`` wildcards (``iframe``, ``h?``, ``*``)
- ``#id``, ``.class`` and attribute selectors
  (``[src]``, ``[type=video]``, ``[href^="https:"]``, ``~= |= ^= $= *=``, ``i`` flag)
- descendant (whitespace), child ``>``, adjacent ``+`` and sibling ``~`` combinators
- comma-separated selector lists

Pseudo-classes and pseudo-elements are not supported and raise
:class:`SelectorError`. Callables are used as-is. Selectors are parsed once and
matched right-to-left against the node's ancestors and preceding siblings.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from .node import Node, NodeKind

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<comb>[>+~])
    |(?P<comma>,)
    |(?P<tag>[A-Za-z*?][A-Za-z0-9_*?-]*)
    |(?P<id>[#]-?[A-Za-z_][\w-]*)
    |(?P<cls>[.]-?[A-Za-z_][\w-]*)
    |(?P<attr>\[\s*(?P<name>[A-Za-z_][\w:.-]*)\s*
        (?:(?P<op>[~|^$*]?=)\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s\]"']+))\s*(?P<flag>[iI])?\s*)?
    \])
    """,
    re.VERBOSE,
)


class SelectorError(ValueError):
    """Raised when a selector string uses syntax outside the supported subset."""


def _glob_match(pattern: str, text: str) -> bool:
    """Match a glob pattern against text.

    Supported wildcards:
    - '*' matches any sequence (including empty)
    - '?' matches any single character
    """

    if pattern == "*":
        return True
    if "*" not in pattern and "?" not in pattern:
        return pattern == text

    p_i = 0
    t_i = 0
    star_i = -1
    match_i = 0

    while t_i < len(text):
        if p_i < len(pattern) and (pattern[p_i] == "?" or pattern[p_i] == text[t_i]):
            p_i += 1
            t_i += 1
            continue

        if p_i < len(pattern) and pattern[p_i] == "*":
            star_i = p_i
            match_i = t_i
            p_i += 1
            continue

        if star_i != -1:
            p_i = star_i + 1
            match_i += 1
            t_i = match_i
            continue

        return False

    while p_i < len(pattern) and pattern[p_i] == "*":
        p_i += 1

    return p_i == len(pattern)


@dataclass(frozen=True, slots=True)
class AttributeTest:
    name: str
    op: str | None = None
    value: str = ""
    ignore_case: bool = False

    def matches(self, node: Node) -> bool:
        actual = node.attributes.get(self.name)
        if actual is None:
            return False
        if self.op is None:
            return True

        expected = self.value
        if self.ignore_case:
            actual = actual.lower()
            expected = expected.lower()

        op = self.op
        if op == "=":
            return actual == expected
        if op == "~=":
            return expected in actual.split()
        if op == "|=":
            return actual == expected or actual.startswith(expected + "-")
        # Empty operands never match the substring operators.
        if not expected:
            return False
        if op == "^=":
            return actual.startswith(expected)
        if op == "$=":
            return actual.endswith(expected)
        return expected in actual


@dataclass(frozen=True, slots=True)
class Compound:
    """One compound selector and the combinator linking it to the compound on its left."""

    combinator: str | None = None
    tag: str = "*"
    ids: tuple[str, ...] = ()
    classes: tuple[str, ...] = ()
    attributes: tuple[AttributeTest, ...] = ()

    def matches(self, node: Node) -> bool:
        if node.kind is not NodeKind.ELEMENT:
            return False
        if not _glob_match(self.tag, node.tag_name.lower()):
            return False
        if any(node.attributes.get("id") != wanted for wanted in self.ids):
            return False
        if self.classes:
            have = (node.attributes.get("class") or "").split()
            if not all(name in have for name in self.classes):
                return False
        return all(test.matches(node) for test in self.attributes)


ComplexSelector = tuple[Compound, ...]


class _CompoundBuilder:
    __slots__ = ("attributes", "classes", "combinator", "ids", "tag")

    def __init__(self, combinator: str | None) -> None:
        self.combinator = combinator
        self.tag = "*"
        self.ids: list[str] = []
        self.classes: list[str] = []
        self.attributes: list[AttributeTest] = []

    def add(self, kind: str, match: re.Match[str]) -> None:
        if kind == "tag":
            self.tag = match.group("tag").lower()
        elif kind == "id":
            self.ids.append(match.group("id")[1:])
        elif kind == "cls":
            self.classes.append(match.group("cls")[1:])
        else:
            value = match.group("dq")
            if value is None:
                value = match.group("sq")
            if value is None:
                value = match.group("bare") or ""
            self.attributes.append(
                AttributeTest(
                    name=match.group("name").lower(),
                    op=match.group("op"),
                    value=value,
                    ignore_case=match.group("flag") is not None,
                )
            )

    def build(self) -> Compound:
        return Compound(
            combinator=self.combinator,
            tag=self.tag,
            ids=tuple(self.ids),
            classes=tuple(self.classes),
            attributes=tuple(self.attributes),
        )


def parse_selector(selector: str) -> tuple[ComplexSelector, ...]:
    """Parse a selector list into complex selectors (compounds in left-to-right order)."""
    groups: list[ComplexSelector] = []
    parts: list[Compound] = []
    builder: _CompoundBuilder | None = None
    pending: str | None = None
    gap = False

    pos = 0
    while pos < len(selector):
        match = _TOKEN_RE.match(selector, pos)
        if match is None:
            msg = f"Unsupported selector syntax at position {pos}: {selector!r}"
            raise SelectorError(msg)
        pos = match.end()
        kind = match.lastgroup

        if kind == "ws":
            gap = True
            continue

        if kind in ("comb", "comma"):
            if builder is None:
                msg = f"Expected a selector before {match.group(0)!r}: {selector!r}"
                raise SelectorError(msg)
            parts.append(builder.build())
            builder = None
            gap = False
            if kind == "comma":
                groups.append(tuple(parts))
                parts = []
                pending = None
            else:
                pending = match.group("comb")
            continue

        if builder is not None and gap:
            parts.append(builder.build())
            builder = None
            pending = " "
        if builder is None:
            builder = _CompoundBuilder(pending if parts else None)
            pending = None
        elif kind == "tag":
            msg = f"Type selector must come first in a compound: {selector!r}"
            raise SelectorError(msg)
        builder.add(kind, match)
        gap = False

    if builder is None:
        msg = f"Selector ends without a compound: {selector!r}"
        raise SelectorError(msg)
    parts.append(builder.build())
    groups.append(tuple(parts))
    return tuple(groups)


def _parent_element(node: Node) -> Node | None:
    parent = node.parent
    if parent is not None and parent.kind is NodeKind.ELEMENT:
        return parent
    return None


def _previous_element(node: Node) -> Node | None:
    sibling = node.previous_sibling
    while sibling is not None and sibling.kind is not NodeKind.ELEMENT:
        sibling = sibling.previous_sibling
    return sibling


def _matches_from(parts: ComplexSelector, index: int, node: Node) -> bool:
    # Recursion depth is bounded by the number of compounds, not by the tree.
    compound = parts[index]
    if not compound.matches(node):
        return False
    if index == 0:
        return True

    combinator = compound.combinator
    if combinator == ">":
        parent = _parent_element(node)
        return parent is not None and _matches_from(parts, index - 1, parent)
    if combinator == "+":
        sibling = _previous_element(node)
        return sibling is not None and _matches_from(parts, index - 1, sibling)
    if combinator == "~":
        sibling = _previous_element(node)
        while sibling is not None:
            if _matches_from(parts, index - 1, sibling):
                return True
            sibling = _previous_element(sibling)
        return False

    ancestor = _parent_element(node)
    while ancestor is not None:
        if _matches_from(parts, index - 1, ancestor):
            return True
        ancestor = _parent_element(ancestor)
    return False


def compile_selector(selector: str | Callable[[Node], bool] | None) -> Callable[[Node], bool] | None:
    """Return a predicate that is True for element nodes matching `selector`."""
    if selector is None:
        return None
    if callable(selector):
        return selector
    if not isinstance(selector, str):
        msg = f"Selector must be a string or a callable, got {type(selector).__name__}"
        raise TypeError(msg)
    if not selector.strip():
        return None

    groups = parse_selector(selector.strip())

    def matches(node: Node) -> bool:
        return node.kind is NodeKind.ELEMENT and any(_matches_from(parts, len(parts) - 1, node) for parts in groups)

    return matches
