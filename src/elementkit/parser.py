"""html5lib-backed parser entry points.

html5lib does the WHATWG tree construction (including all error recovery);
its tree walker tokens are replayed into :class:`~elementkit.node.Node` trees.
"""

from __future__ import annotations

from typing import Any

import html5lib

from .constants import NAMESPACE_PREFIXES
from .node import Node

# fullTree keeps the doctype and comments outside <html> in the parsed document.
_tree_builder_class = html5lib.getTreeBuilder("etree", fullTree=True)
_walker_class = html5lib.getTreeWalker("etree")

_CHARACTER_TOKENS = frozenset({"Characters", "SpaceCharacters"})


class TreeBuilder:
    """Build a Node tree from a stream of html5lib tree walker tokens."""

    __slots__ = ("open_elements", "root")

    def __init__(self, root_name: str = "#document") -> None:
        self.root = Node(root_name)
        self.open_elements: list[Node] = [self.root]

    @property
    def current_node(self) -> Node:
        return self.open_elements[-1]

    def process(self, token: dict[str, Any]) -> None:
        kind = token["type"]
        if kind in _CHARACTER_TOKENS:
            self.insert_text(token["data"])
        elif kind == "StartTag":
            element = self._create_element(token)
            self.current_node.append_child(element)
            self.open_elements.append(element)
        elif kind == "EmptyTag":
            self.current_node.append_child(self._create_element(token))
        elif kind == "EndTag":
            if len(self.open_elements) > 1:
                self.open_elements.pop()
        elif kind == "Comment":
            self.current_node.append_child(Node("#comment", text_content=token["data"]))
        elif kind == "Doctype":
            self.current_node.append_child(Node("!doctype", text_content=token.get("name") or ""))
        # SerializeError / Entity / Unknown tokens carry nothing for the tree

    def insert_text(self, data: str) -> None:
        if not data:
            return
        parent = self.current_node
        # The walker splits a text node into leading/trailing whitespace runs.
        if parent.children and parent.children[-1].tag_name == "#text":
            parent.children[-1].text_content += data
            return
        parent.append_child(Node("#text", text_content=data))

    def finish(self) -> Node:
        self.open_elements = [self.root]
        return self.root

    @staticmethod
    def _create_element(token: dict[str, Any]) -> Node:
        namespace = NAMESPACE_PREFIXES.get(token.get("namespace") or "")
        attributes: dict[str, str] = {}
        for (attr_ns, attr_name), value in token.get("data", {}).items():
            prefix = NAMESPACE_PREFIXES.get(attr_ns or "")
            if prefix and not (prefix == "xmlns" and attr_name == "xmlns"):
                attr_name = f"{prefix}:{attr_name}"
            attributes[attr_name] = value
        return Node(token["name"], attributes, namespace=namespace)


def _build(tree: Any, root_name: str) -> Node:
    builder = TreeBuilder(root_name)
    for token in _walker_class(tree):
        builder.process(token)
    return builder.finish()


def parse_document(html: str) -> Node:
    """Parse a full document; missing html/head/body are synthesized."""
    parser = html5lib.HTMLParser(tree=_tree_builder_class, namespaceHTMLElements=False)
    return _build(parser.parse(html or ""), "#document")


def parse_fragment(html: str, container: str = "div") -> Node:
    """Parse markup as the children of ``container``."""
    parser = html5lib.HTMLParser(tree=_tree_builder_class, namespaceHTMLElements=False)
    return _build(parser.parseFragment(html or "", container=container), "#document-fragment")


def find_body(document: Node) -> Node | None:
    """Return the body element of a parsed document (None for frameset documents)."""
    html = document.find_child_by_tag("html")
    if html is None:
        return None
    return html.find_child_by_tag("body")
